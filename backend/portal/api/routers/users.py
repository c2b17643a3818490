# portal/api/routers/users.py
from fastapi import APIRouter, Depends, Query, Request

from portal.api.deps import client_ip, require_user
from portal.schemas.user import ChangePasswordIn, ConnectIn, DisconnectIn, UpdateProfileIn
from portal.services import account_service, connection_service

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/connections")
async def list_connections(
    claims: dict = Depends(require_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    Get the caller's connection history, newest first.

    Returns:
        dict: success, connections (list) and pagination {page, limit, total, pages}
    """
    rows, pagination = await connection_service.list_connections(claims["id"], page, limit)
    return {
        "success": True,
        "connections": [r.to_dict() for r in rows],
        "pagination": pagination,
    }

@router.put("/profile")
async def update_profile(body: UpdateProfileIn, claims: dict = Depends(require_user)):
    """
    Update full name, phone number and company name.

    Errors:
        - 400 VALIDATION_ERROR: full name or phone number missing
        - 404 NOT_FOUND: user no longer exists
        - 409 CONFLICT: phone number held by another user
    """
    user = await account_service.update_profile(
        claims["id"],
        full_name=body.fullName,
        phone_number=body.phoneNumber,
        company_name=body.companyName,
    )
    return {"success": True, "message": "Profile updated successfully", "user": user.to_profile()}

@router.put("/password")
async def change_password(body: ChangePasswordIn, claims: dict = Depends(require_user)):
    """
    Change the caller's password. The current password must be re-entered.

    Errors:
        - 400 VALIDATION_ERROR: either password missing
        - 401 AUTH_ERROR: current password incorrect
        - 404 NOT_FOUND: user no longer exists
    """
    await account_service.change_password(claims["id"], body.currentPassword, body.newPassword)
    return {"success": True, "message": "Password changed successfully"}

@router.post("/connect")
async def connect(request: Request, body: ConnectIn | None = None, claims: dict = Depends(require_user)):
    """Log a network connection for the caller (IP from body, else the request)."""
    ip_address = (body.ipAddress if body else None) or client_ip(request)
    await connection_service.record_connection(claims["id"], claims["email"], ip_address)
    return {"success": True, "message": "Connection logged successfully"}

@router.post("/disconnect")
async def disconnect(body: DisconnectIn | None = None, claims: dict = Depends(require_user)):
    """
    Close the caller's most recent open connection.

    Succeeds as a no-op when nothing is open; `closed` tells which case happened.
    """
    duration = body.sessionDuration if body else None
    closed = await connection_service.close_connection(claims["id"], duration)
    return {"success": True, "message": "Disconnection logged successfully", "closed": closed}
