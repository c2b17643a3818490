# portal/api/routers/auth.py
from fastapi import APIRouter, Depends, Request, status

from portal.api.deps import client_ip, require_user
from portal.schemas.auth import LoginIn, RegisterIn
from portal.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn):
    """
    Register a new portal user.

    Args:
        body: Request body containing:
            - email: str (must be unique)
            - fullName: str
            - phoneNumber: str (must be unique)
            - companyName: str | None
            - password: str (hashed with bcrypt before storage)

    Returns:
        dict (201): success, message and the created user profile (no password hash)

    Errors:
        - 400 VALIDATION_ERROR: email, full name, phone number or password missing
        - 409 CONFLICT: email or phone number already registered
    """
    user = await auth_service.register(
        email=body.email,
        full_name=body.fullName,
        phone_number=body.phoneNumber,
        company_name=body.companyName,
        password=body.password,
    )
    return {
        "success": True,
        "message": "User registered successfully! You can now login.",
        "user": user.to_profile(),
    }

@router.post("/login")
async def login(body: LoginIn, request: Request):
    """
    Authenticate a portal user and grant network access.

    Local credentials (email + phone number + password) are checked first,
    then the pair is forwarded to the RADIUS server. Only when both succeed
    is the session logged and a token issued.

    Returns:
        dict: success, message, user profile, token and radiusStatus="connected"

    Errors:
        - 400 VALIDATION_ERROR: missing field
        - 401 AUTH_ERROR "invalid credentials": unknown/inactive user or wrong password
        - 401 AUTH_ERROR "radius failed": RADIUS rejected or timed out
    """
    user, token = await auth_service.login(
        email=body.email,
        phone_number=body.phoneNumber,
        password=body.password,
        ip_address=client_ip(request),
    )
    return {
        "success": True,
        "message": "Login successful! You are now connected to the network.",
        "user": user.to_profile(),
        "token": token,
        "radiusStatus": "connected",
    }

@router.get("/profile")
async def profile(claims: dict = Depends(require_user)):
    """
    Get the profile of the user the token was issued to.

    Errors:
        - 401: missing or invalid token
        - 403: token issued for another role
        - 404: user no longer exists
    """
    user = await auth_service.get_profile(claims["id"])
    return {"success": True, "user": user.to_profile()}
