# portal/api/routers/admin.py
from __future__ import annotations

import datetime as dt
import io
import math
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from tortoise.expressions import Q
from tortoise.functions import Count, Max

from portal.api.deps import require_admin
from portal.core.errors import NotFoundError
from portal.models.connection_log import ConnectionLog
from portal.models.user import User
from portal.schemas.admin import AdminOut, AdminUserStatusIn
from portal.schemas.auth import AdminLoginIn
from portal.services import auth_service
from portal.services.export import CONNECTION_COLUMNS, USER_COLUMNS, render_csv

router = APIRouter(prefix="/admin", tags=["admin"])


def utc_now() -> dt.datetime:
    """
    Get current UTC datetime with timezone information.
    """
    return dt.datetime.now(dt.timezone.utc)


def _iso(value) -> Optional[str]:
    # Aggregates come back as datetimes on PostgreSQL and as text on sqlite
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.isoformat()
    return str(value)


async def _connection_stats(user_ids: list) -> dict:
    """
    Per-user connection count and latest connection time.

    Returns:
        dict: user_id (str) -> {"total": int, "last": datetime | str | None}
    """
    if not user_ids:
        return {}
    rows = (
        await ConnectionLog.filter(user_id__in=user_ids)
        .annotate(total=Count("id"), last=Max("connection_time"))
        .group_by("user_id")
        .values("user_id", "total", "last")
    )
    return {str(r["user_id"]): {"total": r["total"], "last": r["last"]} for r in rows}


def _user_row(u: User, stats: dict) -> dict:
    s = stats.get(str(u.id), {})
    return {
        "id": str(u.id),
        "email": u.email,
        "full_name": u.full_name,
        "phone_number": u.phone_number,
        "company_name": u.company_name,
        "created_at": u.created_at,
        "last_login": u.last_login,
        "is_active": u.is_active,
        "total_connections": s.get("total", 0),
        "last_connection": s.get("last"),
    }


def _user_to_dict(u: User, stats: dict) -> dict:
    """
    Convert a User plus its connection stats to the admin API format.
    """
    row = _user_row(u, stats)
    return {
        "id": row["id"],
        "email": row["email"],
        "fullName": row["full_name"],
        "phoneNumber": row["phone_number"],
        "companyName": row["company_name"],
        "createdAt": _iso(row["created_at"]),
        "lastLogin": _iso(row["last_login"]),
        "isActive": row["is_active"],
        "totalConnections": row["total_connections"],
        "lastConnection": _iso(row["last_connection"]),
    }


def _csv_response(data: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(data),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Cache-Control": "no-cache",
        },
    )


# ==============================================================================
# I. Admin login (separate identity space, no RADIUS)
# ==============================================================================
@router.post("/login")
async def admin_login(body: AdminLoginIn):
    """
    Authenticate an admin and issue an admin token.

    Errors:
        - 400 VALIDATION_ERROR: email or password missing
        - 401 AUTH_ERROR "invalid credentials": unknown admin or wrong password
    """
    admin, token = await auth_service.admin_login(body.email, body.password)
    return {
        "success": True,
        "message": "Admin login successful",
        "admin": AdminOut(id=str(admin.id), email=admin.email).model_dump(),
        "token": token,
    }


# ==============================================================================
# II. Dashboard and user listing
# ==============================================================================
@router.get("/dashboard", dependencies=[Depends(require_admin)])
async def dashboard():
    """
    Headline statistics plus the 10 most recent connections.

    Returns:
        dict: success, stats {totalUsers, todayConnections, monthConnections}
              and recentConnections (each with the user's fullName/companyName)
    """
    now = utc_now()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_day.replace(day=1)

    total_users = await User.all().count()
    today_connections = await ConnectionLog.filter(connection_time__gte=start_of_day).count()
    month_connections = await ConnectionLog.filter(connection_time__gte=start_of_month).count()

    recent = await ConnectionLog.all().order_by("-connection_time", "-id").limit(10).prefetch_related("user")
    recent_connections = []
    for r in recent:
        item = r.to_dict()
        item["fullName"] = r.user.full_name if r.user else None
        item["companyName"] = r.user.company_name if r.user else None
        recent_connections.append(item)

    return {
        "success": True,
        "stats": {
            "totalUsers": total_users,
            "todayConnections": today_connections,
            "monthConnections": month_connections,
        },
        "recentConnections": recent_connections,
    }


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = Query(default=None, description="Fuzzy search by email/full name/company"),
):
    """
    Paginated user list, newest first, with per-user connection totals.
    """
    qs = User.all().order_by("-created_at")
    if search:
        qs = qs.filter(
            Q(email__icontains=search) | Q(full_name__icontains=search) | Q(company_name__icontains=search)
        )

    total = await qs.count()
    rows = await qs.offset((page - 1) * limit).limit(limit)
    stats = await _connection_stats([u.id for u in rows])

    return {
        "success": True,
        "users": [_user_to_dict(u, stats) for u in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }


@router.patch("/users/{user_id}", dependencies=[Depends(require_admin)])
async def set_user_active(user_id: uuid.UUID, body: AdminUserStatusIn):
    """
    Soft-disable or re-enable a portal user. Inactive users cannot log in.

    Errors:
        - 404 NOT_FOUND: no such user
    """
    u = await User.get_or_none(id=user_id)
    if not u:
        raise NotFoundError("User not found")
    u.is_active = body.isActive
    await u.save(update_fields=["is_active"])
    stats = await _connection_stats([u.id])
    return {"success": True, "user": _user_to_dict(u, stats)}


# ==============================================================================
# III. CSV exports
# ==============================================================================
@router.get("/export/users", dependencies=[Depends(require_admin)])
async def export_users():
    """Download every user with connection totals as users_export.csv."""
    users = await User.all().order_by("-created_at")
    stats = await _connection_stats([u.id for u in users])
    data = render_csv(USER_COLUMNS, (_user_row(u, stats) for u in users))
    return _csv_response(data, "users_export.csv")


@router.get("/export/connections", dependencies=[Depends(require_admin)])
async def export_connections(
    startDate: Optional[dt.date] = Query(default=None),
    endDate: Optional[dt.date] = Query(default=None),
):
    """
    Download connection logs as connections_export.csv, newest first.

    The date range applies only when both startDate and endDate are given;
    both days are included.
    """
    qs = ConnectionLog.all()
    if startDate and endDate:
        start = dt.datetime.combine(startDate, dt.time.min, tzinfo=dt.timezone.utc)
        end = dt.datetime.combine(endDate + dt.timedelta(days=1), dt.time.min, tzinfo=dt.timezone.utc)
        qs = qs.filter(connection_time__gte=start, connection_time__lt=end)

    logs = await qs.order_by("-connection_time", "-id").prefetch_related("user")
    rows = []
    for log in logs:
        rows.append({
            "id": log.id,
            "email": log.email,
            "full_name": log.user.full_name if log.user else None,
            "company_name": log.user.company_name if log.user else None,
            "connection_time": log.connection_time,
            "ip_address": log.ip_address,
            "session_duration": log.session_duration,
            "status": log.status,
        })
    return _csv_response(render_csv(CONNECTION_COLUMNS, rows), "connections_export.csv")
