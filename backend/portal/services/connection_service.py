"""
ConnectionLog lifecycle: explicit connect, disconnect and per-user history.
"""
import logging
import math
from typing import Optional

from ..models import ConnectionLog, ConnectionStatus

logger = logging.getLogger(__name__)


async def record_connection(user_id: str, email: str, ip_address: Optional[str]) -> ConnectionLog:
    """Open a connected row outside of login (explicit POST /users/connect)"""
    return await ConnectionLog.create(
        user_id=user_id,
        email=email,
        ip_address=ip_address,
        status=ConnectionStatus.CONNECTED,
    )


async def close_connection(user_id: str, session_duration: Optional[int]) -> bool:
    """
    Close the most recent connected row for the user.

    "Most recent" is connection_time DESC, then id DESC so rows sharing a
    timestamp resolve deterministically. Returns False (no-op) when the user
    has no open row; calling it again after a close does nothing further.
    Older open rows from concurrent logins stay open.
    """
    row = (
        await ConnectionLog.filter(user_id=user_id, status=ConnectionStatus.CONNECTED)
        .order_by("-connection_time", "-id")
        .first()
    )
    if row is None:
        return False

    # Conditional on status so a concurrent disconnect cannot close the same row twice
    updated = await ConnectionLog.filter(id=row.id, status=ConnectionStatus.CONNECTED).update(
        session_duration=session_duration,
        status=ConnectionStatus.DISCONNECTED,
    )
    if updated:
        logger.info("[connections] closed log id=%s user=%s duration=%s", row.id, user_id, session_duration)
    return bool(updated)


async def list_connections(user_id: str, page: int, limit: int) -> tuple[list[ConnectionLog], dict]:
    """Newest-first connection history with page/limit pagination"""
    qs = ConnectionLog.filter(user_id=user_id)
    total = await qs.count()
    rows = await qs.order_by("-connection_time", "-id").offset((page - 1) * limit).limit(limit)
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
    return rows, pagination
