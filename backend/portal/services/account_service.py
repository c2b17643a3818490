"""
Self-service account changes: profile update and password change.
Shares the uniqueness and hashing rules with registration and login.
"""
import logging
from typing import Optional

from tortoise.exceptions import IntegrityError

from ..core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..core.security import hash_password_async, verify_password_async
from ..models import User

logger = logging.getLogger(__name__)


async def phone_taken(phone_number: str, user_id: str) -> bool:
    """Phone number stays unique; the caller's own row does not count"""
    return await User.filter(phone_number=phone_number).exclude(id=user_id).exists()


async def update_profile(
    user_id: str,
    full_name: Optional[str],
    phone_number: Optional[str],
    company_name: Optional[str],
) -> User:
    full_name = (full_name or "").strip()
    phone_number = (phone_number or "").strip()
    if not full_name or not phone_number:
        raise ValidationError("Full name and phone number are required")

    if await phone_taken(phone_number, user_id):
        raise ConflictError("This phone number is already registered by another user")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise NotFoundError("User not found")

    user.full_name = full_name
    user.phone_number = phone_number
    user.company_name = (company_name or "").strip() or None
    try:
        await user.save(update_fields=["full_name", "phone_number", "company_name"])
    except IntegrityError:
        raise ConflictError("This phone number is already registered by another user")
    return user


async def change_password(
    user_id: str,
    current_password: Optional[str],
    new_password: Optional[str],
) -> None:
    """Replace the password hash after re-verifying the current password"""
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise NotFoundError("User not found")

    if not await verify_password_async(current_password, user.password_hash):
        raise AuthError("invalid current password")

    user.password_hash = await hash_password_async(new_password)
    await user.save(update_fields=["password_hash"])
    logger.info("[account] password changed for user id=%s", user.id)
