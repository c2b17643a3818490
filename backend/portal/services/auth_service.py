"""
Auth Workflow

Registration, login (local check -> RADIUS -> session logging -> token) and
admin login. Raises core.errors types; the HTTP mapping happens at the
request boundary.
"""
import datetime as dt
import logging
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q
from tortoise.transactions import in_transaction

from ..core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..core.security import (
    ROLE_ADMIN,
    ROLE_USER,
    create_access_token,
    hash_password_async,
    verify_password_async,
)
from ..models import Admin, ConnectionLog, ConnectionStatus, User
from .radius import radius_client

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid credentials"


def _clean(value: Optional[str]) -> Optional[str]:
    """Strip a text field; blank counts as absent"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


async def identity_taken(email: str, phone_number: str) -> bool:
    """True when another user already holds this email or phone number"""
    return await User.filter(Q(email=email) | Q(phone_number=phone_number)).exists()


async def register(
    email: Optional[str],
    full_name: Optional[str],
    phone_number: Optional[str],
    company_name: Optional[str],
    password: Optional[str],
) -> User:
    """
    Create a portal user.

    Either an email or a phone number collision blocks registration. The
    unique constraints back up the pre-check against concurrent registrations.
    No RADIUS call happens here.
    """
    email, full_name, phone_number = _clean(email), _clean(full_name), _clean(phone_number)
    if not email or not full_name or not phone_number or not password:
        raise ValidationError("Email, full name, phone number, and password are required")

    if await identity_taken(email, phone_number):
        raise ConflictError("A user with this email or phone number already exists")

    password_hash = await hash_password_async(password)
    try:
        user = await User.create(
            email=email,
            full_name=full_name,
            phone_number=phone_number,
            company_name=_clean(company_name),
            password_hash=password_hash,
            is_active=True,
            last_login=None,
        )
    except IntegrityError:
        raise ConflictError("A user with this email or phone number already exists")

    logger.info("[auth] registered user id=%s email=%s", user.id, user.email)
    return user


async def login(
    email: Optional[str],
    phone_number: Optional[str],
    password: Optional[str],
    ip_address: Optional[str] = None,
) -> tuple[User, str]:
    """
    Authenticate a portal user and open a network session.

    Steps run strictly in order:
      1. active user lookup by (email, phone_number)
      2. local bcrypt verification
      3. RADIUS Access-Request (authoritative for network access)
      4. last_login update + connected ConnectionLog row, in one transaction
      5. user token

    Steps 1 and 2 fail with the same message so the caller cannot tell which
    field was wrong. A RADIUS failure aborts before any write.
    """
    email, phone_number = _clean(email), _clean(phone_number)
    if not email or not phone_number or not password:
        raise ValidationError("Email, phone number, and password are required")

    user = await User.get_or_none(email=email, phone_number=phone_number, is_active=True)
    if not user:
        logger.info("[auth] login rejected for %s: no matching active user", email)
        raise AuthError(INVALID_CREDENTIALS)

    if not await verify_password_async(password, user.password_hash):
        logger.info("[auth] login rejected for %s: password mismatch", email)
        raise AuthError(INVALID_CREDENTIALS)

    radius = await radius_client.authenticate(user.email, password)
    if not radius.success:
        logger.warning("[auth] RADIUS denied %s: %s", email, radius.error or radius.message)
        raise AuthError("radius failed")

    async with in_transaction() as conn:
        user.last_login = utc_now()
        await user.save(update_fields=["last_login"], using_db=conn)
        await ConnectionLog.create(
            user=user,
            email=user.email,
            ip_address=ip_address,
            status=ConnectionStatus.CONNECTED,
            using_db=conn,
        )

    token = create_access_token(str(user.id), user.email, ROLE_USER)
    logger.info("[auth] user %s logged in from %s", user.email, ip_address)
    return user, token


async def admin_login(email: Optional[str], password: Optional[str]) -> tuple[Admin, str]:
    """Admin console login. Separate identity space, no RADIUS."""
    email = _clean(email)
    if not email or not password:
        raise ValidationError("Email and password are required")

    admin = await Admin.get_or_none(email=email)
    if not admin or not await verify_password_async(password, admin.password_hash):
        logger.info("[auth] admin login rejected for %s", email)
        raise AuthError(INVALID_CREDENTIALS)

    token = create_access_token(str(admin.id), admin.email, ROLE_ADMIN)
    return admin, token


async def get_profile(user_id: str) -> User:
    user = await User.get_or_none(id=user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
