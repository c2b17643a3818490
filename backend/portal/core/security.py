# portal/core/security.py
"""
Security module for authentication and authorization.
Handles password hashing, JWT token creation/validation, and cryptographic operations.
"""
import datetime as dt
import jwt  # PyJWT
from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext

from portal.config import settings

# Password hashing context
# bcrypt with a deliberately expensive cost factor (12 log rounds by default)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",   # Automatically handle deprecated schemes
    bcrypt__rounds=settings.bcrypt_rounds,
)

# JWT configuration
JWT_SECRET = settings.jwt_secret  # Secret key for JWT signing (use strong secret in production)
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes  # Token lifetime, 24h by default
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

ROLE_USER = "user"
ROLE_ADMIN = "admin"

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)

    Note: Never store plain text passwords. Always use this function before saving.
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)

async def hash_password_async(plain: str) -> str:
    """Run hash_password in the threadpool so the event loop is not blocked."""
    return await run_in_threadpool(hash_password, plain)

async def verify_password_async(plain: str, hashed: str) -> bool:
    """Run verify_password in the threadpool so the event loop is not blocked."""
    return await run_in_threadpool(verify_password, plain, hashed)

def create_access_token(subject_id: str, email: str, role: str) -> str:
    """
    Create a JWT bearer token for a portal user or an admin.

    The token carries the subject id, email and role so guarded routes can
    authorize without a database lookup.

    Args:
        subject_id: User or admin identifier (UUID string)
        email: Subject email address
        role: "user" or "admin"

    Returns:
        Encoded JWT token string

    Token payload includes:
        - id: Subject identifier
        - email: Subject email
        - type: Role used by the route guards
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "id": subject_id,
        "email": email,
        "type": role,
        "iat": now,
        "exp": now + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload dictionary containing id, email, type, etc.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
