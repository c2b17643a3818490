# portal/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating the default admin account on first startup
and probing the RADIUS server.
"""
import logging
from portal.config import settings
from portal.models.admin import Admin
from portal.core.security import hash_password_async
from portal.services.radius import radius_client

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin() -> None:
    """
    If no admin exists in the database, create a default admin based on environment variables.
    Only takes effect under the following conditions:
      - Currently no row in the admins table
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_EMAIL    (default: "admin@example.com")
      ADMIN_PASSWORD (required, otherwise won't create)
    """
    if await Admin.all().exists():
        return  # Skip creation if an admin already exists

    if not settings.admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return  # Don't create admin without password (security requirement)

    a = await Admin.create(
        email=settings.admin_email,
        password_hash=await hash_password_async(settings.admin_password),  # Hash password before storing
    )
    logger.warning("[bootstrap] Created default admin -> email=%s id=%s", a.email, a.id)

async def check_radius() -> bool:
    """
    Optional startup probe (RADIUS_CHECK_ON_STARTUP=true).
    Only logs the outcome; the portal still starts when the server is down.
    """
    ok = await radius_client.test_connection()
    if not ok:
        logger.warning("[bootstrap] RADIUS server %s:%s did not accept the probe",
                       radius_client.host, radius_client.port)
    return ok
