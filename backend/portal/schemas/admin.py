# portal/schemas/admin.py
"""
Pydantic schemas for the admin console endpoints.
"""
from pydantic import BaseModel

class AdminOut(BaseModel):
    """Admin identity returned on login."""
    id: str
    email: str

class AdminUserStatusIn(BaseModel):
    """
    Request model for soft-disabling or re-enabling a portal user.
    Users are never hard-deleted; an inactive user cannot log in.
    """
    isActive: bool
