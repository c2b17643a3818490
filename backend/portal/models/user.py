# portal/models/user.py
"""
Database model for portal users.
Represents a network subscriber who registers through the captive portal,
containing credentials, contact details and the soft-disable flag.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many ConnectionLogs (one-to-many, via related_name="connection_logs")

    Security:
    - Password is stored as a bcrypt hash and never returned by the API
    - Email and phone number are each unique across all users
    - Users are never hard-deleted; is_active=False disables login
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    email = fields.CharField(max_length=255, unique=True, index=True)  # Login identity (unique)
    full_name = fields.CharField(max_length=255)
    phone_number = fields.CharField(max_length=20, unique=True, index=True)  # Part of the login lookup key (unique)
    company_name = fields.CharField(max_length=255, null=True)
    password_hash = fields.CharField(max_length=255)  # bcrypt hash, never store plain text
    created_at = fields.DatetimeField(auto_now_add=True)
    last_login = fields.DatetimeField(null=True)  # Set on every fully successful login
    is_active = fields.BooleanField(default=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    def to_profile(self) -> dict:
        """Public profile representation (no password hash)."""
        return {
            "id": str(self.id),
            "email": self.email,
            "fullName": self.full_name,
            "phoneNumber": self.phone_number,
            "companyName": self.company_name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }
