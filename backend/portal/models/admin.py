# portal/models/admin.py
import uuid
from tortoise import fields, models

class Admin(models.Model):
    """
    Admin console account.
    Separate identity space from User: no relation to users or connection logs,
    and admins never go through RADIUS.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    email = fields.CharField(max_length=255, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "admins"
