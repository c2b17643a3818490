# portal/models/connection_log.py
"""
Database model for connection/session audit rows.
One row is opened per successful login (or explicit connect) and closed
by a later disconnect.
"""
from enum import Enum
from tortoise import fields, models

class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

class ConnectionLog(models.Model):
    """
    ConnectionLog database model.

    Relationships:
    - Belongs to a User (many-to-one, nullable); the row outlives user deletion (SET NULL)

    Notes:
    - id is an auto-increment sequence, used to break ties between rows that
      share a connection_time
    - email is a denormalized copy taken at connection time, never re-joined
    """
    id = fields.IntField(pk=True)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="connection_logs",
        null=True,
        on_delete=fields.SET_NULL,
    )
    email = fields.CharField(max_length=255)
    connection_time = fields.DatetimeField(auto_now_add=True, index=True)
    ip_address = fields.CharField(max_length=45, null=True)  # IPv4 or IPv6 text form
    session_duration = fields.IntField(null=True)  # Filled on disconnect
    status = fields.CharEnumField(ConnectionStatus, max_length=16, default=ConnectionStatus.CONNECTED)

    class Meta:
        table = "connection_logs"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": str(self.user_id) if self.user_id else None,
            "email": self.email,
            "connectionTime": self.connection_time.isoformat() if self.connection_time else None,
            "ipAddress": self.ip_address,
            "sessionDuration": self.session_duration,
            "status": self.status.value if isinstance(self.status, ConnectionStatus) else self.status,
        }
