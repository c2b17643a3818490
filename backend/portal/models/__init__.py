# portal/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: Portal subscriber account
- Admin: Admin console account (separate identity space)
- ConnectionLog: Connection/session audit row
"""
from .user import User
from .admin import Admin
from .connection_log import ConnectionLog, ConnectionStatus
