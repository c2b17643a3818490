"""
Services Module

Business logic behind the REST routers:
- auth_service: registration, user login (local check + RADIUS + session log), admin login
- account_service: profile update and password change
- connection_service: connection log open/close/history
- radius: pyrad-based RADIUS authenticator
- export: CSV rendering for admin exports
"""
