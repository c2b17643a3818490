# portal/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Default admin creation and the optional RADIUS startup probe
- db: Database configuration and connection pool management
- errors: Error taxonomy and request-boundary exception handlers
- security: Password hashing and bearer token creation/validation
"""
