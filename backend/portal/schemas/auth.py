# portal/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.

Every field is optional at the schema level: missing credentials are reported
by the auth workflow as a 400 VALIDATION_ERROR instead of a framework 422.
Length limits mirror the column sizes on the User model.
"""
from typing import Optional
from pydantic import BaseModel, Field

class RegisterIn(BaseModel):
    """Portal registration form."""
    email: Optional[str] = Field(default=None, max_length=255)
    fullName: Optional[str] = Field(default=None, max_length=255)
    phoneNumber: Optional[str] = Field(default=None, max_length=20)
    companyName: Optional[str] = Field(default=None, max_length=255)  # The only truly optional field
    password: Optional[str] = None

class LoginIn(BaseModel):
    """
    Portal login form.
    The phone number is part of the lookup key, not just a display field.
    """
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    password: Optional[str] = None

class AdminLoginIn(BaseModel):
    """Admin console login form."""
    email: Optional[str] = None
    password: Optional[str] = None
