# portal/schemas/user.py
"""
Pydantic schemas for the self-service /users endpoints.
"""
from typing import Optional
from pydantic import BaseModel, Field

class UpdateProfileIn(BaseModel):
    fullName: Optional[str] = Field(default=None, max_length=255)
    phoneNumber: Optional[str] = Field(default=None, max_length=20)
    companyName: Optional[str] = Field(default=None, max_length=255)

class ChangePasswordIn(BaseModel):
    currentPassword: Optional[str] = None  # Re-verified before the new hash is accepted
    newPassword: Optional[str] = None

class ConnectIn(BaseModel):
    ipAddress: Optional[str] = Field(default=None, max_length=45)  # Falls back to the request IP

class DisconnectIn(BaseModel):
    sessionDuration: Optional[int] = Field(default=None, ge=0)
