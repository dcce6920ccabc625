"""
Auth API schemas - request/response types for token issuance.
"""

from datetime import datetime

from ninja import Schema
from pydantic import Field


class LoginRequest(Schema):
    """Email/password login."""

    email: str = Field(..., examples=["admin@crm.example"])
    password: str


class UserOut(Schema):
    """Public view of a CRM user."""

    id: int
    email: str
    name: str
    role: str


class TokenOut(Schema):
    """Issued bearer token."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut


class TokenResponse(Schema):
    success: bool = True
    data: TokenOut
    message: str = ""


class UserResponse(Schema):
    success: bool = True
    data: UserOut
    message: str = ""
