"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
"""

from typing import Optional

from pydantic import BaseModel

from src.app.use_cases.users.dtos import MessageResponse, UserProfile


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    """

    name: str
    email: str
    phone_number: Optional[str] = None
    password: str


# ============================================================================
# Response DTOs
# ============================================================================


class AuthResponse(BaseModel):
    """Session token plus the public view of the account"""

    token: str
    user: UserProfile


class VerifyEmailResponse(BaseModel):
    """Response for email verification use case"""

    status: str
    message: str


__all__ = [
    "RegisterCommand",
    "AuthResponse",
    "VerifyEmailResponse",
    "MessageResponse",
]
