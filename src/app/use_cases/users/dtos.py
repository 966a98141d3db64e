"""
User Use Case DTOs (Data Transfer Objects)

UserProfile is the only outbound representation of a User. Every use case
that returns account data builds it through UserProfile.from_entity, so the
credential fields (password hash, reset code, pending verification token,
storage object id, version) never reach a response.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.domain.entities import User


class UserProfile(BaseModel):
    """Public view of a user account"""

    id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    avatar_url: Optional[str] = None
    email_verified: bool
    phone_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserProfile":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            phone_number=user.phone_number,
            avatar_url=user.avatar_url,
            email_verified=user.email_verified,
            phone_verified=user.phone_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AvatarImage(BaseModel):
    """Uploaded image handed over by the API layer"""

    filename: str
    content_type: str
    content: bytes


class UpdateProfileCommand(BaseModel):
    """Partial profile update; None means keep the current value"""

    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class MessageResponse(BaseModel):
    """Plain acknowledgement"""

    message: str


class DeleteAccountResponse(BaseModel):
    id: str


class AccountExport(BaseModel):
    """Account snapshot served as a file download"""

    filename: str
    account: UserProfile
