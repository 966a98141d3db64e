"""
User Entity

Represents one registered account.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class User(SQLModel, table=True):
    """
    User entity - one registered account.

    Business Rules:
    - Email is unique across all users and stored lowercase
    - Phone number is unique when present
    - Password stored as bcrypt hash, never plaintext
    - At most one active reset code, cleared once consumed
    - email_verification_token holds the secret of the single pending
      verification token; cleared when the email is verified
    - email_verified flips to true only through email verification
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)
    phone_number: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=32
    )
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Avatar reference: public URL plus the storage provider's object id
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    avatar_object_id: Optional[str] = Field(default=None, max_length=512)

    email_verified: bool = Field(default=False)
    phone_verified: bool = Field(default=False)
    email_verification_token: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )

    # Password reset credential
    reset_code: Optional[str] = Field(default=None, max_length=16)
    reset_code_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    version: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_email_verified", "email_verified"),)
