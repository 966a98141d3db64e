from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import User


class UserAlreadyExistsError(Exception):
    """Raised when a write violates the email or phone uniqueness constraint"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email_or_phone(
        self,
        email: str,
        phone_number: Optional[str],
        exclude_id: Optional[UUID] = None,
    ) -> Optional[User]:
        """Get the first user (other than exclude_id) holding the email or the phone number"""
        pass

    @abstractmethod
    async def get_by_verification_token(self, token: str) -> Optional[User]:
        """Get user by pending email verification token"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user, raising UserAlreadyExistsError on duplicates"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user, raising UserAlreadyExistsError on duplicates"""
        pass

    @abstractmethod
    async def update_fields(self, user_id: UUID, **values) -> int:
        """Update only the given columns, returning the number of rows matched"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> int:
        """Delete user, returning the number of rows removed"""
        pass

    @abstractmethod
    async def consume_reset_code(
        self, email: str, code: str, now: datetime, password_hash: str
    ) -> int:
        """
        Set a new password hash and clear the reset code in one conditional
        update. Only matches when the code is the user's current one and has
        not expired at `now`. Returns the number of rows changed (0 or 1).
        """
        pass
