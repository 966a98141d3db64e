from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository, UserAlreadyExistsError
from src.domain.base import utcnow
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email_or_phone(
        self,
        email: str,
        phone_number: Optional[str],
        exclude_id: Optional[UUID] = None,
    ) -> Optional[User]:
        """Get the first user (other than exclude_id) holding the email or the phone number"""
        conditions = [User.email == email]
        if phone_number:
            conditions.append(User.phone_number == phone_number)
        stmt = select(User).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.exec(stmt)
        return result.first()

    async def get_by_verification_token(self, token: str) -> Optional[User]:
        """Get user by pending email verification token"""
        stmt = select(User).where(User.email_verification_token == token)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self._flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        user.version += 1
        user.updated_at = utcnow()
        self.session.add(user)
        await self._flush()
        await self.session.refresh(user)
        return user

    async def update_fields(self, user_id: UUID, **values) -> int:
        """Update only the given columns; bumps version like update()"""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(**values, version=User.version + 1, updated_at=utcnow())
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            await self.session.rollback()
            raise UserAlreadyExistsError("Email or phone number is already taken") from exc
        return result.rowcount

    async def delete(self, user_id: UUID) -> int:
        """Delete user by ID"""
        stmt = delete(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def consume_reset_code(
        self, email: str, code: str, now: datetime, password_hash: str
    ) -> int:
        """Swap the password and clear the reset code if code and expiry still match"""
        stmt = (
            update(User)
            .where(
                User.email == email,
                User.reset_code == code,
                User.reset_code_expires_at >= now,
            )
            .values(
                password_hash=password_hash,
                reset_code=None,
                reset_code_expires_at=None,
                version=User.version + 1,
                updated_at=utcnow(),
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def _flush(self):
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise UserAlreadyExistsError("Email or phone number is already taken") from exc
