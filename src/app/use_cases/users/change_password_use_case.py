"""
Change Password Use Case

Replaces the password of the caller's own account.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.password_hasher import EncodingError, PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from .authorization import authorize_self
from .dtos import UserProfile


class ChangePasswordUseCase:
    """
    Use case for changing a password.

    Business Rules:
    - Only the account owner may change it (FORBIDDEN otherwise)
    - The current password must verify (INVALID_CREDENTIALS otherwise)
    - Any pending reset code is cleared along with the old password
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(
        self,
        acting_user_id: UUID,
        target_user_id: UUID,
        old_password: str,
        new_password: str,
    ) -> Result[UserProfile]:
        allowed = authorize_self(acting_user_id, target_user_id)
        if allowed.is_err():
            return Return.err(allowed.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not self.hasher.verify(old_password, user.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid password"))

            try:
                user.password_hash = self.hasher.hash(new_password)
            except EncodingError as e:
                return Return.err(Error("VALIDATION_ERROR", str(e)))

            user.reset_code = None
            user.reset_code_expires_at = None
            user = await self.uow.users.update(user)
            await self.uow.commit()

            return Return.ok(UserProfile.from_entity(user))
