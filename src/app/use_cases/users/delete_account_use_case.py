"""
Delete Account Use Case
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.object_storage import IObjectStorage
from src.app.services.unit_of_work import UnitOfWork
from .authorization import authorize_self
from .dtos import DeleteAccountResponse

logger = logging.getLogger(__name__)


class DeleteAccountUseCase:
    """
    Use case for deleting the caller's own account.

    Business Rules:
    - Only the account owner may delete it
    - The stored avatar is released first; if that fails nothing is deleted
    - Session tokens of the deleted account stop working because the
      authorization guard can no longer resolve the user
    """

    def __init__(self, uow: UnitOfWork, storage: IObjectStorage):
        self.uow = uow
        self.storage = storage

    async def execute(
        self, acting_user_id: UUID, target_user_id: UUID
    ) -> Result[DeleteAccountResponse]:
        allowed = authorize_self(acting_user_id, target_user_id)
        if allowed.is_err():
            return Return.err(allowed.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.avatar_object_id:
                released = await self.storage.destroy(user.avatar_object_id)
                if released.is_err():
                    return Return.err(released.error)

            deleted = await self.uow.users.delete(target_user_id)
            if deleted == 0:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            await self.uow.commit()

        logger.info(f"Deleted user {target_user_id}")
        return Return.ok(DeleteAccountResponse(id=str(target_user_id)))
