from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .authorization import authorize_self
from .dtos import UserProfile


class GetProfileUseCase:
    """Returns the public profile of the caller's own account"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, acting_user_id: UUID, target_user_id: UUID) -> Result[UserProfile]:
        allowed = authorize_self(acting_user_id, target_user_id)
        if allowed.is_err():
            return Return.err(allowed.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            return Return.ok(UserProfile.from_entity(user))
