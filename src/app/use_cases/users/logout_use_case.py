from uuid import UUID

from libs.result import Result, Return
from .authorization import authorize_self
from .dtos import MessageResponse


class LogoutUseCase:
    """
    Ends the caller's session.

    Session tokens are stateless bearer tokens carried in the Authorization
    header, so there is nothing to clear server-side; the client discards
    its token.
    """

    async def execute(self, acting_user_id: UUID, target_user_id: UUID) -> Result[MessageResponse]:
        allowed = authorize_self(acting_user_id, target_user_id)
        if allowed.is_err():
            return Return.err(allowed.error)
        return Return.ok(MessageResponse(message="User logged out"))
