import hmac

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users.dtos import MessageResponse
from src.domain.entities import User


def reset_code_matches(user: User, code: str) -> bool:
    if not user.reset_code:
        return False
    return hmac.compare_digest(user.reset_code.encode(), code.encode())


class ValidateResetCodeUseCase:
    """
    Checks an (email, reset code) pair without consuming it.

    Lets a client confirm the code before asking for the new password.
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    async def execute(self, email: str, code: str) -> Result[MessageResponse]:
        code = code.strip().upper()

        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())

            if user is None or not reset_code_matches(user, code):
                return Return.err(Error("INVALID_RESET_CODE", "Email or reset code is invalid"))

            expires_at = user.reset_code_expires_at
            if expires_at is None or self.clock.now() > expires_at:
                return Return.err(Error("RESET_CODE_EXPIRED", "Reset code has expired"))

        return Return.ok(MessageResponse(message="Reset code is valid"))
