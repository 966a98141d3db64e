"""
Request Password Reset Use Case

Generates a one-time reset code, stores it on the user and emails it.
"""

import logging
import secrets
import string
from datetime import timedelta

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.notifications import AccountNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users.dtos import MessageResponse

logger = logging.getLogger(__name__)

RESET_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_reset_code(length: int) -> str:
    return "".join(secrets.choice(RESET_CODE_ALPHABET) for _ in range(length))


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Unknown email fails with USER_NOT_FOUND
    - Code is random, uppercase, fixed length; replaces any previous code
    - Code expires after code_ttl (1 hour by default)
    - The email is awaited: if it cannot be delivered the request fails
    - The code is never part of the response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: AccountNotifier,
        clock: Clock,
        code_length: int = 6,
        code_ttl: timedelta = timedelta(hours=1),
    ):
        self.uow = uow
        self.notifier = notifier
        self.clock = clock
        self.code_length = code_length
        self.code_ttl = code_ttl

    async def execute(self, email: str) -> Result[MessageResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "No user found with this email"))

            user_id, to_address = user.id, user.email
            reset_code = generate_reset_code(self.code_length)
            await self.uow.users.update_fields(
                user_id,
                reset_code=reset_code,
                reset_code_expires_at=self.clock.now() + self.code_ttl,
            )
            await self.uow.commit()

        sent = await self.notifier.send_reset_code(to_address, reset_code)
        if sent.is_err():
            logger.warning(f"Reset code for user {user_id} was not delivered")
            return Return.err(
                Error("MAIL_DELIVERY_FAILED", "Reset code could not be delivered, please try again")
            )

        return Return.ok(MessageResponse(message="Reset code sent to your email"))
