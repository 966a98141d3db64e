"""
Reset Password Use Case

Sets a new password using an emailed reset code.
"""

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.password_hasher import EncodingError, PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users.dtos import MessageResponse
from .validate_reset_code_use_case import reset_code_matches


class ResetPasswordUseCase:
    """
    Use case for resetting a password with a reset code.

    Business Rules:
    - Code and expiry are checked and the code cleared in one conditional
      update, so two concurrent resets cannot both succeed
    - A consumed code cannot be replayed (INVALID_RESET_CODE)
    - An expired code fails with RESET_CODE_EXPIRED
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, clock: Clock):
        self.uow = uow
        self.hasher = hasher
        self.clock = clock

    async def execute(self, email: str, code: str, new_password: str) -> Result[MessageResponse]:
        """
        Errors:
            - VALIDATION_ERROR: New password is empty
            - INVALID_RESET_CODE: Unknown email, no pending code or wrong code
            - RESET_CODE_EXPIRED: Code is correct but past its expiry
        """
        email = email.strip().lower()
        code = code.strip().upper()

        try:
            password_hash = self.hasher.hash(new_password)
        except EncodingError as e:
            return Return.err(Error("VALIDATION_ERROR", str(e)))

        async with self.uow:
            changed = await self.uow.users.consume_reset_code(
                email, code, self.clock.now(), password_hash
            )

            if changed == 0:
                # Work out why the conditional update matched nothing
                user = await self.uow.users.get_by_email(email)
                if user is None or not reset_code_matches(user, code):
                    return Return.err(
                        Error("INVALID_RESET_CODE", "Email or reset code is invalid")
                    )
                return Return.err(Error("RESET_CODE_EXPIRED", "Reset code has expired"))

            await self.uow.commit()

        return Return.ok(MessageResponse(message="Password reset successfully"))
