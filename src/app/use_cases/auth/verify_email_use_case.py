"""
Verify Email Use Case

Handles email verification via signed token.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.token_issuer import EMAIL_VERIFICATION, ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from .dtos import VerifyEmailResponse

logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Token signature, expiry and purpose are checked first
    - The secret inside the token must equal the user's pending
      email_verification_token
    - Sets email_verified = True and clears the pending secret, so the same
      token cannot be used twice
    """

    def __init__(self, uow: UnitOfWork, tokens: ITokenIssuer):
        self.uow = uow
        self.tokens = tokens

    async def execute(self, token: str) -> Result[VerifyEmailResponse]:
        """
        Errors:
            - INVALID_TOKEN: Bad signature, wrong purpose, or no pending match
            - TOKEN_EXPIRED: Token is past its expiry
        """
        payload = self.tokens.verify_purpose_token(token, EMAIL_VERIFICATION)
        if payload.is_err():
            return Return.err(payload.error)

        secret = payload.value.get("secret")
        if not isinstance(secret, str) or not secret:
            return Return.err(Error("INVALID_TOKEN", "Invalid verification token"))

        async with self.uow:
            user = await self.uow.users.get_by_verification_token(secret)
            if user is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid verification token"))

            user.email_verified = True
            user.email_verification_token = None
            await self.uow.users.update(user)
            await self.uow.commit()
            logger.info(f"Email verified for user {user.id}")

        return Return.ok(
            VerifyEmailResponse(status="verified", message="Email verified successfully")
        )
