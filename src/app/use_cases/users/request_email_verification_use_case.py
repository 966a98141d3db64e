"""
Request Email Verification Use Case

Sends a fresh verification link to the caller's own address.
"""

import secrets
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.notifications import AccountNotifier
from src.app.services.token_issuer import EMAIL_VERIFICATION, ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from .authorization import authorize_self
from .dtos import MessageResponse

REQUESTED_TITLE = "You requested email verification"
REQUESTED_MESSAGE = (
    "If you did not request this, please change your password immediately."
)


class RequestEmailVerificationUseCase:
    """
    Use case for (re)sending the verification email.

    Business Rules:
    - Only the account owner may request it
    - Already verified addresses fail with EMAIL_ALREADY_VERIFIED
    - A new secret replaces the pending one, invalidating older links
    - The email is awaited; delivery failure fails the request
    """

    def __init__(self, uow: UnitOfWork, tokens: ITokenIssuer, notifier: AccountNotifier):
        self.uow = uow
        self.tokens = tokens
        self.notifier = notifier

    async def execute(self, acting_user_id: UUID, target_user_id: UUID) -> Result[MessageResponse]:
        allowed = authorize_self(acting_user_id, target_user_id)
        if allowed.is_err():
            return Return.err(allowed.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.email_verified:
                return Return.err(Error("EMAIL_ALREADY_VERIFIED", "Email already verified"))

            secret = secrets.token_urlsafe(32)
            user.email_verification_token = secret
            user = await self.uow.users.update(user)
            await self.uow.commit()
            to_address, name = user.email, user.name

        token = self.tokens.issue_purpose_token(EMAIL_VERIFICATION, {"secret": secret})
        sent = await self.notifier.send_verification(
            to_address, name, token, REQUESTED_TITLE, REQUESTED_MESSAGE
        )
        if sent.is_err():
            return Return.err(
                Error("MAIL_DELIVERY_FAILED", "Verification email could not be delivered")
            )

        return Return.ok(MessageResponse(message="Verification email sent"))
