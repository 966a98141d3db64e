"""
Account Notifications

Builds the account emails and hands them to the mailer.
"""

import html
import logging

from libs.result import Result
from src.app.services.mailer import IMailer

logger = logging.getLogger(__name__)


class AccountNotifier:
    """
    Composes account emails.

    Critical sends (reset code, requested verification) are awaited and their
    Result returned to the caller. Non-critical sends (welcome, email changed)
    go through send_verification_quietly, which only logs a failure.
    """

    def __init__(self, mailer: IMailer, verify_url_base: str):
        self.mailer = mailer
        self.verify_url_base = verify_url_base.rstrip("/")

    def verification_link(self, token: str) -> str:
        return f"{self.verify_url_base}/{token}"

    async def send_verification(
        self, to_address: str, name: str, token: str, title: str, message: str
    ) -> Result[None]:
        link = self.verification_link(token)
        body = (
            f"<h1>{html.escape(title)}</h1>"
            f"<p>Hi {html.escape(name)},</p>"
            "<p>Please click the following link to verify your email address:</p>"
            f'<p><a href="{html.escape(link, quote=True)}">Verify Email Address</a></p>'
            "<p>This link expires in one hour.</p>"
            f"<p>{html.escape(message)}</p>"
        )
        return await self.mailer.send(to_address, "Verify your email address", body)

    async def send_reset_code(self, to_address: str, code: str) -> Result[None]:
        body = (
            "<h1>Forgot Password</h1>"
            "<p>You have requested to reset your password. Please use the "
            "following code to verify your identity and create a new password:</p>"
            f"<p><strong>{html.escape(code)}</strong></p>"
            "<p>The code expires in one hour. If you did not request a password "
            "reset, please ignore this email.</p>"
        )
        return await self.mailer.send(to_address, "Your Password Reset Code", body)

    async def send_verification_quietly(
        self, to_address: str, name: str, token: str, title: str, message: str
    ) -> None:
        """Background variant of send_verification: failures are logged, not returned"""
        try:
            result = await self.send_verification(to_address, name, token, title, message)
        except Exception:
            logger.exception(f"Verification email to {to_address} raised")
            return
        if result.is_err():
            logger.warning(
                f"Verification email to {to_address} failed: {result.error.message}"
            )
