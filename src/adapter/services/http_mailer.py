"""
Mail dispatch over a transactional email HTTP API (Resend-compatible).
"""

import logging

import httpx

from libs.result import Error, Result, Return
from src.app.services.mailer import IMailer

logger = logging.getLogger(__name__)


class HttpMailer(IMailer):
    def __init__(self, api_url: str, api_key: str, sender: str, timeout: float = 10.0):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout

    async def send(self, to_address: str, subject: str, html_body: str) -> Result[None]:
        if not self.api_key:
            logger.warning("Mail API key not configured, cannot send email")
            return Return.err(Error("MAIL_DELIVERY_FAILED", "Email delivery is not configured"))

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": self.sender,
                        "to": to_address,
                        "subject": subject,
                        "html": html_body,
                    },
                )
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Failed to send email to {to_address}: {e!r}")
            return Return.err(Error("MAIL_DELIVERY_FAILED", "Email could not be delivered"))

        logger.info(f"Email sent to {to_address}: {subject}")
        return Return.ok(None)
