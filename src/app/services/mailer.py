from abc import ABC, abstractmethod

from libs.result import Result


class IMailer(ABC):
    """Outbound mail dispatch - application layer"""

    @abstractmethod
    async def send(self, to_address: str, subject: str, html_body: str) -> Result[None]:
        """Deliver one message, Error(MAIL_DELIVERY_FAILED) on failure"""
        pass
