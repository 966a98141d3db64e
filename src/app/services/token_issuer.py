from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional
from uuid import UUID

from libs.result import Result

EMAIL_VERIFICATION = "email_verification"


class ITokenIssuer(ABC):
    """Signed bearer tokens - application layer"""

    @abstractmethod
    def issue_session(self, user_id: UUID) -> str:
        """Issue a session token bound to a user"""
        pass

    @abstractmethod
    def verify_session(self, token: str) -> Result[UUID]:
        """Return the user id of a valid session token"""
        pass

    @abstractmethod
    def issue_purpose_token(
        self, purpose: str, payload: dict, ttl: Optional[timedelta] = None
    ) -> str:
        """Issue a short-lived token scoped to one purpose"""
        pass

    @abstractmethod
    def verify_purpose_token(self, token: str, purpose: str) -> Result[dict]:
        """Return the payload of a valid token issued for the given purpose"""
        pass
