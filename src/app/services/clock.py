from datetime import datetime

from src.domain.base import utcnow


class Clock:
    """Source of the current time for every expiry comparison"""

    def now(self) -> datetime:
        return utcnow()
