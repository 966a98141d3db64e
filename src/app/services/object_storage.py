from abc import ABC, abstractmethod
from dataclasses import dataclass

from libs.result import Result


@dataclass(frozen=True)
class StoredObject:
    """Reference to an uploaded object"""

    url: str
    object_id: str


class IObjectStorage(ABC):
    """Avatar object storage - application layer"""

    @abstractmethod
    async def upload(
        self, content: bytes, filename: str, content_type: str
    ) -> Result[StoredObject]:
        """Store an object and return its public URL and id"""
        pass

    @abstractmethod
    async def destroy(self, object_id: str) -> Result[None]:
        """Release a previously stored object"""
        pass
