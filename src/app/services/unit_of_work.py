from abc import ABC, abstractmethod

from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """
    Transaction boundary for the account use cases.

    Entering binds `users` to the current transaction. Leaving the block
    discards whatever was not committed, so a use case that returns early
    with an error leaves the account untouched.
    """

    users: IUserRepository

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, *args) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
