from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    UnitOfWork over one AsyncSession.

    FastAPI caches the dependency per request, so the authorization guard
    and the use case share this instance and its session.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self.users = UserRepository(self.session)
        return self

    async def __aexit__(self, *args) -> None:
        # No-op after a commit; otherwise drops the pending changes
        await self.session.rollback()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
