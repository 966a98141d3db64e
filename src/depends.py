from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Optional
from uuid import UUID

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.http_mailer import HttpMailer
from src.adapter.services.jwt_token_issuer import JwtTokenIssuer
from src.adapter.services.s3_object_storage import S3ObjectStorage
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.clock import Clock
from src.app.services.mailer import IMailer
from src.app.services.notifications import AccountNotifier
from src.app.services.object_storage import IObjectStorage
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity resolved from the session token"""

    id: UUID
    email: str


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> Clock:
    return Clock()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)


def get_token_issuer(clock: Clock = Depends(get_clock)) -> ITokenIssuer:
    return JwtTokenIssuer(
        secret=ApplicationConfig.JWT_SECRET,
        clock=clock,
        session_ttl=timedelta(days=ApplicationConfig.SESSION_TOKEN_DAYS),
        purpose_ttl=timedelta(minutes=ApplicationConfig.VERIFICATION_TOKEN_MINUTES),
        algorithm=ApplicationConfig.JWT_ALGORITHM,
    )


def get_mailer() -> IMailer:
    return HttpMailer(
        api_url=ApplicationConfig.MAIL_API_URL,
        api_key=ApplicationConfig.MAIL_API_KEY,
        sender=ApplicationConfig.MAIL_FROM,
        timeout=ApplicationConfig.MAIL_TIMEOUT_SECONDS,
    )


def get_notifier(mailer: IMailer = Depends(get_mailer)) -> AccountNotifier:
    base_url = ApplicationConfig.PUBLIC_BASE_URL.rstrip("/") + ApplicationConfig.API_PREFIX
    return AccountNotifier(mailer, verify_url_base=f"{base_url}/auth/verify-email")


@lru_cache
def get_object_storage() -> IObjectStorage:
    return S3ObjectStorage(
        bucket=ApplicationConfig.S3_BUCKET,
        region=ApplicationConfig.S3_REGION,
        folder=ApplicationConfig.AVATAR_FOLDER,
        endpoint=ApplicationConfig.S3_ENDPOINT,
        access_key=ApplicationConfig.S3_ACCESS_KEY,
        secret_key=ApplicationConfig.S3_SECRET_KEY,
        public_url=ApplicationConfig.S3_PUBLIC_URL,
        timeout=ApplicationConfig.STORAGE_TIMEOUT_SECONDS,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: ITokenIssuer = Depends(get_token_issuer),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> CurrentUser:
    """
    Authorization guard for protected routes.

    Extracts the session token from the Authorization: Bearer header,
    verifies it and resolves the account it belongs to.

    Returns:
        The authenticated account

    Raises:
        ClientError: 401 UNAUTHENTICATED if the token is missing, invalid,
            expired, or its user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise ClientError(
            Error("UNAUTHENTICATED", "No token, authorization denied"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    verified = tokens.verify_session(credentials.credentials)
    if verified.is_err():
        raise ClientError(
            Error("UNAUTHENTICATED", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    async with uow:
        user = await uow.users.get_by_id(verified.value)
        if user is None:
            raise ClientError(
                Error("UNAUTHENTICATED", "Account no longer exists"),
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        return CurrentUser(id=user.id, email=user.email)
