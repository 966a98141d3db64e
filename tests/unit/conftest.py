from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.adapter.services.jwt_token_issuer import JwtTokenIssuer
from src.app.services.notifications import AccountNotifier
from src.app.services.password_hasher import PasswordHasher
from src.domain.entities import User
from tests.fixtures.fakes import FakeMailer, FakeObjectStorage, FrozenClock

TEST_SECRET = "unit-test-secret"


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_email_or_phone = AsyncMock(return_value=None)
    uow.users.get_by_verification_token = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.update_fields = AsyncMock(return_value=1)
    uow.users.delete = AsyncMock(return_value=1)
    uow.users.consume_reset_code = AsyncMock(return_value=1)
    return uow


@pytest.fixture
def hasher():
    # Lowest bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def tokens(clock):
    return JwtTokenIssuer(
        secret=TEST_SECRET,
        clock=clock,
        session_ttl=timedelta(days=7),
        purpose_ttl=timedelta(hours=1),
    )


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def notifier(mailer):
    return AccountNotifier(mailer, verify_url_base="http://test/auth/verify-email")


@pytest.fixture
def storage():
    return FakeObjectStorage()


@pytest.fixture
def make_user(hasher):
    def _make_user(**overrides):
        fields = dict(
            id=uuid4(),
            name="Jane Doe",
            email="jane@example.com",
            phone_number="+15550100",
            password_hash=hasher.hash("secret123"),
            email_verified=False,
            created_at=datetime(2024, 1, 1),
            updated_at=datetime(2024, 1, 1),
        )
        fields.update(overrides)
        return User(**fields)

    return _make_user
