import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import User


@pytest.mark.asyncio
async def test_successful_registration(client: AsyncClient, db_session, mailer):
    """A new account gets a session token, an unverified profile and a welcome email"""
    response = await client.post(
        "/auth/register",
        json={
            "name": "Jane Doe",
            "email": "Jane@Example.com",
            "phone_number": "+15550100",
            "password": "secret123",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert isinstance(data["token"], str) and data["token"]
    assert data["user"]["email"] == "jane@example.com"
    assert data["user"]["name"] == "Jane Doe"
    assert data["user"]["email_verified"] is False
    assert data["user"]["avatar_url"].startswith("https://www.gravatar.com/avatar/")

    for field in ("password_hash", "reset_code", "email_verification_token", "avatar_object_id", "version"):
        assert field not in data["user"]

    result = await db_session.exec(select(User).where(User.email == "jane@example.com"))
    user = result.one()
    assert user.password_hash != "secret123"
    assert user.email_verification_token is not None

    welcome = mailer.last_to("jane@example.com")
    assert welcome.subject == "Verify your email address"
    assert "/auth/verify-email/" in welcome.html_body


@pytest.mark.asyncio
async def test_registration_with_taken_email(client: AsyncClient, registered):
    response = await client.post(
        "/auth/register",
        json={"name": "Other", "email": "jane@example.com", "password": "secret456"},
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USER_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_registration_with_taken_phone(client: AsyncClient, registered):
    response = await client.post(
        "/auth/register",
        json={
            "name": "Other",
            "email": "other@example.com",
            "phone_number": "+15550100",
            "password": "secret456",
        },
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USER_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_registration_succeeds_when_mail_is_down(client: AsyncClient, mailer):
    mailer.fail = True

    response = await client.post(
        "/auth/register",
        json={"name": "Jane", "email": "jane@example.com", "password": "secret123"},
    )

    assert response.status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload,field",
    [
        ({"name": "Jane", "email": "jane@example.com", "password": "short"}, "password"),
        ({"name": "Jane", "email": "not-an-email", "password": "secret123"}, "email"),
        ({"name": "", "email": "jane@example.com", "password": "secret123"}, "name"),
    ],
)
async def test_registration_validation(client: AsyncClient, payload, field):
    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert field in [detail["field"] for detail in error["details"]]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
