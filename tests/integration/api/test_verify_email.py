import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_verify_email_once(client: AsyncClient, registered, mailer):
    token = mailer.verification_token_for("jane@example.com")

    response = await client.get(f"/auth/verify-email/{token}")
    assert response.status_code == 200
    assert response.json()["status"] == "verified"

    profile = await client.get(f"/users/{registered['id']}", headers=registered["headers"])
    assert profile.json()["email_verified"] is True

    replay = await client.get(f"/auth/verify-email/{token}")
    assert replay.status_code == 400
    assert replay.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_verify_email_expired(client: AsyncClient, registered, mailer, clock):
    token = mailer.verification_token_for("jane@example.com")
    clock.advance(hours=2)

    response = await client.get(f"/auth/verify-email/{token}")

    assert response.status_code == 410
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_verify_email_garbage_token(client: AsyncClient):
    response = await client.get("/auth/verify-email/not-a-token")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_request_new_verification_invalidates_old_link(
    client: AsyncClient, registered, mailer
):
    old_token = mailer.verification_token_for("jane@example.com")

    response = await client.post(
        f"/users/{registered['id']}/verification", headers=registered["headers"]
    )
    assert response.status_code == 200
    new_token = mailer.verification_token_for("jane@example.com")

    stale = await client.get(f"/auth/verify-email/{old_token}")
    assert stale.status_code == 400

    fresh = await client.get(f"/auth/verify-email/{new_token}")
    assert fresh.status_code == 200

    again = await client.post(
        f"/users/{registered['id']}/verification", headers=registered["headers"]
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "EMAIL_ALREADY_VERIFIED"
