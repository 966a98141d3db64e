from urllib.parse import quote
from uuid import uuid4

import pytest
from httpx import AsyncClient

SENSITIVE_FIELDS = (
    "password_hash",
    "reset_code",
    "reset_code_expires_at",
    "email_verification_token",
    "avatar_object_id",
    "version",
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def register_other(client: AsyncClient) -> dict:
    response = await client.post(
        "/auth/register",
        json={"name": "Mallory", "email": "mallory@example.com", "password": "secret456"},
    )
    assert response.status_code == 201
    data = response.json()
    return {"id": data["user"]["id"], "headers": {"Authorization": f"Bearer {data['token']}"}}


@pytest.mark.asyncio
async def test_get_profile_redacts_credentials(client: AsyncClient, registered, mailer):
    await client.post("/auth/forgot-password", json={"email": "jane@example.com"})

    response = await client.get(f"/users/{registered['id']}", headers=registered["headers"])

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == registered["id"]
    assert data["phone_number"] == "+15550100"
    for field in SENSITIVE_FIELDS:
        assert field not in data


@pytest.mark.asyncio
async def test_requires_session_token(client: AsyncClient, registered):
    missing = await client.get(f"/users/{registered['id']}")
    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHENTICATED"

    invalid = await client.get(
        f"/users/{registered['id']}", headers={"Authorization": "Bearer not-a-token"}
    )
    assert invalid.status_code == 401
    assert invalid.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_expired_session_token(client: AsyncClient, registered, clock):
    clock.advance(days=8)

    response = await client.get(f"/users/{registered['id']}", headers=registered["headers"])

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_other_accounts_are_forbidden(client: AsyncClient, registered):
    other = await register_other(client)
    target = registered["id"]
    headers = other["headers"]

    requests = [
        client.get(f"/users/{target}", headers=headers),
        client.patch(f"/users/{target}", data={"name": "Hacked"}, headers=headers),
        client.put(
            f"/users/{target}/password",
            json={"old_password": "secret123", "new_password": "hacked123"},
            headers=headers,
        ),
        client.post(f"/users/{target}/verification", headers=headers),
        client.get(f"/users/{target}/export", headers=headers),
        client.post(f"/users/{target}/logout", headers=headers),
        client.delete(f"/users/{target}", headers=headers),
    ]
    for pending in requests:
        response = await pending
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    profile = await client.get(f"/users/{target}", headers=registered["headers"])
    assert profile.json()["name"] == "Jane Doe"


@pytest.mark.asyncio
async def test_malformed_user_id(client: AsyncClient, registered):
    response = await client.get("/users/not-a-uuid", headers=registered["headers"])

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, registered):
    response = await client.patch(
        f"/users/{registered['id']}",
        data={"name": "Janet Doe", "phone_number": "+15550199"},
        headers=registered["headers"],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Janet Doe"
    assert data["phone_number"] == "+15550199"
    assert data["email"] == "jane@example.com"


@pytest.mark.asyncio
async def test_update_email_requires_verification(client: AsyncClient, registered, mailer):
    await client.get(f"/auth/verify-email/{mailer.verification_token_for('jane@example.com')}")

    response = await client.patch(
        f"/users/{registered['id']}",
        data={"email": "janet@example.com"},
        headers=registered["headers"],
    )

    assert response.status_code == 200
    assert response.json()["email"] == "janet@example.com"
    assert response.json()["email_verified"] is False

    token = mailer.verification_token_for("janet@example.com")
    verify = await client.get(f"/auth/verify-email/{token}")
    assert verify.status_code == 200

    login = await client.post(
        "/auth/login", json={"email": "janet@example.com", "password": "secret123"}
    )
    assert login.status_code == 200
    assert login.json()["user"]["email_verified"] is True


@pytest.mark.asyncio
async def test_update_email_must_be_valid(client: AsyncClient, registered):
    response = await client.patch(
        f"/users/{registered['id']}",
        data={"email": "not-an-email"},
        headers=registered["headers"],
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_update_email_to_taken_address(client: AsyncClient, registered):
    await register_other(client)

    response = await client.patch(
        f"/users/{registered['id']}",
        data={"email": "mallory@example.com"},
        headers=registered["headers"],
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USER_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_update_profile_with_image(client: AsyncClient, registered, storage):
    response = await client.patch(
        f"/users/{registered['id']}",
        data={"name": "Janet"},
        files={"image": ("me.png", PNG_BYTES, "image/png")},
        headers=registered["headers"],
    )

    assert response.status_code == 200
    assert response.json()["avatar_url"].startswith("https://cdn.test/")
    assert len(storage.objects) == 1


@pytest.mark.asyncio
async def test_upload_avatar_replaces_previous(client: AsyncClient, registered, storage):
    url = f"/users/{registered['id']}/avatar"

    first = await client.put(
        url, files={"image": ("one.png", PNG_BYTES, "image/png")}, headers=registered["headers"]
    )
    assert first.status_code == 200

    second = await client.put(
        url, files={"image": ("two.jpg", b"\xff\xd8\xff", "image/jpeg")}, headers=registered["headers"]
    )
    assert second.status_code == 200
    assert second.json()["avatar_url"] != first.json()["avatar_url"]
    assert len(storage.objects) == 1
    assert len(storage.destroyed) == 1


@pytest.mark.asyncio
async def test_upload_avatar_rejects_unsupported_type(client: AsyncClient, registered, storage):
    response = await client.put(
        f"/users/{registered['id']}/avatar",
        files={"image": ("me.gif", b"GIF89a", "image/gif")},
        headers=registered["headers"],
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_IMAGE"
    assert storage.objects == {}


@pytest.mark.asyncio
async def test_upload_avatar_storage_down(client: AsyncClient, registered, storage):
    storage.fail_upload = True

    response = await client.put(
        f"/users/{registered['id']}/avatar",
        files={"image": ("me.png", PNG_BYTES, "image/png")},
        headers=registered["headers"],
    )

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "STORAGE_FAILURE"


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, registered):
    url = f"/users/{registered['id']}/password"

    wrong = await client.put(
        url,
        json={"old_password": "not-it", "new_password": "brandnew1"},
        headers=registered["headers"],
    )
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_CREDENTIALS"

    response = await client.put(
        url,
        json={"old_password": "secret123", "new_password": "brandnew1"},
        headers=registered["headers"],
    )
    assert response.status_code == 200

    login = await client.post(
        "/auth/login", json={"email": "jane@example.com", "password": "brandnew1"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_download_account_data(client: AsyncClient, registered):
    response = await client.get(
        f"/users/{registered['id']}/export", headers=registered["headers"]
    )

    assert response.status_code == 200
    assert (
        response.headers["content-disposition"]
        == 'attachment; filename="jane@example.com.json"'
    )
    data = response.json()
    assert data["email"] == "jane@example.com"
    for field in SENSITIVE_FIELDS:
        assert field not in data


@pytest.mark.asyncio
async def test_download_account_data_with_unicode_email(client: AsyncClient):
    registration = await client.post(
        "/auth/register",
        json={"name": "Li Wei", "email": "用户@example.com", "password": "secret456"},
    )
    assert registration.status_code == 201
    data = registration.json()
    email = data["user"]["email"]

    response = await client.get(
        f"/users/{data['user']['id']}/export",
        headers={"Authorization": f"Bearer {data['token']}"},
    )

    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="')
    assert f"filename*=utf-8''{quote(email + '.json')}" in disposition
    assert response.json()["email"] == email


@pytest.mark.asyncio
async def test_delete_account(client: AsyncClient, registered, storage):
    await client.put(
        f"/users/{registered['id']}/avatar",
        files={"image": ("me.png", PNG_BYTES, "image/png")},
        headers=registered["headers"],
    )

    response = await client.delete(f"/users/{registered['id']}", headers=registered["headers"])

    assert response.status_code == 200
    assert response.json() == {"id": registered["id"]}
    assert storage.objects == {}

    after = await client.get(f"/users/{registered['id']}", headers=registered["headers"])
    assert after.status_code == 401
    assert after.json()["error"]["code"] == "UNAUTHENTICATED"

    login = await client.post(
        "/auth/login", json={"email": "jane@example.com", "password": "secret123"}
    )
    assert login.status_code == 401


@pytest.mark.asyncio
async def test_delete_account_storage_down(client: AsyncClient, registered, storage):
    await client.put(
        f"/users/{registered['id']}/avatar",
        files={"image": ("me.png", PNG_BYTES, "image/png")},
        headers=registered["headers"],
    )
    storage.fail_destroy = True

    response = await client.delete(f"/users/{registered['id']}", headers=registered["headers"])

    assert response.status_code == 502
    profile = await client.get(f"/users/{registered['id']}", headers=registered["headers"])
    assert profile.status_code == 200


@pytest.mark.asyncio
async def test_unknown_user_with_valid_token(client: AsyncClient, registered):
    response = await client.get(f"/users/{uuid4()}", headers=registered["headers"])

    assert response.status_code == 403
