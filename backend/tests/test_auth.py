from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from conftest import PASSWORD, create_account
from rallypoint.api.users.models import UserStatus, Users
from rallypoint.core.auth.jwt import create_access_token
from rallypoint.core.utils.keys import hash_token
from rallypoint.db.core import AsyncSessionLocal


async def test_login_returns_user_and_tokens(client, volunteer):
    response = await client.post(
        "/api/auth/login",
        json={"email": "Volunteer@RallyPoint.org", "password": PASSWORD},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == volunteer.id
    assert body["status"] == "approved"
    assert body["token"]["token_type"] == "Bearer"
    assert body["token"]["access_token"]
    assert "password" not in body


async def test_login_rejects_wrong_password(client, volunteer):
    response = await client.post(
        "/api/auth/login",
        json={"email": volunteer.email, "password": "not-the-password"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


async def test_login_rejects_unknown_email(client):
    response = await client.post(
        "/api/auth/login", json={"email": "ghost@rallypoint.org", "password": PASSWORD}
    )
    assert response.status_code == 401


async def test_login_blocks_pending_and_rejected_accounts(client):
    await create_account("pending@rallypoint.org", status=UserStatus.pending)
    await create_account("rejected@rallypoint.org", status=UserStatus.rejected)

    pending = await client.post(
        "/api/auth/login", json={"email": "pending@rallypoint.org", "password": PASSWORD}
    )
    assert pending.status_code == 401
    assert pending.json()["message"] == "Your account is pending approval."
    assert "token" not in pending.json()

    rejected = await client.post(
        "/api/auth/login",
        json={"email": "rejected@rallypoint.org", "password": PASSWORD},
    )
    assert rejected.status_code == 401
    assert rejected.json()["error_code"] == "ACCOUNT_REJECTED"


async def test_login_requires_email_and_password(client):
    response = await client.post("/api/auth/login", json={"email": "a@b.org"})
    assert response.status_code == 400
    assert "password" in response.json()["errors"]


async def test_me_requires_token(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"


async def test_me_rejects_garbage_token(client):
    response = await client.get(
        "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_me_reports_expired_token(client, volunteer):
    token = create_access_token(
        {"user_id": volunteer.id, "token_type": "access_token"},
        expires_delta=timedelta(minutes=-5),
    )
    response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["error_code"] == "TOKEN_EXPIRED"


async def test_refresh_issues_new_access_token(client, volunteer):
    login = await client.post(
        "/api/auth/login", json={"email": volunteer.email, "password": PASSWORD}
    )
    refresh_token = login.json()["token"]["refresh_token"]

    response = await client.post(
        "/api/auth/refresh", json={"refresh_token": refresh_token}
    )
    assert response.status_code == 200
    access_token = response.json()["access_token"]

    me = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {access_token}"}
    )
    assert me.status_code == 200
    assert me.json()["email"] == volunteer.email


async def test_refresh_rejects_access_token(client, volunteer):
    login = await client.post(
        "/api/auth/login", json={"email": volunteer.email, "password": PASSWORD}
    )
    access_token = login.json()["token"]["access_token"]
    response = await client.post("/api/auth/refresh", json={"refresh_token": access_token})
    assert response.status_code == 401


async def test_forgot_password_always_answers_generically(client, monkeypatch):
    sent = []
    monkeypatch.setattr(
        "rallypoint.api.auth.service.send_password_reset_email",
        lambda **kwargs: sent.append(kwargs),
    )
    response = await client.post(
        "/api/auth/forgotpassword", json={"email": "ghost@rallypoint.org"}
    )
    assert response.status_code == 200
    assert sent == []


async def test_password_reset_flow(client, volunteer, monkeypatch):
    sent = []
    monkeypatch.setattr(
        "rallypoint.api.auth.service.send_password_reset_email",
        lambda **kwargs: sent.append(kwargs),
    )
    response = await client.post(
        "/api/auth/forgotpassword", json={"email": volunteer.email}
    )
    assert response.status_code == 200
    assert len(sent) == 1
    token = sent[0]["reset_url"].rsplit("/", 1)[-1]
    assert len(token) == 64

    async with AsyncSessionLocal() as session:
        user = await session.scalar(select(Users).where(Users.id == volunteer.id))
        # Only the hash is stored.
        assert user.password_reset_token == hash_token(token)
        assert user.password_reset_expires > datetime.now(timezone.utc)

    reset = await client.put(
        f"/api/auth/resetpassword/{token}", json={"password": "brand-new-pass"}
    )
    assert reset.status_code == 200
    assert reset.json()["token"]["access_token"]

    login = await client.post(
        "/api/auth/login", json={"email": volunteer.email, "password": "brand-new-pass"}
    )
    assert login.status_code == 200

    reused = await client.put(
        f"/api/auth/resetpassword/{token}", json={"password": "another-pass"}
    )
    assert reused.status_code == 400
    assert reused.json()["message"] == "Token is invalid or has expired"


async def test_password_reset_rejects_expired_token(client, volunteer):
    token = "a" * 64
    async with AsyncSessionLocal() as session:
        user = await session.get(Users, volunteer.id)
        user.password_reset_token = hash_token(token)
        user.password_reset_expires = datetime.now(timezone.utc) - timedelta(minutes=1)
        await session.commit()

    response = await client.put(
        f"/api/auth/resetpassword/{token}", json={"password": "brand-new-pass"}
    )
    assert response.status_code == 400
