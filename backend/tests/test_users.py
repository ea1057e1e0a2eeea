import io
from datetime import datetime, timedelta, timezone

from PIL import Image

from conftest import PASSWORD, auth_headers, create_account, create_event
from rallypoint.api.users.models import UserStatus


async def test_register_creates_pending_volunteer(client, monkeypatch):
    welcomed = []
    monkeypatch.setattr(
        "rallypoint.api.users.service.send_welcome_email",
        lambda **kwargs: welcomed.append(kwargs),
    )
    response = await client.post(
        "/api/users/register",
        json={
            "full_name": "Nina Newcomer",
            "email": "Nina@RallyPoint.org",
            "password": PASSWORD,
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "nina@rallypoint.org"
    assert body["role"] == "volunteer"
    assert body["status"] == "pending"
    assert body["token"]["access_token"]
    assert "password" not in body
    assert welcomed == [{"recipient": "nina@rallypoint.org", "full_name": "Nina Newcomer"}]


async def test_register_rejects_duplicate_email(client, volunteer):
    response = await client.post(
        "/api/users/register",
        json={
            "full_name": "Copy Cat",
            "email": volunteer.email.upper(),
            "password": PASSWORD,
        },
    )
    assert response.status_code == 409
    assert response.json()["message"] == "User already exists"


async def test_register_survives_email_failure(client, monkeypatch):
    def broken_send_email(**kwargs):
        raise RuntimeError("SES is down")

    monkeypatch.setattr(
        "rallypoint.api.users.background_tasks.send_email", broken_send_email
    )
    response = await client.post(
        "/api/users/register",
        json={"full_name": "Nina Newcomer", "email": "nina@rallypoint.org", "password": PASSWORD},
    )
    assert response.status_code == 201


async def test_register_validates_input(client):
    response = await client.post(
        "/api/users/register",
        json={"full_name": "N", "email": "not-an-email", "password": "123"},
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert {"full_name", "email", "password"} <= set(errors)


async def test_profile_read_and_partial_update(client, volunteer, volunteer_headers):
    response = await client.get("/api/users/profile", headers=volunteer_headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == "Val Volunteer"

    response = await client.put(
        "/api/users/profile",
        headers=volunteer_headers,
        data={
            "skills": ["First Aid, Cooking", "Cooking ", "Driving"],
            "availability": "Weekends",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["skills"] == ["First Aid", "Cooking", "Driving"]
    assert body["availability"] == ["Weekends"]
    assert body["full_name"] == "Val Volunteer"
    assert body["email"] == volunteer.email


async def test_profile_password_change_requires_current_password(
    client, volunteer, volunteer_headers
):
    missing = await client.put(
        "/api/users/profile", headers=volunteer_headers, data={"new_password": "newpass1"}
    )
    assert missing.status_code == 400

    wrong = await client.put(
        "/api/users/profile",
        headers=volunteer_headers,
        data={"new_password": "newpass1", "current_password": "wrong-pass"},
    )
    assert wrong.status_code == 401

    ok = await client.put(
        "/api/users/profile",
        headers=volunteer_headers,
        data={"new_password": "newpass1", "current_password": PASSWORD},
    )
    assert ok.status_code == 200

    login = await client.post(
        "/api/auth/login", json={"email": volunteer.email, "password": "newpass1"}
    )
    assert login.status_code == 200


async def test_profile_email_change_must_be_unique(client, admin, volunteer_headers):
    response = await client.put(
        "/api/users/profile", headers=volunteer_headers, data={"email": admin.email}
    )
    assert response.status_code == 409


async def test_list_volunteers_is_admin_only(client, admin_headers, volunteer_headers):
    await create_account("pending@rallypoint.org", status=UserStatus.pending)

    forbidden = await client.get("/api/users", headers=volunteer_headers)
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "Not authorized as an admin"

    response = await client.get("/api/users", headers=admin_headers)
    assert response.status_code == 200
    emails = [user["email"] for user in response.json()]
    assert emails == ["pending@rallypoint.org", "volunteer@rallypoint.org"]

    pending = await client.get(
        "/api/users", params={"status": "pending"}, headers=admin_headers
    )
    assert [user["email"] for user in pending.json()] == ["pending@rallypoint.org"]


async def test_update_user_status(client, admin_headers):
    applicant = await create_account("applicant@rallypoint.org", status=UserStatus.pending)

    invalid = await client.put(
        f"/api/users/{applicant.id}/status",
        json={"status": "pending"},
        headers=admin_headers,
    )
    assert invalid.status_code == 400

    missing = await client.put(
        "/api/users/9999/status", json={"status": "approved"}, headers=admin_headers
    )
    assert missing.status_code == 404

    approved = await client.put(
        f"/api/users/{applicant.id}/status",
        json={"status": "approved"},
        headers=admin_headers,
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    login = await client.post(
        "/api/auth/login", json={"email": applicant.email, "password": PASSWORD}
    )
    assert login.status_code == 200


async def test_my_events_lists_registrations_by_date(client, admin, volunteer, volunteer_headers):
    now = datetime.now(timezone.utc)
    later = await create_event(admin.id, title="Later", date=now + timedelta(days=20))
    sooner = await create_event(admin.id, title="Sooner", date=now + timedelta(days=2))
    await create_event(admin.id, title="Not mine")

    for event in (later, sooner):
        response = await client.post(
            f"/api/events/{event.id}/register", headers=volunteer_headers
        )
        assert response.status_code == 201

    response = await client.get("/api/users/my-events", headers=volunteer_headers)
    assert response.status_code == 200
    assert [event["title"] for event in response.json()] == ["Sooner", "Later"]


async def test_pending_volunteer_token_still_authenticates(client):
    applicant = await create_account("applicant@rallypoint.org", status=UserStatus.pending)
    response = await client.get(
        "/api/users/profile", headers=await auth_headers(applicant)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "pending"


async def test_profile_image_requires_storage(client, volunteer_headers):
    response = await client.put(
        "/api/users/profile",
        headers=volunteer_headers,
        files={"image": ("me.png", b"not really a png", "image/png")},
    )
    assert response.status_code == 503


async def test_profile_image_upload(client, volunteer_headers, monkeypatch):
    from rallypoint.config import settings

    uploads = []

    class FakeS3:
        def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
            uploads.append((bucket, key, ExtraArgs))

    monkeypatch.setattr(settings, "S3_BUCKET", "rallypoint-media")
    monkeypatch.setattr(settings, "S3_ACCESS_KEY", "key")
    monkeypatch.setattr(settings, "S3_SECRET_KEY", "secret")
    monkeypatch.setattr(settings, "S3_PUBLIC_URL", "https://cdn.rallypoint.test")
    monkeypatch.setattr(
        "rallypoint.core.storage.images.boto3.client", lambda *args, **kwargs: FakeS3()
    )

    image = io.BytesIO()
    Image.new("RGB", (4, 4), color="red").save(image, format="PNG")
    response = await client.put(
        "/api/users/profile",
        headers=volunteer_headers,
        files={"image": ("me.png", image.getvalue(), "image/png")},
    )
    assert response.status_code == 200
    assert len(uploads) == 1
    bucket, key, extra = uploads[0]
    assert bucket == "rallypoint-media"
    assert key.startswith("rallypoint/users/profile_pictures/")
    assert extra == {"ContentType": "image/png"}
    assert response.json()["profile_picture"] == f"https://cdn.rallypoint.test/{key}"

    invalid = await client.put(
        "/api/users/profile",
        headers=volunteer_headers,
        files={"image": ("me.png", b"not really a png", "image/png")},
    )
    assert invalid.status_code == 400
