import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from conftest import add_to_waitlist, auth_headers, create_account, create_event
from rallypoint.api.events.models import Registrations, WaitlistEntries
from rallypoint.api.events.registration import service as registration_service
from rallypoint.api.users.models import UserStatus
from rallypoint.db.core import AsyncSessionLocal
from rallypoint.response import CustomHTTPException


async def registration_count(event_id: int) -> int:
    async with AsyncSessionLocal() as session:
        return await session.scalar(
            select(func.count(Registrations.id)).where(Registrations.event_id == event_id)
        )


async def test_register_for_event(client, event, volunteer, volunteer_headers):
    response = await client.post(
        f"/api/events/{event.id}/register", headers=volunteer_headers
    )
    assert response.status_code == 201
    body = response.json()
    assert body["volunteer_id"] == volunteer.id
    assert body["event_id"] == event.id


async def test_register_requires_approved_status(client, event):
    applicant = await create_account("applicant@rallypoint.org", status=UserStatus.pending)
    response = await client.post(
        f"/api/events/{event.id}/register", headers=await auth_headers(applicant)
    )
    assert response.status_code == 403
    assert await registration_count(event.id) == 0


async def test_register_requires_token(client, event):
    response = await client.post(f"/api/events/{event.id}/register")
    assert response.status_code == 401


async def test_register_unknown_event(client, volunteer_headers):
    response = await client.post("/api/events/9999/register", headers=volunteer_headers)
    assert response.status_code == 404


async def test_register_twice_conflicts(client, event, volunteer_headers):
    first = await client.post(f"/api/events/{event.id}/register", headers=volunteer_headers)
    assert first.status_code == 201

    second = await client.post(
        f"/api/events/{event.id}/register", headers=volunteer_headers
    )
    assert second.status_code == 409
    assert second.json()["message"] == "You are already registered for this event"
    assert await registration_count(event.id) == 1


async def test_register_full_event(client, admin, volunteer_headers):
    event = await create_event(admin.id, slots_available=1)
    other = await create_account("other@rallypoint.org")
    await client.post(
        f"/api/events/{event.id}/register", headers=await auth_headers(other)
    )

    response = await client.post(
        f"/api/events/{event.id}/register", headers=volunteer_headers
    )
    assert response.status_code == 409
    assert response.json()["error_code"] == "EVENT_FULL"


async def test_register_with_zero_slots_is_full(client, admin, volunteer_headers):
    event = await create_event(admin.id, slots_available=0)
    response = await client.post(
        f"/api/events/{event.id}/register", headers=volunteer_headers
    )
    assert response.status_code == 409


async def test_concurrent_registrations_never_oversell(admin):
    event = await create_event(admin.id, slots_available=2)
    volunteers = [
        await create_account(f"rush{i}@rallypoint.org") for i in range(6)
    ]

    async def attempt(volunteer):
        async with AsyncSessionLocal() as session:
            try:
                await registration_service.register(session, volunteer, event.id)
                return True
            except CustomHTTPException as e:
                assert e.status_code == 409
                return False

    results = await asyncio.gather(*(attempt(v) for v in volunteers))
    assert results.count(True) == 2
    assert await registration_count(event.id) == 2


async def test_unregister(client, event, volunteer_headers):
    await client.post(f"/api/events/{event.id}/register", headers=volunteer_headers)

    response = await client.delete(
        f"/api/events/{event.id}/unregister", headers=volunteer_headers
    )
    assert response.status_code == 200
    assert await registration_count(event.id) == 0

    again = await client.delete(
        f"/api/events/{event.id}/unregister", headers=volunteer_headers
    )
    assert again.status_code == 404
    assert again.json()["message"] == "Registration not found"


async def test_unregister_promotes_earliest_waitlisted(client, admin, volunteer, volunteer_headers, monkeypatch):
    promoted = []
    monkeypatch.setattr(
        "rallypoint.api.events.registration.router.send_promotion_emails",
        lambda promotions: promoted.extend(promotions),
    )
    event = await create_event(admin.id, title="Park Planting", slots_available=1)
    await client.post(f"/api/events/{event.id}/register", headers=volunteer_headers)

    early = await create_account("early@rallypoint.org", full_name="Early Bird")
    late = await create_account("late@rallypoint.org")
    now = datetime.now(timezone.utc)
    await add_to_waitlist(late.id, event.id, now)
    await add_to_waitlist(early.id, event.id, now - timedelta(minutes=10))

    response = await client.delete(
        f"/api/events/{event.id}/unregister", headers=volunteer_headers
    )
    assert response.status_code == 200

    async with AsyncSessionLocal() as session:
        registered = list(
            await session.scalars(
                select(Registrations.volunteer_id).where(
                    Registrations.event_id == event.id
                )
            )
        )
        waiting = list(
            await session.scalars(
                select(WaitlistEntries.volunteer_id).where(
                    WaitlistEntries.event_id == event.id
                )
            )
        )
    assert registered == [early.id]
    assert waiting == [late.id]
    assert len(promoted) == 1
    assert promoted[0]["email"] == "early@rallypoint.org"
    assert promoted[0]["full_name"] == "Early Bird"
    assert promoted[0]["event_title"] == "Park Planting"


async def test_waitlist_then_promotion_end_to_end(client, admin, volunteer_headers, monkeypatch):
    monkeypatch.setattr(
        "rallypoint.api.events.registration.router.send_promotion_emails",
        lambda promotions: None,
    )
    event = await create_event(admin.id, slots_available=1)
    holder = await create_account("holder@rallypoint.org")
    holder_headers = await auth_headers(holder)
    await client.post(f"/api/events/{event.id}/register", headers=holder_headers)

    joined = await client.post(
        f"/api/events/{event.id}/waitlist", headers=volunteer_headers
    )
    assert joined.status_code == 201

    await client.delete(f"/api/events/{event.id}/unregister", headers=holder_headers)

    mine = await client.get("/api/events/my-registrations", headers=volunteer_headers)
    assert mine.json() == [event.id]
    waitlist = await client.get("/api/events/my-waitlist", headers=volunteer_headers)
    assert waitlist.json() == []


async def test_admin_removes_volunteer(client, event, volunteer, volunteer_headers, admin_headers):
    await client.post(f"/api/events/{event.id}/register", headers=volunteer_headers)

    forbidden = await client.delete(
        f"/api/events/{event.id}/volunteers/{volunteer.id}", headers=volunteer_headers
    )
    assert forbidden.status_code == 403

    response = await client.delete(
        f"/api/events/{event.id}/volunteers/{volunteer.id}", headers=admin_headers
    )
    assert response.status_code == 200
    assert await registration_count(event.id) == 0
