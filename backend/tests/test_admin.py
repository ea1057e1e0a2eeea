from datetime import datetime, timedelta, timezone

from conftest import create_account, create_event
from rallypoint.api.hourlogs.models import HourLogs, HourLogStatus
from rallypoint.api.users.models import UserStatus
from rallypoint.db.core import AsyncSessionLocal


async def test_stats_on_empty_database(client, admin_headers):
    response = await client.get("/api/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {
        "total_volunteers": 0,
        "pending_volunteers": 0,
        "upcoming_events": 0,
        "total_hours_logged": 0,
    }


async def test_stats_counts(client, admin, volunteer, admin_headers):
    await create_account("pending@rallypoint.org", status=UserStatus.pending)
    await create_account("rejected@rallypoint.org", status=UserStatus.rejected)
    now = datetime.now(timezone.utc)
    past = await create_event(admin.id, date=now - timedelta(days=1))
    await create_event(admin.id, date=now + timedelta(days=1))
    await create_event(admin.id, date=now + timedelta(days=2))

    async with AsyncSessionLocal() as session:
        for hours, status in (
            (2.5, HourLogStatus.approved),
            (4, HourLogStatus.approved),
            (8, HourLogStatus.pending),
            (1, HourLogStatus.rejected),
        ):
            session.add(
                HourLogs(
                    volunteer_id=volunteer.id,
                    event_id=past.id,
                    hours=hours,
                    date_worked=now.date(),
                    status=status,
                )
            )
        await session.commit()

    response = await client.get("/api/admin/stats", headers=admin_headers)
    assert response.json() == {
        "total_volunteers": 3,
        "pending_volunteers": 1,
        "upcoming_events": 2,
        "total_hours_logged": 6.5,
    }


async def test_stats_are_admin_only(client, volunteer_headers):
    response = await client.get("/api/admin/stats", headers=volunteer_headers)
    assert response.status_code == 403
