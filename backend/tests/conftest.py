import os
import tempfile
from datetime import datetime, timedelta, timezone

TEST_DB_DIR = tempfile.mkdtemp(prefix="rallypoint-tests-")

os.environ["APP_SECRET_KEY"] = "rallypoint-test-secret"
os.environ["APP_DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_DIR}/test.sqlite3"
os.environ["APP_CORS_ORIGINS"] = "http://localhost:3000"
os.environ["APP_BCRYPT_ROUNDS"] = "4"
for key in (
    "APP_SES_ACCESS_KEY",
    "APP_SES_SECRET_KEY",
    "APP_S3_BUCKET",
    "APP_DISCORD_ERROR_WEBHOOK",
    "APP_GEMINI_API_KEY",
):
    os.environ.pop(key, None)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from rallypoint.api.auth.service import create_access_refresh_tokens  # noqa: E402
from rallypoint.api.events.models import Events, WaitlistEntries  # noqa: E402
from rallypoint.api.users.models import UserRoles, UserStatus  # noqa: E402
from rallypoint.api.users.service import create_user  # noqa: E402
from rallypoint.db.base import AbstractSQLModel  # noqa: E402
from rallypoint.db.core import AsyncSessionLocal, engine  # noqa: E402
from rallypoint.server import application  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(AbstractSQLModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(AbstractSQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=application), base_url="http://test"
    ) as client:
        yield client
    application.dependency_overrides.clear()


async def create_account(
    email: str,
    role: UserRoles = UserRoles.volunteer,
    status: UserStatus = UserStatus.approved,
    full_name: str = "Test User",
    password: str = PASSWORD,
):
    async with AsyncSessionLocal() as session:
        return await create_user(
            session,
            full_name=full_name,
            email=email,
            password=password,
            role=role,
            status=status,
        )


async def auth_headers(user) -> dict:
    token = await create_access_refresh_tokens(user)
    return {"Authorization": f"Bearer {token.access_token}"}


async def create_event(created_by_id: int, **overrides) -> Events:
    values = {
        "title": "Beach Cleanup",
        "description": "Help us clean the beach.",
        "date": datetime.now(timezone.utc) + timedelta(days=7),
        "location": "Santa Monica",
        "slots_available": 10,
        "tags": [],
    }
    values.update(overrides)
    async with AsyncSessionLocal() as session:
        event = Events(created_by_id=created_by_id, **values)
        session.add(event)
        await session.commit()
        await session.refresh(event)
        return event


async def add_to_waitlist(volunteer_id: int, event_id: int, created_at: datetime):
    async with AsyncSessionLocal() as session:
        session.add(
            WaitlistEntries(
                volunteer_id=volunteer_id, event_id=event_id, created_at=created_at
            )
        )
        await session.commit()


@pytest.fixture
async def admin():
    return await create_account("admin@rallypoint.org", role=UserRoles.admin)


@pytest.fixture
async def volunteer():
    return await create_account("volunteer@rallypoint.org", full_name="Val Volunteer")


@pytest.fixture
async def admin_headers(admin):
    return await auth_headers(admin)


@pytest.fixture
async def volunteer_headers(volunteer):
    return await auth_headers(volunteer)


@pytest.fixture
async def event(admin):
    return await create_event(admin.id)
