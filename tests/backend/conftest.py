import os
import uuid

# Cheap bcrypt cost for the suite; must be set before portal.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from portal.core import db as db_module
from portal.core.security import hash_password
from portal.main import app
from portal.models import Admin, User
from portal.services.radius import RadiusResult, radius_client


TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client (service-level tests).
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest.fixture(autouse=True)
def radius_calls(monkeypatch):
    """
    Replace the RADIUS round-trip with an accepting fake.
    Returns the list of (username, password) pairs the workflow sent.
    Tests that need a rejection patch `radius_client.authenticate` again.
    """
    calls = []

    async def fake_authenticate(username: str, password: str) -> RadiusResult:
        calls.append((username, password))
        return RadiusResult(True, "RADIUS authentication successful", {"Reply-Message": ["welcome"]})

    monkeypatch.setattr(radius_client, "authenticate", fake_authenticate)
    return calls


@pytest.fixture
def radius_reject(monkeypatch):
    """
    Make every RADIUS authentication fail (as on Access-Reject or timeout).
    """
    calls = []

    async def fake_authenticate(username: str, password: str) -> RadiusResult:
        calls.append((username, password))
        return RadiusResult(False, "RADIUS authentication failed", error="timeout")

    monkeypatch.setattr(radius_client, "authenticate", fake_authenticate)
    return calls


@pytest_asyncio.fixture
async def create_admin(db):
    """
    Factory fixture to create admin accounts directly via ORM.
    """

    async def _create_admin(password: str = "AdminPass!23") -> tuple[Admin, str]:
        admin = await Admin.create(
            email=f"admin_{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
        )
        return admin, password

    return _create_admin


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create portal users directly.
    """

    async def _create_user(password: str = "UserPass!23", **overrides) -> tuple[User, str]:
        fields = {
            "email": f"{uuid.uuid4().hex[:8]}@example.com",
            "full_name": "Portal User",
            "phone_number": f"555{uuid.uuid4().int % 10_000_000:07d}",
            "company_name": "Acme",
            "password_hash": hash_password(password),
        }
        fields.update(overrides)
        user = await User.create(**fields)
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def user_headers(client, create_user):
    """
    Log a fresh user in through the API and return (user, password, headers).
    """

    async def _user_headers(**overrides):
        user, password = await create_user(**overrides)
        resp = await client.post(
            "/api/auth/login",
            json={"email": user.email, "phoneNumber": user.phone_number, "password": password},
        )
        assert resp.status_code == 200, resp.text
        return user, password, {"Authorization": f"Bearer {resp.json()['token']}"}

    return _user_headers


@pytest_asyncio.fixture
async def admin_headers(client, create_admin):
    """
    Helper fixture to obtain admin Authorization headers via the login endpoint.
    """
    admin, password = await create_admin()
    resp = await client.post("/api/admin/login", json={"email": admin.email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
