import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PLATFORM_ADMIN_EMAILS", "root@platform.test")
os.environ.setdefault("LOG_JSON", "false")

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, UTC
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ticketdesk.auth.session import AuthState
from ticketdesk.config import settings
from ticketdesk.database import get_db
from ticketdesk.models.base import Base
# Import all model classes to ensure they're registered with SQLAlchemy
from ticketdesk.models.company import Company
from ticketdesk.models.role import UserRole
from ticketdesk.models.ticket import Ticket
from ticketdesk.models.ticket_comment import TicketComment
from ticketdesk.models.user import User
# Import FastAPI app AFTER model imports
from ticketdesk.main import app


@pytest_asyncio.fixture
async def engine(tmp_path):
    """
    File-backed SQLite per test.

    Each session gets its own connection so concurrent lookups and
    inserts behave like they would against a real server.
    """
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ticketdesk.db'}",
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Database session for seeding and assertions"""
    async with session_factory() as db:
        yield db


@pytest_asyncio.fixture
async def client(session_factory):
    """Async HTTP client with test database"""

    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://ticketdesk.test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id: str = "auth-user-123",
    email: str = "test@example.com",
    name: str | None = "Test User",
    expired: bool = False,
) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: Principal id to embed in 'sub' claim
        email: Principal email claim
        name: Optional display name claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "email": email, "exp": exp, "iat": datetime.now(UTC)}
    if name is not None:
        payload["name"] = name

    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def headers_for(email: str, subdomain: str | None = "acme", user_id: str | None = None) -> dict:
    """Bearer token plus tenant override headers for one principal"""
    headers = {
        "Authorization": f"Bearer {create_test_token(user_id=user_id or f'auth-{email}', email=email)}"
    }
    if subdomain is not None:
        headers["X-Tenant-Subdomain"] = subdomain
    return headers


async def add_user(db, company: Company, email: str, role: UserRole, name: str | None = None) -> User:
    user = User(company_id=company.id, email=email, name=name or email.split("@")[0], role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def acme(db_session) -> Company:
    """Regular company: no self-provisioning"""
    company = Company(name="Acme Corp", subdomain="acme")
    db_session.add(company)
    await db_session.commit()
    await db_session.refresh(company)
    return company


@pytest_asyncio.fixture
async def globex(db_session) -> Company:
    company = Company(name="Globex", subdomain="globex")
    db_session.add(company)
    await db_session.commit()
    await db_session.refresh(company)
    return company


@pytest_asyncio.fixture
async def demo(db_session) -> Company:
    """Self-provisioning demo company"""
    company = Company(name="Demo Company", subdomain="demo", allows_self_provisioning=True)
    db_session.add(company)
    await db_session.commit()
    await db_session.refresh(company)
    return company


@pytest_asyncio.fixture
async def acme_admin(db_session, acme) -> User:
    return await add_user(db_session, acme, "admin@acme.test", UserRole.ADMIN)


@pytest_asyncio.fixture
async def acme_agent(db_session, acme) -> User:
    return await add_user(db_session, acme, "agent@acme.test", UserRole.AGENT)


@pytest_asyncio.fixture
async def acme_customer(db_session, acme) -> User:
    return await add_user(db_session, acme, "customer@acme.test", UserRole.CUSTOMER)


@pytest.fixture
def admin_headers(acme_admin):
    return headers_for(acme_admin.email)


@pytest.fixture
def agent_headers(acme_agent):
    return headers_for(acme_agent.email)


@pytest.fixture
def customer_headers(acme_customer):
    return headers_for(acme_customer.email)


class FakeAuthProvider:
    """Auth provider whose notifications are driven by the test"""

    def __init__(self):
        self.listeners = []
        self.login_calls = 0
        self.logout_calls = 0

    def on_auth_state_changed(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def login(self):
        self.login_calls += 1

    def logout(self):
        self.logout_calls += 1

    def emit(self, principal, is_loading=False):
        for listener in list(self.listeners):
            listener(AuthState(principal=principal, is_loading=is_loading))
