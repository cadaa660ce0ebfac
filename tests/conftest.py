"""Shared pytest fixtures: SQLite in-memory database, app client and fakes."""

import logging
import os

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# the app lifespan must not touch the configured PostgreSQL database
os.environ["NOTUS_SKIP_LIFESPAN_DB"] = "1"

from notus.api.sharing import get_email_service  # noqa: E402
from notus.config import Settings, get_settings  # noqa: E402
from notus.core.errors import InternalError  # noqa: E402
from notus.core.models import BaseModel, Document, User  # noqa: E402
from notus.core.redis_client import get_redis_client  # noqa: E402
from notus.core.result import Result  # noqa: E402
from notus.core.services.email_service import EmailReceipt  # noqa: E402
from notus.core.services.interfaces import IEmailService  # noqa: E402
from notus.database import get_db_session  # noqa: E402
from notus.main import app  # noqa: E402
from notus.security.jwt import create_access_token  # noqa: E402
from notus.security.password import hash_password  # noqa: E402

# aiosqlite logs every statement at DEBUG
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_PASSWORD = "TestPassword123!"


class FakeEmailService(IEmailService):
    """Records invite emails instead of calling the provider."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send_share_invite(self, email, link, inviter_name, doc_title):
        if self.fail:
            return Result.fail(InternalError(detail="provider down"))
        self.sent.append({"email": email, "link": link, "inviter_name": inviter_name, "doc_title": doc_title})
        return Result.ok(EmailReceipt(message_id=f"fake-{len(self.sent)}", simulated=True))


class FakeRedis:
    """In-memory stand-in for the invite denylist."""

    def __init__(self, available: bool = True, lookup_fails: bool = False):
        self.available = available
        self.lookup_fails = lookup_fails
        self.denied = {}

    async def add_to_denylist(self, jti, expire):
        if not self.available:
            return False
        self.denied[jti] = expire
        return True

    async def is_denylisted(self, jti):
        if self.lookup_fails:
            return None
        return jti in self.denied

    async def ping(self):
        return self.available


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="test-secret-key",
        share_invite_secret="test-invite-secret",
        app_base_url="http://app.test",
        resend_api_key=None,
        debug=True,
    )


@pytest.fixture
def invite_config(test_settings):
    return test_settings.invite_settings()


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces CASCADE / SET NULL with this pragma
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow, hash once
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def make_user(test_session, password_hash):
    """Factory: ``await make_user("bob@example.com")``."""

    async def _make_user(email: str, username: str = None, is_admin: bool = False, is_banned: bool = False) -> User:
        user = User(
            email=email.strip().lower(),
            username=username or email.split("@")[0],
            password_hash=password_hash,
            is_admin=is_admin,
            is_banned=is_banned,
        )
        test_session.add(user)
        await test_session.commit()
        await test_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_document(test_session):
    async def _make_document(owner: User, title: str = "Notes", content: str = "", tags=None) -> Document:
        document = Document(owner_id=owner.id, title=title, content=content, tags=tags or [])
        test_session.add(document)
        await test_session.commit()
        await test_session.refresh(document)
        return document

    return _make_document


@pytest.fixture
async def owner(make_user):
    return await make_user("alice@example.com", "alice")


@pytest.fixture
async def document(make_document, owner):
    return await make_document(owner, "Notes")


@pytest.fixture
def fake_email():
    return FakeEmailService()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def test_app(test_session, test_settings, fake_email, fake_redis):
    """App wired to the test database, settings and fakes."""

    async def _override_get_db():
        yield test_session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_email_service] = lambda: fake_email
    app.dependency_overrides[get_redis_client] = lambda: fake_redis
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(test_settings):
    """Factory building bearer headers for a user."""

    def _auth_headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id)}, settings=test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
