"""Shared fixtures: in-memory database, settings, seeded admins and an app client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from hotelsite.auth import TokenCodec, hash_password
from hotelsite.auth_service import AuthService
from hotelsite.auth_sessions import SessionRow  # noqa: F401  registers the table
from hotelsite.config import Settings
from hotelsite.db import get_engine
from hotelsite.main import create_app
from hotelsite.models import Admin, Base

TEST_SECRET = "test-secret-key-for-testing-purposes-minimum-32-characters"
ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "correct"
T0 = 1_700_000_000
EIGHT_HOURS = 8 * 60 * 60


class DictRequest:
    """Headers and cookies from plain dicts, for code that takes a RequestLike."""

    def __init__(self, headers: dict[str, str] | None = None, cookies: dict[str, str] | None = None):
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.cookies = dict(cookies or {})

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def get_cookie(self, name: str) -> str | None:
        return self.cookies.get(name)


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        environment="test",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        db_init_attempts=1,
        log_level="DEBUG",
    )


@pytest.fixture
def engine():
    eng = get_engine("sqlite://")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


def make_admin(engine, email: str, password: str, active: bool = True) -> int:
    with Session(engine) as s:
        a = Admin(email=email, password_hash=hash_password(password, rounds=4), is_active=active, created_at=T0)
        s.add(a)
        s.commit()
        return int(a.id)


@pytest.fixture
def admin_id(engine) -> int:
    return make_admin(engine, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def inactive_admin_id(engine) -> int:
    return make_admin(engine, "retired@test.com", ADMIN_PASSWORD, active=False)


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def auth(engine, codec, settings, clock) -> AuthService:
    return AuthService(engine, codec, settings, clock=clock)


@pytest.fixture
def app(settings, engine, admin_id):
    return create_app(settings, engine=engine)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/auth", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return client
