import pytest
from fastapi.testclient import TestClient

from database import Database
from limiter import limiter
from main import create_app
from schemas.userschema import UserSchema, UserCredsSchema


@pytest.fixture
def db(tmp_path):
    yield Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def app(db):
    limiter.reset()
    yield create_app(db)


@pytest.fixture
def tester(app):
    with TestClient(app=app) as client:
        yield client


@pytest.fixture
def user_schema():
    user = UserSchema(name="Test User", email="testuser@example.com", password="testpassword")
    yield user.model_dump()


@pytest.fixture
def user_creds_schema():
    user_creds = UserCredsSchema(email="testuser@example.com", password="testpassword")
    yield user_creds.model_dump()


def register(tester: TestClient, email: str = "testuser@example.com", password: str = "testpassword", name: str = "Test User") -> dict:
    response = tester.post(url="/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201
    return response.json()["data"]


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token(tester):
    yield register(tester)["token"]


@pytest.fixture
def headers(token):
    yield auth_headers(token)
