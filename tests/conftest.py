import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="refugeeconnect-tests-")

# settings are read at import time, so the environment must be ready first
os.environ["DB_DRIVER_NAME"] = "sqlite"
os.environ["DB_DATABASE_NAME"] = os.path.join(_TEST_DIR, "test.db")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["API_KEY"] = "sk-test"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_DIR, "uploads")
os.environ["INIT_MODE"] = "runtime"

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from refugeeconnect.api.ai_service import AIService
from refugeeconnect.api.rate_limit import ai_limiter, api_limiter
from refugeeconnect.database.config.connection_engine import connection_engine, init_db, metadata
from refugeeconnect.database.core.funcs import register_user, seed_community_groups
from refugeeconnect.main import app
from tests.helpers import login_as, make_admin, user_payload


@pytest.fixture(autouse=True)
def fresh_database():
    metadata.drop_all(connection_engine)
    init_db()
    seed_community_groups()
    ai_limiter.reset()
    api_limiter.reset()
    yield


@pytest.fixture
def completion_client() -> MagicMock:
    stub = MagicMock()
    stub.complete.return_value = "Stub answer"
    return stub


@pytest.fixture
def search() -> MagicMock:
    return MagicMock(return_value=[])


@pytest.fixture
def ai_service(completion_client, search) -> AIService:
    return AIService(completion_client=completion_client, search=search)


@pytest.fixture
def client(ai_service):
    app.state.ai_service = ai_service
    with TestClient(app) as test_client:
        yield test_client
    app.state.ai_service = None


@pytest.fixture
def user() -> dict:
    return register_user(data=user_payload())["user"]


@pytest.fixture
def other_user() -> dict:
    return register_user(
        data=user_payload(first_name="John", last_name="Deng", email="john@example.org", phone="+256700000002")
    )["user"]


@pytest.fixture
def admin_user() -> dict:
    admin = register_user(
        data=user_payload(first_name="Grace", last_name="Admin", email="admin@example.org", phone="+256700000003")
    )["user"]
    make_admin(admin["id"])
    admin["isAdmin"] = True
    return admin


@pytest.fixture
def auth_client(client, user) -> TestClient:
    return login_as(client, user)
