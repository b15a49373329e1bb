# tests/conftest.py
import os

# Must be set before the app (and its cached settings / engine) is imported
os.environ["APP_ENV"] = "test"
os.environ["DB_URL"] = "sqlite+aiosqlite:///./test_zone_attendance.db"
os.environ.pop("JWT_SECRET_KEY", None)
os.environ.pop("INTERNAL_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all tests.

    Uses the application factory; the startup hook creates the schema in the
    SQLite test database. Tests that need a clean slate call `await init_db()`.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
