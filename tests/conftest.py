import os
import tempfile
from datetime import date, timedelta

# The app reads its configuration at import time, so point it at a scratch
# SQLite database and upload directory before anything imports formbook.
_TMP_DIR = tempfile.mkdtemp(prefix="formbook-tests-")
_DB_PATH = os.path.join(_TMP_DIR, "test.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

OWNER = {"X-User-Id": "1"}
OTHER_USER = {"X-User-Id": "2"}


@pytest.fixture
def client():
    from formbook.main import app

    with TestClient(app) as test_client:
        yield test_client
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)


def next_weekday(weekday: int) -> date:
    """First date after today falling on `weekday` (0 = Monday)."""
    day = date.today() + timedelta(days=1)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day
