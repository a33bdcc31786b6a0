import os
import uuid

import pytest

# Use in-memory sqlite for tests; must be set before ironlog.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")


@pytest.fixture
def client():
    # Import after env is set so engine is created with sqlite
    from fastapi.testclient import TestClient  # noqa: WPS433
    from ironlog.main import app  # noqa: WPS433

    return TestClient(app)


@pytest.fixture
def user_id():
    # One in-memory database is shared by every test; isolate by user
    return f"user-{uuid.uuid4().hex[:8]}"
