"""
Back Office API - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before anything from `app` is
       imported, because app.config reads them once at import time.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session:  AsyncMock standing in for AsyncSession
    ├── temp_storage:     Fresh directory for blob storage tests
    ├── sample_png_bytes: Tiny PNG for upload tests
    ├── db_tables:        Creates and drops every table on the test database
    ├── clinician:        A clinician row linked to user "user-1"
    ├── auth_headers:     Bearer token for the clinician's user
    └── test_client:      HTTPX AsyncClient over the ASGI app
"""

import os
import tempfile

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup (must run before any app import)
# ══════════════════════════════════════════════════════════════════════════

_TEST_DIR = tempfile.mkdtemp(prefix="backoffice_test_")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["STORAGE_ROOT"] = os.path.join(_TEST_DIR, "storage")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"

from typing import Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.auth import create_session_token  # noqa: E402
from app.database import Base, async_session_factory, engine  # noqa: E402
from app.models import Clinician  # noqa: E402

CLINICIAN_USER_ID = "user-1"


# ══════════════════════════════════════════════════════════════════════════
# Unit Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_png_bytes():
    """PNG signature plus an IHDR chunk; enough bytes to look like an image."""
    return (
        b"\x89PNG\r\n\x1a\n"
        b"\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    )


@pytest.fixture
def practice_payload() -> Dict:
    """A valid PUT /api/practiceInformation body."""
    return {
        "practiceName": "Test Practice",
        "practiceEmail": "test@example.com",
        "timeZone": "America/New_York",
        "practiceLogo": "logo.png",
        "phoneNumbers": [
            {"number": "123-456-7890", "type": "main"},
            {"number": "987-654-3210", "type": "fax"},
        ],
        "teleHealth": True,
    }


# ══════════════════════════════════════════════════════════════════════════
# Database / API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_tables():
    """Fresh schema for each test; sqlite runs without a pool."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def clinician(db_tables) -> Clinician:
    async with async_session_factory() as session:
        row = Clinician(user_id=CLINICIAN_USER_ID, first_name="Test", last_name="Clinician")
        session.add(row)
        await session.commit()
        return row


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_session_token(CLINICIAN_USER_ID)}"}


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from app.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
