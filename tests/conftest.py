import os
import sys
from pathlib import Path
import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'docshare' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("USE_LOCAL_DB", "0")


@pytest.fixture(scope="session")
def client() -> TestClient:
    # lazy import after env configured
    from docshare.main import create_app

    app = create_app()
    return TestClient(app)


@pytest.fixture(autouse=True)
def clean_store():
    from docshare.infrastructure.database.repositories import (
        document_repository,
        profile_repository,
        share_repository,
    )

    stores = (
        profile_repository._MEM_PROFILES,
        document_repository._MEM_DOCUMENTS,
        share_repository._MEM_SHARES,
    )
    for store in stores:
        store.clear()
    yield
    for store in stores:
        store.clear()


@pytest.fixture()
def auth_header():
    # in disabled mode the token is the caller's profile id
    def _header(user_id: str = "test-user") -> dict[str, str]:
        return {"Authorization": f"Bearer {user_id}"}

    return _header
