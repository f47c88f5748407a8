import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
_test_data_dir = tempfile.mkdtemp()
os.environ["COOKBOOK_STORAGE"] = "json"
os.environ["COOKBOOK_DATA_PATH"] = os.path.join(_test_data_dir, "state.json")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from cookbook_club.main import app
from cookbook_club.schemas.club import ClubInitResult
from cookbook_club.schemas.state import StateSnapshot, create_default_state
from cookbook_club.schemas.user import User
from cookbook_club.services.club import init_club
from cookbook_club.services.membership import invite_member
from cookbook_club.services.user import create_user
from cookbook_club.storage.json_store import JsonStateStore
from helpers import NOW

@pytest.fixture(scope="function")
def state() -> StateSnapshot:
    """A fresh, empty snapshot."""
    return create_default_state()


@pytest.fixture(scope="function")
def club(state: StateSnapshot) -> ClubInitResult:
    """Initialize "Sunday Supper" hosted by Alice (user_1)."""
    return init_club(state, club_name="Sunday Supper", host_name="Alice", now=NOW)


@pytest.fixture(scope="function")
def host_id(club: ClubInitResult) -> str:
    return club.host.id


@pytest.fixture(scope="function")
def bob(state: StateSnapshot, host_id: str) -> User:
    """Bob (user_2), invited as a plain member."""
    user = create_user(state, name="Bob", now=NOW)
    invite_member(state, host_id, user.id, now=NOW)
    return user


@pytest.fixture(scope="function")
def carol(state: StateSnapshot, club: ClubInitResult) -> User:
    """Carol (user_3), registered but not a member."""
    return create_user(state, name="Carol", email="carol@example.com", now=NOW)


@pytest.fixture(scope="function")
def image_path(tmp_path) -> str:
    path = tmp_path / "dish.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0")
    return str(path)


@pytest.fixture(scope="function")
def store(tmp_path) -> JsonStateStore:
    return JsonStateStore(tmp_path / "state.json")


@pytest.fixture(scope="function")
def client(store: JsonStateStore):
    """Create a test client with the state store dependency overridden."""
    from cookbook_club.api.deps import get_store

    app.dependency_overrides[get_store] = lambda: store

    yield TestClient(app)

    app.dependency_overrides.clear()
