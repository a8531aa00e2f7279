import pytest
from fastapi.testclient import TestClient

from leaderboard_service.app import create_app
from leaderboard_service.object_store import MemoryObjectStore
from leaderboard_service.store import LeaderboardStore

BUCKET = "test-bucket"
KEY = "leaderboard.json"


@pytest.fixture
def object_store():
    return MemoryObjectStore()


@pytest.fixture
def store(object_store):
    return LeaderboardStore(object_store, BUCKET, KEY)


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store, admin_password="admin")) as c:
        yield c
