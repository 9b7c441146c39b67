import heapq
import itertools
import logging

import pytest
from fastapi.testclient import TestClient

from marketplace.api.deps import get_storage, get_store
from marketplace.config import config
from marketplace.main import app
from marketplace.models import Profile, ServiceType
from marketplace.storage import LocalMediaStorage
from marketplace.store import MemoryRecordStore
from marketplace.tests.constants import ADMIN_ID, BNEI_BRAK, JERUSALEM, OWNER_ID

logger = logging.getLogger(__name__)


@pytest.fixture
def make_profile():
    """Build profiles with sensible defaults and unique ids."""
    counter = itertools.count(1)

    def _make(**overrides) -> Profile:
        number = next(counter)
        fields = {
            "id": f"p{number:03d}",
            "business_name": f"עסק {number}",
            "city": JERUSALEM,
            "service_type": ServiceType.APPOINTMENT,
            "rating": 4.0,
            "review_count": 10,
            "categories": ["plumbers"],
            "media_urls": [],
            "country": "IL",
        }
        fields.update(overrides)
        return Profile(**fields)

    return _make


@pytest.fixture
def sample_profiles(make_profile):
    """15 emergency listings in Jerusalem plus unrelated noise."""
    emergency = [
        make_profile(
            service_type=ServiceType.EMERGENCY,
            rating=round(5.0 - index * 0.1, 1),
            media_urls=[f"https://cdn.example.com/media/e{index}.jpg"],
        )
        for index in range(15)
    ]
    others = [
        make_profile(city=BNEI_BRAK, service_type=ServiceType.EMERGENCY, rating=4.9),
        make_profile(service_type=ServiceType.RETAIL, categories=["fashion"]),
        make_profile(service_type=ServiceType.EMERGENCY, is_active=False),
        make_profile(service_type=ServiceType.EMERGENCY, country="US"),
    ]
    return emergency + others


@pytest.fixture
def memory_store(sample_profiles, make_profile):
    owned = make_profile(
        id="owned",
        owner_id=OWNER_ID,
        city=BNEI_BRAK,
        service_type=ServiceType.PROJECT,
        media_urls=[
            "https://cdn.example.com/media/owned/intro.mp4",
            "https://cdn.example.com/media/owned/kitchen.jpg",
        ],
    )
    return MemoryRecordStore(sample_profiles + [owned], admins=[ADMIN_ID])


@pytest.fixture
def media_storage(tmp_path):
    return LocalMediaStorage(str(tmp_path / "media"), "/media")


@pytest.fixture
def client(memory_store, media_storage, monkeypatch):
    monkeypatch.setattr(config, "STORE_BACKEND", "memory")
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_storage] = lambda: media_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Manual clock with the ``call_later`` surface of an asyncio loop."""

    def __init__(self):
        self.now_ms = 0
        self._queue = []
        self._sequence = itertools.count()

    def call_later(self, delay_seconds, callback):
        handle = FakeHandle()
        due = self.now_ms + round(delay_seconds * 1000)
        heapq.heappush(self._queue, (due, next(self._sequence), handle, callback))
        return handle

    def live(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now_ms = due
            if not handle.cancelled:
                callback()
        self.now_ms = target


@pytest.fixture
def scheduler():
    return FakeScheduler()
