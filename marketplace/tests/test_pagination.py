import asyncio

from marketplace.schemas.request import SearchFilters
from marketplace.search.mapper import profile_to_professional
from marketplace.search.pagination import (
    fetch_count,
    fetch_page,
    search_page,
    sort_video_first,
)
from marketplace.search.predicates import build_predicates
from marketplace.store import MemoryRecordStore, RecordStoreError
from marketplace.tests.constants import JERUSALEM

PAGE_SIZE = 12


class FailingStore(MemoryRecordStore):
    async def count(self, predicates):
        raise RecordStoreError("count unavailable")

    async def fetch(self, predicates, offset, limit):
        raise RecordStoreError("fetch unavailable")


def _emergency_in_jerusalem():
    filters = SearchFilters(city=JERUSALEM, service_type="emergency")
    return build_predicates(filters, "IL")


def test_first_page_and_load_more(memory_store):
    predicates = _emergency_in_jerusalem()

    total = asyncio.run(fetch_count(memory_store, predicates))
    first = asyncio.run(fetch_page(memory_store, predicates, 0, PAGE_SIZE))
    second = asyncio.run(
        fetch_page(memory_store, predicates, first.next_cursor, PAGE_SIZE)
    )

    assert total == 15
    assert len(first.items) == 12
    assert first.has_more is True
    assert first.next_cursor == 12
    assert len(second.items) == 3
    assert second.has_more is False
    assert {item.id for item in first.items}.isdisjoint(item.id for item in second.items)


def test_short_page_terminates(make_profile):
    store = MemoryRecordStore([make_profile() for _ in range(5)])

    page = asyncio.run(fetch_page(store, build_predicates(SearchFilters(), "IL"), 0, 12))

    assert len(page.items) == 5
    assert page.has_more is False


def test_exact_page_reports_more_then_empty(make_profile):
    store = MemoryRecordStore([make_profile() for _ in range(12)])
    predicates = build_predicates(SearchFilters(), "IL")

    first = asyncio.run(fetch_page(store, predicates, 0, 12))
    second = asyncio.run(fetch_page(store, predicates, first.next_cursor, 12))

    assert first.has_more is True
    assert second.items == []
    assert second.has_more is False


def test_inactive_and_foreign_listings_excluded(memory_store):
    predicates = build_predicates(SearchFilters(service_type="emergency"), "IL")

    total = asyncio.run(fetch_count(memory_store, predicates))

    # 15 in Jerusalem plus one in Bnei Brak; inactive and US rows excluded
    assert total == 16


def test_video_only_backfills_across_batches(make_profile):
    profiles = []
    for index in range(30):
        media = ["https://cdn.example.com/clip.mp4"] if index % 5 == 0 else []
        profiles.append(make_profile(rating=5.0 - index * 0.01, media_urls=media))
    store = MemoryRecordStore(profiles)
    predicates = build_predicates(SearchFilters(video_only=True), "IL")

    first = asyncio.run(fetch_page(store, predicates, 0, 4))
    second = asyncio.run(fetch_page(store, predicates, first.next_cursor, 4))

    assert [item.id for item in first.items] == ["p001", "p006", "p011", "p016"]
    assert first.next_cursor == 16
    assert first.has_more is True
    assert [item.id for item in second.items] == ["p021", "p026"]
    assert second.has_more is False


def test_page_sorted_video_first_then_rating(make_profile):
    store = MemoryRecordStore(
        [
            make_profile(id="top", rating=5.0),
            make_profile(id="video-low", rating=3.0, media_urls=["https://c/x.webm"]),
            make_profile(id="mid", rating=4.0),
            make_profile(id="video-high", rating=4.5, media_urls=["https://c/y.mp4"]),
        ]
    )

    page = asyncio.run(fetch_page(store, build_predicates(SearchFilters(), "IL"), 0, 12))

    assert [item.id for item in page.items] == ["video-high", "video-low", "top", "mid"]


def test_sort_video_first_is_stable(make_profile):
    items = [
        profile_to_professional(make_profile(id="a", rating=4.0)),
        profile_to_professional(make_profile(id="b", rating=4.0)),
    ]

    assert [item.id for item in sort_video_first(items)] == ["a", "b"]


def test_store_failure_is_reported(make_profile):
    store = FailingStore([make_profile()])
    predicates = build_predicates(SearchFilters(), "IL")

    page = asyncio.run(fetch_page(store, predicates, 0, 12))
    total = asyncio.run(fetch_count(store, predicates))

    assert page.items == []
    assert page.has_more is False
    assert page.failed is True
    assert total is None


def test_search_page_returns_count_with_page(memory_store):
    total, page = asyncio.run(search_page(memory_store, _emergency_in_jerusalem(), 12, 12))

    assert total == 15
    assert len(page.items) == 3
    assert page.has_more is False


def test_search_page_reports_both_failures(make_profile):
    total, page = asyncio.run(
        search_page(FailingStore([make_profile()]), build_predicates(SearchFilters(), "IL"), 0, 12)
    )

    assert total is None
    assert page.failed is True
