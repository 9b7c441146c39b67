"""
Cursor pagination over the record store.

A cursor is the remote offset of the next unconsumed record. When client-side
predicates are active a single remote batch may yield fewer matches than the
page size, so ``fetch_page`` keeps pulling batches until the page is full or
the store runs dry.
"""
import asyncio
import logging
from dataclasses import dataclass, field

from marketplace.schemas.response import Professional
from marketplace.search.mapper import profile_to_professional
from marketplace.search.predicates import Predicate, matches_all, split_predicates
from marketplace.store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    items: list[Professional] = field(default_factory=list)
    next_cursor: int = 0
    has_more: bool = False
    failed: bool = False


def sort_video_first(items: list[Professional]) -> list[Professional]:
    """Video-bearing listings first, then by rating. Stable within ties."""
    return sorted(items, key=lambda item: (not item.has_video, -item.rating))


async def fetch_page(
    store: RecordStore,
    predicates: list[Predicate],
    cursor: int,
    page_size: int,
) -> PageResult:
    remote, local = split_predicates(predicates)
    items: list[Professional] = []
    has_more = True

    try:
        while has_more and len(items) < page_size:
            batch = await store.fetch(remote, cursor, page_size)
            has_more = len(batch) == page_size

            for position, profile in enumerate(batch):
                professional = profile_to_professional(profile)
                if matches_all(professional, local):
                    items.append(professional)
                if len(items) == page_size:
                    consumed = position + 1
                    if consumed < len(batch):
                        has_more = True
                    cursor += consumed
                    break
            else:
                cursor += len(batch)

            if not local:
                break
    except RecordStoreError as e:
        logger.error(f"Error fetching listings at cursor {cursor}: {e}")
        return PageResult(items=[], next_cursor=cursor, has_more=False, failed=True)

    return PageResult(
        items=sort_video_first(items),
        next_cursor=cursor,
        has_more=has_more,
    )


async def fetch_count(store: RecordStore, predicates: list[Predicate]) -> int | None:
    """Count matching records; ``None`` when the store failed."""
    remote, _ = split_predicates(predicates)
    try:
        return await store.count(remote)
    except RecordStoreError as e:
        logger.error(f"Error counting listings: {e}")
        return None


async def search_page(
    store: RecordStore,
    predicates: list[Predicate],
    cursor: int,
    page_size: int,
) -> tuple[int | None, PageResult]:
    """Run the count and the page request for one search concurrently."""
    total, page = await asyncio.gather(
        fetch_count(store, predicates),
        fetch_page(store, predicates, cursor, page_size),
    )
    return total, page
