"""
Positional sponsored emphasis and feed ad placement.

Both are derived from the current result order on every call and are never
stored on the listing. ``start`` is the number of items the reader has
already been shown, so a page fetched later continues the same positions.
"""
from marketplace.catalog import Ad
from marketplace.config import config
from marketplace.schemas.response import FeedEntry, Professional


def mark_sponsored(
    items: list[Professional], start: int = 0, every: int = config.SPONSORED_EVERY
) -> list[Professional]:
    """Flag items at 1-indexed positions every, 2*every, ... as sponsored."""
    return [
        item.model_copy(update={"is_sponsored": (start + offset + 1) % every == 0})
        for offset, item in enumerate(items)
    ]


def interleave_ads(
    items: list[Professional],
    ads: list[Ad],
    start: int = 0,
    every: int = config.AD_EVERY,
) -> list[FeedEntry]:
    """Insert the next pool ad after every ``every``-th item until the pool runs out."""
    feed = []
    for offset, item in enumerate(items):
        position = start + offset + 1
        feed.append(FeedEntry(kind="professional", professional=item))
        ad_index = position // every - 1
        if position % every == 0 and ad_index < len(ads):
            feed.append(FeedEntry(kind="ad", ad=ads[ad_index]))
    return feed


def build_feed(
    items: list[Professional], ads: list[Ad], start: int = 0
) -> list[FeedEntry]:
    return interleave_ads(mark_sponsored(items, start), ads, start)
