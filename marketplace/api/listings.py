import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from marketplace.api.deps import get_store
from marketplace.catalog import CATEGORIES, COMMUNITIES, FEED_ADS, SERVICE_TYPE_LABELS
from marketplace.config import config
from marketplace.schemas.request import ListingsGetRequest
from marketplace.schemas.response import CatalogResponse, ListingsGetResponse
from marketplace.search.pagination import search_page
from marketplace.search.predicates import build_predicates
from marketplace.search.sponsored import build_feed
from marketplace.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["listings"])
catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/", response_model=ListingsGetResponse)
async def get_listings(
    filters: Annotated[ListingsGetRequest, Query()],
    store: RecordStore = Depends(get_store),
):
    """Get one page of active listings matching the filters."""
    logger.info(f"GET /listings/ - Filters: {filters}")

    country = filters.country or config.DEFAULT_COUNTRY
    predicates = build_predicates(filters, country)

    total, page = await search_page(
        store, predicates, filters.cursor, config.PAGE_SIZE
    )

    return ListingsGetResponse(
        items=build_feed(page.items, FEED_ADS, start=filters.shown),
        total=total or 0,
        has_more=page.has_more,
        next_cursor=page.next_cursor,
        failed=page.failed or total is None,
    )


@catalog_router.get("/", response_model=CatalogResponse)
async def get_catalog():
    return CatalogResponse(
        categories=CATEGORIES,
        communities=COMMUNITIES,
        service_types=SERVICE_TYPE_LABELS,
    )
