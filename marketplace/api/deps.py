from functools import lru_cache

from marketplace.config import config
from marketplace.storage import LocalMediaStorage
from marketplace.store import MemoryRecordStore, RecordStore, SqlRecordStore


@lru_cache
def get_store() -> RecordStore:
    if config.STORE_BACKEND == "memory":
        return MemoryRecordStore()
    return SqlRecordStore()


@lru_cache
def get_storage() -> LocalMediaStorage:
    return LocalMediaStorage(config.MEDIA_ROOT, config.MEDIA_BASE_URL)
