"""Product record stores.

``build_store`` picks MongoDB when a connection string is configured and
falls back to the process-local store otherwise.
"""

from transparency.core.config import Settings

from .base import ProductStore  # noqa: F401
from .memory import InMemoryProductStore  # noqa: F401


def build_store(settings: Settings) -> ProductStore:
    if settings.mongo_uri:
        from .mongo import MongoProductStore

        return MongoProductStore.from_uri(settings.mongo_uri, settings.mongo_db, settings.mongo_collection)
    return InMemoryProductStore()
