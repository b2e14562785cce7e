import logging
from typing import Any

import certifi
from motor.motor_asyncio import AsyncIOMotorClient
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from transparency.core.exceptions import NotFound
from transparency.core.exceptions import StorageFailure
from transparency.models.product import Product
from transparency.services.storage.base import ProductStore
from transparency.services.storage.base import new_product_id

logger = logging.getLogger(__name__)


def create_client(uri: str) -> AsyncIOMotorClient:
    """Create a Motor client. SRV (Atlas) URIs get an explicit CA bundle."""
    options: dict[str, Any] = {
        "tz_aware": True,
        "uuidRepresentation": "standard",
        "serverSelectionTimeoutMS": 6000,
        "connectTimeoutMS": 6000,
    }
    if uri.startswith("mongodb+srv://"):
        options["tlsCAFile"] = certifi.where()
    return AsyncIOMotorClient(uri, **options)


def _to_document(product: Product) -> dict[str, Any]:
    doc = product.model_dump(exclude={"id", "stage"})
    doc["_id"] = product.id
    return doc


def _from_document(doc: dict[str, Any]) -> Product:
    doc = dict(doc)
    doc["id"] = doc.pop("_id")
    return Product.model_validate(doc)


class MongoProductStore(ProductStore):
    """Product store backed by a MongoDB collection. The product id is the document ``_id``."""

    def __init__(self, collection: AsyncIOMotorCollection, client: AsyncIOMotorClient | None = None):
        self.col = collection
        self._client = client

    @classmethod
    def from_uri(cls, uri: str, db_name: str, collection_name: str = "products") -> "MongoProductStore":
        client = create_client(uri)
        return cls(client[db_name][collection_name], client=client)

    async def create(self, *, name: str, category: str, attributes: dict[str, Any]) -> Product:
        product = Product(id=new_product_id(), name=name, category=category, attributes=dict(attributes))
        try:
            await self.col.insert_one(_to_document(product))
        except PyMongoError as e:
            logger.error("Mongo insert failed for product %s: %s", product.id, str(e))
            raise StorageFailure("Failed to create product record") from e
        return product

    async def get(self, product_id: str) -> Product | None:
        try:
            doc = await self.col.find_one({"_id": product_id})
        except PyMongoError as e:
            logger.error("Mongo lookup failed for product %s: %s", product_id, str(e))
            raise StorageFailure("Failed to fetch product record") from e
        return _from_document(doc) if doc else None

    async def update(self, product: Product) -> Product:
        try:
            result = await self.col.replace_one({"_id": product.id}, _to_document(product))
        except PyMongoError as e:
            logger.error("Mongo update failed for product %s: %s", product.id, str(e))
            raise StorageFailure("Failed to update product record") from e
        if result.matched_count == 0:
            raise NotFound(product.id)
        return product

    async def delete(self, product_id: str) -> bool:
        try:
            result = await self.col.delete_one({"_id": product_id})
        except PyMongoError as e:
            logger.error("Mongo delete failed for product %s: %s", product_id, str(e))
            raise StorageFailure("Failed to delete product record") from e
        return result.deleted_count > 0

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
