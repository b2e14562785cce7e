import logging
from typing import Any

from transparency.core.exceptions import NotFound
from transparency.models.product import Product
from transparency.services.storage.base import ProductStore
from transparency.services.storage.base import new_product_id

logger = logging.getLogger(__name__)


class InMemoryProductStore(ProductStore):
    """Process-local store. Records are copied on the way in and out so callers
    never share state with the store."""

    def __init__(self) -> None:
        self._records: dict[str, Product] = {}

    async def create(self, *, name: str, category: str, attributes: dict[str, Any]) -> Product:
        product = Product(id=new_product_id(), name=name, category=category, attributes=dict(attributes))
        self._records[product.id] = product.model_copy(deep=True)
        logger.debug("Stored new product %s", product.id)
        return product

    async def get(self, product_id: str) -> Product | None:
        stored = self._records.get(product_id)
        return stored.model_copy(deep=True) if stored else None

    async def update(self, product: Product) -> Product:
        if product.id not in self._records:
            raise NotFound(product.id)
        self._records[product.id] = product.model_copy(deep=True)
        return product

    async def delete(self, product_id: str) -> bool:
        return self._records.pop(product_id, None) is not None
