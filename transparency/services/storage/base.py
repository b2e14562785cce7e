from abc import ABC
from abc import abstractmethod
from typing import Any
from uuid import uuid4

from transparency.models.product import Product


def new_product_id() -> str:
    return uuid4().hex


class ProductStore(ABC):
    """Single-record persistence for products.

    Implementations raise ``StorageFailure`` for driver errors and
    ``NotFound`` when updating a record that no longer exists. Writes are
    last-write-wins; there is no version check.
    """

    @abstractmethod
    async def create(self, *, name: str, category: str, attributes: dict[str, Any]) -> Product:
        """Persist a new Draft product and return it with its assigned id."""

    @abstractmethod
    async def get(self, product_id: str) -> Product | None:
        """Return the product, or None when absent."""

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """Replace the stored record with *product*."""

    @abstractmethod
    async def delete(self, product_id: str) -> bool:
        """Remove the record. Returns False when nothing was removed."""

    async def close(self) -> None:
        return None
