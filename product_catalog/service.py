# product_catalog/service.py

"""
Catalog service: input validation and orchestration over the repository.

This is the only place where a missing product becomes `NotFound` and where
storage faults become the opaque `InternalFailure`.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import List, Optional

from .exceptions import CatalogError, InternalFailure, InvalidInput, NotFound
from .repository import ProductRepository
from .schemas import Product, ProductIn

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    @contextmanager
    def _storage_errors(self, operation: str, product_id: Optional[int] = None):
        try:
            yield
        except CatalogError:
            raise
        except Exception as e:
            logger.error(
                f"Error during {operation} (product_id={product_id}): {e}",
                exc_info=True,
            )
            raise InternalFailure() from e

    def search_or_list(
        self,
        category_id: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        color: Optional[str] = None,
    ) -> List[Product]:
        has_filters = (
            category_id is not None
            or min_price is not None
            or max_price is not None
            or bool(color and color.strip())
        )
        with self._storage_errors("search_or_list"):
            if has_filters:
                return self.repository.search(category_id, min_price, max_price, color)
            return self.repository.list_all()

    def list_by_category(self, category_id: int) -> List[Product]:
        with self._storage_errors("list_by_category"):
            return self.repository.get_by_category(category_id)

    def get_by_id(self, product_id: int) -> Product:
        with self._storage_errors("get_by_id", product_id):
            return self._require(product_id)

    def create(self, product: ProductIn) -> Product:
        with self._storage_errors("create"):
            self._validate(product)
            return self.repository.create(product)

    def update(self, product_id: int, product: ProductIn) -> None:
        with self._storage_errors("update", product_id):
            self._require(product_id)
            self._validate(product)
            self.repository.update(product_id, product)

    def delete(self, product_id: int) -> None:
        with self._storage_errors("delete", product_id):
            self._require(product_id)
            self.repository.delete(product_id)

    def adjust_stock(self, product_id: int, delta: int) -> Product:
        """Apply a relative stock change and return the product as stored afterwards."""
        with self._storage_errors("adjust_stock", product_id):
            self._require(product_id)
            self.repository.update_stock(product_id, delta)
            # The row can be deleted between the two statements
            return self._require(product_id)

    def _require(self, product_id: int) -> Product:
        product = self.repository.get_by_id(product_id)
        if product is None:
            raise NotFound()
        return product

    @staticmethod
    def _validate(product: ProductIn) -> None:
        if not product.name or not product.name.strip():
            raise InvalidInput("Product name is required.")
        if product.category_id <= 0:
            raise InvalidInput("Valid category ID is required.")
