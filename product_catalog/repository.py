# product_catalog/repository.py

"""
Product repository: every read and write against the `products` table.

Storage faults are not handled here; they are rolled back and re-raised for
the service layer to translate.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from .filters import build_conjuncts, render
from .models import FIELD_COLUMNS, WRITABLE_FIELDS, ProductRecord
from .schemas import PLACEHOLDER_IMAGE_URL, Product, ProductIn

logger = logging.getLogger(__name__)


def to_product(record: ProductRecord) -> Product:
    """Map a row to a Product, filling in the placeholder image when none is stored."""
    values = {field: getattr(record, column) for field, column in FIELD_COLUMNS.items()}
    if not values["image_url"]:
        values["image_url"] = PLACEHOLDER_IMAGE_URL
    return Product(**values)


def to_columns(product: ProductIn) -> dict:
    """Map the writable fields of a product to column values."""
    return {FIELD_COLUMNS[field]: getattr(product, field) for field in WRITABLE_FIELDS}


class ProductRepository:
    """
    Repository for product database operations.

    Example usage:
        repo = ProductRepository(db)
        shirts = repo.search(category_id=2, color="blue")
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Product]:
        records = self.db.execute(select(ProductRecord)).scalars().all()
        return [to_product(record) for record in records]

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Return the product, or None when no row has this id."""
        record = self.db.execute(
            select(ProductRecord).where(ProductRecord.product_id == product_id)
        ).scalar_one_or_none()
        if record is None:
            return None
        return to_product(record)

    def search(
        self,
        category_id: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        color: Optional[str] = None,
    ) -> List[Product]:
        """
        Find products matching every given filter.

        Absent filters impose no constraint, so calling this without filters
        returns the same products as `list_all`. Price bounds are inclusive
        and color is a substring match on the stored subcategory.
        """
        conjuncts = build_conjuncts(category_id, min_price, max_price, color)
        logger.debug(f"Searching products with conjuncts: {conjuncts}")
        query = select(ProductRecord).where(render(conjuncts))
        records = self.db.execute(query).scalars().all()
        return [to_product(record) for record in records]

    def get_by_category(self, category_id: int) -> List[Product]:
        return self.search(category_id=category_id)

    def create(self, product: ProductIn) -> Product:
        """Insert a product and return it with its generated id."""
        record = ProductRecord(**to_columns(product))
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except Exception:
            self.db.rollback()
            raise
        return Product(id=record.product_id, **product.model_dump(include=set(WRITABLE_FIELDS)))

    def update(self, product_id: int, product: ProductIn) -> None:
        """Overwrite every writable column; a missing id updates nothing."""
        self._execute(
            update(ProductRecord)
            .where(ProductRecord.product_id == product_id)
            .values(**to_columns(product))
        )

    def delete(self, product_id: int) -> None:
        """Delete the row; a missing id deletes nothing."""
        self._execute(delete(ProductRecord).where(ProductRecord.product_id == product_id))

    def update_stock(self, product_id: int, delta: int) -> None:
        """Add `delta` to the stored stock in one statement evaluated by the store."""
        self._execute(
            update(ProductRecord)
            .where(ProductRecord.product_id == product_id)
            .values(stock=ProductRecord.stock + delta)
        )

    def _execute(self, statement) -> None:
        try:
            self.db.execute(statement)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
