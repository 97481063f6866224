# product_catalog/models.py

"""
SQLAlchemy database model for the catalog's fixed `products` table.
The physical layout predates this service and must not be renamed.
"""

from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text

from .db import Base

# External field name -> physical column name.
# `color` has always been stored as `subcategory`.
FIELD_COLUMNS = {
    "id": "product_id",
    "name": "name",
    "price": "price",
    "category_id": "category_id",
    "description": "description",
    "color": "subcategory",
    "stock": "stock",
    "featured": "featured",
    "image_url": "image_url",
}

# Fields a client may write; the id is assigned by the store.
WRITABLE_FIELDS = tuple(field for field in FIELD_COLUMNS if field != "id")


class ProductRecord(Base):
    """
    One row of the 'products' table.
    """

    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    # Numeric(10, 2) keeps prices exact; never map this to a float.
    price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(Integer, nullable=False, index=True)
    description = Column(Text, nullable=True)
    subcategory = Column(String(255), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)
    image_url = Column(String(1024), nullable=True)

    def __repr__(self):
        return f"<ProductRecord(id={self.product_id}, name='{self.name}', stock={self.stock})>"


def column_for(field: str):
    """Return the mapped column attribute for an external field name."""
    return getattr(ProductRecord, FIELD_COLUMNS[field])
