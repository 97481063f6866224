# product_catalog/schemas.py

"""
Pydantic schemas for the catalog API.
Attributes are snake_case in Python and camelCase on the wire.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PLACEHOLDER_IMAGE_URL = "https://placehold.co/300x300/e0e0e0/333333?text=No+Image"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Payload for POST and PUT /products.
# Blank names and non-positive categories are rejected by the service, not here.
class ProductIn(CamelModel):
    name: Optional[str] = Field(None, max_length=255, description="Name of the product.")
    price: Decimal = Field(..., max_digits=10, decimal_places=2, description="Price in currency units.")
    category_id: int = Field(0, description="Category the product belongs to.")
    description: Optional[str] = Field(None, description="Detailed description of the product.")
    color: Optional[str] = Field(None, max_length=255, description="Color of the product.")
    stock: int = Field(0, description="Units in stock.")
    featured: bool = Field(False, description="Whether the product is featured.")
    image_url: Optional[str] = Field(None, max_length=1024, description="Image URL.")


# A product as read back from the store.
class Product(ProductIn):
    id: int = Field(..., description="Unique identifier of the product.")


class StockAdjustment(CamelModel):
    delta: int = Field(..., description="Units to add (positive) or remove (negative).")
