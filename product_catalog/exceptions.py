# product_catalog/exceptions.py

from typing import Optional


class CatalogError(Exception):
    """Base exception for catalog service errors."""

    message = "Oops... our bad."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return self.args[0]


class InvalidInput(CatalogError):
    pass


class NotFound(CatalogError):
    message = "Product not found."


class InternalFailure(CatalogError):
    """Storage fault; the message never carries the underlying cause."""
