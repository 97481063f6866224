# product_catalog/main.py

"""
FastAPI Product Catalog API.
Exposes filtered search, retrieval, creation, update, deletion and stock
adjustment of catalog products. Write endpoints require the admin token.
"""
import os
import logging
import sys
import time
from decimal import Decimal
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from .db import Base, engine, get_db
from .exceptions import CatalogError, InternalFailure, InvalidInput, NotFound
from .repository import ProductRepository
from .schemas import Product, ProductIn, StockAdjustment
from .security import require_admin
from .service import CatalogService

# -----------------------------
# Configure Logging
# -----------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

ERROR_STATUS = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    InternalFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# -----------------------------
# FastAPI App Initialization
# -----------------------------
app = FastAPI(
    title="Product Catalog API",
    description="Search and manage the products of the e-commerce catalog",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- FastAPI Event Handlers ---
@app.on_event("startup")
async def startup_event():
    """
    Ensures the products table exists, retrying while the database comes up.
    """
    max_retries = 10
    retry_delay_seconds = 5
    for i in range(max_retries):
        try:
            logger.info(
                f"Attempting to connect to the database and create tables (attempt {i+1}/{max_retries})..."
            )
            Base.metadata.create_all(bind=engine)
            logger.info("Successfully connected to the database and ensured tables exist.")
            break
        except OperationalError as e:
            logger.warning(f"Failed to connect to the database: {e}")
            if i < max_retries - 1:
                logger.info(f"Retrying in {retry_delay_seconds} seconds...")
                time.sleep(retry_delay_seconds)
            else:
                logger.critical(
                    f"Failed to connect to the database after {max_retries} attempts. Exiting application."
                )
                sys.exit(1)
        except Exception as e:
            logger.critical(
                f"An unexpected error occurred during database startup: {e}",
                exc_info=True,
            )
            sys.exit(1)


# --- Error Translation ---
@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request."},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": InternalFailure.message},
    )


def get_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(ProductRepository(db))


# --- Root Endpoint ---
@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    return {"message": "Welcome to the Product Catalog!"}


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    return {"status": "ok", "service": "product-catalog"}


# -----------------------------
# Product Endpoints
# -----------------------------


@app.get(
    "/products",
    response_model=List[Product],
    summary="List products, optionally filtered",
)
def search_products(
    service: CatalogService = Depends(get_service),
    category_id: Optional[int] = Query(None, alias="cat", description="Exact category ID."),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", description="Inclusive lower price bound."),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", description="Inclusive upper price bound."),
    color: Optional[str] = Query(None, max_length=255, description="Substring of the product color."),
):
    """
    Returns every product when no filter is given, otherwise the products
    matching all of the given filters.
    """
    logger.info(
        f"Listing products with cat={category_id}, minPrice={min_price}, "
        f"maxPrice={max_price}, color='{color}'"
    )
    products = service.search_or_list(category_id, min_price, max_price, color)
    logger.info(f"Retrieved {len(products)} products.")
    return products


@app.get(
    "/products/{product_id}",
    response_model=Product,
    summary="Retrieve a product by ID",
)
def get_product(product_id: int, service: CatalogService = Depends(get_service)):
    logger.info(f"Fetching product with ID: {product_id}")
    try:
        return service.get_by_id(product_id)
    except NotFound:
        logger.warning(f"Product with ID: {product_id} not found.")
        raise


@app.post(
    "/products",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    dependencies=[Depends(require_admin)],
)
def create_product(product: ProductIn, service: CatalogService = Depends(get_service)):
    logger.info(f"Creating product: {product.name}")
    created = service.create(product)
    logger.info(f"Product '{created.name}' (ID: {created.id}) created successfully.")
    return created


@app.put(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace an existing product",
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: int, product: ProductIn, service: CatalogService = Depends(get_service)
):
    logger.info(f"Updating product with ID: {product_id}")
    service.update(product_id, product)
    logger.info(f"Product (ID: {product_id}) updated successfully.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product by ID",
    dependencies=[Depends(require_admin)],
)
def delete_product(product_id: int, service: CatalogService = Depends(get_service)):
    logger.info(f"Attempting to delete product with ID: {product_id}")
    service.delete(product_id)
    logger.info(f"Product (ID: {product_id}) deleted successfully.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.patch(
    "/products/{product_id}/stock",
    response_model=Product,
    summary="Adjust a product's stock by a relative amount",
    dependencies=[Depends(require_admin)],
)
def adjust_stock(
    product_id: int,
    adjustment: StockAdjustment,
    service: CatalogService = Depends(get_service),
):
    logger.info(f"Adjusting stock of product {product_id} by {adjustment.delta}")
    return service.adjust_stock(product_id, adjustment.delta)


@app.get(
    "/categories/{category_id}/products",
    response_model=List[Product],
    summary="List the products of a category",
)
def list_category_products(category_id: int, service: CatalogService = Depends(get_service)):
    logger.info(f"Listing products of category {category_id}")
    return service.list_by_category(category_id)
