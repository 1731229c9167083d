"""Product CRUD API endpoints."""
import math
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.errors import NotFoundError
from app.schemas.product import (
    CategoryListData,
    CategoryListEnvelope,
    Pagination,
    ProductData,
    ProductEnvelope,
    ProductListData,
    ProductListEnvelope,
    ProductResponse,
)
from app.services.product_repository import ProductRepository
from app.services.query_builder import build_product_query
from app.services.validation import decode_product_payload

router = APIRouter(prefix="/api/products", tags=["products"])


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Dependency providing a repository bound to the request's session."""
    return ProductRepository(db)


def _product_envelope(product) -> ProductEnvelope:
    return ProductEnvelope(data=ProductData(product=ProductResponse.model_validate(product)))


@router.get("", response_model=ProductListEnvelope)
def list_products(
    page: Optional[str] = Query(None, description="Page number (default: 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default: 10)"),
    category: Optional[str] = Query(None, description="Filter by exact category"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Minimum price (inclusive)"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Maximum price (inclusive)"),
    in_stock: Optional[str] = Query(None, alias="inStock", description="'true' for in-stock products only"),
    sort: Optional[str] = Query(None, description="e.g. price:asc,name:desc"),
    search: Optional[str] = Query(None, description="Search in name and description"),
    repository: ProductRepository = Depends(get_product_repository),
):
    """
    List products with filtering, sorting and pagination.

    Query Parameters:
    - page: Page number (default: 1)
    - limit: Items per page (default: 10)
    - category: Filter by exact category
    - minPrice / maxPrice: Inclusive price range
    - inStock: "true" for in-stock products, anything else for out-of-stock
    - sort: Comma-separated field:direction pairs (default: createdAt:desc)
    - search: Match any term in name or description
    """
    raw_params = {
        "page": page,
        "limit": limit,
        "category": category,
        "minPrice": min_price,
        "maxPrice": max_price,
        "inStock": in_stock,
        "sort": sort,
        "search": search,
    }
    query = build_product_query(
        {key: value for key, value in raw_params.items() if value is not None},
        max_limit=get_settings().max_page_size,
    )

    products, total = repository.list_products(query)

    return ProductListEnvelope(
        results=len(products),
        pagination=Pagination(
            total_products=total,
            total_pages=math.ceil(total / query.limit),
            current_page=query.page,
            limit=query.limit,
        ),
        data=ProductListData(
            products=[ProductResponse.model_validate(product) for product in products]
        ),
    )


@router.get("/categories", response_model=CategoryListEnvelope)
def list_categories(repository: ProductRepository = Depends(get_product_repository)):
    """Get all distinct product categories."""
    categories = sorted(repository.list_categories())
    return CategoryListEnvelope(
        results=len(categories),
        data=CategoryListData(categories=categories),
    )


@router.get("/{product_id}", response_model=ProductEnvelope)
def get_product(
    product_id: str, repository: ProductRepository = Depends(get_product_repository)
):
    """Get a single product by ID."""
    product = repository.get(product_id)
    if not product:
        raise NotFoundError("Product not found")

    return _product_envelope(product)


@router.post("", response_model=ProductEnvelope, status_code=201)
def create_product(
    payload: Any = Body(...),
    repository: ProductRepository = Depends(get_product_repository),
):
    """
    Create a new product.

    Private (admin only). Requires name, description, price and category.
    """
    product_in = decode_product_payload(payload)
    product = repository.create(product_in.model_dump())

    return _product_envelope(product)


@router.put("/{product_id}", response_model=ProductEnvelope)
def update_product(
    product_id: str,
    payload: Any = Body(...),
    repository: ProductRepository = Depends(get_product_repository),
):
    """
    Update a product.

    Private (admin only). The payload is validated like a create request;
    optional fields that are left out keep their current values.
    """
    product_in = decode_product_payload(payload)
    product = repository.update(product_id, product_in.model_dump(exclude_unset=True))
    if not product:
        raise NotFoundError("Product not found")

    return _product_envelope(product)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str, repository: ProductRepository = Depends(get_product_repository)
):
    """Delete a single product. Private (admin only)."""
    if not repository.delete(product_id):
        raise NotFoundError("Product not found")

    return None
