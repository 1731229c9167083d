"""Product schemas for API requests and responses."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing snake_case attributes as camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True
        from_attributes = True


class ProductCreate(CamelModel):
    """Decoded product payload for create and update requests."""

    name: str = Field(..., description="Product name")
    description: str = Field(..., description="Product description")
    price: float = Field(..., description="Product price")
    category: str = Field(..., description="Product category")
    image_url: Optional[str] = Field(None, description="Product image URL")
    in_stock: bool = Field(True, description="Whether the product is in stock")


class ProductResponse(CamelModel):
    """Schema for product responses."""

    id: str
    name: str
    description: str
    price: float
    category: str
    image_url: Optional[str] = None
    in_stock: bool
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="formattedPrice")
    @property
    def formatted_price(self) -> str:
        return f"${self.price:.2f}"


class ProductData(CamelModel):
    product: ProductResponse


class ProductEnvelope(CamelModel):
    """Single product response envelope."""

    status: str = "success"
    data: ProductData


class Pagination(CamelModel):
    total_products: int
    total_pages: int
    current_page: int
    limit: int


class ProductListData(CamelModel):
    products: list[ProductResponse]


class ProductListEnvelope(CamelModel):
    """Schema for paginated product list responses."""

    status: str = "success"
    results: int
    pagination: Pagination
    data: ProductListData


class CategoryListData(CamelModel):
    categories: list[str]


class CategoryListEnvelope(CamelModel):
    status: str = "success"
    results: int
    data: CategoryListData
