"""
# `storefront/schemas/product.py`: Product schemas

Products are created and edited outside this service; here they are only read.

| Field          | Type    | Description |
|----------------|---------|-------------|
| id             | `str`   | Product ID |
| name           | `str`   | Product name |
| description    | `str`   | Long description (optional) |
| price          | `int`   | Unit price in KRW |
| category       | `str`   | Category slug (optional) |
| stock_quantity | `int`   | Units in stock |
| is_active      | `bool`  | Purchasable? |
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from storefront.schemas.common import ActionResult, PageInfo

ProductSort = Literal["latest", "price-asc", "price-desc"]
PriceRange = Literal["0-10000", "10000-50000", "50000+"]


class ProductOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: int = Field(..., ge=0)
    category: Optional[str] = None
    stock_quantity: int = Field(0, ge=0)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductSummary(BaseModel):
    """The slice of a product a cart line shows next to its quantity."""
    id: str
    name: str
    price: int
    stock_quantity: int
    category: Optional[str] = None
    is_active: bool = True


class ProductPage(ActionResult, PageInfo):
    products: List[ProductOut] = Field(default_factory=list)


class ProductList(ActionResult):
    products: List[ProductOut] = Field(default_factory=list)


class ProductResult(ActionResult):
    product: ProductOut
