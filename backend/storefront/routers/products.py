"""
# `storefront/routers/products.py`: Product catalog endpoints

Public, no token required.

- `GET /products`: active products; optional `category`, `price_range`
  (`0-10000`, `10000-50000`, `50000+`), `sort` (`latest`, `price-asc`,
  `price-desc`) and `page` (12 per page).
- `GET /products/popular`: the 8 newest active products.
- `GET /products/{product_id}`: one active product, 404 otherwise.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront.config import get_db
from storefront.schemas.product import PriceRange, ProductList, ProductPage, ProductResult, ProductSort
from storefront.services import catalog

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=ProductPage, summary="List Products")
def list_products(
    category: Optional[str] = Query(None, description="Category slug"),
    price_range: Optional[PriceRange] = Query(None),
    sort: ProductSort = Query("latest"),
    page: int = Query(1, ge=1),
    db=Depends(get_db),
):
    return ProductPage(**catalog.list_products(db, category=category, price_range=price_range, sort=sort, page=page))


@router.get("/popular", response_model=ProductList, summary="Popular Products")
def popular_products(db=Depends(get_db)):
    return ProductList(products=catalog.get_popular_products(db))


@router.get("/{product_id}", response_model=ProductResult, summary="Get Product")
def get_product(product_id: str, db=Depends(get_db)):
    return ProductResult(product=catalog.get_product(db, product_id))
