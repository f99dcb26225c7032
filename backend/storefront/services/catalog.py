"""
storefront/services/catalog.py - Read-only product catalog.

Only active products are ever returned. Filters mirror the storefront's product
page: category, a preset price range and a sort key, paginated 12 per page.
"""
import logging
import math
from typing import Any, Dict, Optional

from storefront.core.constants import POPULAR_PRODUCTS_LIMIT, PRICE_RANGES, PRODUCTS_PER_PAGE
from storefront.core.errors import NotFoundError, ValidationFailedError
from storefront.repositories import products as products_repo

logger = logging.getLogger("storefront.catalog")


def list_products(
    db,
    category: Optional[str] = None,
    price_range: Optional[str] = None,
    sort: str = "latest",
    page: int = 1,
) -> Dict[str, Any]:
    if price_range is not None and price_range not in PRICE_RANGES:
        raise ValidationFailedError(f"Unknown price range: {price_range}")
    if sort not in products_repo.SORTS:
        raise ValidationFailedError(f"Unknown sort option: {sort}")

    page = max(1, page)
    min_price, max_price = PRICE_RANGES[price_range] if price_range else (None, None)
    products, total = products_repo.query_active(
        db,
        category=category or None,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        offset=(page - 1) * PRODUCTS_PER_PAGE,
        limit=PRODUCTS_PER_PAGE,
    )
    logger.debug("list_products category=%s range=%s sort=%s page=%s -> %s/%s",
                 category, price_range, sort, page, len(products), total)
    return {
        "products": products,
        "page": page,
        "total_count": total,
        "total_pages": math.ceil(total / PRODUCTS_PER_PAGE),
    }


def get_popular_products(db):
    """Most recently added active products (stand-in until sales data exists)."""
    products, _ = products_repo.query_active(db, sort="latest", limit=POPULAR_PRODUCTS_LIMIT)
    return products


def get_product(db, product_id: str) -> Dict[str, Any]:
    product = products_repo.get(db, product_id)
    if not product or not product.get("is_active"):
        raise NotFoundError("Product not found.")
    return product
