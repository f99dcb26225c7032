"""Business constants shared by services and schemas."""

# Shipping (KRW)
FREE_SHIPPING_THRESHOLD = 50_000
SHIPPING_FEE = 3_000

# Pagination
PRODUCTS_PER_PAGE = 12
ORDERS_PER_PAGE = 10
POPULAR_PRODUCTS_LIMIT = 8

# Catalog filters: (min inclusive, max exclusive)
PRICE_RANGES = {
    "0-10000": (0, 10_000),
    "10000-50000": (10_000, 50_000),
    "50000+": (50_000, None),
}

# Checkout form limits
RECIPIENT_NAME_MIN_LENGTH = 2
RECIPIENT_NAME_MAX_LENGTH = 50
ADDRESS_MIN_LENGTH = 5
ADDRESS_MAX_LENGTH = 200
ADDRESS_DETAIL_MIN_LENGTH = 2
ADDRESS_DETAIL_MAX_LENGTH = 200
ORDER_NOTE_MAX_LENGTH = 200
PHONE_PATTERN = r"^010-\d{3,4}-\d{4}$"
POSTAL_CODE_PATTERN = r"^\d{5}$"

# Firestore collections (before prefixing)
PRODUCTS = "products"
CART_ITEMS = "cart_items"
ORDERS = "orders"
ORDER_ITEMS = "order_items"
