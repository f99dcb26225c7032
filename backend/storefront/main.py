"""
# `storefront/main.py`: Application entry point

Creates the FastAPI app, configures logging and CORS, registers the error
handlers that turn every rejection into `{"success": false, "message", "code"}`
and mounts the routers.

**Public routers:** `/products`, `/cart`, `/orders`, `/payments`
**Admin routers (prefix `/admin`):** `/orders`, protected by `require_admin`.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.config import settings
from storefront.core.errors import StorefrontError
from storefront.routers import carts, orders, payments, products
from storefront.schemas.common import ErrorResult

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("storefront")

app = FastAPI(
    title="Storefront API",
    description="Product browsing, cart, checkout and payment confirmation.",
    version="1.0.0",
    redirect_slashes=False,
)

# CORS: comma separated ALLOWED_ORIGINS, or all origins when unset
allow_origins = [origin.strip() for origin in settings.allowed_origins.split(',')] if settings.allowed_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResult(message=exc.message, code=exc.code).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    message = first.get("msg", "Invalid request.")
    return JSONResponse(
        status_code=400,
        content=ErrorResult(
            message=f"{field}: {message}" if field else message,
            code="invalid_request",
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s failed unexpectedly", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResult(message="An unexpected error occurred.", code="internal_error").model_dump(),
    )


app.include_router(products.router)
app.include_router(carts.router)
app.include_router(orders.router)
app.include_router(payments.router)

app.include_router(orders.admin_router, prefix="/admin")


@app.get("/")
def health_check():
    return {"status": "storefront running"}


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
