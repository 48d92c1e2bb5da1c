import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from storefront.core.config import settings
from storefront.core.errors import CartError
from storefront.core.events import CartChanged, cart_events
from storefront.api import cart

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.SHOP_NAME} - Storefront",
    description="Storefront shopping cart API",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Session cookie carries the anonymous cart id and the signed-in user id
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    max_age=settings.SESSION_MAX_AGE
)

app.include_router(cart.router)


def log_cart_change(event: CartChanged):
    logger.info(
        f"Cart {event.cart_id} changed: {event.action} {event.slug} "
        f"(session={event.session_cart_id}, user={event.user_id})"
    )


@app.get("/health")
async def health_check():
    return {"status": "ok", "shop_name": settings.SHOP_NAME}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(CartError)
async def cart_exception_handler(request: Request, exc: CartError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


@app.on_event("startup")
async def startup_event():
    cart_events.subscribe(log_cart_change)
    logger.info(f"Starting {settings.SHOP_NAME} storefront")


@app.on_event("shutdown")
async def shutdown_event():
    cart_events.unsubscribe(log_cart_change)
    logger.info("Shutting down storefront")
