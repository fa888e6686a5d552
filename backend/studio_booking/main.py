# backend/studio_booking/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION
from .errors import register_error_handlers
from .routes.v1 import (
    bookings as bookings_v1,
    clients as clients_v1,
    health as health_v1,
    payments as payments_v1,
    prometheus as prometheus_v1,
    reviews as reviews_v1,
    studios as studios_v1,
)

# Configure logging
logging.basicConfig(
    level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{API_TITLE} starting up...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Payment gateway: {settings.payment_gateway}")

    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    yield

    logger.info(f"{API_TITLE} shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)

register_error_handlers(app)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

# Routers declare full resource paths (/studios/..., /bookings/...) because
# several of them nest under another resource's path.
api_v1.include_router(health_v1.router)
api_v1.include_router(studios_v1.router)
api_v1.include_router(bookings_v1.router)
api_v1.include_router(payments_v1.router)
api_v1.include_router(clients_v1.router)
api_v1.include_router(reviews_v1.router)

app.include_router(api_v1)

# Prometheus scrapes the root path
app.include_router(prometheus_v1.router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": f"Welcome to the {API_TITLE}", "version": API_VERSION, "docs": "/docs"}
