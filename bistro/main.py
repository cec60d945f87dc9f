import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from prometheus_client import make_asgi_app

from bistro.config import settings
from bistro.database import AsyncSessionLocal, Base, engine
from bistro.errors import register_error_handlers
from bistro.middleware.metrics import MetricsMiddleware
from bistro.middleware.request_id import RequestIDMiddleware
from bistro.routers import admin, catering, kitchen, menu, notices, orders
from bistro.services.kitchen_channel import KitchenChannel
from bistro.services.menu_service import seed_menu
from bistro.utils.logging import setup_logging
from bistro.utils.tracing import setup_tracing

setup_logging(settings.log_level, settings.service_name)
logger = logging.getLogger(__name__)

setup_tracing(settings.service_name, settings.otlp_endpoint)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up, creating database tables")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)

    if settings.seed_menu:
        await seed_menu()

    app.state.kitchen_channel = KitchenChannel(AsyncSessionLocal)
    logger.info("Startup complete")

    yield

    await engine.dispose()
    logger.info("Shutting down")


app = FastAPI(
    title="Bistro Ordering",
    description="Menu, checkout, order tracking and the live kitchen display",
    version="1.0.0",
    lifespan=lifespan,
)

FastAPIInstrumentor.instrument_app(app)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
register_error_handlers(app)

app.include_router(menu.router, tags=["menu"])
app.include_router(orders.router, tags=["orders"])
app.include_router(catering.router, tags=["catering"])
app.include_router(notices.router, tags=["notices"])
app.include_router(admin.public_router, tags=["admin"])
app.include_router(admin.router, tags=["admin"])
app.include_router(kitchen.router, tags=["kitchen"])

# Expose Prometheus metrics at /metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
