"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from lendmatch.api.middleware import RequestIDMiddleware, MetricsMiddleware
from lendmatch.api.v1 import chat, leads, matches, partners, sync
from lendmatch.infrastructure.database.session import SessionLocal, init_db
from lendmatch.infrastructure.observability.logging import setup_logging
from lendmatch.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the sample partner catalog on startup"""
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="LendMatch",
        description="Lead qualification chat assistant and lending partner matching service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "scoring_variant": settings.scoring_variant}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(partners.router, prefix="/v1", tags=["partners"])
    app.include_router(leads.router, prefix="/v1", tags=["leads"])
    app.include_router(chat.router, prefix="/v1", tags=["chat"])
    app.include_router(matches.router, prefix="/v1", tags=["matches"])
    app.include_router(sync.router, prefix="/v1", tags=["sync"])

    return app


app = create_app()
