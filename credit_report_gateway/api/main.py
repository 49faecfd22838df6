"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from credit_report_gateway.api.errors import register_exception_handlers
from credit_report_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from credit_report_gateway.api.v1 import reports, summary, upload
from credit_report_gateway.infrastructure.database.models import Base
from credit_report_gateway.infrastructure.database.session import create_db_engine, create_session_factory
from credit_report_gateway.infrastructure.observability.logging import setup_logging
from credit_report_gateway.config import Settings, settings as default_settings


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or default_settings

    # Setup structured logging
    setup_logging(settings.log_level, settings.service_name)

    engine = create_db_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables:
            Base.metadata.create_all(bind=engine)
        logging.info("Service starting", extra={"service": settings.service_name})
        yield
        engine.dispose()
        logging.info("Service stopped", extra={"service": settings.service_name})

    app = FastAPI(
        title="Credit Report Gateway",
        description="Experian credit report ingestion and analysis service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"success": True, "status": "ok", "service": settings.service_name, "environment": settings.environment}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(upload.router, prefix="/api", tags=["upload"])
    app.include_router(reports.router, prefix="/api", tags=["reports"])
    app.include_router(summary.router, prefix="/api", tags=["summary"])

    return app


app = create_app()
