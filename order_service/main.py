"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Run the service lifecycle: pool -> warm start -> ingestion -> serve -> drain
  - Expose health, readiness, metrics and (optional) cache debug endpoints

Collaborators:
  - container.py: ServiceContainer (composition root)
  - routes.router: GET /order
  - RequestContextMiddleware: Request ID and logging context
  - infrastructure/db/pool: init/close

Constraints:
  - Warm start completes before ingestion starts and before requests are served
  - Shutdown waits at most shutdown_timeout_seconds for the ingestion worker

Notes:
  - create_app(container=...) lets tests inject a container built from
    in-memory doubles; the pool is only managed for the default container
  - /healthz follows Kubernetes health check convention
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from .config import get_settings
from .container import ServiceContainer, build_container, get_container
from .error_responses import not_found
from .exception_handlers import register_exception_handlers
from .infrastructure.db.pool import close_pool, init_pool
from .logger import logger
from .metrics import get_metrics_response
from .middleware import RequestContextMiddleware
from .routes import router


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        # This will raise ValidationError if env vars are missing/invalid
        settings = get_settings()
        owns_pool = container is None

        if owns_pool:
            init_pool(
                database_url=settings.database_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                statement_timeout_ms=settings.store_timeout_ms(),
                checkout_timeout_seconds=settings.store_timeout_seconds,
            )
            active = build_container(settings)
        else:
            active = container
        app.state.container = active

        logger.info(
            "Order service starting up",
            extra={
                "http_port": active.settings.http_port,
                "kafka_topic": active.settings.kafka_topic,
                "cache_ttl_seconds": active.settings.cache_ttl_seconds,
                "cache_payloads": active.settings.cache_payloads,
            },
        )

        # R: Cache must be warm before consuming or serving
        active.run_warm_start()
        active.start_ingestion()

        yield

        logger.info("Order service shutting down")
        active.shutdown()
        if owns_pool:
            close_pool()
        logger.info("Order service stopped")

    app = FastAPI(
        title="Order Service",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[{"name": "orders", "description": "Order lookup"}],
    )

    register_exception_handlers(app)
    app.add_middleware(RequestContextMiddleware)
    app.include_router(router)

    @app.get("/healthz")
    def healthz(request: Request):
        """
        R: Liveness plus store connectivity.

        Returns:
            ok: True if the store answers
            db: "connected" or "disconnected"
            ingestion: "running", "stopped" or "disabled"
            request_id: Correlation ID for this request
        """
        services = get_container(request)
        db_status = "disconnected"
        try:
            if services.repository.ping():
                db_status = "connected"
        except Exception as e:
            logger.warning("Health check: DB unavailable", extra={"error": str(e)})

        if services.worker is None:
            ingestion = "disabled"
        else:
            ingestion = "running" if services.worker.is_alive() else "stopped"

        return {
            "ok": db_status == "connected",
            "db": db_status,
            "ingestion": ingestion,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/readyz")
    def readyz(request: Request):
        """R: Ready once warm start finished and the store answers."""
        services = get_container(request)
        db_ok = False
        try:
            db_ok = services.repository.ping()
        except Exception as e:
            logger.warning("Readiness: DB unavailable", extra={"error": str(e)})

        payload = {
            "ok": db_ok and services.warm_start_done,
            "db": "connected" if db_ok else "disconnected",
            "warm_start": "done" if services.warm_start_done else "pending",
        }
        return JSONResponse(payload, status_code=200 if payload["ok"] else 503)

    @app.get("/metrics")
    def metrics():
        """R: Expose Prometheus metrics."""
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    @app.get("/debug/cache", include_in_schema=False)
    def debug_cache(request: Request):
        """R: Live cache keys and stats (opt-in, never in production)."""
        services = get_container(request)
        settings = services.settings
        if not settings.debug_endpoints_enabled or settings.is_production():
            raise not_found("Endpoint", "/debug/cache")
        entries = services.cache.dump()
        return {
            "stats": services.cache.stats(),
            "entries": [
                {"order_uid": key, "has_payload": entry.value is not None}
                for key, entry in sorted(entries.items())
            ],
        }

    return app


app = create_app()
