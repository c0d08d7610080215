# sheetlens/main.py
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from sheetlens import __version__
from sheetlens.api.router import api_router
from sheetlens.core.config import Settings, settings as default_settings
from sheetlens.core.error_handlers import register_error_handlers
from sheetlens.core.logging import setup_logging
from sheetlens.observability.metrics import render_prometheus_metrics
from sheetlens.observability.middleware import MetricsMiddleware, RequestIdMiddleware
from sheetlens.schemas import HealthCheck
from sheetlens.services.container import Services, build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    services: Services = app.state.services
    logger.info(f"🚀 Server starting ({services.settings.APP_ENV})...")
    await services.startup()
    try:
        yield
    finally:
        await services.shutdown()
        logger.info("👋 Server stopping...")


async def log_requests(request: Request, call_next):
    logger.info(f"➡️  {request.method} {request.url.path}")
    try:
        response = await call_next(request)
        logger.info(f"⬅️  {request.method} {request.url.path} → {response.status_code}")
        return response
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} → ERROR: {e}")
        raise


def create_app(
        settings: Optional[Settings] = None,
        *,
        services: Optional[Services] = None
) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    app = FastAPI(title="SheetLens API", version=__version__, lifespan=lifespan)
    app.state.services = services if services is not None else build_services(settings)

    register_error_handlers(app)

    # Added innermost first: request id wraps everything
    app.add_middleware(MetricsMiddleware)
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Length"],
        max_age=600,
    )
    app.add_middleware(RequestIdMiddleware)

    @app.get("/health", response_model=HealthCheck)
    async def health_check():
        return HealthCheck()

    @app.get("/metrics", response_class=PlainTextResponse)
    async def metrics():
        return PlainTextResponse(
            render_prometheus_metrics(),
            media_type="text/plain; version=0.0.4"
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    logger.info("✅ Application configured")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.SERVER_HOST, port=default_settings.SERVER_PORT)
