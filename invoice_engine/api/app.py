import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from invoice_engine.api.error import ClientError, client_error_handler
from invoice_engine.api.routes import invoices
from invoice_engine.depends import create_tables

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Create the FastAPI app and include the routers.

    Args:
        config: ApplicationConfig-like object

    Returns:
        FastAPI: The configured FastAPI application.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            await create_tables()
            logger.info("Invoice engine tables ready")
        yield

    app = FastAPI(
        title="Legal Invoice Engine",
        description="Subscription, case and payment plan invoice generation",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)"
            )
            return response

    app.add_exception_handler(ClientError, client_error_handler)
    app.include_router(invoices.router)

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    return app
