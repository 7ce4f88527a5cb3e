"""
Prompt A/B Test - FastAPI host for the prompt experiment hooks
"""
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from prompt_ab.config import config
from prompt_ab.handlers import http_exception_handler, validation_exception_handler
from prompt_ab.hooks import StartupEvent, register
from prompt_ab.logging_config import setup_logging
from prompt_ab.models import StartupContext
from prompt_ab.routes import init_routes

# Initialize structured logging
logger = setup_logging()

_UNSET: Any = object()


def create_app(raw_config: Any = _UNSET) -> FastAPI:
    """
    Build the application.

    Args:
        raw_config: Experiment configuration; read from the environment when omitted
    """
    if raw_config is _UNSET:
        raw_config = config.load_plugin_config()

    plugin = register(raw_config, logger=logger)
    app_start_time = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle management for the application"""
        logger.info(f"Starting {config.APP_NAME}")
        if plugin is not None:
            plugin.dispatch(StartupEvent(context=StartupContext(port=config.APP_PORT)))
        yield
        logger.info(f"Shutting down {config.APP_NAME}")

    app = FastAPI(
        title=config.APP_NAME,
        version=config.DD_VERSION,
        lifespan=lifespan
    )
    app.state.plugin = plugin

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add unique request ID to all requests for tracing"""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(init_routes(plugin, app_start_time))

    logger.info(
        "Application initialized",
        extra={"experiments": plugin.experiment_ids if plugin else []}
    )
    return app


app = create_app()


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the module-level app with uvicorn."""
    uvicorn.run(app, host=host or config.APP_HOST, port=port or config.APP_PORT)


if __name__ == "__main__":
    run()
