"""
FastAPI server hosting the stockfeeds routes.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .. import __version__
from ..config.settings import AppConfig
from ..exceptions import StockFeedError
from ..routes import feeds_router, images_router, set_config

logger = logging.getLogger(__name__)


class FeedServer:
    """FastAPI server for the feed routes."""

    def __init__(self, config: AppConfig):
        """Initialize feed server.

        Args:
            config: Application configuration
        """
        self.config = config
        self.server: Optional[uvicorn.Server] = None
        self._server_task: Optional[asyncio.Task] = None

        set_config(config)

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            logger.info("Feed server starting up")
            if not self.config.feeds.image_directory:
                logger.info("ROTATION_IMAGE_DIR not set, chart serving disabled")
            yield
            logger.info("Feed server shutting down")

        self.app = FastAPI(
            title="stockfeeds",
            description="RSS/Atom/JSON feeds generated from stock screener CSV output",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc",
            openapi_url="/openapi.json",
            lifespan=lifespan
        )

        self._setup_middleware()
        self._setup_routes()
        self._setup_error_handlers()

    def _setup_middleware(self) -> None:
        """Configure FastAPI middleware."""
        cors_origins = list(self.config.server.cors_origins)
        if cors_origins:
            logger.info(f"CORS allowed origins: {cors_origins}")
            self.app.add_middleware(
                CORSMiddleware,
                allow_origins=cors_origins,
                allow_credentials=False,
                allow_methods=["GET", "OPTIONS"],
                allow_headers=["*"],
            )

        self.app.add_middleware(GZipMiddleware, minimum_size=1000)

    def _setup_routes(self) -> None:
        """Configure API routes."""

        @self.app.get("/health", tags=["Health"])
        async def health_check():
            """Check API health status."""
            return JSONResponse(
                status_code=200,
                content={
                    "status": "healthy",
                    "version": __version__,
                    "server_time": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
                    "image_serving": bool(self.config.feeds.image_directory),
                }
            )

        @self.app.get("/", tags=["Info"])
        async def root():
            """API information."""
            return {
                "name": "stockfeeds",
                "version": __version__,
                "routes": {
                    "stockpicker": "/stockpicker/{directory}",
                    "rotation_monitor": "/rotation-monitor/{directory}",
                    "rotation_images": "/rotation-images/{filename}",
                },
                "docs": "/docs",
                "health": "/health"
            }

        self.app.include_router(feeds_router, tags=["Feeds"])
        self.app.include_router(images_router, tags=["Images"])

    def _setup_error_handlers(self) -> None:
        """Configure global error handlers."""

        @self.app.exception_handler(StockFeedError)
        async def stockfeed_error_handler(request: Request, exc: StockFeedError):
            """Handle domain errors that escaped a route."""
            logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}")
            return JSONResponse(
                status_code=400,
                content={
                    **exc.to_dict(),
                    "request_id": request.headers.get("X-Request-ID")
                }
            )

        @self.app.exception_handler(OSError)
        async def file_error_handler(request: Request, exc: OSError):
            """Handle directory listing and file read failures."""
            logger.error(f"File access failed on {request.url.path}: {exc}")
            return JSONResponse(
                status_code=500,
                content={
                    "error": "FILE_READ_ERROR",
                    "message": str(exc),
                    "request_id": request.headers.get("X-Request-ID")
                }
            )

        @self.app.exception_handler(Exception)
        async def general_error_handler(request: Request, exc: Exception):
            """Handle unexpected errors."""
            logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "INTERNAL_SERVER_ERROR",
                    "message": "An unexpected error occurred",
                    "request_id": request.headers.get("X-Request-ID")
                }
            )

    async def start_server(self) -> None:
        """Start the server in a background task without blocking."""
        if self._server_task is not None:
            logger.warning("Feed server already running")
            return

        host = self.config.server.host
        port = self.config.server.port

        logger.info(f"Starting feed server on {host}:{port}")

        server_config = uvicorn.Config(
            app=self.app,
            host=host,
            port=port,
            log_level=self.config.log_level.value.lower(),
            access_log=True,
            loop="asyncio"
        )

        self.server = uvicorn.Server(server_config)
        self._server_task = asyncio.create_task(self.server.serve())

        logger.info(f"Feed server started on http://{host}:{port}")

    async def stop_server(self) -> None:
        """Stop the server gracefully."""
        if self.server is None:
            logger.warning("Feed server not running")
            return

        logger.info("Stopping feed server...")
        self.server.should_exit = True

        if self._server_task:
            try:
                await asyncio.wait_for(self._server_task, timeout=10.0)
            except asyncio.TimeoutError:
                logger.warning("Server shutdown timed out, cancelling task")
                self._server_task.cancel()
                try:
                    await self._server_task
                except asyncio.CancelledError:
                    pass

        self.server = None
        self._server_task = None

        logger.info("Feed server stopped")

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self.app


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration to use; defaults apply when omitted
    """
    return FeedServer(config or AppConfig()).get_app()
