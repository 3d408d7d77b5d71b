"""
Application entry point for stockfeeds.

Loads configuration from the environment, configures logging and runs the
feed server until SIGINT/SIGTERM.
"""

import asyncio
import logging
import signal
import sys
from typing import Optional

from .config import AppConfig, EnvironmentLoader
from .exceptions import ConfigurationError
from .server import FeedServer


class StockFeedsApp:
    """Main application class wiring configuration, logging and the server."""

    def __init__(self):
        self.config: Optional[AppConfig] = None
        self.feed_server: Optional[FeedServer] = None
        self.running = False
        self._stop_event: Optional[asyncio.Event] = None

        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[logging.StreamHandler(sys.stdout)]
        )
        self.logger = logging.getLogger(__name__)

    def initialize(self, load_env_file: bool = True) -> None:
        """Load configuration and build the server.

        Raises:
            ConfigurationError: If the environment holds invalid settings
        """
        self.logger.info("Initializing stockfeeds...")

        self.config = EnvironmentLoader.load_config(load_env_file=load_env_file)
        logging.getLogger().setLevel(self.config.log_level.value)
        self.logger.info("Configuration loaded successfully")
        self.logger.info(f"Chart links use base URL {self.config.feeds.image_base_url}")

        self.feed_server = FeedServer(self.config)

    async def start(self) -> None:
        """Start the server and block until a shutdown signal arrives."""
        if self.feed_server is None:
            self.initialize()

        self._stop_event = asyncio.Event()
        self._install_signal_handlers()

        await self.feed_server.start_server()
        self.running = True
        self.logger.info("stockfeeds running. Press Ctrl+C to stop.")

        await self._stop_event.wait()
        await self.stop()

    async def stop(self) -> None:
        """Stop the server gracefully."""
        if not self.running:
            return
        self.running = False

        self.logger.info("Initiating graceful shutdown...")
        if self.feed_server:
            await self.feed_server.stop_server()
        self.logger.info("stockfeeds stopped cleanly")

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._signal_handler, signum)
            except NotImplementedError:
                # Windows event loops don't support signal handlers
                pass

    def _signal_handler(self, signum) -> None:
        """Handle shutdown signals (SIGINT, SIGTERM)."""
        signal_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
        self.logger.info(f"Received {signal_name}, initiating graceful shutdown...")
        if self._stop_event is not None:
            self._stop_event.set()


async def main() -> None:
    """Run stockfeeds until interrupted."""
    app = StockFeedsApp()

    try:
        app.initialize()
    except ConfigurationError as e:
        app.logger.error(f"Invalid configuration: {e}")
        for problem in e.errors:
            app.logger.error(f"  - {problem}")
        sys.exit(1)

    try:
        await app.start()
    except KeyboardInterrupt:
        await app.stop()
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
