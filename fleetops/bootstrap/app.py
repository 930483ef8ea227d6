"""
bootstrap/app.py - Application builder and lifecycle

Builds configuration, storage, the mission store and the reference data
providers, then runs either the API server or the interactive CLI.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
import asyncio
import logging
import time

from .config import FleetOpsConfig, load_config

logger = logging.getLogger("bootstrap.app")


class AppState(Enum):
    """Application lifecycle states."""
    CREATED = "created"
    CONFIGURING = "configuring"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


@dataclass
class AppContext:
    """Runtime application context."""
    config: FleetOpsConfig = None
    mission_store: Any = None
    state: AppState = AppState.CREATED
    start_time: float = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_uptime(self) -> float:
        """Get application uptime in seconds."""
        if self.start_time == 0:
            return 0
        return time.time() - self.start_time


class FleetOpsApp:
    """Main application class."""

    def __init__(self, config_file: str = None, config: Optional[FleetOpsConfig] = None):
        self._config_file = config_file
        self._context = AppContext(config=config)
        self._startup_hooks: List[Callable] = []
        self._shutdown_hooks: List[Callable] = []
        self._initialized = False

    @property
    def config(self) -> FleetOpsConfig:
        return self._context.config

    @property
    def context(self) -> AppContext:
        return self._context

    @property
    def mission_store(self):
        return self._context.mission_store

    def build(self) -> "FleetOpsApp":
        """Load configuration, create storage and the mission store."""
        self._context.state = AppState.CONFIGURING

        if self._context.config is None:
            self._context.config = load_config(self._config_file)

        self._ensure_storage_directories()

        from fleetops.deployment.mission_store import MissionStore
        self._context.mission_store = MissionStore(self.config.storage.missions_file)

        self._initialized = True
        logger.info("Application built successfully")
        return self

    def _ensure_storage_directories(self) -> None:
        """Create storage directories if they don't exist."""
        storage = self._context.config.storage
        directories = [
            storage.base_dir,
            str(Path(storage.missions_file).parent),
            storage.exports_dir,
        ]

        for dir_path in directories:
            path = Path(dir_path)
            if not path.exists():
                path.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created directory: {dir_path}")

    # ==================== Providers ====================

    def create_directory(self):
        """UserDirectory backed by the configured compendium."""
        from fleetops.providers.compendium import VesselCompendium
        from fleetops.providers.directory import UserDirectory

        providers = self.config.providers
        compendium = VesselCompendium(
            source=providers.compendium_source,
            timeout_seconds=providers.timeout_seconds,
        )
        return UserDirectory(
            url=providers.users_url,
            compendium=compendium,
            timeout_seconds=providers.timeout_seconds,
        )

    def create_client(self):
        from fleetops.providers.missions import MissionClient

        providers = self.config.providers
        return MissionClient(
            base_url=providers.base_url,
            missions_path=providers.missions_path,
            timeout_seconds=providers.timeout_seconds,
        )

    def create_cli_context(self, **kwargs: Any):
        from fleetops.cli.core import CLIContext

        return CLIContext(
            client=self.create_client(),
            directory=self.create_directory(),
            zero_capacity_unlimited=self.config.composer.zero_capacity_unlimited,
            **kwargs,
        )

    # ==================== Lifecycle ====================

    async def start(self) -> None:
        """Start application and run startup hooks."""
        if not self._initialized:
            self.build()

        self._context.state = AppState.STARTING
        self._context.start_time = time.time()

        for hook in self._startup_hooks:
            try:
                if asyncio.iscoroutinefunction(hook):
                    await hook(self._context)
                else:
                    hook(self._context)
            except Exception as e:
                logger.error(f"Startup hook failed: {e}")
                self._context.state = AppState.FAILED
                raise

        self._context.state = AppState.RUNNING
        logger.info("Application started")

    async def stop(self) -> None:
        """Stop application and run shutdown hooks."""
        self._context.state = AppState.STOPPING

        for hook in reversed(self._shutdown_hooks):
            try:
                if asyncio.iscoroutinefunction(hook):
                    await hook(self._context)
                else:
                    hook(self._context)
            except Exception as e:
                logger.error(f"Shutdown hook failed: {e}")

        self._context.state = AppState.STOPPED
        logger.info("Application stopped")

    def on_startup(self, hook: Callable) -> "FleetOpsApp":
        self._startup_hooks.append(hook)
        return self

    def on_shutdown(self, hook: Callable) -> "FleetOpsApp":
        self._shutdown_hooks.append(hook)
        return self

    def run_cli(self, output_format=None) -> int:
        """Run interactive CLI."""
        if not self._initialized:
            self.build()

        asyncio.run(self.start())

        from fleetops.cli.repl import REPL

        ctx = self.create_cli_context()
        if output_format is not None:
            ctx.output_format = output_format
        try:
            REPL(ctx).run()
            return 0
        except Exception as e:
            logger.exception(f"CLI error: {e}")
            return 1
        finally:
            ctx.close()
            asyncio.run(self.stop())

    def create_api(self):
        if not self._initialized:
            self.build()

        from fleetops.deployment.api import create_fastapi_app
        return create_fastapi_app(self._context)

    def run_api(self) -> None:
        """Run API server."""
        import uvicorn

        app = self.create_api()
        uvicorn.run(
            app,
            host=self.config.api.host,
            port=self.config.api.port,
            workers=self.config.api.workers,
            log_config=None,
        )


def create_app(config_file: str = None) -> FleetOpsApp:
    """Create and configure the FleetOps application."""
    return FleetOpsApp(config_file).build()
