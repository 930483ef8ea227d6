"""
bootstrap/ - Bootstrap Layer

Provides configuration, application lifecycle and entry points.
"""

from .config import (
    FleetOpsConfig,
    APIConfig,
    ProvidersConfig,
    StorageConfig,
    ComposerConfig,
    LoggingConfig,
    load_config,
    get_config,
)

from .app import (
    AppState,
    AppContext,
    FleetOpsApp,
    create_app,
)

from .entrypoints import (
    cli_main,
    api_main,
    setup_logging,
    JSONFormatter,
)


__all__ = [
    # Config
    "FleetOpsConfig",
    "APIConfig",
    "ProvidersConfig",
    "StorageConfig",
    "ComposerConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    # App
    "AppState",
    "AppContext",
    "FleetOpsApp",
    "create_app",
    # Entry Points
    "cli_main",
    "api_main",
    "setup_logging",
    "JSONFormatter",
]
