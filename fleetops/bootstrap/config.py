"""
bootstrap/config.py - Application configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("bootstrap.config")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    enable_docs: bool = True
    docs_url: str = "/docs"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "APIConfig":
        cors = os.getenv("FLEETOPS_API_CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("FLEETOPS_API_HOST", "0.0.0.0"),
            port=int(os.getenv("FLEETOPS_API_PORT", "8000")),
            workers=int(os.getenv("FLEETOPS_API_WORKERS", "1")),
            enable_docs=_env_bool("FLEETOPS_API_ENABLE_DOCS", "true"),
            docs_url=os.getenv("FLEETOPS_API_DOCS_URL", "/docs"),
            cors_origins=cors.split(",") if cors else ["*"],
        )


@dataclass
class ProvidersConfig:
    """Where the composer reads reference data and persists missions."""

    base_url: str = "http://localhost:8000"
    users_url: Optional[str] = None
    compendium_source: Optional[str] = None
    missions_path: str = "/api/fleet-ops/missions"
    timeout_seconds: float = 15.0

    @classmethod
    def from_env(cls) -> "ProvidersConfig":
        base = os.getenv("FLEETOPS_BASE_URL", "http://localhost:8000")
        return cls(
            base_url=base,
            users_url=os.getenv("FLEETOPS_USERS_URL", f"{base}/api/users"),
            compendium_source=os.getenv("FLEETOPS_COMPENDIUM"),
            missions_path=os.getenv("FLEETOPS_MISSIONS_PATH", "/api/fleet-ops/missions"),
            timeout_seconds=float(os.getenv("FLEETOPS_HTTP_TIMEOUT", "15.0")),
        )


@dataclass
class StorageConfig:
    """Storage paths configuration."""

    base_dir: str = "./storage"
    missions_file: str = "./storage/missions.json"
    exports_dir: str = "./storage/exports"

    @classmethod
    def from_env(cls) -> "StorageConfig":
        base = os.getenv("FLEETOPS_STORAGE_DIR", "./storage")
        return cls(
            base_dir=base,
            missions_file=os.getenv("FLEETOPS_MISSIONS_FILE", f"{base}/missions.json"),
            exports_dir=os.getenv("FLEETOPS_EXPORTS_DIR", f"{base}/exports"),
        )


@dataclass
class ComposerConfig:
    """Composer behaviour."""

    zero_capacity_unlimited: bool = False
    focus_delay_ms: int = 100
    default_page_size: int = 50
    max_page_size: int = 200

    @classmethod
    def from_env(cls) -> "ComposerConfig":
        return cls(
            zero_capacity_unlimited=_env_bool("FLEETOPS_ZERO_CAPACITY_UNLIMITED", "false"),
            focus_delay_ms=int(os.getenv("FLEETOPS_FOCUS_DELAY_MS", "100")),
            default_page_size=int(os.getenv("FLEETOPS_PAGE_SIZE", "50")),
            max_page_size=int(os.getenv("FLEETOPS_MAX_PAGE_SIZE", "200")),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("FLEETOPS_LOG_LEVEL", "INFO"),
            format=os.getenv("FLEETOPS_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("FLEETOPS_LOG_FILE"),
            json_logs=_env_bool("FLEETOPS_JSON_LOGS", "false"),
        )


_SECTIONS = ("api", "providers", "storage", "composer", "logging")


@dataclass
class FleetOpsConfig:
    """Root configuration for the FleetOps application."""

    environment: str = "development"
    debug: bool = False
    version: str = "1.0.0"

    api: APIConfig = field(default_factory=APIConfig)
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    composer: ComposerConfig = field(default_factory=ComposerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Additional settings
    settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "FleetOpsConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("FLEETOPS_ENVIRONMENT", "development"),
            debug=_env_bool("FLEETOPS_DEBUG", "false"),
            api=APIConfig.from_env(),
            providers=ProvidersConfig.from_env(),
            storage=StorageConfig.from_env(),
            composer=ComposerConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "FleetOpsConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "FleetOpsConfig":
        """Create config from dictionary, file values over environment."""
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]

        for section_name in _SECTIONS:
            section = getattr(config, section_name)
            for key, value in (data.get(section_name) or {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section_name}.{key}")

        if "settings" in data:
            config.settings.update(data["settings"])

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "version": self.version,
            "api": {
                "host": self.api.host,
                "port": self.api.port,
                "workers": self.api.workers,
            },
            "providers": {
                "base_url": self.providers.base_url,
                "users_url": self.providers.users_url,
                "compendium_source": self.providers.compendium_source,
                "missions_path": self.providers.missions_path,
            },
            "storage": {
                "base_dir": self.storage.base_dir,
                "missions_file": self.storage.missions_file,
            },
            "composer": {
                "zero_capacity_unlimited": self.composer.zero_capacity_unlimited,
                "focus_delay_ms": self.composer.focus_delay_ms,
            },
        }


# Global config instance
_config: Optional[FleetOpsConfig] = None


def load_config(filepath: str = None) -> FleetOpsConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        FleetOpsConfig instance
    """
    global _config

    if filepath:
        _config = FleetOpsConfig.from_file(filepath)
    else:
        default_paths = [
            "./fleetops.json",
            "./config/fleetops.json",
            os.path.expanduser("~/.fleetops/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = FleetOpsConfig.from_file(path)
                return _config

        _config = FleetOpsConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> FleetOpsConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
