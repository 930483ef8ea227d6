"""
cli/core.py - Core CLI infrastructure

Context, command base class, registry and output formatting.
"""

from __future__ import annotations
from typing import Any, Awaitable, Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass, field
from enum import Enum
from abc import ABC, abstractmethod
import argparse
import asyncio
import json
import logging

from fleetops.ui.events import EventBus
from fleetops.ui.host import MissionComposerHost

if TYPE_CHECKING:
    from fleetops.providers.directory import UserDirectory
    from fleetops.providers.missions import MissionClient
    from fleetops.ui.composer import MissionComposer

logger = logging.getLogger("cli")


class OutputFormat(Enum):
    """Output format options."""
    TEXT = "text"
    JSON = "json"
    TABLE = "table"
    MINIMAL = "minimal"


@dataclass
class CLIContext:
    """Context for CLI operations."""

    client: Optional["MissionClient"] = None
    directory: Optional["UserDirectory"] = None
    bus: EventBus = field(default_factory=EventBus)
    zero_capacity_unlimited: bool = False

    # Current mission
    host: Optional[MissionComposerHost] = None
    mission_path: str = ""

    # Output settings
    output_format: OutputFormat = OutputFormat.TEXT
    verbose: bool = False

    # Session
    history: List[str] = field(default_factory=list)

    _loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def composer(self) -> Optional["MissionComposer"]:
        return self.host.composer if self.host is not None else None

    def run(self, coro: Awaitable[Any]) -> Any:
        """Run a coroutine on the session loop; async clients stay bound to it."""
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    def open_mission(self, mission: Optional[Dict[str, Any]] = None) -> MissionComposerHost:
        """Close the current host and open a new one on the given mission."""
        if self.host is not None:
            self.host.close()
        self.host = MissionComposerHost(
            client=self.client,
            mission=mission,
            directory=self.directory,
            bus=self.bus,
            confirm=lambda message: True,
            focus_delay_ms=0,
            zero_capacity_unlimited=self.zero_capacity_unlimited,
        )
        self.run(self.host.open())
        return self.host

    def close(self) -> None:
        if self.host is not None:
            self.host.close()
            self.host = None
        if self._loop is not None and not self._loop.is_closed():
            if self.client is not None:
                self._loop.run_until_complete(self.client.close())
            self._loop.close()


@dataclass
class CommandResult:
    """Result of a CLI command execution."""

    success: bool = True
    message: str = ""
    data: Any = None
    error: Optional[str] = None

    # For display formatting
    format_hint: str = "text"
    exit_code: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "data": self.data,
            "error": self.error,
        }


class CLICommand(ABC):
    """Base class for CLI commands."""

    name: str = "command"
    description: str = "Base command"
    aliases: List[str] = []

    # Commands that work on the open mission
    requires_mission: bool = True

    @abstractmethod
    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        """Execute the command."""
        pass

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        """Configure argument parser for this command."""
        pass


class CommandRegistry:
    """Registry for CLI commands."""

    def __init__(self):
        self._commands: Dict[str, CLICommand] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, command: CLICommand) -> None:
        """Register a command."""
        self._commands[command.name] = command
        for alias in command.aliases:
            self._aliases[alias] = command.name

    def get(self, name: str) -> Optional[CLICommand]:
        """Get command by name or alias."""
        if name in self._commands:
            return self._commands[name]
        if name in self._aliases:
            return self._commands[self._aliases[name]]
        return None

    def get_all(self) -> Dict[str, CLICommand]:
        return dict(self._commands)


def format_output(result: CommandResult, format: OutputFormat) -> str:
    """Format command result for display."""
    if format == OutputFormat.JSON:
        return json.dumps(result.to_dict(), indent=2, default=str)

    elif format == OutputFormat.TABLE:
        if isinstance(result.data, list) and result.data:
            lines = []
            if isinstance(result.data[0], dict):
                keys = list(result.data[0].keys())
                lines.append(" | ".join(keys))
                lines.append("-" * (len(keys) * 15))
                for row in result.data:
                    lines.append(" | ".join(str(row.get(k, "")) for k in keys))
            return "\n".join(lines)
        return str(result.data)

    elif format == OutputFormat.MINIMAL:
        if result.success:
            return str(result.data) if result.data else ""
        return result.error or "Error"

    else:  # TEXT
        if result.success:
            output = result.message
            if result.data:
                if isinstance(result.data, dict):
                    for k, v in result.data.items():
                        output += f"\n  {k}: {v}"
                else:
                    output += f"\n{result.data}"
            return output
        return f"Error: {result.error}"
