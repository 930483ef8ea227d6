"""
cli/ - Command Line Interface

Drives the mission composer from a terminal:
- Interactive REPL
- Batch mode execution
- Mission commands (new, load, save, export)
- Roster and vessel commands (add-person, pick, assign, ground)
"""

from .core import (
    CLIContext,
    OutputFormat,
    CommandResult,
    CommandRegistry,
    CLICommand,
    format_output,
)

from .commands import (
    NewCommand,
    LoadCommand,
    ShowCommand,
    SetCommand,
    StageCommand,
    PeopleCommand,
    AddPersonCommand,
    RemovePersonCommand,
    ShipsCommand,
    FilterCommand,
    PickCommand,
    AddPickedCommand,
    RemoveShipCommand,
    AssignCommand,
    UnassignCommand,
    GroundCommand,
    StatusCommand,
    SaveCommand,
    ExportCommand,
    DEFAULT_COMMANDS,
)

from .repl import REPL


__all__ = [
    # Core
    "CLIContext",
    "OutputFormat",
    "CommandResult",
    "CommandRegistry",
    "CLICommand",
    "format_output",
    # Commands
    "NewCommand",
    "LoadCommand",
    "ShowCommand",
    "SetCommand",
    "StageCommand",
    "PeopleCommand",
    "AddPersonCommand",
    "RemovePersonCommand",
    "ShipsCommand",
    "FilterCommand",
    "PickCommand",
    "AddPickedCommand",
    "RemoveShipCommand",
    "AssignCommand",
    "UnassignCommand",
    "GroundCommand",
    "StatusCommand",
    "SaveCommand",
    "ExportCommand",
    "DEFAULT_COMMANDS",
    # REPL
    "REPL",
]
