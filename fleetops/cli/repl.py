"""
cli/repl.py - Read-Eval-Print Loop
"""

from __future__ import annotations
from typing import Dict, List, Optional
import argparse
import shlex
import logging

from .core import (
    CLIContext,
    CommandResult,
    CommandRegistry,
    format_output,
)
from .commands import DEFAULT_COMMANDS

logger = logging.getLogger("cli.repl")


class REPL:
    """
    Interactive Read-Eval-Print Loop for the mission composer.
    """

    def __init__(
        self,
        ctx: Optional[CLIContext] = None,
        registry: Optional[CommandRegistry] = None,
    ):
        """
        Initialize REPL.

        Args:
            ctx: CLI context (created if not provided)
            registry: Command registry (a fresh one if not provided)
        """
        self.ctx = ctx or CLIContext()
        self.registry = registry or CommandRegistry()
        self._running = False
        self._parsers: Dict[str, argparse.ArgumentParser] = {}

        self._register_default_commands()

    def _register_default_commands(self) -> None:
        for command_cls in DEFAULT_COMMANDS:
            cmd = command_cls()
            self.registry.register(cmd)
            parser = argparse.ArgumentParser(prog=cmd.name, description=cmd.description)
            cmd.configure_parser(parser)
            self._parsers[cmd.name] = parser

    def run(self, prompt: str = "fleetops> ") -> None:
        """
        Start interactive REPL loop.

        Args:
            prompt: Prompt string to display
        """
        self._running = True
        print("FleetOps Mission Composer CLI")
        print("Type 'help' for available commands, 'quit' to exit\n")

        while self._running:
            try:
                line = input(prompt).strip()

                if not line:
                    continue

                if line.lower() in ("quit", "exit", "q"):
                    self._running = False
                    print("Goodbye!")
                    break

                if line.lower() == "help":
                    self._show_help()
                    continue

                result = self.execute_line(line)
                print(format_output(result, self.ctx.output_format))

            except KeyboardInterrupt:
                print("\nUse 'quit' to exit")
            except EOFError:
                self._running = False
                print("\nGoodbye!")
                break
            except Exception as e:
                logger.exception(f"Command failed: {e}")
                print(f"Error: {e}")

    def execute_line(self, line: str) -> CommandResult:
        """
        Execute a single command line.

        Args:
            line: Command line to execute

        Returns:
            CommandResult
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            return CommandResult(success=False, error=f"Parse error: {e}", exit_code=1)

        if not parts:
            return CommandResult(success=True)

        cmd_name = parts[0]
        cmd_args = parts[1:]

        self.ctx.history.append(line)

        cmd = self.registry.get(cmd_name)
        if cmd is None:
            return CommandResult(
                success=False,
                error=f"Unknown command: {cmd_name}. Type 'help' for available commands.",
                exit_code=1,
            )

        parser = self._parsers.get(cmd.name)
        if parser is None:
            parser = argparse.ArgumentParser(prog=cmd.name)
            cmd.configure_parser(parser)
            self._parsers[cmd.name] = parser

        try:
            args = parser.parse_args(cmd_args)
        except SystemExit:
            # argparse calls sys.exit on error
            return CommandResult(
                success=False,
                error=f"Invalid arguments for {cmd_name}",
                exit_code=1,
            )

        if cmd.requires_mission and self.ctx.host is None:
            return CommandResult(
                success=False,
                error="No mission open. Use 'new' or 'load'.",
                exit_code=1,
            )

        return cmd.execute(self.ctx, args)

    def execute_batch(self, commands: List[str]) -> List[CommandResult]:
        """
        Execute a batch of commands, stopping at the first failure.

        Args:
            commands: List of command lines

        Returns:
            List of CommandResults
        """
        results = []
        for line in commands:
            line = line.strip()
            if line and not line.startswith("#"):
                result = self.execute_line(line)
                results.append(result)
                if not result.success:
                    break  # Stop on error
        return results

    def execute_file(self, filepath: str) -> List[CommandResult]:
        with open(filepath, 'r') as f:
            commands = f.readlines()
        return self.execute_batch(commands)

    def _show_help(self) -> None:
        """Display help information."""
        print("\nAvailable Commands:")
        print("-" * 40)

        for name, cmd in sorted(self.registry.get_all().items()):
            aliases = f" ({', '.join(cmd.aliases)})" if cmd.aliases else ""
            print(f"  {name:15}{aliases}")
            print(f"    {cmd.description}")

        print("\nBuilt-in Commands:")
        print("  help          Show this help")
        print("  quit/exit     Exit the REPL")
        print()
