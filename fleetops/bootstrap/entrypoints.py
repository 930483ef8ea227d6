"""
bootstrap/entrypoints.py - Application entry points

Provides CLI and API entry points.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from fleetops import __version__

logger = logging.getLogger("bootstrap.entrypoints")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data)


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    json_format: bool = False,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
        fmt: Format string for plain-text logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = JSONFormatter() if json_format else logging.Formatter(fmt)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _setup_from_config(config, level: str = None, log_file: str = None) -> None:
    setup_logging(
        level=level or config.logging.level,
        log_file=log_file or config.logging.log_file,
        json_format=config.logging.json_logs,
        fmt=config.logging.format,
    )


def cli_main(args: list = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        description="FleetOps Mission Composer CLI",
        prog="fleetops",
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )
    parser.add_argument(
        "-s", "--script",
        help="Execute script file",
        default=None,
    )
    parser.add_argument(
        "-e", "--execute",
        help="Execute single command",
        default=None,
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    parsed = parser.parse_args(args)

    try:
        from .app import FleetOpsApp
        from fleetops.cli.core import OutputFormat, format_output
        from fleetops.cli.repl import REPL

        app = FleetOpsApp(parsed.config).build()
        _setup_from_config(
            app.config,
            level="DEBUG" if parsed.verbose else parsed.log_level,
            log_file=parsed.log_file,
        )
        output_format = OutputFormat.JSON if parsed.json else OutputFormat.TEXT

        if parsed.script or parsed.execute:
            ctx = app.create_cli_context(output_format=output_format)
            repl = REPL(ctx)
            try:
                if parsed.script:
                    results = repl.execute_file(parsed.script)
                    for result in results:
                        print(format_output(result, ctx.output_format))
                    return 0 if all(r.success for r in results) else 1

                result = repl.execute_line(parsed.execute)
                print(format_output(result, ctx.output_format))
                return result.exit_code
            finally:
                ctx.close()

        # Interactive mode
        return app.run_cli(output_format=output_format)

    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


def api_main(args: list = None) -> None:
    """
    API server entry point.

    Args:
        args: Command line arguments
    """
    parser = argparse.ArgumentParser(
        description="FleetOps API Server",
        prog="fleetops-api",
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        help="API port",
        default=None,
    )
    parser.add_argument(
        "-H", "--host",
        help="API host",
        default=None,
    )
    parser.add_argument(
        "-w", "--workers",
        type=int,
        help="Number of workers",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level",
    )

    parsed = parser.parse_args(args)

    try:
        from .app import FleetOpsApp

        app = FleetOpsApp(parsed.config).build()
        _setup_from_config(app.config, level=parsed.log_level)

        # Override config with CLI args
        if parsed.port:
            app.config.api.port = parsed.port
        if parsed.host:
            app.config.api.host = parsed.host
        if parsed.workers:
            app.config.api.workers = parsed.workers

        app.run_api()

    except KeyboardInterrupt:
        print("\nShutting down...")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


def main():
    """Main entry point for the package."""
    if len(sys.argv) > 1:
        command = sys.argv[1]

        if command == "api":
            api_main(sys.argv[2:])
        elif command == "cli":
            sys.exit(cli_main(sys.argv[2:]))
        elif command in ["-h", "--help"]:
            print(f"FleetOps Mission Composer v{__version__}")
            print()
            print("Usage: fleetops <command> [options]")
            print()
            print("Commands:")
            print("  cli      Start interactive CLI")
            print("  api      Start API server")
            print()
            print("Use '<command> --help' for command-specific help.")
        else:
            # Default to CLI with args
            sys.exit(cli_main(sys.argv[1:]))
    else:
        # Default to interactive CLI
        sys.exit(cli_main([]))


if __name__ == "__main__":
    main()
