#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Centralized logging for Somewhere stores, commands and the CLI.

Writes structured (JSON detail) records to rotating log files kept outside
the home directory, so that log files never show up as untracked items.
This is the diagnostic log; the audit trail of executed commands lives in
the home database's Log table (see ConfigManager.append_log).
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

# --- Third party imports ---
import click


FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _with_details(label: str, message: str, details: Optional[Dict[str, Any]]) -> str:
    """``LABEL - message`` with the details appended as JSON when given."""
    if not details:
        return f"{label} - {message}"
    return f"{label} - {message}: {json.dumps(details, default=str)}"


class SomewhereLogger:
    """
    Rotating file logger shared by stores, commands and the CLI.

    ``main_logger`` (``<component>.operations``) takes everything from
    DEBUG up into ``<component>.log`` and echoes warnings to the console;
    ``error_logger`` (``<component>.errors``) keeps errors with their
    tracebacks in ``errors.log``.

    Attributes:
        log_dir: Directory for log files
        component_name: Prefix of the logger names and of the main log file
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "somewhere",
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        """
        Args:
            log_dir: Directory for log files (created if missing)
            component_name: e.g. 'cli' or 'commands'
            max_bytes: Size at which a log file is rotated
            backup_count: Rotated files kept per log
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.main_logger = self._fresh_logger("operations", logging.DEBUG)
        self.main_logger.addHandler(
            self._rotating_handler(f"{component_name}.log", logging.DEBUG)
        )
        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        self.main_logger.addHandler(console)

        self.error_logger = self._fresh_logger("errors", logging.ERROR)
        self.error_logger.addHandler(self._rotating_handler("errors.log", logging.ERROR))

    def _fresh_logger(self, suffix: str, level: int) -> logging.Logger:
        # Only this component's loggers are reset; root logging is untouched
        logger = logging.getLogger(f"{self.component_name}.{suffix}")
        logger.setLevel(level)
        logger.propagate = False
        logger.handlers = []
        return logger

    def _rotating_handler(self, filename: str, level: int) -> RotatingFileHandler:
        handler = RotatingFileHandler(
            self.log_dir / filename,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        return handler

    def close(self) -> None:
        """Detach and close every handler so the log files are released."""
        for logger in (self.main_logger, self.error_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    # ---- Structured records ----

    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a finished store or filesystem step; details become JSON."""
        self.main_logger.info(
            f"OPERATION - {operation}: {json.dumps(details or {}, default=str)}"
        )

    def log_command(
        self, command: str, arguments: Sequence[str], result: List[str]
    ) -> None:
        """
        Record a dispatched command.

        Only the number of output lines is kept; the full result goes to
        the home's Log table.
        """
        summary = {"arguments": list(arguments), "lines": len(result)}
        self.main_logger.info(f"COMMAND - {command}: {json.dumps(summary, default=str)}")

    def log_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Write the error, its context and the current traceback to errors.log."""
        self.error_logger.error(f"ERROR - {type(error).__name__}: {error}")
        if context:
            pairs = ", ".join(f"{key}={value}" for key, value in context.items())
            self.error_logger.error(f"Context: {pairs}")
        self.error_logger.error(f"Traceback:\n{traceback.format_exc()}")

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.debug(_with_details("DEBUG", message, details))

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.info(_with_details("INFO", message, details))

    def log_warning(
        self, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Warnings also reach the console."""
        self.main_logger.warning(_with_details("WARNING", message, details))

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log the error in full; return the one line shown to the user.

        Examples:
            >>> logger.log_cli_error(NotFoundError("Specified tag `x` does not exist"))
            'NotFoundError: Specified tag `x` does not exist'
        """
        self.log_error(error, context or {"source": "cli"})
        message = f"{type(error).__name__}: {error}"
        if show_traceback:
            return f"{message}\n\n{traceback.format_exc()}"
        return message


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Report a failed `somewhere run` command and exit.

    The error is logged through the logger stored on ``ctx.obj`` and a one
    line message (with traceback under ``--verbose``) goes to stderr. The
    shell prints errors itself and keeps reading commands.

    Args:
        ctx: Click context whose ``obj`` holds ``logger`` and ``verbose``
        error: The exception raised by the command
        operation: Command name, recorded as context
        additional_context: Extra context such as the arguments
        exit_code: Process exit status
    """
    context: Dict[str, Any] = {"operation": operation, **(additional_context or {})}
    message = safe_logger(ctx.obj.get("logger")).log_cli_error(
        error, context, show_traceback=ctx.obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


class NullLogger:
    """
    Logger with the SomewhereLogger interface that does nothing.

    Lets managers and commands call logging methods unconditionally when
    no log directory was configured.
    """

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_command(
        self, command: str, arguments: Sequence[str], result: List[str]
    ) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """Format the error without logging it."""
        return f"{type(error).__name__}: {error}"

    def close(self) -> None:
        pass


_null_logger = NullLogger()


def safe_logger(logger: Optional[SomewhereLogger]) -> SomewhereLogger:
    """
    Return the provided logger, or the shared NullLogger if it is None.

    Usage:
        safe_logger(self.logger).log_info("message")

    Args:
        logger: SomewhereLogger instance or None

    Returns:
        The provided logger or a NullLogger instance
    """
    return logger if logger is not None else _null_logger  # type: ignore[return-value]
