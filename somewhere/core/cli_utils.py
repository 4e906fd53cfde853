#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for Somewhere.

Functions:
    setup_logger: Initialize SomewhereLogger for CLI operations

Usage:
    from somewhere.core.cli_utils import setup_logger

    logger = setup_logger(log_dir, "cli")
"""
from pathlib import Path

from somewhere.core.logging_manager import SomewhereLogger


def setup_logger(log_dir: Path, component_name: str) -> SomewhereLogger:
    """
    Setup logging for CLI operations.

    Creates ``<log_dir>/operations`` if it doesn't exist and initializes a
    SomewhereLogger for the component.

    Args:
        log_dir: Base log directory (typically paths.LOG_DIR)
        component_name: Component identifier for logging (e.g. 'cli')

    Returns:
        Configured SomewhereLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return SomewhereLogger(operations_log_dir, component_name=component_name)
