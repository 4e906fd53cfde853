#!/usr/bin/env python3
"""
paths.py
-------------------
Fixed names and limits shared across Somewhere.

A home is any directory holding the database file ``DB_NAME``; nothing
else marks it. Diagnostic logs go to ``LOG_DIR`` in the user's home so they
never appear as untracked files inside a managed directory.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from pathlib import Path
from typing import Optional

# ----- Home marker -----
DB_NAME = "Home.somewhere"
RELEASE_VERSION = "V0.1.0"

# ----- Naming -----
MAX_PATH_LENGTH = 260
DELETED_SUFFIX = "_deleted"

# ----- Dates -----
ENTRY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

# ----- Logs -----
LOG_DIR = Path.home() / ".somewhere" / "logs"


def format_entry_date(when: Optional[datetime] = None) -> str:
    """
    Format a timestamp the way File.EntryDate and Log.DateTime store it.

    Only milliseconds are kept, e.g. ``2024-03-01 09:15:02.120``.
    """
    when = when or datetime.now()
    return when.strftime(ENTRY_DATE_FORMAT)[:-3]
