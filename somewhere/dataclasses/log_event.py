#!/usr/bin/env python3
"""
log_event.py
-----------------
Audit record of one executed command, stored as YAML in the Log table.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import List, Optional

# --- Third-party imports ---
import yaml


@dataclass
class LogEvent:
    """
    Command name, its arguments and the lines it returned.

    Serialized with the capitalized keys ``Command``, ``Arguments`` and
    ``Result``.
    """

    command: str
    arguments: List[str] = field(default_factory=list)
    result: List[str] = field(default_factory=list)

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            {
                "Command": self.command,
                "Arguments": list(self.arguments),
                "Result": list(self.result),
            },
            allow_unicode=True,
            sort_keys=False,
        )

    @classmethod
    def from_yaml(cls, text: Optional[str]) -> "LogEvent":
        data = yaml.safe_load(text or "") or {}
        return cls(
            command=data.get("Command", ""),
            arguments=list(data.get("Arguments") or []),
            result=list(data.get("Result") or []),
        )
