"""
dataclasses package
-------------------
Plain value objects returned by the stores and parsed from imports.

- ItemDetail / TagUsage / RemarkMeta: read projections of the store
- LogEvent: one audit record of an executed command
- Tiddler: one entry of a TiddlyWiki JSON export
"""
from somewhere.dataclasses.item_detail import ItemDetail, RemarkMeta, TagUsage
from somewhere.dataclasses.log_event import LogEvent
from somewhere.dataclasses.tiddler import Tiddler

__all__ = ["ItemDetail", "RemarkMeta", "TagUsage", "LogEvent", "Tiddler"]
