"""module-info.json indexing and lookup."""

from amodinfo.modinfo.decoder import SCHEMAS, decode
from amodinfo.modinfo.index import ModuleIndex
from amodinfo.modinfo.scanner import STRATEGIES, build_index
from amodinfo.modinfo.types import Entry, LegacyModuleRecord, ModuleRecord

__all__ = [
    "SCHEMAS",
    "STRATEGIES",
    "Entry",
    "LegacyModuleRecord",
    "ModuleIndex",
    "ModuleRecord",
    "build_index",
    "decode",
]
