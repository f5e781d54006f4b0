"""Porcelain v2 status report: models and parser."""

from gitreport.status.models import (
    Branch,
    ConflictType,
    EntryKind,
    EntryStatus,
    IgnoredEntry,
    OrdinaryEntry,
    RenamedEntry,
    RenameOperation,
    Report,
    Stash,
    StatusEntry,
    SubmoduleStatus,
    UnmergedEntry,
    UntrackedEntry,
)
from gitreport.status.parser import StatusParser, parse_status

__all__ = [
    "Branch",
    "ConflictType",
    "EntryKind",
    "EntryStatus",
    "IgnoredEntry",
    "OrdinaryEntry",
    "RenameOperation",
    "RenamedEntry",
    "Report",
    "Stash",
    "StatusEntry",
    "StatusParser",
    "SubmoduleStatus",
    "UnmergedEntry",
    "UntrackedEntry",
    "parse_status",
]
