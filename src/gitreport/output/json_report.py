"""JSON reporter for status reports."""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any, Dict, List

from gitreport.status.models import Report, StatusEntry


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value):
        return {k: _plain(v) for k, v in dataclasses.asdict(value).items()}
    return value


def entry_to_dict(entry: StatusEntry) -> Dict[str, Any]:
    """All of an entry's fields plus its capability flags."""
    data: Dict[str, Any] = {"kind": entry.kind.value}
    for f in dataclasses.fields(entry):
        data[f.name] = _plain(getattr(entry, f.name))
    data.setdefault("index_status", _plain(entry.index_status))
    data.setdefault("worktree_status", _plain(entry.worktree_status))
    data["flags"] = {
        "staged": entry.staged,
        "unstaged": entry.unstaged,
        "fully_staged": entry.fully_staged,
        "untracked": entry.untracked,
        "ignored": entry.ignored,
        "unmerged": entry.unmerged,
    }
    return data


def to_dict(report: Report) -> Dict[str, Any]:
    """Convert a Report to a JSON-serialisable dict."""
    branch = None
    if report.branch is not None:
        branch = dataclasses.asdict(report.branch)
        branch["detached"] = report.branch.detached

    entries: List[Dict[str, Any]] = [entry_to_dict(e) for e in report.entries]

    return {
        "version": "1.0",
        "branch": branch,
        "stash": {"count": report.stash.count},
        "entries": entries,
        "summary": {
            "total": len(report.entries),
            "staged": len(report.staged),
            "unstaged": len(report.unstaged),
            "fully_staged": len(report.fully_staged),
            "untracked": len(report.untracked),
            "ignored": len(report.ignored),
            "unmerged": len(report.unmerged),
        },
        "merge_conflict": report.merge_conflict,
    }


def render(report: Report) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(report), indent=2)
