"""Porcelain v2 status parser.

Consumes the output of ``git status --porcelain=v2 --branch --show-stash -z``
and builds a :class:`Report`.  Records are NUL-terminated; a rename record
(type ``2``) carries its original path in the following NUL segment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from gitreport.command.errors import StatusParseError
from gitreport.status.models import (
    Branch,
    ConflictType,
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

log = logging.getLogger(__name__)

DETACHED = "(detached)"
INITIAL = "(initial)"


def _mode(token: str) -> int:
    return int(token, 8)


def _count(token: str, sign: str = "") -> Optional[int]:
    """Read a header count such as ``+3``; None when it is not a number."""
    digits = token[len(sign):] if sign and token.startswith(sign) else token
    return int(digits) if digits.isdigit() else None


def _fields(record: str, count: int) -> List[str]:
    """Split *record* into *count* space-separated fields; the last is the rest."""
    tokens = record.split(" ", count - 1)
    if len(tokens) != count or not tokens[-1]:
        raise StatusParseError(f"Malformed status record: {record!r}")
    return tokens


def parse_ordinary(record: str) -> OrdinaryEntry:
    # 1 <XY> <sub> <mH> <mI> <mW> <hH> <hI> <path>
    tokens = _fields(record, 9)
    xy = tokens[1]
    return OrdinaryEntry(
        path=tokens[8],
        index_status=EntryStatus.from_code(xy[:1]),
        worktree_status=EntryStatus.from_code(xy[1:2]),
        submodule_status=SubmoduleStatus.parse(tokens[2]),
        head_mode=_mode(tokens[3]),
        index_mode=_mode(tokens[4]),
        worktree_mode=_mode(tokens[5]),
        head_sha=tokens[6],
        index_sha=tokens[7],
    )


def parse_renamed(record: str) -> RenamedEntry:
    # 2 <XY> <sub> <mH> <mI> <mW> <hH> <hI> <X><score> <path>\0<origPath>
    tokens = _fields(record, 10)
    path, sep, original_path = tokens[9].partition("\0")
    if not sep or not path or not original_path:
        raise StatusParseError(f"Rename record without original path: {record!r}")
    xy = tokens[1]
    score = tokens[8]
    return RenamedEntry(
        path=path,
        original_path=original_path,
        index_status=EntryStatus.from_code(xy[:1]),
        worktree_status=EntryStatus.from_code(xy[1:2]),
        submodule_status=SubmoduleStatus.parse(tokens[2]),
        head_mode=_mode(tokens[3]),
        index_mode=_mode(tokens[4]),
        worktree_mode=_mode(tokens[5]),
        head_sha=tokens[6],
        index_sha=tokens[7],
        operation=RenameOperation.from_code(score[:1]),
        similarity_score=int(score[1:]),
    )


def parse_unmerged(record: str) -> UnmergedEntry:
    # u <XY> <sub> <m1> <m2> <m3> <mW> <h1> <h2> <h3> <path>
    tokens = _fields(record, 11)
    return UnmergedEntry(
        path=tokens[10],
        conflict_type=ConflictType.from_code(tokens[1]),
        submodule_status=SubmoduleStatus.parse(tokens[2]),
        base_mode=_mode(tokens[3]),
        our_mode=_mode(tokens[4]),
        their_mode=_mode(tokens[5]),
        worktree_mode=_mode(tokens[6]),
        base_sha=tokens[7],
        our_sha=tokens[8],
        their_sha=tokens[9],
    )


def parse_untracked(record: str) -> UntrackedEntry:
    return UntrackedEntry(path=_fields(record, 2)[1])


def parse_ignored(record: str) -> IgnoredEntry:
    return IgnoredEntry(path=_fields(record, 2)[1])


ENTRY_PARSERS: Dict[str, Callable[[str], StatusEntry]] = {
    "1": parse_ordinary,
    "2": parse_renamed,
    "u": parse_unmerged,
    "?": parse_untracked,
    "!": parse_ignored,
}


@dataclass
class _BranchBuilder:
    """Mutable branch state, frozen into a Branch once parsing ends."""

    name: Optional[str] = None
    oid: Optional[str] = None
    upstream: Optional[str] = None
    ahead: Optional[int] = None
    behind: Optional[int] = None

    def freeze(self) -> Branch:
        return Branch(
            name=self.name,
            oid=self.oid,
            upstream=self.upstream,
            ahead=self.ahead,
            behind=self.behind,
        )


class StatusParser:
    """Parse porcelain v2 ``-z`` status output into a :class:`Report`.

    Usage::

        report = StatusParser(stdout).parse()
        for entry in report.staged:
            ...
    """

    def __init__(self, status_output: str) -> None:
        self._output = status_output
        self._branch: Optional[_BranchBuilder] = None
        self._stash_count = 0
        self._entries: List[StatusEntry] = []

    def parse(self) -> Report:
        for record in self.records():
            if record.startswith("#"):
                self._parse_header(record)
                continue
            entry_parser = ENTRY_PARSERS.get(record[0])
            if entry_parser is None:
                raise StatusParseError(f"Unknown status record type {record[0]!r}: {record!r}")
            try:
                self._entries.append(entry_parser(record))
            except ValueError as exc:
                raise StatusParseError(f"Malformed status record {record!r}: {exc}") from exc

        return Report(
            branch=self._branch.freeze() if self._branch else None,
            stash=Stash(count=self._stash_count),
            entries=tuple(self._entries),
        )

    def records(self) -> Iterator[str]:
        """Yield one string per logical record.

        A type ``2`` record is joined with the following segment by a NUL so
        the rename parser can split the two paths apart again.
        """
        parts = iter(self._output.split("\0"))
        for part in parts:
            if not part:
                continue
            if part.startswith("2"):
                original_path = next(parts, None)
                if original_path is None:
                    raise StatusParseError(f"Rename record without original path: {part!r}")
                part = f"{part}\0{original_path}"
            yield part

    # --- headers ---

    @property
    def branch(self) -> _BranchBuilder:
        if self._branch is None:
            self._branch = _BranchBuilder()
        return self._branch

    def _parse_header(self, record: str) -> None:
        # "# <name> <value>..."; unknown names and unreadable values are skipped
        tokens = record.split()
        if len(tokens) < 3:
            log.debug("Skipping status header without a value: %r", record)
            return
        header, values = tokens[1], tokens[2:]
        if header == "branch.head":
            self.branch.name = None if values[0] == DETACHED else values[0]
        elif header == "branch.oid":
            self.branch.oid = None if values[0] == INITIAL else values[0]
        elif header == "branch.upstream":
            self.branch.upstream = values[0]
        elif header == "branch.ab":
            # "+? -?" when ahead/behind counting is disabled
            ahead = _count(values[0], "+")
            behind = _count(values[1], "-") if len(values) > 1 else None
            if ahead is None or behind is None:
                log.debug("Skipping unreadable status header: %r", record)
                return
            self.branch.ahead = ahead
            self.branch.behind = behind
        elif header == "stash":
            count = _count(values[0])
            if count is None:
                log.debug("Skipping unreadable status header: %r", record)
                return
            self._stash_count = count


def parse_status(status_output: str) -> Report:
    """Parse porcelain v2 ``-z`` output into a :class:`Report`."""
    return StatusParser(status_output).parse()
