"""Data models for porcelain v2 status reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Tuple, Union


class EntryStatus(str, Enum):
    UNMODIFIED = "unmodified"
    MODIFIED = "modified"
    TYPE_CHANGED = "type_changed"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UPDATED_BUT_UNMERGED = "updated_but_unmerged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> EntryStatus:
        return _STATUS_CODES.get(code, cls.UNKNOWN)


_STATUS_CODES = {
    ".": EntryStatus.UNMODIFIED,
    "M": EntryStatus.MODIFIED,
    "T": EntryStatus.TYPE_CHANGED,
    "A": EntryStatus.ADDED,
    "D": EntryStatus.DELETED,
    "R": EntryStatus.RENAMED,
    "C": EntryStatus.COPIED,
    "U": EntryStatus.UPDATED_BUT_UNMERGED,
    "?": EntryStatus.UNTRACKED,
    "!": EntryStatus.IGNORED,
}


class ConflictType(str, Enum):
    BOTH_DELETED = "both_deleted"
    ADDED_BY_US = "added_by_us"
    DELETED_BY_THEM = "deleted_by_them"
    ADDED_BY_THEM = "added_by_them"
    DELETED_BY_US = "deleted_by_us"
    BOTH_ADDED = "both_added"
    BOTH_MODIFIED = "both_modified"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> ConflictType:
        return _CONFLICT_CODES.get(code, cls.UNKNOWN)


_CONFLICT_CODES = {
    "DD": ConflictType.BOTH_DELETED,
    "AU": ConflictType.ADDED_BY_US,
    "UD": ConflictType.DELETED_BY_THEM,
    "UA": ConflictType.ADDED_BY_THEM,
    "DU": ConflictType.DELETED_BY_US,
    "AA": ConflictType.BOTH_ADDED,
    "UU": ConflictType.BOTH_MODIFIED,
}


class RenameOperation(str, Enum):
    RENAME = "rename"
    COPY = "copy"  # git only emits R today
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> RenameOperation:
        return {"R": cls.RENAME, "C": cls.COPY}.get(code, cls.UNKNOWN)


class EntryKind(str, Enum):
    ORDINARY = "ordinary"
    RENAMED = "renamed"
    UNMERGED = "unmerged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"


@dataclass(frozen=True)
class SubmoduleStatus:
    """Decoded ``S<c><m><u>`` submodule field."""

    commit_changed: bool
    tracked_changes: bool
    untracked_changes: bool

    @classmethod
    def parse(cls, token: str) -> Optional[SubmoduleStatus]:
        """Return None when *token* does not describe a submodule (``N...``)."""
        if not token.startswith("S"):
            return None
        padded = token.ljust(4, ".")
        return cls(
            commit_changed=padded[1] == "C",
            tracked_changes=padded[2] == "M",
            untracked_changes=padded[3] == "U",
        )


# --- Entries ---


class _EntryFlags:
    """Capability defaults shared by every entry variant."""

    kind: ClassVar[EntryKind]
    path: str

    @property
    def ignored(self) -> bool:
        return False

    @property
    def untracked(self) -> bool:
        return False

    @property
    def unstaged(self) -> bool:
        return False

    @property
    def staged(self) -> bool:
        return False

    @property
    def fully_staged(self) -> bool:
        return self.staged and not self.unstaged

    @property
    def unmerged(self) -> bool:
        return False


@dataclass(frozen=True)
class OrdinaryEntry(_EntryFlags):
    """A changed tracked path (record type ``1``)."""

    kind: ClassVar[EntryKind] = EntryKind.ORDINARY

    path: str
    index_status: EntryStatus
    worktree_status: EntryStatus
    submodule_status: Optional[SubmoduleStatus]
    head_mode: int
    index_mode: int
    worktree_mode: int
    head_sha: str
    index_sha: str

    @property
    def staged(self) -> bool:
        return self.index_status != EntryStatus.UNMODIFIED

    @property
    def unstaged(self) -> bool:
        return self.worktree_status != EntryStatus.UNMODIFIED


@dataclass(frozen=True)
class RenamedEntry(_EntryFlags):
    """A renamed or copied path (record type ``2``)."""

    kind: ClassVar[EntryKind] = EntryKind.RENAMED

    path: str
    original_path: str
    index_status: EntryStatus
    worktree_status: EntryStatus
    submodule_status: Optional[SubmoduleStatus]
    head_mode: int
    index_mode: int
    worktree_mode: int
    head_sha: str
    index_sha: str
    operation: RenameOperation
    similarity_score: int

    @property
    def staged(self) -> bool:
        return self.index_status != EntryStatus.UNMODIFIED

    @property
    def unstaged(self) -> bool:
        return self.worktree_status != EntryStatus.UNMODIFIED


@dataclass(frozen=True)
class UnmergedEntry(_EntryFlags):
    """A path with a merge conflict (record type ``u``)."""

    kind: ClassVar[EntryKind] = EntryKind.UNMERGED

    path: str
    conflict_type: ConflictType
    submodule_status: Optional[SubmoduleStatus]
    base_mode: int
    our_mode: int
    their_mode: int
    worktree_mode: int
    base_sha: str
    our_sha: str
    their_sha: str

    @property
    def index_status(self) -> Optional[EntryStatus]:
        return None

    @property
    def worktree_status(self) -> Optional[EntryStatus]:
        return None

    @property
    def unmerged(self) -> bool:
        return True


@dataclass(frozen=True)
class UntrackedEntry(_EntryFlags):
    kind: ClassVar[EntryKind] = EntryKind.UNTRACKED

    path: str

    @property
    def index_status(self) -> Optional[EntryStatus]:
        return None

    @property
    def worktree_status(self) -> Optional[EntryStatus]:
        return None

    @property
    def untracked(self) -> bool:
        return True

    @property
    def unstaged(self) -> bool:
        return True


@dataclass(frozen=True)
class IgnoredEntry(_EntryFlags):
    kind: ClassVar[EntryKind] = EntryKind.IGNORED

    path: str

    @property
    def index_status(self) -> Optional[EntryStatus]:
        return None

    @property
    def worktree_status(self) -> Optional[EntryStatus]:
        return None

    @property
    def ignored(self) -> bool:
        return True


StatusEntry = Union[OrdinaryEntry, RenamedEntry, UnmergedEntry, UntrackedEntry, IgnoredEntry]


# --- Headers ---


@dataclass(frozen=True)
class Branch:
    """Branch state from the ``# branch.*`` headers."""

    name: Optional[str] = None  # None when HEAD is detached
    oid: Optional[str] = None  # None on an unborn branch
    upstream: Optional[str] = None
    ahead: Optional[int] = None  # only meaningful with an upstream
    behind: Optional[int] = None

    @property
    def detached(self) -> bool:
        return self.name is None

    @property
    def has_upstream(self) -> bool:
        return self.upstream is not None


@dataclass(frozen=True)
class Stash:
    count: int = 0


@dataclass(frozen=True)
class Report:
    """A parsed status report.

    All views are recomputed from ``entries`` on every access.
    """

    branch: Optional[Branch] = None
    stash: Stash = field(default_factory=Stash)
    entries: Tuple[StatusEntry, ...] = ()

    @property
    def ignored(self) -> List[StatusEntry]:
        return [e for e in self.entries if e.ignored]

    @property
    def untracked(self) -> List[StatusEntry]:
        return [e for e in self.entries if e.untracked]

    @property
    def unstaged(self) -> List[StatusEntry]:
        return [e for e in self.entries if e.unstaged]

    @property
    def staged(self) -> List[StatusEntry]:
        return [e for e in self.entries if e.staged]

    @property
    def fully_staged(self) -> List[StatusEntry]:
        return [e for e in self.entries if e.fully_staged]

    @property
    def unmerged(self) -> List[StatusEntry]:
        return [e for e in self.entries if e.unmerged]

    @property
    def merge_conflict(self) -> bool:
        return bool(self.unmerged)
