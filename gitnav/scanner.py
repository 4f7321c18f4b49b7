"""Repo discovery — find all git repositories under a directory, depth-bounded."""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from gitnav.errors import PathNotFoundError

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"


@dataclass(frozen=True)
class RepoRecord:
    """A discovered repository: display name plus absolute path."""

    name: str
    path: str

    @classmethod
    def from_path(cls, path: str) -> RepoRecord:
        return cls(name=Path(path).name or "unknown", path=path)


class EntryKind(enum.Enum):
    DIRECTORY = "directory"
    OTHER = "other"
    UNREADABLE = "unreadable"


def classify_entry(entry: os.DirEntry) -> EntryKind:
    """Classify a directory entry without following symlinks.

    A symlink to a directory is OTHER. An entry whose type cannot be
    determined (permission error, removed mid-walk) is UNREADABLE.
    """
    try:
        if entry.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        return EntryKind.OTHER
    except OSError:
        return EntryKind.UNREADABLE


def find_repos(root: str, max_depth: int = 5) -> list[RepoRecord]:
    """Find every directory under root that has a ``.git`` directory child.

    Depth 0 is root itself; directories deeper than max_depth are not
    inspected. Hidden directories are walked, symlinks are not followed, and
    found repositories are still descended into so nested repos are reported
    too. Unreadable directories are skipped.

    Returns records sorted by name (stable, duplicates kept).
    """
    root = os.path.abspath(os.path.expanduser(root))
    if not os.path.exists(root):
        raise PathNotFoundError(root)

    repos: list[RepoRecord] = []

    def _walk(path: str, depth: int) -> None:
        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", path, exc)
            return

        has_git = False
        subdirs: list[os.DirEntry] = []

        for entry in entries:
            kind = classify_entry(entry)
            if kind is EntryKind.UNREADABLE:
                logger.debug("Skipping unreadable entry %s", entry.path)
                continue
            if kind is not EntryKind.DIRECTORY:
                continue
            if entry.name == GIT_MARKER:
                has_git = True
            else:
                subdirs.append(entry)

        if has_git:
            repos.append(RepoRecord.from_path(path))

        if depth >= max_depth:
            return
        for d in subdirs:
            _walk(d.path, depth + 1)

    _walk(root, 0)
    repos.sort(key=lambda r: r.name)
    logger.debug("Found %d repositories under %s (max depth %d)", len(repos), root, max_depth)
    return repos


def format_records(repos: list[RepoRecord]) -> str:
    """Render records as ``name<TAB>path`` lines joined by newlines.

    This is both the cache file payload and the fzf input block.
    """
    return "\n".join(f"{r.name}\t{r.path}" for r in repos)


def records_to_json(repos: list[RepoRecord]) -> list[dict[str, str]]:
    """Array-of-objects form used by ``--list --json``."""
    return [asdict(r) for r in repos]
