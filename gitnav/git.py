"""Git metadata extraction for the preview pane — subprocess-based."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from gitnav.config import PreviewConfig
from gitnav.errors import RepositoryOpenError

logger = logging.getLogger(__name__)

DETACHED_HEAD = "(detached HEAD)"
SHORT_ID_LEN = 7


@dataclass
class StatusCounts:
    staged: int = 0
    unstaged: int = 0
    untracked: int = 0

    @property
    def is_clean(self) -> bool:
        return not (self.staged or self.unstaged or self.untracked)


@dataclass
class CommitLine:
    short_id: str
    subject: str


@dataclass
class RepoPreview:
    path: str
    name: str
    branch: Optional[str] = None
    last_commit: Optional[datetime] = None
    status: Optional[StatusCounts] = None
    commits: list[CommitLine] = field(default_factory=list)


def _run_git(repo_path: str, args: list[str], timeout: int = 30) -> Optional[str]:
    """Run a git command and return stdout, or None if it failed.

    ``--no-optional-locks`` keeps read-only commands such as ``status`` from
    refreshing and rewriting the index.
    """
    try:
        result = subprocess.run(
            ["git", "--no-optional-locks", "-C", repo_path] + args,
            capture_output=True,
            text=True,
            timeout=timeout,
            errors="replace",
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as exc:
        logger.debug("git %s failed in %s: %s", " ".join(args), repo_path, exc)
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def _open_repo(repo_path: str) -> str:
    """Check repo_path is a repository work tree root and return it absolute."""
    path = os.path.abspath(os.path.expanduser(repo_path))
    if not os.path.isdir(path):
        raise RepositoryOpenError(path, "no such directory")

    toplevel = _run_git(path, ["rev-parse", "--show-toplevel"])
    if toplevel is None:
        raise RepositoryOpenError(path)
    if os.path.realpath(toplevel.strip()) != os.path.realpath(path):
        raise RepositoryOpenError(path, "not the repository root")
    return path


def get_head_commit(repo_path: str) -> Optional[str]:
    """Full hash HEAD peels to, or None (unborn branch, broken ref)."""
    out = _run_git(repo_path, ["rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
    if out is None or not out.strip():
        return None
    return out.strip()


def get_branch(repo_path: str) -> Optional[str]:
    """Short branch name, DETACHED_HEAD, or None if HEAD does not resolve."""
    if get_head_commit(repo_path) is None:
        return None
    out = _run_git(repo_path, ["symbolic-ref", "--quiet", "--short", "HEAD"])
    if out is None or not out.strip():
        return DETACHED_HEAD
    return out.strip()


def get_last_commit_time(repo_path: str) -> Optional[datetime]:
    """Commit time of HEAD in local time."""
    out = _run_git(repo_path, ["log", "-1", "--format=%ct", "HEAD"])
    if out is None or not out.strip():
        return None
    try:
        return datetime.fromtimestamp(int(out.strip())).astimezone()
    except (ValueError, OverflowError, OSError):
        return None


def parse_status(output: str) -> StatusCounts:
    """Tally ``git status --porcelain=v1 -z`` output.

    Counters are independent: a path staged and then modified again counts
    once as staged and once as unstaged.
    """
    counts = StatusCounts()
    tokens = output.split("\0")
    i = 0
    while i < len(tokens):
        entry = tokens[i]
        i += 1
        if len(entry) < 3:
            continue
        x, y = entry[0], entry[1]
        if x in "RC":
            # Rename/copy entries carry the origin path as the next token
            i += 1
        if x == "?" and y == "?":
            counts.untracked += 1
            continue
        if x in "AMD":
            counts.staged += 1
        if y in "MD":
            counts.unstaged += 1
    return counts


def get_status(repo_path: str) -> Optional[StatusCounts]:
    out = _run_git(repo_path, [
        "status", "--porcelain=v1", "-z", "--no-renames", "--untracked-files=all",
    ])
    if out is None:
        return None
    return parse_status(out)


def get_recent_commits(repo_path: str, limit: int) -> list[CommitLine]:
    """Up to limit commits reachable from HEAD, newest first."""
    if limit <= 0:
        return []
    # -z ends each record with NUL, which a commit message cannot contain
    out = _run_git(repo_path, ["log", "-z", f"-n{limit}", "--format=%H%n%B", "HEAD"])
    if not out:
        return []

    commits: list[CommitLine] = []
    for record in out.split("\0"):
        if not record:
            continue
        sha, _, message = record.partition("\n")
        # First line only; form feeds and other separators stay in the subject
        subject = message.split("\n", 1)[0].rstrip("\r")
        commits.append(CommitLine(short_id=sha[:SHORT_ID_LEN], subject=subject))
    return commits[:limit]


def describe_repo(repo_path: str, config: Optional[PreviewConfig] = None) -> RepoPreview:
    """Collect the preview facts for one repository.

    Only RepositoryOpenError is fatal; every other section degrades to
    missing when git cannot answer.
    """
    config = config or PreviewConfig()
    path = _open_repo(repo_path)
    preview = RepoPreview(path=path, name=Path(path).name or "unknown")

    if config.show_branch:
        preview.branch = get_branch(path)
    if config.show_last_activity:
        preview.last_commit = get_last_commit_time(path)
    if config.show_status:
        preview.status = get_status(path)
    if config.recent_commits > 0:
        preview.commits = get_recent_commits(path, config.recent_commits)

    return preview
