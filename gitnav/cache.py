"""Repo list cache — TTL-checked TSV files keyed by a hash of the search path.

Each search path gets one file, ``<cache_dir>/repos_<16 hex>.cache``, holding
``name<TAB>path`` lines. Freshness comes from the file's mtime only.
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
import time
from pathlib import Path

from platformdirs import user_cache_dir

from gitnav.errors import CacheIOError
from gitnav.scanner import RepoRecord, format_records

logger = logging.getLogger(__name__)

CACHE_PREFIX = "repos_"
CACHE_SUFFIX = ".cache"
FINGERPRINT_LEN = 16


def path_fingerprint(search_path: str | os.PathLike) -> str:
    """SHA-256 of the path exactly as given, truncated to 16 hex chars.

    No normalization: ``/a/b`` and ``/a/b/`` are different keys.
    """
    raw = os.fsencode(search_path)
    return hashlib.sha256(raw).hexdigest()[:FINGERPRINT_LEN]


def default_cache_dir() -> Path:
    """``$GITNAV_CACHE_DIR`` if set, else the platform user cache dir."""
    override = os.environ.get("GITNAV_CACHE_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_cache_dir("gitnav"))


class RepoCache:
    """Fingerprint-keyed, TTL-gated store of scan results.

    No locking: concurrent saves for the same search path race and the last
    writer wins.
    """

    def __init__(self, cache_dir: str | os.PathLike, ttl_seconds: int) -> None:
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_seconds
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheIOError(
                f"Failed to create cache directory: {self.cache_dir} ({exc})"
            ) from exc

    def entry_path(self, search_path: str | os.PathLike) -> Path:
        return self.cache_dir / f"{CACHE_PREFIX}{path_fingerprint(search_path)}{CACHE_SUFFIX}"

    def is_valid(self, search_path: str | os.PathLike) -> bool:
        """True if an entry exists and is younger than the TTL.

        Any error while probing counts as invalid. A TTL of 0 is always stale,
        and so is a file whose mtime lies in the future.
        """
        path = self.entry_path(search_path)
        try:
            mtime = path.stat().st_mtime
        except OSError:
            return False

        age = time.time() - mtime
        if age < 0:
            return False
        return age < self.ttl_seconds

    def load(self, search_path: str | os.PathLike) -> list[RepoRecord]:
        """Read an entry back. Lines without exactly two tab-separated fields are dropped."""
        path = self.entry_path(search_path)
        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheIOError(f"Failed to read cache file: {path} ({exc})") from exc

        repos: list[RepoRecord] = []
        for line in contents.split("\n"):
            parts = line.rstrip("\r").split("\t")
            if len(parts) != 2:
                continue
            repos.append(RepoRecord(name=parts[0], path=parts[1]))

        logger.debug("Loaded %d repositories from %s", len(repos), path)
        return repos

    def save(self, search_path: str | os.PathLike, repos: list[RepoRecord]) -> None:
        """Overwrite the entry for search_path with repos."""
        path = self.entry_path(search_path)
        payload = format_records(repos)
        try:
            path.write_text(payload, encoding="utf-8", newline="")
        except OSError as exc:
            raise CacheIOError(f"Failed to write cache file: {path} ({exc})") from exc

        logger.debug("Saved %d repositories to %s", len(repos), path)

    def clear(self) -> None:
        """Remove the whole cache directory and recreate it empty."""
        try:
            if self.cache_dir.exists():
                shutil.rmtree(self.cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheIOError(f"Failed to clear cache directory: {self.cache_dir} ({exc})") from exc
        logger.info("Cleared cache directory %s", self.cache_dir)

    def list_entries(self) -> list[Path]:
        """All ``*.cache`` files in the cache directory, sorted."""
        if not self.cache_dir.exists():
            return []
        try:
            files = [
                p for p in self.cache_dir.iterdir()
                if p.suffix == CACHE_SUFFIX and p.is_file()
            ]
        except OSError as exc:
            raise CacheIOError(f"Failed to read cache directory: {self.cache_dir} ({exc})") from exc
        return sorted(files)

    def total_size(self) -> int:
        """Sum of the byte sizes of all entries."""
        total = 0
        for f in self.list_entries():
            try:
                total += f.stat().st_size
            except OSError as exc:
                raise CacheIOError(f"Failed to stat cache file: {f} ({exc})") from exc
        return total
