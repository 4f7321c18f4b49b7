"""Error types raised by gitnav."""

from __future__ import annotations


class GitnavError(Exception):
    """Base exception for gitnav errors.

    ``code`` is the short identifier shown to the user (``Error: ENOPATH - ...``)
    and ``fix`` an optional hint printed beneath the message.
    """

    code = "EGENERAL"
    title = "Unexpected error"

    def __init__(self, message: str, *, fix: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fix = fix


class PathNotFoundError(GitnavError):
    """Raised when the scan root does not exist."""

    code = "ENOPATH"
    title = "Search path not found"

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Base path does not exist: {path}",
            fix="Check --path or search.base_path in your config",
        )
        self.path = path


class CacheIOError(GitnavError):
    """Raised when a cache file or the cache directory cannot be read or written."""

    code = "ECACHE"
    title = "Cache I/O failure"


class RepositoryOpenError(GitnavError):
    """Raised when a path is not a readable repository root."""

    code = "ENOREPO"
    title = "Not a git repository"

    def __init__(self, path: str, reason: str = "") -> None:
        msg = f"Failed to open repository: {path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)
        self.path = path


class ConfigLoadError(GitnavError):
    """Raised when the config file exists but cannot be read or parsed."""

    code = "ECONFIG"
    title = "Invalid config file"


class ConfigValidationError(GitnavError):
    """Raised when configuration values are out of range or of the wrong type."""

    code = "ECONFIG"
    title = "Invalid configuration"

    def __init__(self, problems: list[str]) -> None:
        super().__init__(
            "; ".join(problems),
            fix="Run `gitnav config` to see a valid example",
        )
        self.problems = list(problems)


class SelectorError(GitnavError):
    """Raised when the fzf process cannot be started or talked to."""

    code = "EFZF"
    title = "Selector failure"
