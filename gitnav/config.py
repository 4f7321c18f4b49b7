"""Configuration loading for gitnav.

Priority: explicit ``--config`` path > ``$GITNAV_CONFIG`` > the platform user
config dir (``config.toml``) > built-in defaults. Environment variables
(``GITNAV_BASE_PATH`` and friends) override values read from the file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir

from gitnav.errors import ConfigLoadError, ConfigValidationError

logger = logging.getLogger(__name__)

LAYOUTS = ("default", "reverse", "reverse-list")
MAX_DEPTH_LIMIT = 100
MAX_RECENT_COMMITS = 100

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class SearchConfig:
    base_path: str = "~"
    max_depth: int = 5


@dataclass
class CacheConfig:
    enabled: bool = True
    ttl_seconds: int = 300


@dataclass
class UiConfig:
    prompt: str = "Select repo > "
    header: str = "Repository (↑/↓, ⏎, Esc)"
    preview_width_percent: int = 60
    layout: str = "reverse"
    height_percent: int = 90
    show_border: bool = True


@dataclass
class PreviewConfig:
    show_branch: bool = True
    show_last_activity: bool = True
    show_status: bool = True
    recent_commits: int = 5
    date_format: str = "%Y-%m-%d %H:%M"


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build a Config from parsed TOML. Missing keys keep their defaults."""
        config = cls()
        problems: list[str] = []
        for section in fields(cls):
            table = data.get(section.name)
            if table is None:
                continue
            if not isinstance(table, Mapping):
                problems.append(f"[{section.name}] must be a table")
                continue
            target = getattr(config, section.name)
            for f in fields(target):
                if f.name not in table:
                    continue
                value = table[f.name]
                expected = type(getattr(target, f.name))
                # bool is a subclass of int; reject it for int fields
                if (expected is int and isinstance(value, bool)) or not isinstance(value, expected):
                    problems.append(
                        f"{section.name}.{f.name} must be {expected.__name__}, "
                        f"got {type(value).__name__}"
                    )
                    continue
                setattr(target, f.name, value)
        if problems:
            raise ConfigValidationError(problems)
        return config

    @classmethod
    def load_from_file(cls, path: Path) -> Config:
        if not path.exists():
            logger.debug("No config file at %s, using defaults", path)
            return cls()
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as exc:
            raise ConfigLoadError(f"Failed to read config file: {path} ({exc})") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigLoadError(f"Failed to parse config file: {path} ({exc})") from exc
        logger.debug("Loaded config from %s", path)
        return cls.from_dict(data)

    @classmethod
    def load(
        cls,
        custom_path: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> Config:
        env = os.environ if env is None else env
        path = custom_path
        if path is None and env.get("GITNAV_CONFIG", "").strip():
            path = Path(env["GITNAV_CONFIG"].strip())
        if path is None:
            path = default_config_path()
        config = cls.load_from_file(Path(path).expanduser())
        config.apply_env(env)
        return config

    def apply_env(self, env: Mapping[str, str]) -> None:
        """Override values from GITNAV_* environment variables."""
        problems: list[str] = []

        def _get(name: str) -> Optional[str]:
            value = env.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        def _int(name: str) -> Optional[int]:
            raw = _get(name)
            if raw is None:
                return None
            try:
                return int(raw)
            except ValueError:
                problems.append(f"{name} must be an integer, got {raw!r}")
                return None

        def _bool(name: str) -> Optional[bool]:
            raw = _get(name)
            if raw is None:
                return None
            if raw.lower() in _TRUE:
                return True
            if raw.lower() in _FALSE:
                return False
            problems.append(f"{name} must be a boolean, got {raw!r}")
            return None

        base_path = _get("GITNAV_BASE_PATH")
        if base_path is not None:
            self.search.base_path = base_path
        max_depth = _int("GITNAV_MAX_DEPTH")
        if max_depth is not None:
            self.search.max_depth = max_depth
        enabled = _bool("GITNAV_CACHE_ENABLED")
        if enabled is not None:
            self.cache.enabled = enabled
        ttl = _int("GITNAV_CACHE_TTL")
        if ttl is not None:
            self.cache.ttl_seconds = ttl
        recent = _int("GITNAV_RECENT_COMMITS")
        if recent is not None:
            self.preview.recent_commits = recent
        date_format = _get("GITNAV_DATE_FORMAT")
        if date_format is not None:
            self.preview.date_format = date_format

        if problems:
            raise ConfigValidationError(problems)

    def validate(self) -> None:
        """Raise ConfigValidationError listing every out-of-range value."""
        problems: list[str] = []
        if not self.search.base_path.strip():
            problems.append("search.base_path must not be empty")
        if not 1 <= self.search.max_depth <= MAX_DEPTH_LIMIT:
            problems.append(
                f"search.max_depth must be between 1 and {MAX_DEPTH_LIMIT}, "
                f"got {self.search.max_depth}"
            )
        if self.cache.ttl_seconds < 0:
            problems.append(f"cache.ttl_seconds must be >= 0, got {self.cache.ttl_seconds}")
        if not 1 <= self.ui.preview_width_percent <= 100:
            problems.append(
                f"ui.preview_width_percent must be between 1 and 100, "
                f"got {self.ui.preview_width_percent}"
            )
        if not 1 <= self.ui.height_percent <= 100:
            problems.append(
                f"ui.height_percent must be between 1 and 100, got {self.ui.height_percent}"
            )
        if self.ui.layout not in LAYOUTS:
            problems.append(
                f"ui.layout must be one of {', '.join(LAYOUTS)}, got {self.ui.layout!r}"
            )
        if not 0 <= self.preview.recent_commits <= MAX_RECENT_COMMITS:
            problems.append(
                f"preview.recent_commits must be between 0 and {MAX_RECENT_COMMITS}, "
                f"got {self.preview.recent_commits}"
            )
        if problems:
            raise ConfigValidationError(problems)

    @classmethod
    def example_toml(cls) -> str:
        """Defaults rendered as a commented TOML file."""
        default = cls()
        lines = [
            "# gitnav configuration",
            f"# Save as {default_config_path()}",
            "",
        ]
        comments = {
            "search": "Where to look for repositories",
            "cache": "Scan result caching",
            "ui": "fzf appearance",
            "preview": "Preview pane contents",
        }
        for section in fields(default):
            lines.append(f"# {comments[section.name]}")
            lines.append(f"[{section.name}]")
            table = getattr(default, section.name)
            for f in fields(table):
                lines.append(f"{f.name} = {_toml_value(getattr(table, f.name))}")
            lines.append("")
        return "\n".join(lines).rstrip("\n") + "\n"


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def default_config_path() -> Path:
    return Path(user_config_dir("gitnav")) / "config.toml"
