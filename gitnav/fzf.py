"""fzf integration — hand the repo list to fzf and read back the choice."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from typing import Optional

from gitnav.config import Config, UiConfig
from gitnav.errors import SelectorError
from gitnav.scanner import RepoRecord, format_records

logger = logging.getLogger(__name__)


def is_fzf_available() -> bool:
    return shutil.which("fzf") is not None


def build_fzf_args(ui: UiConfig, preview_command: str) -> list[str]:
    """fzf argv for the given UI settings.

    Only the name column is shown and searched; the path rides along as
    field 2 for the preview command and the result.
    """
    args = [
        "fzf",
        "--prompt", ui.prompt,
        "--header", ui.header,
        "--delimiter", "\t",
        "--with-nth", "1",
        "--preview-window", f"right:{ui.preview_width_percent}%:wrap",
        "--layout", ui.layout,
        "--height", f"{ui.height_percent}%",
    ]
    if ui.show_border:
        args.append("--border")
    # Keep the scanner's alphabetical order
    args.append("--no-sort")
    args += ["--preview", preview_command]
    return args


def preview_command(argv0: list[str]) -> str:
    """Shell command fzf runs for the preview pane; ``{2}`` is the repo path."""
    return " ".join(shlex.quote(a) for a in argv0) + " --preview {2}"


def parse_selection(output: str) -> Optional[str]:
    """Path field from fzf's ``name<TAB>path`` output line."""
    parts = output.strip("\r\n").split("\t")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def select_repo(
    repos: list[RepoRecord],
    config: Config,
    argv0: list[str],
) -> Optional[str]:
    """Run fzf over repos. Returns the chosen path, or None if cancelled."""
    data = format_records(repos)
    if not data:
        return None

    args = build_fzf_args(config.ui, preview_command(argv0))
    logger.debug("Running %s", " ".join(shlex.quote(a) for a in args))
    try:
        result = subprocess.run(
            args,
            input=data,
            stdout=subprocess.PIPE,
            text=True,
        )
    except OSError as exc:
        raise SelectorError(f"Failed to spawn fzf process: {exc}") from exc

    if result.returncode != 0:
        # 1 = no match, 130 = ESC / Ctrl-C
        logger.debug("fzf exited with %d", result.returncode)
        return None
    return parse_selection(result.stdout)
