"""Shared visual constants for gitnav output."""

from __future__ import annotations

from rich.style import Style

# ── Color Palette (GitHub Dark + Neon Accents) ──────────────────────────

MUTED = "#8b949e"
FG = "#e6edf3"

CYAN = "#58a6ff"
GREEN = "#39d353"
PURPLE = "#bc8cff"
YELLOW = "#e3b341"
RED = "#f85149"

# ── Preview Styles ──────────────────────────────────────────────────────

LABEL_REPO = Style(color=CYAN, bold=True)
LABEL_BRANCH = Style(color=YELLOW, bold=True)
LABEL_ACTIVITY = Style(color=PURPLE, bold=True)
LABEL_STATUS = Style(color=PURPLE, bold=True)
LABEL_COMMITS = Style(color=GREEN, bold=True)

STAGED = Style(color=GREEN)
UNSTAGED = Style(color=YELLOW)
UNTRACKED = Style(color=RED)
COMMIT_ID = Style(color=YELLOW)

# ── CLI Messages ────────────────────────────────────────────────────────

ERROR = Style(color=RED, bold=True)
HINT = Style(color=MUTED, italic=True)
