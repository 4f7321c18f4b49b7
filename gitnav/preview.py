"""Preview pane rendering — what fzf shows next to the selected repo."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Union

from rich.console import Console
from rich.text import Text

from gitnav.config import PreviewConfig
from gitnav.git import RepoPreview
from gitnav.theme import (
    COMMIT_ID,
    LABEL_ACTIVITY,
    LABEL_BRANCH,
    LABEL_COMMITS,
    LABEL_REPO,
    LABEL_STATUS,
    STAGED,
    UNSTAGED,
    UNTRACKED,
)

MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
MONTH = 2592000  # 30 days
YEAR = 31536000  # 365 days


def format_relative_time(delta: Union[timedelta, int, float]) -> str:
    """Format a duration as "N <unit> ago".

    Future and past durations read the same (absolute value). Units are
    always plural, including "1 hours ago".
    """
    if isinstance(delta, timedelta):
        seconds = int(delta.total_seconds())
    else:
        seconds = int(delta)
    seconds = abs(seconds)

    if seconds < MINUTE:
        return f"{seconds} seconds ago"
    if seconds < HOUR:
        return f"{seconds // MINUTE} minutes ago"
    if seconds < DAY:
        return f"{seconds // HOUR} hours ago"
    if seconds < WEEK:
        return f"{seconds // DAY} days ago"
    if seconds < MONTH:
        return f"{seconds // WEEK} weeks ago"
    if seconds < YEAR:
        return f"{seconds // MONTH} months ago"
    return f"{seconds // YEAR} years ago"


def _label(label: str, style, value: str = "") -> Text:
    text = Text()
    text.append(label, style=style)
    if value:
        text.append(f" {value}")
    return text


def render_preview(
    preview: RepoPreview,
    config: Optional[PreviewConfig] = None,
    now: Optional[datetime] = None,
) -> Text:
    """Lay out a RepoPreview as styled Rich Text.

    Sections are separated by a blank line; a disabled or empty section
    produces nothing.
    """
    config = config or PreviewConfig()
    sections: list[list[Text]] = []

    sections.append([
        _label("Repository:", LABEL_REPO, preview.name),
        _label("Location:", LABEL_REPO, preview.path),
    ])

    head: list[Text] = []
    if config.show_branch and preview.branch is not None:
        head.append(_label("Branch:", LABEL_BRANCH, preview.branch))
    if config.show_last_activity and preview.last_commit is not None:
        ts = preview.last_commit
        current = now or datetime.now(ts.tzinfo)
        relative = format_relative_time(current - ts)
        absolute = ts.strftime(config.date_format)
        head.append(_label("Last Activity:", LABEL_ACTIVITY, f"{relative} ({absolute})"))
    if head:
        sections.append(head)

    if config.show_status and preview.status is not None:
        status = [_label("Status:", LABEL_STATUS)]
        s = preview.status
        if s.is_clean:
            status.append(Text("  Clean working tree"))
        else:
            if s.staged:
                status.append(Text(f"  +{s.staged} staged", style=STAGED))
            if s.unstaged:
                status.append(Text(f"  ~{s.unstaged} unstaged", style=UNSTAGED))
            if s.untracked:
                status.append(Text(f"  ?{s.untracked} untracked", style=UNTRACKED))
        sections.append(status)

    if config.recent_commits > 0:
        commits = [_label("Recent commits:", LABEL_COMMITS)]
        for c in preview.commits:
            line = Text("  ")
            line.append(c.short_id, style=COMMIT_ID)
            line.append(f" {c.subject}")
            commits.append(line)
        sections.append(commits)

    return Text("\n\n").join(Text("\n").join(lines) for lines in sections)


def to_terminal(text: Text, color: bool = True) -> str:
    """Render Rich Text to a string, with ANSI escapes when color is on."""
    if not color:
        return text.plain
    console = Console(force_terminal=True, color_system="truecolor", soft_wrap=True, width=10_000)
    with console.capture() as capture:
        console.print(text, end="")
    return capture.get()
