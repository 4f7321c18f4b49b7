"""Tests for relative time formatting and preview rendering."""

from datetime import datetime, timedelta, timezone

import pytest

from gitnav.config import PreviewConfig
from gitnav.git import CommitLine, RepoPreview, StatusCounts
from gitnav.preview import format_relative_time, render_preview, to_terminal


@pytest.mark.parametrize("seconds,expected", [
    (0, "0 seconds ago"),
    (59, "59 seconds ago"),
    (60, "1 minutes ago"),
    (3599, "59 minutes ago"),
    (3600, "1 hours ago"),
    (86399, "23 hours ago"),
    (86400, "1 days ago"),
    (604799, "6 days ago"),
    (604800, "1 weeks ago"),
    (2591999, "4 weeks ago"),
    (2592000, "1 months ago"),
    (31535999, "12 months ago"),
    (31536000, "1 years ago"),
    (3 * 31536000 + 5, "3 years ago"),
])
def test_format_relative_time_buckets(seconds, expected):
    assert format_relative_time(seconds) == expected


def test_format_relative_time_negative_is_symmetric():
    assert format_relative_time(-30) == "30 seconds ago"
    assert format_relative_time(-7200) == format_relative_time(7200)


def test_format_relative_time_timedelta():
    assert format_relative_time(timedelta(hours=5, minutes=59)) == "5 hours ago"
    assert format_relative_time(timedelta(seconds=59.9)) == "59 seconds ago"
    assert format_relative_time(timedelta(days=-3)) == "3 days ago"


def _preview() -> RepoPreview:
    return RepoPreview(
        path="/home/user/code/demo",
        name="demo",
        branch="main",
        last_commit=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        status=StatusCounts(staged=1, unstaged=0, untracked=2),
        commits=[
            CommitLine(short_id="abc1234", subject="Fix the thing"),
            CommitLine(short_id="def5678", subject="Initial commit"),
        ],
    )


NOW = datetime(2024, 1, 1, 14, 30, tzinfo=timezone.utc)


def test_render_preview_full():
    text = render_preview(_preview(), PreviewConfig(), now=NOW)
    assert text.plain == (
        "Repository: demo\n"
        "Location: /home/user/code/demo\n"
        "\n"
        "Branch: main\n"
        "Last Activity: 2 hours ago (2024-01-01 12:00)\n"
        "\n"
        "Status:\n"
        "  +1 staged\n"
        "  ?2 untracked\n"
        "\n"
        "Recent commits:\n"
        "  abc1234 Fix the thing\n"
        "  def5678 Initial commit"
    )


def test_render_preview_clean_tree():
    preview = _preview()
    preview.status = StatusCounts()
    text = render_preview(preview, PreviewConfig(), now=NOW).plain
    assert "Status:\n  Clean working tree" in text
    assert "staged" not in text


def test_render_preview_detached_and_custom_date_format():
    preview = _preview()
    preview.branch = "(detached HEAD)"
    config = PreviewConfig(date_format="%d/%m/%Y")
    text = render_preview(preview, config, now=NOW).plain
    assert "Branch: (detached HEAD)" in text
    assert "Last Activity: 2 hours ago (01/01/2024)" in text


def test_render_preview_all_sections_disabled():
    config = PreviewConfig(
        show_branch=False,
        show_last_activity=False,
        show_status=False,
        recent_commits=0,
    )
    text = render_preview(_preview(), config, now=NOW)
    assert text.plain == "Repository: demo\nLocation: /home/user/code/demo"


def test_render_preview_missing_facts_are_omitted():
    preview = RepoPreview(path="/x/empty", name="empty")
    config = PreviewConfig(recent_commits=0)
    text = render_preview(preview, config, now=NOW).plain
    assert "Branch" not in text
    assert "Last Activity" not in text
    assert "Status" not in text
    assert text == "Repository: empty\nLocation: /x/empty"


def test_render_preview_branch_without_activity():
    preview = _preview()
    preview.last_commit = None
    config = PreviewConfig(show_status=False, recent_commits=0)
    text = render_preview(preview, config, now=NOW).plain
    assert text.endswith("\n\nBranch: main")


def test_to_terminal_plain():
    text = render_preview(_preview(), PreviewConfig(), now=NOW)
    assert to_terminal(text, color=False) == text.plain
    assert "\x1b[" not in to_terminal(text, color=False)


def test_to_terminal_color():
    text = render_preview(_preview(), PreviewConfig(), now=NOW)
    rendered = to_terminal(text, color=True)
    assert "\x1b[" in rendered
    assert "Repository:" in rendered
    assert "abc1234" in rendered
