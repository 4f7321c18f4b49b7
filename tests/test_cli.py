"""Tests for the CLI entry point."""

import json
import os
import subprocess
import tempfile

import pytest

from gitnav import cli, exit_codes
from gitnav.cache import RepoCache


@pytest.fixture
def workspace(monkeypatch):
    """Isolated search root, cache dir and (absent) config file."""
    with tempfile.TemporaryDirectory() as tmp:
        for name in list(os.environ):
            if name.startswith("GITNAV_"):
                monkeypatch.delenv(name)
        root = os.path.join(tmp, "code")
        cache_dir = os.path.join(tmp, "cache")
        os.makedirs(root)
        monkeypatch.setenv("GITNAV_CONFIG", os.path.join(tmp, "missing.toml"))
        monkeypatch.setenv("GITNAV_CACHE_DIR", cache_dir)
        yield root, cache_dir


def _make_repos(root, *names):
    for name in names:
        os.makedirs(os.path.join(root, name, ".git"))


def test_list(workspace, capsys):
    root, _ = workspace
    _make_repos(root, "beta", "alpha")
    code = cli.run(["--list", "--path", root])
    assert code == exit_codes.EXIT_SUCCESS
    lines = capsys.readouterr().out.splitlines()
    assert lines == [os.path.join(root, "alpha"), os.path.join(root, "beta")]


def test_list_json(workspace, capsys):
    root, _ = workspace
    _make_repos(root, "beta", "alpha")
    code = cli.run(["--list", "--json", "--path", root])
    assert code == exit_codes.EXIT_SUCCESS
    data = json.loads(capsys.readouterr().out)
    assert data == [
        {"name": "alpha", "path": os.path.join(root, "alpha")},
        {"name": "beta", "path": os.path.join(root, "beta")},
    ]


def test_list_uses_cache_until_forced(workspace, capsys):
    root, cache_dir = workspace
    _make_repos(root, "alpha")
    assert cli.run(["--list", "--path", root]) == exit_codes.EXIT_SUCCESS
    assert RepoCache(cache_dir, 300).is_valid(root)
    capsys.readouterr()

    _make_repos(root, "beta")
    cli.run(["--list", "--path", root])
    assert capsys.readouterr().out.splitlines() == [os.path.join(root, "alpha")]

    cli.run(["--list", "--path", root, "--force"])
    assert len(capsys.readouterr().out.splitlines()) == 2

    # The forced scan does not refresh the cache
    cli.run(["--list", "--path", root])
    assert len(capsys.readouterr().out.splitlines()) == 1


def test_list_cache_disabled(workspace, monkeypatch, capsys):
    root, cache_dir = workspace
    monkeypatch.setenv("GITNAV_CACHE_ENABLED", "false")
    _make_repos(root, "alpha")
    assert cli.run(["--list", "--path", root]) == exit_codes.EXIT_SUCCESS
    assert not os.path.exists(cache_dir)


def test_max_depth_flag(workspace, capsys):
    root, _ = workspace
    _make_repos(root, "top", os.path.join("group", "nested"))
    cli.run(["--list", "--path", root, "-f", "-d", "1"])
    assert capsys.readouterr().out.splitlines() == [os.path.join(root, "top")]


def test_invalid_max_depth(workspace, capsys):
    root, _ = workspace
    code = cli.run(["--list", "--path", root, "-d", "0"])
    assert code == exit_codes.EXIT_DATA_ERROR
    assert "ECONFIG" in capsys.readouterr().err


def test_no_repos(workspace, capsys):
    root, _ = workspace
    code = cli.run(["--list", "--path", root])
    assert code == exit_codes.EXIT_GENERAL_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "ENOREPOS" in captured.err


def test_missing_path(workspace, capsys):
    root, _ = workspace
    code = cli.run(["--list", "--path", os.path.join(root, "nope")])
    assert code == exit_codes.EXIT_GENERAL_ERROR
    assert "ENOPATH" in capsys.readouterr().err


def test_interactive_selection(workspace, monkeypatch, capsys):
    root, _ = workspace
    _make_repos(root, "alpha", "beta")
    monkeypatch.setattr(cli, "is_fzf_available", lambda: True)
    monkeypatch.setattr(cli, "select_repo", lambda repos, config, argv0: repos[1].path)
    assert cli.run(["--path", root]) == exit_codes.EXIT_SUCCESS
    assert capsys.readouterr().out.strip() == os.path.join(root, "beta")


def test_interactive_cancelled(workspace, monkeypatch, capsys):
    root, _ = workspace
    _make_repos(root, "alpha")
    monkeypatch.setattr(cli, "is_fzf_available", lambda: True)
    monkeypatch.setattr(cli, "select_repo", lambda repos, config, argv0: None)
    assert cli.run(["--path", root]) == exit_codes.EXIT_INTERRUPTED
    assert capsys.readouterr().out == ""


def test_interactive_without_fzf(workspace, monkeypatch, capsys):
    root, _ = workspace
    _make_repos(root, "alpha")
    monkeypatch.setattr(cli, "is_fzf_available", lambda: False)
    assert cli.run(["--path", root]) == exit_codes.EXIT_UNAVAILABLE
    assert "ENOFZF" in capsys.readouterr().err


def test_preview(workspace, capsys):
    root, _ = workspace
    repo = os.path.join(root, "demo")
    os.makedirs(repo)
    subprocess.run(["git", "init", "-b", "main", repo], capture_output=True)
    code = cli.run(["--preview", repo, "--no-color"])
    assert code == exit_codes.EXIT_SUCCESS
    out = capsys.readouterr().out
    assert out.startswith("Repository: demo\nLocation: ")
    assert "\x1b[" not in out


def test_preview_not_a_repo(workspace, capsys):
    root, _ = workspace
    code = cli.run(["--preview", root, "--no-color"])
    assert code == exit_codes.EXIT_GENERAL_ERROR
    assert "ENOREPO" in capsys.readouterr().err


def test_init(workspace, capsys):
    assert cli.run(["init", "zsh"]) == exit_codes.EXIT_SUCCESS
    assert "gn() {" in capsys.readouterr().out


def test_init_unsupported(workspace, capsys):
    assert cli.run(["init", "tcsh"]) == exit_codes.EXIT_GENERAL_ERROR
    assert "ENOSUPPORT" in capsys.readouterr().err


def test_config_command(workspace, capsys):
    assert cli.run(["config"]) == exit_codes.EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "[search]" in out
    assert "ttl_seconds = 300" in out


def test_clear_cache(workspace, capsys):
    root, cache_dir = workspace
    _make_repos(root, "alpha")
    cli.run(["--list", "--path", root])
    capsys.readouterr()

    assert cli.run(["clear-cache", "--dry-run"]) == exit_codes.EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "Cache files: 1" in out
    assert "Files to be deleted:" in out
    assert len(os.listdir(cache_dir)) == 1

    assert cli.run(["clear-cache"]) == exit_codes.EXIT_SUCCESS
    assert "Cache cleared successfully" in capsys.readouterr().out
    assert os.listdir(cache_dir) == []


def test_clear_cache_empty(workspace, capsys):
    assert cli.run(["clear-cache", "--dry-run"]) == exit_codes.EXIT_SUCCESS
    assert "No cache files to delete" in capsys.readouterr().out


def test_version(workspace, capsys):
    assert cli.run(["version"]) == exit_codes.EXIT_SUCCESS
    assert capsys.readouterr().out.strip() == f"gitnav {cli.__version__}"


def test_version_verbose(workspace, capsys):
    assert cli.run(["version", "-v"]) == exit_codes.EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "System Information:" in out
    assert "rich:" in out
