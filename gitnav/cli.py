"""CLI entry point for gitnav."""

from __future__ import annotations

import argparse
import json
import logging
import os
import platform
import sys
from importlib import metadata
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.text import Text

from gitnav import __version__
from gitnav import exit_codes
from gitnav.cache import RepoCache, default_cache_dir
from gitnav.config import Config
from gitnav.errors import (
    CacheIOError,
    ConfigLoadError,
    ConfigValidationError,
    GitnavError,
    SelectorError,
)
from gitnav.fzf import is_fzf_available, select_repo
from gitnav.git import describe_repo
from gitnav.log import setup_logging
from gitnav.preview import render_preview, to_terminal
from gitnav.scanner import RepoRecord, find_repos, records_to_json
from gitnav.shell import SUPPORTED_SHELLS, generate_init_script
from gitnav.theme import ERROR, HINT

logger = logging.getLogger(__name__)

DOCS_URL = "https://github.com/msetsma/gitnav"

EXAMPLES = """\
examples:
  gn                        interactive repository selection
  gn -f                     force cache refresh
  gn --path ~/work          search in a specific directory
  gn --list                 list all repos (no interactive mode)
  gn --list --json          machine-readable output
  gitnav init zsh           generate shell integration
  gitnav config             show example config
  gitnav clear-cache        clear cache
"""


class UserError(GitnavError):
    """An error with a ready-made code, description and fix for the user."""

    def __init__(self, code: str, title: str, message: str, fix: str, exit_code: int) -> None:
        super().__init__(message, fix=fix)
        self.code = code
        self.title = title
        self.exit_code = exit_code


def _exit_code_for(exc: GitnavError) -> int:
    if isinstance(exc, UserError):
        return exc.exit_code
    if isinstance(exc, (ConfigValidationError, ConfigLoadError)):
        return exit_codes.EXIT_DATA_ERROR
    if isinstance(exc, CacheIOError):
        return exit_codes.EXIT_IO_ERROR
    if isinstance(exc, SelectorError):
        return exit_codes.EXIT_UNAVAILABLE
    return exit_codes.EXIT_GENERAL_ERROR


def print_error(console: Console, exc: GitnavError) -> None:
    """Structured error block on stderr: code, description, fix."""
    console.print(Text(f"Error: {exc.code} - {exc.title}", style=ERROR))
    console.print()
    console.print(Text(exc.message))
    if isinstance(exc, ConfigValidationError) and len(exc.problems) > 1:
        for problem in exc.problems:
            console.print(Text(f"  - {problem}"))
    if exc.fix:
        console.print()
        console.print(Text(f"Fix: {exc.fix}", style=HINT))


def _self_command() -> list[str]:
    """How fzf should call us back for previews."""
    return [sys.executable, "-m", "gitnav"]


def load_repos(search_path: str, max_depth: int, config: Config, force: bool) -> list[RepoRecord]:
    """Repos from the cache when fresh, otherwise a new scan (saved back to the cache).

    Cache failures are logged and fall back to scanning.
    """
    if not config.cache.enabled or force:
        logger.debug("Scanning repositories (cache disabled or force refresh)")
        return find_repos(search_path, max_depth)

    try:
        cache = RepoCache(default_cache_dir(), config.cache.ttl_seconds)
    except CacheIOError as exc:
        logger.warning("%s", exc.message)
        return find_repos(search_path, max_depth)

    if cache.is_valid(search_path):
        try:
            repos = cache.load(search_path)
        except CacheIOError as exc:
            logger.warning("%s; rescanning", exc.message)
        else:
            logger.debug("Loaded %d repositories from cache", len(repos))
            return repos

    logger.debug("Cache miss, scanning repositories")
    repos = find_repos(search_path, max_depth)
    try:
        cache.save(search_path, repos)
    except CacheIOError as exc:
        logger.warning("%s", exc.message)
    return repos


def run_navigation(args: argparse.Namespace) -> int:
    config = Config.load(args.config)
    if args.max_depth is not None:
        config.search.max_depth = args.max_depth
    config.validate()

    search_path = str(args.path) if args.path is not None else config.search.base_path
    search_path = os.path.expanduser(search_path)
    max_depth = config.search.max_depth

    logger.debug("Search path: %s", search_path)
    logger.debug("Max depth: %d", max_depth)
    logger.debug("Cache enabled: %s", config.cache.enabled)
    logger.debug("Force refresh: %s", args.force)

    repos = load_repos(search_path, max_depth, config, args.force)
    if not repos:
        raise UserError(
            "ENOREPOS",
            "No repositories found",
            f"No git repositories found in: {search_path}",
            "Verify the path exists and contains git repositories",
            exit_codes.EXIT_GENERAL_ERROR,
        )
    logger.info("Found %d repositories", len(repos))

    if args.list:
        if args.json_output:
            print(json.dumps(records_to_json(repos), indent=2))
        else:
            for repo in repos:
                print(repo.path)
        return exit_codes.EXIT_SUCCESS

    if not is_fzf_available():
        raise UserError(
            "ENOFZF",
            "fzf not found",
            "fzf is required for interactive mode.\n\n"
            "Installation:\n"
            "  macOS:   brew install fzf\n"
            "  Linux:   apt install fzf  or  pacman -S fzf\n"
            "  Windows: scoop install fzf",
            f"Use non-interactive mode instead: gitnav --list  ({DOCS_URL}#requirements)",
            exit_codes.EXIT_UNAVAILABLE,
        )

    selected = select_repo(repos, config, _self_command())
    if selected is None:
        return exit_codes.EXIT_INTERRUPTED
    # The shell wrapper cds into whatever we print
    print(selected)
    return exit_codes.EXIT_SUCCESS


def run_preview(repo_path: Path, config_path: Optional[Path], no_color: bool) -> int:
    config = Config.load(config_path)
    preview = describe_repo(str(repo_path), config.preview)
    text = render_preview(preview, config.preview)
    # fzf captures our stdout, so don't gate colors on isatty
    print(to_terminal(text, color=not no_color and "NO_COLOR" not in os.environ))
    return exit_codes.EXIT_SUCCESS


def run_init(shell: str) -> int:
    script = generate_init_script(shell)
    if script is None:
        raise UserError(
            "ENOSUPPORT",
            "Unsupported shell",
            f"The shell '{shell}' is not supported by gitnav.\n"
            f"Supported shells: {', '.join(SUPPORTED_SHELLS)}",
            f"Use one of the supported shells, e.g. `gitnav init zsh` ({DOCS_URL}#shell-integration)",
            exit_codes.EXIT_GENERAL_ERROR,
        )
    sys.stdout.write(script)
    return exit_codes.EXIT_SUCCESS


def run_clear_cache(dry_run: bool, config_path: Optional[Path], out: Console) -> int:
    cache = RepoCache(default_cache_dir(), Config.load(config_path).cache.ttl_seconds)
    files = cache.list_entries()
    size = cache.total_size()

    if dry_run:
        out.print(f"Cache directory: {cache.cache_dir}")
        out.print(f"Cache files: {len(files)}")
        out.print(f"Total size: {size} bytes")
        out.print()
        if not files:
            out.print("No cache files to delete")
            return exit_codes.EXIT_SUCCESS
        out.print("Files to be deleted:")
        for f in files:
            try:
                out.print(f"  {f} ({f.stat().st_size} bytes)")
            except OSError:
                out.print(f"  {f}")
        return exit_codes.EXIT_SUCCESS

    cache.clear()
    out.print("Cache cleared successfully")
    if files:
        out.print(f"Deleted {len(files)} cache files ({size} bytes)")
    return exit_codes.EXIT_SUCCESS


def run_version(verbose: bool, out: Console) -> int:
    out.print(f"gitnav {__version__}")
    if not verbose:
        return exit_codes.EXIT_SUCCESS

    out.print()
    out.print("System Information:")
    out.print(f"  OS: {platform.system()}")
    out.print(f"  Architecture: {platform.machine()}")
    out.print(f"  Python: {platform.python_version()}")
    out.print()
    out.print("Features:")
    out.print(f"  Colors: {'disabled' if out.no_color else 'enabled'}")
    out.print(f"  Interactive Mode: {'enabled' if is_fzf_available() else 'unavailable (fzf not found)'}")
    out.print()
    out.print("Dependencies:")
    for dist in ("rich", "platformdirs"):
        try:
            out.print(f"  {dist}: {metadata.version(dist)}")
        except metadata.PackageNotFoundError:
            out.print(f"  {dist}: not installed")
    return exit_codes.EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitnav",
        description="Fast git repository navigator with fuzzy finding.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Force refresh (bypass cache)",
    )
    parser.add_argument(
        "-p", "--path",
        type=Path,
        help="Override base search path",
    )
    parser.add_argument(
        "-d", "--max-depth",
        type=int,
        metavar="N",
        help="Override max search depth",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        metavar="FILE",
        help="Path to custom config file",
    )
    parser.add_argument(
        "-l", "--list",
        action="store_true",
        help="List repositories without launching fzf (enables piping)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON (with --list)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress non-error output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--preview", type=Path, metavar="REPO", help=argparse.SUPPRESS)
    parser.add_argument(
        "--version",
        action="version",
        version=f"gitnav {__version__}",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    init = sub.add_parser("init", help="Generate shell integration script")
    init.add_argument("shell", help="Shell type (zsh, bash, fish, nu/nushell)")
    sub.add_parser("config", help="Print example config to stdout")
    clear = sub.add_parser("clear-cache", help="Clear all cache files")
    clear.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without deleting",
    )
    version = sub.add_parser("version", help="Show version information")
    version.add_argument("-v", "--verbose", action="store_true", dest="version_verbose",
                         help="Show detailed version information")
    return parser


def run(argv: Optional[list[str]] = None) -> int:
    """Parse argv, dispatch, and return the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, debug=args.debug, quiet=args.quiet, no_color=args.no_color)
    err = Console(stderr=True, no_color=args.no_color, highlight=False, markup=False)
    out = Console(no_color=args.no_color, highlight=False, markup=False, quiet=args.quiet)

    try:
        if args.command == "init":
            return run_init(args.shell)
        if args.command == "config":
            sys.stdout.write(Config.example_toml())
            return exit_codes.EXIT_SUCCESS
        if args.command == "clear-cache":
            return run_clear_cache(args.dry_run, args.config, out)
        if args.command == "version":
            return run_version(args.version_verbose, out)
        if args.preview is not None:
            return run_preview(args.preview, args.config, args.no_color)
        return run_navigation(args)
    except GitnavError as exc:
        print_error(err, exc)
        return _exit_code_for(exc)
    except KeyboardInterrupt:
        return exit_codes.EXIT_INTERRUPTED


def main() -> None:
    """Entry point for the gitnav CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
