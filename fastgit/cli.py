"""Command-line front door for fastgit.

Parses CLI options, configures logging and resolves the theme, then either
prints the change tree once (``--render``) or starts the interactive UI.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .app import App
from .config import load_settings
from .file_tree import FileTree
from .git_runner import GitError
from .git_status import scan_status
from .render import format_tree_row
from .runtime import run_app
from .ui_theme import UITheme, available_theme_names, resolve_theme

logger = logging.getLogger("fastgit")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Path | None, verbose: bool) -> None:
    """Attach a file handler when a log file is set; stay silent otherwise.

    The UI owns the terminal, so nothing is ever logged to stderr.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False
    if log_file is None:
        logger.addHandler(logging.NullHandler())
        return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def render_tree_view(path: Path, theme: UITheme, expand_all: bool = False, timeout_seconds: float = 2.0) -> str:
    """Render the changed-path tree for ``path`` as text.

    Raises ``GitError`` when ``path`` is not inside a git working copy.
    """
    scan = scan_status(path, timeout_seconds)
    if not scan.is_repo:
        raise GitError(f"not a git repository: {path}")
    tree = FileTree(root_dir=scan.repo_root)
    tree.rebuild(scan.changed_paths())
    if expand_all:
        tree.expand_all()
    out = []
    for row in tree.rows:
        line = format_tree_row(row, scan.statuses, False, theme)
        out.append(line)
        out.append("\n")
    return "".join(out)


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch fastgit on a working copy.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = argparse.ArgumentParser(description="Browse, stage and commit changes in a git working copy.")
    parser.add_argument("path", nargs="?", default=None, help="Directory inside a repository. Defaults to cwd.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--render", action="store_true", help="Print the changed-file tree and exit.")
    parser.add_argument("--expand-all", action="store_true", help="Expand every folder in --render output.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(args.log_file or settings.log_file, args.verbose)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.is_dir():
        raise SystemExit(f"Directory not found: {path}")

    theme = resolve_theme(args.theme or settings.theme, no_color=args.no_color)
    logger.info("starting in %s with theme %s", path, theme.name)

    if args.render:
        try:
            sys.stdout.write(render_tree_view(path, theme, args.expand_all, settings.git_timeout_seconds))
        except GitError as exc:
            raise SystemExit(str(exc)) from exc
        return

    app = App(path, settings=settings, theme=theme, no_color=args.no_color)
    run_app(app)


if __name__ == "__main__":
    main()
