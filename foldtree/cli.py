"""Command-line front door for foldtree.

Parses CLI options, builds a tree view for the target directory, applies
requested folds, and prints the visible document.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import STRATEGIES, load_tree_view_config
from .errors import FoldtreeError
from .log import setup_logging
from .runtime.view import RebuildStatus, TreeView
from .tree_text.display import format_document
from .ui_theme import available_theme_names, resolve_theme

DEFAULT_BUILD_TIMEOUT_SECONDS = 60.0


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print a directory as a foldable, indentation-coded tree."
    )
    parser.add_argument("path", nargs="?", default=None, help="Root directory. Defaults to current directory.")
    parser.add_argument("--strategy", choices=STRATEGIES, default=None, help="Collection strategy.")
    parser.add_argument("--exclude", default=None, help="Regex matched against entry base names to skip.")
    parser.add_argument("--no-compress", action="store_true", help="Keep single-child directory chains expanded.")
    parser.add_argument(
        "--fold",
        action="append",
        default=[],
        metavar="PATH",
        help="Collapse PATH (relative to the root or absolute). Repeatable.",
    )
    parser.add_argument("--navigate", metavar="PATH", help="Report the row PATH resolves to.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=DEFAULT_BUILD_TIMEOUT_SECONDS,
        help="Seconds to wait for asynchronous collection.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    return parser


def run(argv: list[str] | None = None, default_path: Path | None = None) -> int:
    """Run the CLI and return a process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    if default_path is None:
        default_path = Path.cwd()
    root = Path(args.path or default_path)
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")

    try:
        config = load_tree_view_config().with_overrides(
            strategy=args.strategy,
            exclude_pattern=args.exclude,
            compress=False if args.no_compress else None,
        )
    except FoldtreeError as exc:
        raise SystemExit(str(exc)) from exc

    view = TreeView(config)
    outcomes = []
    status = view.rebuild(root, on_done=outcomes.append)
    if status is RebuildStatus.STARTED and not view.wait(timeout=args.timeout):
        view.close()
        raise SystemExit(f"Timed out collecting {root}")

    theme = resolve_theme(args.theme or config.theme, no_color=args.no_color or not sys.stdout.isatty())
    outcome = outcomes[-1] if outcomes else None
    if outcome is None or outcome.status is RebuildStatus.FAILED:
        error = outcome.error if outcome is not None else "no result"
        sys.stderr.write(f"{theme.status_error}collection failed:{theme.reset} {error}\n")
        return 1

    for fold_path in args.fold:
        if not view.fold(fold_path):
            sys.stderr.write(f"nothing to fold at {fold_path}\n")

    assert view.document is not None
    sys.stdout.write(
        format_document(
            view.document.title,
            view.visible_lines(),
            indent=view.document.indent,
            theme=theme,
        )
    )

    if args.navigate:
        result = view.navigate_to(args.navigate)
        if result is None:
            sys.stdout.write(f"{args.navigate}: not found\n")
            return 2
        kind = "exact" if result.exact else "closest"
        sys.stdout.write(f"{args.navigate}: row {result.line + 1} ({kind}) {view.resolve_path()}\n")
    return 0


def main(default_path: Path | None = None) -> None:
    """Console-script entry point."""
    raise SystemExit(run(default_path=default_path))


if __name__ == "__main__":
    main()
