"""Command-line front door for lazyjson.

Parses CLI options, loads the JSON document, and either prints one view /
search listing non-interactively or launches the interactive explorer.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .document import DocumentLoadError, build_flat_index, load_document
from .document.loader import STDIN_NAME
from .render import column_panels, format_column_panels, format_tree_row, raw_lines, resolve_theme, tree_rows
from .render.ansi import clip_ansi_line
from .render.screen import format_search_hit
from .render.theme import UITheme, available_theme_names
from .runtime.app import ViewerApp, result_as_json
from .runtime.config import (
    load_default_view,
    load_preview_limits,
    load_raw_indent,
    load_style_name,
    load_theme_name,
    save_default_view,
)
from .runtime.loop import run_viewer
from .runtime.navigation import NavigationController
from .runtime.state import COLUMN, RAW, VIEW_MODES, SessionState
from .search import fuzzy_search

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def configure_logging(log_file: str | None) -> None:
    """Keep the terminal clean: log to ``log_file`` or nowhere."""
    package_logger = logging.getLogger("lazyjson")
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        package_logger.setLevel(logging.DEBUG)
    else:
        handler = logging.NullHandler()
    package_logger.addHandler(handler)


def render_view(
    document: object,
    view: str,
    *,
    path: str | None = None,
    max_cols: int = 80,
    theme: UITheme,
    style: str = "monokai",
    no_color: bool = False,
    raw_indent: int = 2,
) -> str:
    """Render one view of ``document`` as printable text.

    The tree view prints every node; ``path`` only moves the selection. The
    column view prints the panels along the selection's ancestor chain.
    """
    state = SessionState(view_mode=view)
    navigation = NavigationController(document, state)
    navigation.switch_view(view)
    if path is not None and not navigation.navigate(path):
        raise SystemExit(f"no such path: {path}")

    if view == RAW:
        lines = raw_lines(document, raw_indent, style, no_color)
    elif view == COLUMN:
        panels = column_panels(document, state)
        height = max([len(panel.rows) for panel in panels] + [1])
        lines = format_column_panels(panels, max_cols, height, theme)
    else:
        navigation.expand_all()
        lines = [format_tree_row(row, theme) for row in tree_rows(document, state)]

    out: list[str] = []
    for line in lines:
        row = clip_ansi_line(line, max_cols)
        out.append(row)
        if "\033" in row:
            out.append("\033[0m")
        out.append("\n")
    return "".join(out)


def render_search(document: object, query: str, *, max_cols: int = 80, theme: UITheme) -> str:
    """Print ranked search hits, best first, one per line."""
    out: list[str] = []
    for hit in fuzzy_search(query, build_flat_index(document)):
        row = clip_ansi_line(format_search_hit(hit, query, theme), max_cols)
        out.append(row)
        if "\033" in row:
            out.append("\033[0m")
        out.append("\n")
    return "".join(out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyjson",
        description="Explore a JSON document in the terminal: tree, column and raw views with previews.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="JSON file, or '-' for stdin. Defaults to stdin when it is not a terminal.",
    )
    parser.add_argument("--view", choices=VIEW_MODES, default=None, help="Initial view (default from config).")
    parser.add_argument("--path", dest="select_path", metavar="PATH", default=None, help="Initial selection, e.g. $.users[0].name.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for raw view and markdown.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "--select",
        action="store_true",
        help="Enter selects a value, ends the session and prints it as JSON.",
    )
    parser.add_argument("--render", choices=VIEW_MODES, default=None, help="Print one view and exit.")
    parser.add_argument("--search", metavar="QUERY", default=None, help="Print ranked search hits and exit.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render/--search output (default: terminal width).",
    )
    parser.add_argument("--log-file", default=None, help="Write debug logs to this file.")
    parser.add_argument("--save-view", action="store_true", help="Persist --view as the default view.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run lazyjson."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file)

    if args.save_view:
        if args.view is None:
            parser.error("--save-view requires --view")
        save_default_view(args.view)

    if args.render is not None and args.search is not None:
        raise SystemExit("Cannot combine --render with --search.")

    source = args.path
    if source is None:
        if sys.stdin.isatty():
            parser.error("no input: pass a JSON file or pipe one on stdin")
        source = STDIN_NAME
    try:
        document = load_document(source if source == STDIN_NAME else Path(source))
    except DocumentLoadError as exc:
        logger.debug("load failed for %s: %s", source, exc)
        raise SystemExit(str(exc)) from exc

    style = args.style or load_style_name()
    theme = resolve_theme(args.theme or load_theme_name(), no_color=args.no_color)
    raw_indent = load_raw_indent()
    max_cols = args.max_cols if args.max_cols is not None else _default_render_width()

    if args.render is not None:
        sys.stdout.write(
            render_view(
                document,
                args.render,
                path=args.select_path,
                max_cols=max_cols,
                theme=theme,
                style=style,
                no_color=args.no_color,
                raw_indent=raw_indent,
            )
        )
        return
    if args.search is not None:
        sys.stdout.write(render_search(document, args.search, max_cols=max_cols, theme=theme))
        return

    app = ViewerApp(
        document,
        source_name="<stdin>" if source == STDIN_NAME else str(source),
        view_mode=args.view or load_default_view(),
        initial_path=args.select_path,
        theme=theme,
        style=style,
        no_color=args.no_color,
        raw_indent=raw_indent,
        select_enabled=args.select,
        limits=load_preview_limits(),
    )
    result = run_viewer(app)
    if args.select and result.has_selection:
        sys.stdout.write(result_as_json(result) + "\n")


if __name__ == "__main__":
    main()
