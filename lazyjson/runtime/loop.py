"""Main interactive event loop and viewer entrypoint.

The loop is wiring only: poll the app, repaint when dirty, read one key with a
timeout short enough to honor the search debounce and pending queries.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import sys

from ..render import render_frame
from .app import ViewerApp
from .keys import read_key
from .state import SessionResult
from .terminal import TerminalController

logger = logging.getLogger(__name__)

CHROME_ROWS = 2


def run_main_loop(app: ViewerApp, terminal: TerminalController, stdin_fd: int) -> SessionResult:
    """Run until the app requests quit; returns the session result."""
    last_size: tuple[int, int] | None = None
    try:
        with terminal.raw_mode():
            while True:
                term = shutil.get_terminal_size((80, 24))
                size = (term.columns, term.lines)
                if size != last_size:
                    last_size = size
                    app.state.dirty = True
                app.poll()
                app.sync_scroll(max(1, term.lines - CHROME_ROWS))
                if app.state.dirty:
                    terminal.write(render_frame(app.build_render_context(term.columns, term.lines)))
                    app.state.dirty = False
                key = read_key(stdin_fd, timeout_ms=app.next_poll_timeout_ms())
                if app.handle_key(key):
                    break
    finally:
        app.shutdown()
    return app.state.result


@contextlib.contextmanager
def _keyboard_fd():
    """Yield a readable tty fd; reopens the controlling tty when stdin is piped."""
    if sys.stdin.isatty():
        yield sys.stdin.fileno()
        return
    fd = os.open("/dev/tty", os.O_RDONLY)
    try:
        yield fd
    finally:
        os.close(fd)


@contextlib.contextmanager
def _display_fd():
    """Yield a writable tty fd; stdout stays free for the result when piped."""
    if sys.stdout.isatty():
        yield sys.stdout.fileno()
        return
    fd = os.open("/dev/tty", os.O_WRONLY)
    try:
        yield fd
    finally:
        os.close(fd)


def run_viewer(app: ViewerApp) -> SessionResult:
    """Drive ``app`` on the controlling terminal."""
    with _keyboard_fd() as stdin_fd, _display_fd() as stdout_fd:
        terminal = TerminalController(stdin_fd, stdout_fd)
        logger.debug("starting interactive session for %s", app.source_name or "<document>")
        return run_main_loop(app, terminal, stdin_fd)
