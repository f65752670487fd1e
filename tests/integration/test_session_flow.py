"""End-to-end session: main loop, keys, search, frames and the select result."""

from __future__ import annotations

import contextlib
import os
import unittest
from unittest import mock

from lazyjson.render import PLAIN_THEME
from lazyjson.render.ansi import strip_ansi
from lazyjson.runtime.app import ViewerApp
from lazyjson.runtime.loop import run_main_loop

DOCUMENT = {
    "users": [
        {"name": "Ada", "site": "https://ada.dev"},
        {"name": "Linus"},
    ],
    "count": 2,
}


class _FakeTerminal:
    def __init__(self) -> None:
        self.frames: list[str] = []
        self.entered = 0

    def write(self, text: str) -> None:
        self.frames.append(text)

    @contextlib.contextmanager
    def raw_mode(self):
        self.entered += 1
        yield


class _Clock:
    def __init__(self) -> None:
        self.now = 50.0

    def __call__(self) -> float:
        return self.now


class SessionFlowTests(unittest.TestCase):
    def run_session(self, keys: list[str], **kwargs) -> tuple[ViewerApp, _FakeTerminal]:
        clock = _Clock()
        app = ViewerApp(
            DOCUMENT,
            source_name="users.json",
            theme=PLAIN_THEME,
            no_color=True,
            collaborators=mock.Mock(),
            audio_player=mock.Mock(),
            clock=clock,
            start_worker=lambda job, name: job(),
            **kwargs,
        )
        terminal = _FakeTerminal()
        pending = list(keys)

        def fake_read_key(fd, timeout_ms=None):
            clock.now += 0.2
            return pending.pop(0) if pending else "q"

        with mock.patch("lazyjson.runtime.loop.read_key", side_effect=fake_read_key), mock.patch(
            "lazyjson.runtime.loop.shutil.get_terminal_size",
            return_value=os.terminal_size((100, 20)),
        ):
            run_main_loop(app, terminal, stdin_fd=0)
        return app, terminal

    def test_search_then_select_returns_value(self) -> None:
        app, terminal = self.run_session(["/", "l", "i", "n", "", "ENTER", "ENTER"], select_enabled=True)
        self.assertTrue(app.state.result.has_selection)
        self.assertEqual(app.state.result.selected, "Linus")
        self.assertEqual(terminal.entered, 1)
        last_frame = strip_ansi(terminal.frames[-1])
        self.assertIn("users[1].name", last_frame)
        self.assertIn("enter: select", last_frame)

    def test_quit_leaves_empty_result(self) -> None:
        app, terminal = self.run_session(["DOWN", "RIGHT", "q"])
        self.assertFalse(app.state.result.has_selection)
        self.assertTrue(terminal.frames)

    def test_column_walk_and_history(self) -> None:
        app, _ = self.run_session(["2", "RIGHT", "RIGHT", "DOWN", "[", "q"])
        self.assertEqual(app.state.view_mode, "column")
        self.assertEqual(app.state.selection_path, "users[0]")
        self.assertTrue(app.state.can_go_forward)

    def test_frames_fit_terminal(self) -> None:
        _, terminal = self.run_session(["e", "3", "1", "q"])
        for frame in terminal.frames:
            rows = frame.removeprefix("\033[H\033[J").split("\r\n")
            self.assertEqual(len(rows), 20)


if __name__ == "__main__":
    unittest.main()
