"""CLI entrypoint tests.

Covers non-interactive rendering, search listing, input errors, config
persistence and the select-and-print session result.
"""

from __future__ import annotations

import io
import json
import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyjson import cli
from lazyjson.render.ansi import strip_ansi
from lazyjson.runtime.state import SessionResult

DOCUMENT = {"a": {"b": 1, "c": [True, None]}, "site": "https://example.com/x.png"}


class _CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.config_path = self.root / "config" / "config.json"
        patcher = mock.patch("lazyjson.runtime.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)
        self.document_path = self.root / "doc.json"
        self.document_path.write_text(json.dumps(DOCUMENT), encoding="utf-8")

    def run_cli(self, *argv: str) -> str:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            cli.main(list(argv))
        return stdout.getvalue()


class RenderOutputTests(_CliTestCase):
    def test_render_tree_prints_every_node(self) -> None:
        output = self.run_cli(str(self.document_path), "--render", "tree", "--no-color", "--max-cols", "60")
        lines = [strip_ansi(line) for line in output.splitlines()]
        self.assertEqual(len(lines), 7)
        self.assertEqual(lines[0], "▾ $ {2 keys}")
        self.assertIn("│ │ │   [0] true", lines)

    def test_render_raw_prints_serialized_document(self) -> None:
        output = self.run_cli(str(self.document_path), "--render", "raw", "--no-color", "--max-cols", "200")
        self.assertEqual(json.loads(output), DOCUMENT)

    def test_render_column_follows_path(self) -> None:
        output = self.run_cli(
            str(self.document_path), "--render", "column", "--path", "$.a.c[0]", "--no-color", "--max-cols", "90"
        )
        first = strip_ansi(output.splitlines()[0])
        self.assertIn("[0] true", first)

    def test_render_with_unknown_path_fails(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli(str(self.document_path), "--render", "tree", "--path", "nope")
        self.assertIn("no such path", str(ctx.exception))

    def test_search_lists_ranked_hits(self) -> None:
        output = self.run_cli(str(self.document_path), "--search", "example", "--no-color")
        lines = [strip_ansi(line) for line in output.splitlines()]
        self.assertEqual(lines, ["site https://example.com/x.png"])


class InputErrorTests(_CliTestCase):
    def test_missing_file_exits_with_message(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli(str(self.root / "missing.json"), "--render", "raw")
        self.assertIn("Path not found", str(ctx.exception))

    def test_invalid_json_exits_with_position(self) -> None:
        broken = self.root / "broken.json"
        broken.write_text('{"a": [1, }', encoding="utf-8")
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli(str(broken), "--render", "raw")
        self.assertIn("invalid JSON", str(ctx.exception))

    def test_stdin_document(self) -> None:
        with mock.patch("sys.stdin", io.StringIO('{"k": "v"}')):
            output = self.run_cli("-", "--render", "raw", "--no-color", "--max-cols", "200")
        self.assertEqual(json.loads(output), {"k": "v"})

    def test_render_and_search_are_exclusive(self) -> None:
        with self.assertRaises(SystemExit):
            self.run_cli(str(self.document_path), "--render", "raw", "--search", "x")


class SessionTests(_CliTestCase):
    def test_select_prints_returned_value(self) -> None:
        result = SessionResult(selected={"b": 1}, has_selection=True)
        with mock.patch("lazyjson.cli.run_viewer", return_value=result) as run_viewer:
            output = self.run_cli(str(self.document_path), "--select", "--path", "a", "--view", "column")
        app = run_viewer.call_args.args[0]
        self.assertTrue(app.select_enabled)
        self.assertEqual(app.state.view_mode, "column")
        self.assertEqual(app.state.selection_path, "a")
        self.assertEqual(json.loads(output), {"b": 1})

    def test_piped_stdout_only_receives_the_selection(self) -> None:
        tty_fd = 97
        real_open, real_close = os.open, os.close
        opened: list[tuple[str, int]] = []

        def fake_open(path, flags, *args):
            if path == "/dev/tty":
                opened.append((path, flags))
                return tty_fd
            return real_open(path, flags, *args)

        def fake_close(fd):
            if fd != tty_fd:
                real_close(fd)

        keyboard = mock.Mock()
        keyboard.isatty.return_value = True
        keyboard.fileno.return_value = 0
        result = SessionResult(selected=[True, None], has_selection=True)
        with (
            mock.patch("sys.stdin", keyboard),
            mock.patch("lazyjson.runtime.loop.os.open", side_effect=fake_open),
            mock.patch("lazyjson.runtime.loop.os.close", side_effect=fake_close),
            mock.patch("lazyjson.runtime.loop.TerminalController") as terminal_cls,
            mock.patch("lazyjson.runtime.loop.run_main_loop", return_value=result),
        ):
            output = self.run_cli(str(self.document_path), "--select", "--path", "a.c")
        self.assertEqual(opened, [("/dev/tty", os.O_WRONLY)])
        terminal_cls.assert_called_once_with(0, tty_fd)
        self.assertEqual(json.loads(output), [True, None])

    def test_no_output_without_selection(self) -> None:
        with mock.patch("lazyjson.cli.run_viewer", return_value=SessionResult()):
            output = self.run_cli(str(self.document_path), "--select")
        self.assertEqual(output, "")

    def test_default_view_comes_from_config_and_save_view_persists(self) -> None:
        with mock.patch("lazyjson.cli.run_viewer", return_value=SessionResult()):
            self.run_cli(str(self.document_path), "--view", "raw", "--save-view")
        self.assertEqual(json.loads(self.config_path.read_text(encoding="utf-8"))["default_view"], "raw")
        with mock.patch("lazyjson.cli.run_viewer", return_value=SessionResult()) as run_viewer:
            self.run_cli(str(self.document_path))
        self.assertEqual(run_viewer.call_args.args[0].state.view_mode, "raw")


class LoggingTests(unittest.TestCase):
    def test_log_file_receives_debug_records(self) -> None:
        package_logger = logging.getLogger("lazyjson")
        before = list(package_logger.handlers)
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "lazyjson.log"
            cli.configure_logging(str(log_path))
            try:
                logging.getLogger("lazyjson.test").debug("hello log")
            finally:
                for handler in package_logger.handlers[len(before):]:
                    handler.close()
                    package_logger.removeHandler(handler)
                package_logger.setLevel(logging.NOTSET)
            self.assertIn("hello log", log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
