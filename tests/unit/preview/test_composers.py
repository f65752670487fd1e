"""Preview dispatcher tests.

Verifies composer choice, the fixed property order, pending collaborator
requests and fallbacks for every value type.
"""

from __future__ import annotations

import unittest
from datetime import datetime, timezone
from unittest import mock

from lazyjson.document import classify_value
from lazyjson.preview import (
    CHECK,
    READ,
    FilePreview,
    PathCheck,
    PreviewDispatcher,
    cache_key,
    describe_relative,
    format_size,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc).timestamp()


def _compose(value: object, query_cache: dict[str, object] | None = None, **kwargs):
    dispatcher = PreviewDispatcher(now=lambda: NOW, **kwargs)
    return dispatcher.compose("field", value, classify_value(value), {} if query_cache is None else query_cache)


def _keys(preview) -> list[str]:
    return [name for name, _ in preview.properties]


class ComposerChoiceTests(unittest.TestCase):
    def test_property_table_starts_with_path_and_type(self) -> None:
        for value in ({"a": 1}, [1, 2], "plain", 4, None, "#fff", "2024-01-01", "https://x.com", "/tmp/x.txt"):
            preview = _compose(value)
            self.assertEqual(_keys(preview)[:2], ["path", "type"], value)

    def test_default_composer_for_containers(self) -> None:
        preview = _compose({"a": 1, "b": [1, 2]})
        self.assertEqual(preview.composer, "default")
        self.assertEqual(dict(preview.properties)["keys"], "2")
        self.assertEqual(preview.body, ["a: 1", "b: [2 items]"])

    def test_long_container_body_is_capped(self) -> None:
        preview = _compose(list(range(25)))
        self.assertEqual(len(preview.body), 21)
        self.assertEqual(preview.body[-1], "… 5 more")

    def test_url_composer_fields(self) -> None:
        preview = _compose("https://example.com/img/cat.png?size=2")
        self.assertEqual(preview.composer, "url")
        self.assertEqual(
            _keys(preview),
            ["path", "type", "href", "origin", "protocol", "host", "pathname", "query", "extension"],
        )
        props = dict(preview.properties)
        self.assertEqual(props["origin"], "https://example.com")
        self.assertEqual(props["protocol"], "https:")
        self.assertEqual(props["extension"], "png")
        self.assertEqual(preview.open_target, "https://example.com/img/cat.png?size=2")

    def test_color_composer_fields_and_plain_swatch(self) -> None:
        preview = _compose("#ff0000", no_color=True)
        self.assertEqual(preview.composer, "color")
        props = dict(preview.properties)
        self.assertEqual(props["hex"], "#ff0000")
        self.assertEqual(props["rgb"], "rgb(255, 0, 0)")
        self.assertEqual(props["hsl"], "hsl(0, 100%, 50%)")
        self.assertEqual(preview.body, ["swatch #ff0000"])

    def test_date_composer_fields(self) -> None:
        preview = _compose("2024-05-29T00:00:00Z")
        self.assertEqual(preview.composer, "date")
        props = dict(preview.properties)
        self.assertEqual(props["unix"], str(int(datetime(2024, 5, 29, tzinfo=timezone.utc).timestamp())))
        self.assertEqual(props["weekday"], "Wednesday")
        self.assertEqual(preview.body, ["3 days ago"])

    def test_markdown_falls_back_to_raw_text_when_rendering_fails(self) -> None:
        text = "# Title\n\n- one\n- two\n\nsome **bold** text"
        with mock.patch("lazyjson.preview.dispatcher.highlight_markdown", side_effect=RuntimeError("boom")):
            preview = _compose(text)
        self.assertEqual(preview.composer, "markdown")
        self.assertEqual(preview.body, text.splitlines())


class FileComposerTests(unittest.TestCase):
    TARGET = "/data/report.txt"

    def test_missing_check_is_requested(self) -> None:
        preview = _compose(self.TARGET)
        self.assertEqual(preview.composer, "file")
        self.assertEqual([request.key for request in preview.pending], [cache_key(CHECK, self.TARGET)])

    def test_existing_file_requests_content_read(self) -> None:
        cache = {cache_key(CHECK, self.TARGET): PathCheck(exists=True, size=10, modified_time=0.0)}
        preview = _compose(self.TARGET, cache)
        self.assertEqual([request.key for request in preview.pending], [cache_key(READ, self.TARGET)])
        self.assertEqual(dict(preview.properties)["size"], "10 B")

    def test_cached_text_is_rendered_without_new_requests(self) -> None:
        cache = {
            cache_key(CHECK, self.TARGET): PathCheck(exists=True, size=6),
            cache_key(READ, self.TARGET): FilePreview(kind="text", text="hello\nworld", size=11),
        }
        preview = _compose(self.TARGET, cache)
        self.assertEqual(preview.pending, [])
        self.assertEqual(preview.body, ["hello", "world"])

    def test_missing_path_and_directory(self) -> None:
        missing = _compose(self.TARGET, {cache_key(CHECK, self.TARGET): PathCheck.missing()})
        self.assertEqual(missing.body, ["<path does not exist>"])
        self.assertEqual(dict(missing.properties)["exists"], "no")
        directory = _compose(self.TARGET, {cache_key(CHECK, self.TARGET): PathCheck(exists=True, is_directory=True)})
        self.assertEqual(directory.body[0], "<directory>")
        self.assertEqual(directory.pending, [])

    def test_error_and_audio_results(self) -> None:
        check = {cache_key(CHECK, "/a/song.mp3"): PathCheck(exists=True, size=2048)}
        audio = _compose("/a/song.mp3", {**check, cache_key(READ, "/a/song.mp3"): FilePreview(kind="audio", size=2048)})
        self.assertEqual(audio.media_path, "/a/song.mp3")
        failed = _compose(
            "/a/song.mp3",
            {**check, cache_key(READ, "/a/song.mp3"): FilePreview.failure("audio exceeds preview limit")},
        )
        self.assertEqual(failed.body, ["<error: audio exceeds preview limit>"])
        self.assertIsNone(failed.media_path)


class FormattingTests(unittest.TestCase):
    def test_format_size(self) -> None:
        self.assertEqual(format_size(None), "-")
        self.assertEqual(format_size(512), "512 B")
        self.assertEqual(format_size(2048), "2.0 KB")

    def test_describe_relative(self) -> None:
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        self.assertEqual(describe_relative(datetime(2024, 6, 1, 0, 0, 30, tzinfo=timezone.utc), now), "just now")
        self.assertEqual(describe_relative(datetime(2024, 6, 1, 2, tzinfo=timezone.utc), now), "in 2 hours")
        self.assertEqual(describe_relative(datetime(2023, 5, 1, tzinfo=timezone.utc), now), "1 year ago")


if __name__ == "__main__":
    unittest.main()
