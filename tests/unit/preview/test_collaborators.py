from __future__ import annotations

import struct
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyjson.preview import FilePreview, LocalCollaborators, copy_text_with_fallback, read_file_preview
from lazyjson.preview.collaborators import TRUNCATION_MARKER, image_dimensions


def _png_header(width: int, height: int) -> bytes:
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + struct.pack(">II", width, height) + b"\x08\x06\x00\x00\x00"


class ReadFilePreviewTests(unittest.TestCase):
    def test_text_is_truncated_with_marker(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "notes.txt"
            target.write_text("abcdefghij", encoding="utf-8")
            preview = read_file_preview(target, max_text_bytes=4, max_media_bytes=100)
        self.assertEqual(preview.kind, "text")
        self.assertTrue(preview.truncated)
        self.assertEqual(preview.text, "abcd\n" + TRUNCATION_MARKER)

    def test_binary_content_is_unknown(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "blob.bin"
            target.write_bytes(b"\x00\x01\x02")
            preview = read_file_preview(target, 100, 100)
        self.assertEqual(preview.kind, "unknown")
        self.assertEqual(preview.size, 3)

    def test_oversized_media_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "big.png"
            target.write_bytes(_png_header(1, 1) + b"\x00" * 200)
            preview = read_file_preview(target, 100, 50)
        self.assertEqual(preview.kind, "error")
        self.assertIn("exceeds preview limit", preview.error)

    def test_image_dimensions_are_read_from_header(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "pic.png"
            target.write_bytes(_png_header(640, 480))
            preview = read_file_preview(target, 100, 10_000)
        self.assertEqual((preview.kind, preview.image_format, preview.width, preview.height), ("image", "png", 640, 480))

    def test_gif_header_dimensions(self) -> None:
        self.assertEqual(image_dimensions(b"GIF89a" + struct.pack("<HH", 16, 9)), ("gif", 16, 9))
        self.assertIsNone(image_dimensions(b"plain text"))

    def test_missing_file_is_an_error_preview(self) -> None:
        preview = read_file_preview(Path("/nonexistent/dir/file.txt"), 10, 10)
        self.assertEqual(preview.kind, "error")


class LocalCollaboratorsTests(unittest.TestCase):
    def test_check_path_reports_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.txt"
            target.write_text("12345", encoding="utf-8")
            collaborators = LocalCollaborators(save_directory=Path(tmp))
            check = collaborators.check_path(str(target))
            self.assertTrue(check.exists)
            self.assertFalse(check.is_directory)
            self.assertEqual(check.size, 5)
            self.assertTrue(collaborators.check_path(tmp).is_directory)
            self.assertFalse(collaborators.check_path(str(Path(tmp) / "nope")).exists)

    def test_save_file_never_overwrites(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            collaborators = LocalCollaborators(save_directory=Path(tmp))
            first = collaborators.save_file("one", "value.json")
            second = collaborators.save_file("two", "value.json")
            self.assertNotEqual(first, second)
            self.assertEqual(Path(first).read_text(encoding="utf-8"), "one")
            self.assertEqual(Path(second).name, "value-1.json")


class CopyFallbackTests(unittest.TestCase):
    def test_clipboard_success(self) -> None:
        collaborators = mock.Mock()
        collaborators.copy_to_clipboard.return_value = True
        self.assertEqual(copy_text_with_fallback(collaborators, "x", "x.txt"), "copied to clipboard")
        collaborators.save_file.assert_not_called()

    def test_clipboard_failure_saves_file(self) -> None:
        collaborators = mock.Mock()
        collaborators.copy_to_clipboard.side_effect = OSError("no display")
        collaborators.save_file.return_value = "/tmp/x.txt"
        self.assertEqual(copy_text_with_fallback(collaborators, "x", "x.txt"), "clipboard unavailable; saved to /tmp/x.txt")

    def test_both_paths_failing_is_reported(self) -> None:
        collaborators = mock.Mock()
        collaborators.copy_to_clipboard.return_value = False
        collaborators.save_file.return_value = None
        self.assertEqual(copy_text_with_fallback(collaborators, "x", "x.txt"), "clipboard unavailable and save failed")


if __name__ == "__main__":
    unittest.main()
