from __future__ import annotations

import unittest
from unittest import mock

from lazyjson.preview import AudioPlayer


class _FakeProcess:
    def __init__(self) -> None:
        self.terminated = False

    def poll(self):
        return 0 if self.terminated else None

    def terminate(self) -> None:
        self.terminated = True

    def wait(self, timeout=None) -> int:
        return 0


class AudioPlayerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.processes: list[_FakeProcess] = []

        def popen(args, **kwargs):
            process = _FakeProcess()
            self.processes.append(process)
            return process

        self.popen = mock.Mock(side_effect=popen)
        self.player = AudioPlayer(player_command=("play",), popen=self.popen)

    def test_starting_new_audio_stops_previous(self) -> None:
        self.assertTrue(self.player.play("/a.mp3"))
        self.assertTrue(self.player.play("/b.mp3"))
        self.assertTrue(self.processes[0].terminated)
        self.assertFalse(self.processes[1].terminated)
        self.assertEqual(self.player.playing_path, "/b.mp3")
        self.assertEqual(self.popen.call_args.args[0], ["play", "/b.mp3"])

    def test_toggle_stops_the_playing_file(self) -> None:
        self.assertTrue(self.player.toggle("/a.mp3"))
        self.assertFalse(self.player.toggle("/a.mp3"))
        self.assertFalse(self.player.playing)

    def test_unavailable_player_never_spawns(self) -> None:
        with mock.patch("lazyjson.preview.audio.find_player_command", return_value=None):
            player = AudioPlayer(popen=self.popen)
        self.assertFalse(player.available)
        self.assertFalse(player.play("/a.mp3"))
        self.popen.assert_not_called()


if __name__ == "__main__":
    unittest.main()
