"""Single-slot audio playback for audio previews.

Starting a new preview stops the previous one; the player process is
terminated, so the next play starts from the beginning.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable

logger = logging.getLogger(__name__)

_PLAYER_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("afplay",),
    ("ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"),
    ("paplay",),
    ("aplay", "-q"),
)


def find_player_command() -> tuple[str, ...] | None:
    for command in _PLAYER_COMMANDS:
        if shutil.which(command[0]) is not None:
            return command
    return None


class AudioPlayer:
    """Own at most one playing audio process."""

    def __init__(
        self,
        player_command: tuple[str, ...] | None = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ) -> None:
        self._command = player_command if player_command is not None else find_player_command()
        self._popen = popen
        self._process: subprocess.Popen | None = None
        self.playing_path: str | None = None

    @property
    def available(self) -> bool:
        return self._command is not None

    @property
    def playing(self) -> bool:
        if self._process is None:
            return False
        if self._process.poll() is not None:
            self._process = None
            self.playing_path = None
            return False
        return True

    def stop(self) -> None:
        process = self._process
        self._process = None
        self.playing_path = None
        if process is None:
            return
        try:
            process.terminate()
            process.wait(timeout=1)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("audio player did not stop cleanly: %s", exc)

    def play(self, path: str) -> bool:
        """Stop anything playing and start ``path`` from the beginning."""
        self.stop()
        if self._command is None:
            return False
        try:
            self._process = self._popen(
                [*self._command, path],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.warning("could not start audio player: %s", exc)
            return False
        self.playing_path = path
        return True

    def toggle(self, path: str) -> bool:
        """Play ``path`` or stop it if it is the one playing; returns playing state."""
        if self.playing and self.playing_path == path:
            self.stop()
            return False
        return self.play(path)
