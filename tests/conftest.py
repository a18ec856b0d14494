"""Shared fixtures: a stand-in for the FFmpeg and FFprobe executables."""

import json
import logging
import subprocess
from pathlib import Path
from typing import Callable

import pytest


class FakeFFmpeg:
    """
    Replacement for ``subprocess.run`` answering FFmpeg/FFprobe commands.

    Encodes write a file whose size gives ``curve(quality)`` bps over
    ``duration`` seconds. Probes report ``duration`` for any existing file.
    """

    def __init__(
        self,
        curve: Callable[[float], float],
        duration: float = 10.0,
        fail_on_encode: int | None = None,
    ):
        self.curve = curve
        self.duration = duration
        self.fail_on_encode = fail_on_encode
        self.qualities: list[float] = []
        self.commands: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(list(cmd))
        tool = Path(cmd[0]).name

        if cmd[1:] == ["-version"]:
            return subprocess.CompletedProcess(cmd, 0, stdout=b"ffmpeg version fake", stderr=b"")

        if tool == "ffprobe":
            path = Path(cmd[-1])
            if not path.exists():
                return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="No such file")
            payload = {"format": {"filename": str(path), "duration": f"{self.duration:.6f}"}}
            return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(payload), stderr="")

        quality = float(cmd[cmd.index("-q:a") + 1])
        self.qualities.append(quality)
        if self.fail_on_encode is not None and len(self.qualities) >= self.fail_on_encode:
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="Encoder exploded")

        size = int(self.curve(quality) * self.duration / 8)
        Path(cmd[-1]).write_bytes(b"\0" * size)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


def concave_curve(quality: float) -> float:
    """Vorbis-like: bitrate rises with quality, flattening out."""
    return 400000 * (max(quality, 0.0) / 10) ** 0.5


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI attached to the package logger."""
    yield
    logger = logging.getLogger("oar")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def write_audio(tmp_path):
    """Create an input file with a given bitrate over 10 seconds."""

    def _write(bitrate: float, name: str = "input.flac", duration: float = 10.0) -> Path:
        path = tmp_path / name
        path.write_bytes(b"\0" * int(bitrate * duration / 8))
        return path

    return _write


@pytest.fixture
def install_ffmpeg(monkeypatch):
    """Install a FakeFFmpeg built from the given arguments."""

    def _install(curve: Callable[[float], float] = concave_curve, **kwargs) -> FakeFFmpeg:
        fake = FakeFFmpeg(curve, **kwargs)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake

    return _install


@pytest.fixture
def fake_ffmpeg(install_ffmpeg):
    """FakeFFmpeg with a vorbis-like curve."""
    return install_ffmpeg()
