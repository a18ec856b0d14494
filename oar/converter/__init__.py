"""Audio encoding module."""

from oar.converter.encoder import FfmpegEncoder, check_ffmpeg
from oar.converter.ffmpeg import build_encode_command, build_probe_command
from oar.converter.workspace import Workspace

__all__ = [
    "build_encode_command",
    "build_probe_command",
    "check_ffmpeg",
    "FfmpegEncoder",
    "Workspace",
]
