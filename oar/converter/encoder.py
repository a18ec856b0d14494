"""Quality-driven encoding into the working artifact."""

import logging
import subprocess
from pathlib import Path

from oar.converter.ffmpeg import build_encode_command, build_version_command
from oar.models.config import Config
from oar.utils.errors import EncodeError

logger = logging.getLogger(__name__)


def check_ffmpeg(config: Config | None = None) -> bool:
    """Check if FFmpeg is available."""
    ffmpeg_path = config.ffmpeg_path if config else "ffmpeg"
    try:
        result = subprocess.run(
            build_version_command(ffmpeg_path),
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (OSError, subprocess.SubprocessError):
        return False


class FfmpegEncoder:
    """
    Encodes an input at a given quality into one fixed artifact path.

    Every call overwrites the previous artifact, so at most one encode
    exists on disk at a time.
    """

    def __init__(self, artifact_path: Path, config: Config | None = None):
        self.artifact_path = Path(artifact_path)
        self.config = config or Config()
        self.encode_count = 0

    def __call__(self, input_path: Path, quality: float) -> Path:
        return self.encode(input_path, quality)

    def encode(self, input_path: Path, quality: float) -> Path:
        """
        Run FFmpeg at ``quality``.

        Returns:
            Path of the written artifact

        Raises:
            EncodeError: If FFmpeg is missing, fails, or times out
        """
        cmd = build_encode_command(
            input_path,
            quality,
            self.artifact_path,
            ffmpeg_path=self.config.ffmpeg_path,
            codec=self.config.audio_codec,
        )
        timeout = self.config.ffmpeg_timeout

        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise EncodeError(
                f"FFmpeg timed out after {timeout} seconds converting '{input_path}'"
            ) from e
        except FileNotFoundError as e:
            raise EncodeError(f"FFmpeg not found at {self.config.ffmpeg_path}") from e

        if result.returncode != 0:
            raise EncodeError(
                f"Error converting input file '{input_path}': {result.stderr[-500:]}"
            )

        self.encode_count += 1
        return self.artifact_path
