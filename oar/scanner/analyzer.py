"""Duration and bitrate measurement using FFprobe."""

import json
import logging
import subprocess
from pathlib import Path

from oar.converter.ffmpeg import build_probe_command
from oar.models.config import Config
from oar.models.search import ProbeResult
from oar.utils.errors import FileAccessError, ProbeError

logger = logging.getLogger(__name__)


def duration_seconds(path: Path, config: Config | None = None) -> float:
    """
    Run FFprobe and read the container's reported duration.

    Args:
        path: Path to audio file
        config: Optional config for FFprobe path and timeout

    Returns:
        Duration in seconds

    Raises:
        ProbeError: If FFprobe fails or reports no usable duration
    """
    ffprobe_path = config.ffprobe_path if config else "ffprobe"
    timeout = config.ffprobe_timeout if config else 30

    cmd = build_probe_command(Path(path), ffprobe_path)

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ProbeError(f"FFprobe timed out for {path}") from e
    except FileNotFoundError as e:
        raise ProbeError(f"FFprobe not found at {ffprobe_path}") from e

    if result.returncode != 0:
        raise ProbeError(f"Error probing file '{path}': {result.stderr.strip()}")

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(f"Invalid FFprobe output for {path}") from e

    raw = (data.get("format") or {}).get("duration")
    if raw is None:
        raise ProbeError(f"No duration reported for {path}")

    try:
        duration = float(raw)
    except (TypeError, ValueError) as e:
        raise ProbeError(f"Malformed duration {raw!r} for {path}") from e

    if not duration > 0:
        raise ProbeError(f"Non-positive duration {duration} for {path}")

    logger.debug("Duration of '%s': %.3f s", path, duration)
    return duration


def bitrate_bps(path: Path, duration_seconds: float) -> float:
    """Average bitrate of ``path`` over ``duration_seconds``."""
    assert duration_seconds > 0, "duration must be positive"

    try:
        size = Path(path).stat().st_size
    except OSError as e:
        raise FileAccessError(f"Error getting file info '{path}'") from e

    return size * 8 / duration_seconds


def probe_file(
    path: Path,
    duration: float | None = None,
    config: Config | None = None,
) -> ProbeResult:
    """
    Measure a file's bitrate, probing its duration unless given.
    """
    if duration is None:
        duration = duration_seconds(path, config)

    return ProbeResult(
        path=Path(path),
        duration_seconds=duration,
        bitrate_bps=bitrate_bps(path, duration),
    )
