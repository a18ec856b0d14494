"""FFmpeg command builders for quality-driven encoding."""

from pathlib import Path


def format_quality(quality: float) -> str:
    """Render a quality value for ``-q:a`` without losing precision."""
    return repr(float(quality))


def build_encode_command(
    input_path: Path,
    quality: float,
    output_path: Path,
    ffmpeg_path: str = "ffmpeg",
    codec: str | None = None,
) -> list[str]:
    """
    Build FFmpeg command for a variable-quality audio encode.

    The container (and, without ``codec``, the encoder) follow from the
    output suffix, e.g. ``.ogg`` selects libvorbis.

    Args:
        input_path: Source audio file
        quality: Value for the encoder's ``-q:a`` control
        output_path: Artifact path, overwritten if present
        ffmpeg_path: Path to FFmpeg executable
        codec: Optional explicit audio encoder

    Returns:
        Command as list of strings
    """
    cmd = [
        ffmpeg_path,
        "-y",  # Overwrite output
        "-i", str(input_path),
        "-vn",  # No video / cover art streams
    ]

    if codec:
        cmd.extend(["-c:a", codec])

    cmd.extend(["-q:a", format_quality(quality)])
    cmd.append(str(output_path))

    return cmd


def build_probe_command(
    path: Path,
    ffprobe_path: str = "ffprobe",
) -> list[str]:
    """
    Build FFprobe command reading container-level metadata.
    """
    return [
        ffprobe_path,
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        str(path),
    ]


def build_version_command(ffmpeg_path: str = "ffmpeg") -> list[str]:
    return [ffmpeg_path, "-version"]
