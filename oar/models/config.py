"""Configuration models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ConversionRequest(BaseModel):
    """A single conversion, as requested on the command line."""

    input_path: Path
    max_bitrate: int = Field(default=208000, gt=0)  # bps
    max_quality_delta: float = Field(default=0.000001, gt=0)
    output_path: Path = Path("output.ogg")

    model_config = {"frozen": True}

    @property
    def artifact_suffix(self) -> str:
        """Container suffix for the working artifact."""
        return self.output_path.suffix or ".ogg"


class SearchOptions(BaseModel):
    """Tuning knobs for the quality search."""

    max_iterations: int | None = Field(default=None, gt=0)
    clamp: bool = False  # Keep estimates inside the scan bounds
    stall_correction: bool = True  # Illinois rule, exact hits collapse the bracket
    settle_under_target: bool = True  # Re-encode the under-target endpoint if the last probe overshot

    model_config = {"frozen": True}


class Config(BaseSettings):
    """Global configuration from environment or defaults."""

    # FFmpeg settings
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    ffmpeg_timeout: int | None = None  # No timeout unless configured
    ffprobe_timeout: int = 30
    audio_codec: str | None = None  # Let FFmpeg pick from the container

    # Search bounds on the encoder's quality scale
    quality_low: float = 1.0
    quality_high: float = 10.0

    # Inputs at or below this bitrate are rejected
    min_input_bitrate: int = 192000

    # Working directory for the single temporary artifact
    workspace_dir: Path = Path(".oar_tmp")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = {"env_prefix": "OAR_"}
