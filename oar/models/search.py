"""Probe and quality search models."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field


class ProbeResult(BaseModel):
    """Measured bitrate of one file on disk."""

    path: Path
    duration_seconds: float
    bitrate_bps: float

    model_config = {"frozen": True}


class QualityPoint(BaseModel):
    """Bitrate observed for an encode at a given quality."""

    quality: float
    bitrate: float  # bps, as measured

    model_config = {"frozen": True}


@dataclass
class SearchState:
    """
    Evolving bracket of the quality search.

    ``low_fit`` and ``high_fit`` are the bitrates the next line is fitted
    through. They equal the measured bitrates unless stall correction has
    pulled a retained endpoint towards the target.
    """

    low: QualityPoint
    high: QualityPoint
    low_fit: float
    high_fit: float
    rising: bool = True  # Bitrate grows with the quality number
    estimate: QualityPoint | None = None
    iterations: int = 0
    last_replaced: str | None = None  # "low" | "high"

    @classmethod
    def from_endpoints(cls, low: QualityPoint, high: QualityPoint) -> "SearchState":
        return cls(
            low=low,
            high=high,
            low_fit=low.bitrate,
            high_fit=high.bitrate,
            rising=high.bitrate >= low.bitrate,
        )

    @property
    def width(self) -> float:
        return self.high.quality - self.low.quality


class SearchResult(BaseModel):
    """Outcome of a converged quality search."""

    quality: float
    bitrate: float
    artifact_path: Path
    bracket_low: QualityPoint
    bracket_high: QualityPoint
    iterations: int = 0
    settled: bool = False  # Final artifact re-encoded at the under-target endpoint
    probes: list[QualityPoint] = Field(default_factory=list)

    @property
    def bracket_width(self) -> float:
        return self.bracket_high.quality - self.bracket_low.quality


class ConversionOutcome(BaseModel):
    """Result of a full conversion run."""

    input: ProbeResult
    search: SearchResult
    output_path: Path
    target_bitrate: int
