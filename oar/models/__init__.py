"""Data models for oar."""

from oar.models.config import Config, ConversionRequest, SearchOptions
from oar.models.search import (
    ConversionOutcome,
    ProbeResult,
    QualityPoint,
    SearchResult,
    SearchState,
)

__all__ = [
    "Config",
    "ConversionRequest",
    "SearchOptions",
    "ConversionOutcome",
    "ProbeResult",
    "QualityPoint",
    "SearchResult",
    "SearchState",
]
