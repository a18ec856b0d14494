"""Secant-method search for the quality that meets a target bitrate."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

from oar.models.config import SearchOptions
from oar.models.search import QualityPoint, SearchResult, SearchState
from oar.scanner.analyzer import bitrate_bps
from oar.utils.errors import ConfigError, SearchError

logger = logging.getLogger(__name__)

Encode = Callable[[Path, float], Path]
Measure = Callable[[Path, float], float]


@dataclass
class SearchEvent:
    """Base event for search progress."""

    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ProbeEvent(SearchEvent):
    """Event after each encode-and-measure probe."""

    phase: str = ""  # "low" | "high" | "estimate" | "settle"
    iteration: int = 0
    point: QualityPoint | None = None
    bracket_width: float | None = None


@dataclass
class SearchCompletedEvent(SearchEvent):
    """Event when the search has converged."""

    result: SearchResult | None = None


def estimate_quality(
    quality_low: float,
    bitrate_low: float,
    quality_high: float,
    bitrate_high: float,
    target_bitrate: float,
) -> float:
    """
    Quality where the line through both bracket points meets the target.

    The line maps bitrate to quality: ``q = m * bitrate + b``. The result
    may lie outside the bracket.

    Raises:
        SearchError: If both points have the same bitrate
    """
    if bitrate_high == bitrate_low:
        raise SearchError(
            f"Qualities {quality_low} and {quality_high} both measure "
            f"{bitrate_low:.0f} bps; cannot fit a line"
        )

    slope = (quality_high - quality_low) / (bitrate_high - bitrate_low)
    intercept = quality_low - slope * bitrate_low
    return slope * target_bitrate + intercept


class QualitySearch:
    """
    False-position search over the encoder's quality scale.

    Each probe encodes the input at one quality into the shared artifact and
    measures the artifact's bitrate. The bracket narrows until its width on
    the quality axis is within ``max_quality_delta``.
    """

    def __init__(
        self,
        encode: Encode,
        duration_seconds: float,
        target_bitrate: float,
        max_quality_delta: float,
        quality_low: float = 1.0,
        quality_high: float = 10.0,
        options: SearchOptions | None = None,
        measure: Measure = bitrate_bps,
        event_callback: Callable[[SearchEvent], None] | None = None,
    ):
        if target_bitrate <= 0:
            raise ConfigError(f"Target bitrate must be positive, got {target_bitrate}")
        if max_quality_delta <= 0:
            raise ConfigError(
                f"Quality tolerance must be positive, got {max_quality_delta}"
            )
        if duration_seconds <= 0:
            raise ConfigError(f"Duration must be positive, got {duration_seconds}")
        if quality_low >= quality_high:
            raise ConfigError(
                f"Quality bounds must satisfy low < high, got {quality_low} >= {quality_high}"
            )

        self.encode = encode
        self.measure = measure
        self.duration_seconds = duration_seconds
        self.target_bitrate = float(target_bitrate)
        self.max_quality_delta = max_quality_delta
        self.quality_low = quality_low
        self.quality_high = quality_high
        self.options = options or SearchOptions()
        self.event_callback = event_callback

        self._artifact: Path | None = None
        self._probes: list[QualityPoint] = []

    def emit(self, event: SearchEvent) -> None:
        """Emit event to callback if registered."""
        if self.event_callback:
            self.event_callback(event)

    def run(self, input_path: Path) -> SearchResult:
        """
        Search for the quality meeting the target bitrate.

        Any encode or measure failure propagates immediately.

        Returns:
            SearchResult describing the artifact left by the last encode
        """
        self._artifact = None
        self._probes = []

        low = self._probe(input_path, self.quality_low)
        self.emit(ProbeEvent(phase="low", point=low))
        high = self._probe(input_path, self.quality_high)
        self.emit(ProbeEvent(phase="high", point=high))

        state = SearchState.from_endpoints(low, high)
        if not self._straddles(state):
            logger.warning(
                "Target %.0f bps lies outside [%.0f, %.0f] bps measured at the "
                "scan bounds; the estimate will be extrapolated",
                self.target_bitrate,
                min(low.bitrate, high.bitrate),
                max(low.bitrate, high.bitrate),
            )

        while state.width > self.max_quality_delta:
            max_iterations = self.options.max_iterations
            if max_iterations is not None and state.iterations >= max_iterations:
                raise SearchError(
                    f"No convergence after {max_iterations} iterations; "
                    f"bracket [{state.low.quality}, {state.high.quality}]"
                )

            quality = estimate_quality(
                state.low.quality,
                state.low_fit,
                state.high.quality,
                state.high_fit,
                self.target_bitrate,
            )
            if self.options.clamp:
                quality = min(max(quality, self.quality_low), self.quality_high)

            point = self._probe(input_path, quality)
            state.iterations += 1
            state.estimate = point
            logger.info(
                "Bitrate at quality '%f': %.1f kbps",
                point.quality,
                point.bitrate / 1000,
            )

            self._narrow(state, point)
            self.emit(ProbeEvent(
                phase="estimate",
                iteration=state.iterations,
                point=point,
                bracket_width=state.width,
            ))

        result = self._finish(input_path, state)
        self.emit(SearchCompletedEvent(result=result))
        return result

    def _probe(self, input_path: Path, quality: float) -> QualityPoint:
        artifact = self.encode(input_path, quality)
        bitrate = self.measure(artifact, self.duration_seconds)

        self._artifact = artifact
        point = QualityPoint(quality=quality, bitrate=bitrate)
        self._probes.append(point)
        return point

    def _straddles(self, state: SearchState) -> bool:
        low, high = state.low.bitrate, state.high.bitrate
        return min(low, high) <= self.target_bitrate <= max(low, high)

    def _narrow(self, state: SearchState, point: QualityPoint) -> None:
        """Replace one bracket endpoint with the new estimate."""
        overshoot = point.bitrate > self.target_bitrate

        if not self.options.stall_correction:
            # Unmodified false position: assumes bitrate rises with quality
            if overshoot:
                state.high, state.high_fit = point, point.bitrate
            else:
                state.low, state.low_fit = point, point.bitrate
            return

        if point.bitrate == self.target_bitrate:
            state.low = state.high = point
            state.low_fit = state.high_fit = point.bitrate
            state.last_replaced = None
            return

        replace_high = overshoot if state.rising else not overshoot
        if replace_high:
            state.high, state.high_fit = point, point.bitrate
            if state.last_replaced == "high":
                state.low_fit = self._halve_towards_target(state.low_fit)
            state.last_replaced = "high"
        else:
            state.low, state.low_fit = point, point.bitrate
            if state.last_replaced == "low":
                state.high_fit = self._halve_towards_target(state.high_fit)
            state.last_replaced = "low"

    def _halve_towards_target(self, bitrate: float) -> float:
        return self.target_bitrate + (bitrate - self.target_bitrate) / 2

    def _finish(self, input_path: Path, state: SearchState) -> SearchResult:
        final = self._probes[-1]
        settled = False

        if self.options.settle_under_target and final.bitrate > self.target_bitrate:
            under = [
                p for p in (state.low, state.high)
                if p.bitrate <= self.target_bitrate
            ]
            if under:
                best = max(under, key=lambda p: p.bitrate)
                logger.info(
                    "Last probe overshot target; re-encoding at quality '%f'",
                    best.quality,
                )
                final = self._probe(input_path, best.quality)
                settled = True
                self.emit(ProbeEvent(
                    phase="settle",
                    iteration=state.iterations,
                    point=final,
                    bracket_width=state.width,
                ))
                if final.bitrate > self.target_bitrate:
                    logger.warning(
                        "Re-encode at quality '%f' measured %.0f bps, above target",
                        final.quality,
                        final.bitrate,
                    )
            else:
                logger.warning(
                    "No probe measured at or below %.0f bps; keeping last encode",
                    self.target_bitrate,
                )

        return SearchResult(
            quality=final.quality,
            bitrate=final.bitrate,
            artifact_path=self._artifact,
            bracket_low=state.low,
            bracket_high=state.high,
            iterations=state.iterations,
            settled=settled,
            probes=list(self._probes),
        )
