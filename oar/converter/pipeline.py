"""End-to-end conversion: validate, search, promote."""

import logging
from typing import Callable

from oar.converter.encoder import FfmpegEncoder
from oar.converter.workspace import Workspace
from oar.models.config import Config, ConversionRequest, SearchOptions
from oar.models.search import ConversionOutcome
from oar.scanner.analyzer import probe_file
from oar.search.engine import QualitySearch, SearchEvent
from oar.utils.errors import ConfigError, InputBitrateTooLowError

logger = logging.getLogger(__name__)


def convert(
    request: ConversionRequest,
    config: Config | None = None,
    options: SearchOptions | None = None,
    event_callback: Callable[[SearchEvent], None] | None = None,
) -> ConversionOutcome:
    """
    Convert ``request.input_path`` at the quality meeting the target bitrate.

    Steps:
    1. Measure the input's duration and bitrate
    2. Reject inputs at or below the minimum bitrate
    3. Search for the quality inside the workspace
    4. Move the final artifact to the output path

    The workspace is removed on every exit path.

    Raises:
        ConfigError: If the output path lies inside the workspace
        OarError: On any failure; nothing is retried
    """
    config = config or Config()

    workspace = Workspace(config.workspace_dir, request.artifact_suffix)
    if workspace.contains(request.output_path):
        raise ConfigError(
            f"Output path '{request.output_path}' is inside the working "
            f"directory '{config.workspace_dir}', which is removed on exit"
        )

    with workspace:
        source = probe_file(request.input_path, config=config)
        logger.info(
            "Input '%s': %.3f s, %.1f kbps",
            source.path,
            source.duration_seconds,
            source.bitrate_bps / 1000,
        )

        if source.bitrate_bps <= config.min_input_bitrate:
            raise InputBitrateTooLowError(
                request.input_path, source.bitrate_bps, config.min_input_bitrate
            )

        encoder = FfmpegEncoder(workspace.artifact_path, config)
        search = QualitySearch(
            encoder,
            duration_seconds=source.duration_seconds,
            target_bitrate=request.max_bitrate,
            max_quality_delta=request.max_quality_delta,
            quality_low=config.quality_low,
            quality_high=config.quality_high,
            options=options,
            event_callback=event_callback,
        )
        result = search.run(request.input_path)
        output_path = workspace.promote(request.output_path)

    logger.info(
        "Wrote '%s' at quality %f (%.1f kbps, %d iterations)",
        output_path,
        result.quality,
        result.bitrate / 1000,
        result.iterations,
        extra={"fields": {
            "quality": result.quality,
            "bitrate_bps": result.bitrate,
            "iterations": result.iterations,
        }},
    )

    return ConversionOutcome(
        input=source,
        search=result,
        output_path=output_path,
        target_bitrate=request.max_bitrate,
    )
