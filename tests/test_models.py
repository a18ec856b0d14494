"""Tests for configuration models and logging setup."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from oar.models.config import Config, ConversionRequest, SearchOptions
from oar.utils.errors import FileAccessError, InputBitrateTooLowError
from oar.utils.logging import setup_logging


class TestConversionRequest:
    """Tests for ConversionRequest."""

    def test_defaults(self):
        request = ConversionRequest(input_path=Path("in.flac"))

        assert request.max_bitrate == 208000
        assert request.max_quality_delta == 0.000001
        assert request.output_path == Path("output.ogg")
        assert request.artifact_suffix == ".ogg"

    def test_immutable(self):
        request = ConversionRequest(input_path=Path("in.flac"))

        with pytest.raises(ValidationError):
            request.max_bitrate = 1

    @pytest.mark.parametrize("field,value", [("max_bitrate", 0), ("max_quality_delta", -1.0)])
    def test_rejects_non_positive(self, field, value):
        with pytest.raises(ValidationError):
            ConversionRequest(input_path=Path("in.flac"), **{field: value})

    def test_suffix_defaults_to_ogg(self):
        request = ConversionRequest(input_path=Path("in.flac"), output_path=Path("out"))

        assert request.artifact_suffix == ".ogg"


class TestConfig:
    """Tests for environment-driven Config."""

    def test_defaults(self):
        config = Config()

        assert config.quality_low == 1.0
        assert config.quality_high == 10.0
        assert config.min_input_bitrate == 192000
        assert config.workspace_dir == Path(".oar_tmp")
        assert config.ffmpeg_timeout is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("OAR_FFMPEG_PATH", "/opt/bin/ffmpeg")
        monkeypatch.setenv("OAR_MIN_INPUT_BITRATE", "128000")
        monkeypatch.setenv("OAR_FFMPEG_TIMEOUT", "600")

        config = Config()

        assert config.ffmpeg_path == "/opt/bin/ffmpeg"
        assert config.min_input_bitrate == 128000
        assert config.ffmpeg_timeout == 600

    def test_rejects_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("OAR_LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            Config()

    def test_search_options_defaults(self):
        options = SearchOptions()

        assert options.max_iterations is None
        assert not options.clamp
        assert options.stall_correction
        assert options.settle_under_target


class TestErrors:
    def test_low_bitrate_message(self):
        error = InputBitrateTooLowError(Path("in.mp3"), 128000.0, 192000)

        assert str(error) == (
            "Minimum allowed bitrate is 192 kbps. 'in.mp3' has 128.000000 kbps"
        )


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_jsonl_file(self, tmp_path):
        log_file = tmp_path / "logs" / "oar.jsonl"
        logger = setup_logging("DEBUG", log_file)

        logging.getLogger("oar.search").info("probe", extra={"fields": {"quality": 4.2}})

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "probe"
        assert entry["logger"] == "oar.search"
        assert entry["quality"] == 4.2
        assert logger.name == "oar"

    def test_console_quiet_unless_verbose(self):
        logger = setup_logging()
        assert logger.handlers[0].level == logging.WARNING

        logger = setup_logging(verbose=True)
        assert logger.handlers[0].level == logging.INFO

    def test_unopenable_log_file(self, tmp_path):
        (tmp_path / "blocker").write_text("")

        with pytest.raises(FileAccessError, match="Error opening log file"):
            setup_logging(log_file=tmp_path / "blocker" / "oar.log")
