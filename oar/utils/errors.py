"""Custom exceptions."""


class OarError(Exception):
    """Base exception for oar."""

    pass


class ConfigError(OarError):
    """Invalid request or tool configuration."""

    pass


class InputBitrateTooLowError(OarError):
    """Input bitrate is at or below the configured minimum."""

    def __init__(self, path, bitrate_bps: float, minimum_bps: int):
        self.path = path
        self.bitrate_bps = bitrate_bps
        self.minimum_bps = minimum_bps
        super().__init__(
            f"Minimum allowed bitrate is {minimum_bps // 1000} kbps. "
            f"'{path}' has {bitrate_bps / 1000:f} kbps"
        )


class ProbeError(OarError):
    """External tool failed or returned unusable data."""

    pass


class EncodeError(ProbeError):
    """FFmpeg failed to produce an encode."""

    pass


class FileAccessError(OarError):
    """File or directory could not be accessed."""

    pass


class OutputMoveError(OarError):
    """Final artifact could not be moved to the output path."""

    pass


class SearchError(OarError):
    """Quality search could not make progress."""

    pass
