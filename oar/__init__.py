"""oar - convert audio at the encoder quality that meets a target bitrate."""

__version__ = "0.1.0"
