"""Duration and bitrate measurement."""

from oar.scanner.analyzer import bitrate_bps, duration_seconds, probe_file

__all__ = ["bitrate_bps", "duration_seconds", "probe_file"]
