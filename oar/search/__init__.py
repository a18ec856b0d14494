"""Quality search module."""

from oar.search.engine import QualitySearch, estimate_quality

__all__ = ["QualitySearch", "estimate_quality"]
