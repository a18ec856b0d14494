"""Utility modules."""

from oar.utils.errors import OarError
from oar.utils.logging import setup_logging

__all__ = ["OarError", "setup_logging"]
