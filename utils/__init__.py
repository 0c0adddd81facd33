"""
Utility modules for the valuation engine.
"""

from .formatting import format_currency, format_percent, format_area
from .logging import setup_logging

__all__ = ["format_currency", "format_percent", "format_area", "setup_logging"]
