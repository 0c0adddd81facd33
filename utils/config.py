"""
Configuration management.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Dict

from core.market_study.errors import ValuationInputError


def _load_weights() -> Dict[str, float]:
    """Parse HOMOGENIZATION_WEIGHTS, a JSON object of characteristic -> weight."""
    raw = os.getenv("HOMOGENIZATION_WEIGHTS")
    if not raw:
        return {}
    try:
        weights = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValuationInputError(f"HOMOGENIZATION_WEIGHTS is not valid JSON: {e}")
    if not isinstance(weights, dict):
        raise ValuationInputError("HOMOGENIZATION_WEIGHTS must be a JSON object")
    return {str(k): float(v) for k, v in weights.items()}


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "standard"))

    # Valuation
    currency: str = field(default_factory=lambda: os.getenv("CURRENCY", "BRL"))
    homogenization_weights: Dict[str, float] = field(default_factory=_load_weights)

    # Reports
    reports_dir: str = field(default_factory=lambda: os.getenv("REPORTS_DIR", "./reports"))

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "currency": self.currency,
            "homogenization_weights": dict(self.homogenization_weights),
            "reports_dir": self.reports_dir,
        }
