"""
Exceptions raised by the market valuation engine.

Input errors are caller mistakes that slipped past request validation.
Invariant errors are defects in the engine itself and should never be
shown to a user as a validation message.
"""


class ValuationError(Exception):
    """Base exception for all valuation engine errors."""


class ValuationInputError(ValuationError, ValueError):
    """Raised when the engine receives data it cannot value."""


class StatisticalInvariantError(ValuationError, RuntimeError):
    """Raised when a statistical invariant is violated (engine defect)."""


class StandardNotAvailableError(ValuationError, LookupError):
    """Raised when a market study has no valuation for the requested standard."""

    def __init__(self, standard: str):
        self.standard = standard
        super().__init__(f"No valuation available for standard: {standard}")
