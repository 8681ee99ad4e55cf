from __future__ import annotations


class BandDataError(ValueError):
    """Raised when ingestion input cannot be turned into rows."""


class BandConfigError(ValueError):
    """Raised when a highlight configuration value is invalid."""
