"""Mini README: Core package initializer for the TrackEase expense tracker.

TrackEase records dated income and expense transactions, aggregates them
into totals and monthly rollups, and serves both through a small FastAPI
backend. Heavy modules (web framework, database drivers) are not imported
here so unit tests of the finance helpers stay lightweight.
"""

from .logging_utils import get_logger

__version__ = "0.3.0"

__all__ = ["__version__", "get_logger"]
