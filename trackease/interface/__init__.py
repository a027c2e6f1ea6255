"""Mini README: Interactive interfaces for TrackEase.

Exports the FastAPI application factory that powers the REST API and the
browser dashboard. The command line entry point lives in ``trackease_cli``.
"""

from .web_app import create_application

__all__ = ["create_application"]
