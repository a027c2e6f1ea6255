"""Mini README: Export utilities for TrackEase transaction history.

Currently provides CSV output shared by the ``/api/export`` endpoint and the
``export`` CLI command.
"""

from .csv_exporter import CSV_HEADER, CsvExporter, export_transactions_csv

__all__ = ["CSV_HEADER", "CsvExporter", "export_transactions_csv"]
