"""Job tracker: a small job-listing store with JSON/CSV export."""

__version__ = "0.1.0"
