"""Reading tracker: books, reading progress, history ledger and statistics."""

__version__ = "0.1.0"
