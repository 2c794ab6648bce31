"""Reading progress updates and the history ledger."""

from .ledger import HistoryLedger
from .progress import ProgressEngine, ProgressPreview

__all__ = [
    "HistoryLedger",
    "ProgressEngine",
    "ProgressPreview",
]
