"""Shell history reconciliation for live and idle sessions."""

from syscleaner.history.models import (
    EMPTY_HISTORY_PLACEHOLDER,
    HISTORY_FILES,
    FlushResult,
    HistoryFileSpec,
    HistorySession,
)
from syscleaner.history.reconciler import HistoryReconciler, rewrite_history

__all__ = [
    "EMPTY_HISTORY_PLACEHOLDER",
    "HISTORY_FILES",
    "FlushResult",
    "HistoryFileSpec",
    "HistoryReconciler",
    "HistorySession",
    "rewrite_history",
]
