"""Reconciliation engine: per-article decisions and run aggregation."""

from .aggregator import RunAggregator
from .observer import LoggingObserver, NullObserver, SyncObserver
from .reconciler import Reconciler, compare, tags_differ

__all__ = [
    "LoggingObserver",
    "NullObserver",
    "Reconciler",
    "RunAggregator",
    "SyncObserver",
    "compare",
    "tags_differ",
]
