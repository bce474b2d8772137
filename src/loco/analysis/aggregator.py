"""Concurrent per-language aggregation of FileMetrics.

Merges run from many worker threads at once. Merges into different keys never
wait on each other; merges into the same key are serialized by that key's lock.
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, TypeVar

from ..logging_config import get_logger
from ..scanning.models import FileMetric

logger = get_logger(__name__)

V = TypeVar("V")

ADDITIVE_FIELDS = (
    "total_lines",
    "code_lines",
    "comment_lines",
    "blank_lines",
    "functions",
    "classes",
    "imports",
    "todos",
    "fixmes",
    "test_indicators",
    "doc_indicators",
)

AVERAGED_FIELDS = (
    "avg_line_length",
    "complexity_score",
    "cyclomatic_complexity",
    "maintainability_index",
    "technical_debt_ratio",
)


def lines_weighted_mean(values: Sequence[float], weights: Sequence[int]) -> float:
    """Mean of ``values`` weighted by line counts.

    Falls back to the plain mean when every weight is zero (a corpus of empty
    files) and returns 0.0 for no values.
    """
    if not values:
        return 0.0
    total_weight = sum(weights)
    if total_weight == 0:
        return sum(values) / len(values)
    return sum(v * w for v, w in zip(values, weights)) / total_weight


@dataclass
class LanguageAggregate:
    """Running totals and lines-weighted averages for one key."""

    language: str
    files: int = 0

    # Additive counters
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    total_size: int = 0
    functions: int = 0
    classes: int = 0
    imports: int = 0
    todos: int = 0
    fixmes: int = 0
    test_indicators: int = 0
    doc_indicators: int = 0

    max_line_length: int = 0

    # Lines-weighted averages
    avg_line_length: float = 0.0
    complexity_score: float = 0.0
    cyclomatic_complexity: float = 0.0
    maintainability_index: float = 0.0
    technical_debt_ratio: float = 0.0

    # Recomputed from running sums after every merge
    code_percentage: float = 0.0
    comment_percentage: float = 0.0
    blank_percentage: float = 0.0

    @classmethod
    def from_metric(cls, language: str, metric: FileMetric) -> "LanguageAggregate":
        aggregate = cls(language=language)
        aggregate.merge(metric)
        return aggregate

    def merge(self, metric: FileMetric) -> None:
        """Fold one file into the running totals.

        Not thread-safe on its own; callers hold the key's lock.
        """
        old_files = self.files
        old_weight = self.total_lines
        weight = metric.total_lines
        new_weight = old_weight + weight

        self.files += 1
        for name in ADDITIVE_FIELDS:
            setattr(self, name, getattr(self, name) + getattr(metric, name))
        self.total_size += metric.size_bytes
        self.max_line_length = max(self.max_line_length, metric.max_line_length)

        for name in AVERAGED_FIELDS:
            old_avg = getattr(self, name)
            value = getattr(metric, name)
            if new_weight > 0:
                avg = (old_avg * old_weight + value * weight) / new_weight
            else:
                avg = (old_avg * old_files + value) / self.files
            setattr(self, name, avg)

        self._update_percentages()

    def _update_percentages(self) -> None:
        if self.total_lines > 0:
            self.code_percentage = self.code_lines / self.total_lines * 100.0
            self.comment_percentage = self.comment_lines / self.total_lines * 100.0
            self.blank_percentage = self.blank_lines / self.total_lines * 100.0
        else:
            self.code_percentage = 0.0
            self.comment_percentage = 0.0
            self.blank_percentage = 0.0


class AggregateStore(ABC):
    """Concurrent associative store with atomic get-or-insert-then-update."""

    @abstractmethod
    def upsert(self, key: str, create: Callable[[], V], update: Callable[[V], None]) -> None:
        """Insert ``create()`` if ``key`` is new, otherwise apply ``update``.

        Either branch runs with exclusive access to the key's value.
        """

    @abstractmethod
    def snapshot(self) -> Dict[str, V]:
        """Deep copy of every value, taken under each key's lock."""


class ShardedLockStore(AggregateStore):
    """One lock per key.

    The registry lock is held only while a new key's lock is inserted, never
    during an update.
    """

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._values: Dict[str, object] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        lock = self._locks.get(key)
        if lock is None:
            with self._registry_lock:
                lock = self._locks.setdefault(key, threading.Lock())
        return lock

    def upsert(self, key, create, update) -> None:
        with self._lock_for(key):
            value = self._values.get(key)
            if value is None:
                self._values[key] = create()
            else:
                update(value)

    def snapshot(self):
        with self._registry_lock:
            keys = list(self._locks)
        result = {}
        for key in keys:
            with self._locks[key]:
                if key in self._values:
                    result[key] = copy.deepcopy(self._values[key])
        return result

    def __len__(self) -> int:
        return len(self._values)


def _by_language(metric: FileMetric) -> str:
    return metric.language


class MetricsAggregator:
    """Merges FileMetrics into per-key LanguageAggregates.

    Args:
        key: Maps a metric to its aggregate key (language label by default;
            the engine also uses the parent directory)
        store: Concurrent store holding the aggregates
    """

    def __init__(
        self,
        key: Callable[[FileMetric], str] = _by_language,
        store: Optional[AggregateStore] = None,
    ):
        self._key = key
        self._store = store or ShardedLockStore()

    def merge(self, metric: FileMetric) -> None:
        key = self._key(metric)
        self._store.upsert(
            key,
            lambda: LanguageAggregate.from_metric(key, metric),
            lambda aggregate: aggregate.merge(metric),
        )

    def merge_all(self, metrics: Sequence[FileMetric]) -> None:
        for metric in metrics:
            self.merge(metric)

    def results(self) -> Dict[str, LanguageAggregate]:
        """Copy of every aggregate, ordered by key."""
        snapshot = self._store.snapshot()
        return {key: snapshot[key] for key in sorted(snapshot)}

    def totals(self) -> Dict[str, int]:
        """Additive fields summed across every aggregate."""
        aggregates = self.results()
        results = list(aggregates.values())
        totals = {name: sum(getattr(a, name) for a in results) for name in ADDITIVE_FIELDS}
        totals["files"] = sum(a.files for a in results)
        totals["total_size"] = sum(a.total_size for a in results)
        logger.debug(f"Aggregated {totals['files']} files into {len(aggregates)} keys")
        return totals
