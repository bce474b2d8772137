"""Concurrent analysis engine.

Pipeline:
  Dispatch (one task per file) -> Read -> Classify -> Merge into aggregators
  -> Barrier (executor shutdown)
  -> Hotspots + Quality + Performance
  -> AnalysisResult
"""

from __future__ import annotations

import dataclasses
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..cache import AnalysisCache
from ..config import AnalysisConfig, default_config
from ..exceptions import UnreadableFileError
from ..file_ops import detect_encoding, read_source
from ..logging_config import get_logger
from ..scanning.classifier import classify
from ..scanning.languages import LanguageRule, RuleRegistry, default_registry
from ..scanning.models import FileMetric
from .aggregator import LanguageAggregate, MetricsAggregator
from .hotspots import Hotspot, HotspotRanker
from .quality import QualityComputer, QualityMetrics

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]
Source = Tuple[str, str, LanguageRule]
# A task's output: the file's metric and, when sniffed, its encoding label
Measured = Tuple[FileMetric, Optional[str]]


@dataclass(frozen=True)
class PerformanceMetrics:
    """Throughput of one run."""

    files_per_second: float = 0.0
    lines_per_second: float = 0.0
    bytes_per_second: float = 0.0
    elapsed_seconds: float = 0.0

    @classmethod
    def measure(cls, files: int, lines: int, size: int, elapsed: float) -> "PerformanceMetrics":
        if elapsed <= 0:
            return cls(elapsed_seconds=max(elapsed, 0.0))
        return cls(
            files_per_second=files / elapsed,
            lines_per_second=lines / elapsed,
            bytes_per_second=size / elapsed,
            elapsed_seconds=elapsed,
        )


@dataclass
class AnalysisResult:
    """Everything one run produces."""

    files: List[FileMetric] = field(default_factory=list)
    languages: Dict[str, LanguageAggregate] = field(default_factory=dict)
    directories: Dict[str, LanguageAggregate] = field(default_factory=dict)
    hotspots: List[Hotspot] = field(default_factory=list)
    quality: QualityMetrics = field(default_factory=QualityMetrics)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    skipped: int = 0
    encodings: Dict[str, int] = field(default_factory=dict)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.total_lines for f in self.files)

    @property
    def total_size(self) -> int:
        return sum(f.size_bytes for f in self.files)


def _by_directory(metric: FileMetric) -> str:
    parent = str(Path(metric.path).parent)
    return parent if parent else "."


class AnalysisEngine:
    """Classifies files on a worker pool and aggregates the results.

    Args:
        config: Analysis configuration (pool size, grouping, thresholds)
        cache: Optional content-hash cache of FileMetrics
        reader: Turns a path into decoded text; raises UnreadableFileError
        registry: Maps extensions to rules and language labels
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        cache: Optional[AnalysisCache] = None,
        reader: Callable[[Path], str] = read_source,
        registry: RuleRegistry = default_registry,
    ):
        self.config = config or default_config
        self.cache = cache
        self.reader = reader
        self.registry = registry

    def analyze_paths(
        self,
        paths: Sequence[Path],
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """Read and classify every path.

        Files with no rule for their extension, or that cannot be read, are
        counted in ``skipped`` and left out of every aggregate. With
        ``detect_encoding`` set, each analyzed file's encoding is sniffed by
        the same worker that reads it.
        """

        def task(path: Path) -> Optional[Measured]:
            rule = self.registry.rule_for_path(path)
            if rule is None:
                logger.debug(f"No rule for {path}")
                return None
            try:
                content = self.reader(path)
            except UnreadableFileError as e:
                logger.debug(f"Skipping {path}: {e}")
                return None
            label = detect_encoding(path) if self.config.detect_encoding else None
            return self._measure(str(path), content, rule), label

        return self._run(list(paths), task, on_progress)

    def analyze_sources(
        self,
        sources: Sequence[Source],
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """Classify in-memory ``(path, text, rule)`` triples."""

        def task(source: Source) -> Optional[Measured]:
            path, content, rule = source
            return self._measure(path, content, rule), None

        return self._run(list(sources), task, on_progress)

    def _measure(self, path: str, content: str, rule: LanguageRule) -> FileMetric:
        label = self.registry.label_for_path(Path(path))
        if not self.registry.is_known(Path(path).suffix):
            label = rule.name

        if self.cache is not None:
            cached = self.cache.get(content, rule, path)
            if cached is not None:
                # Same content may sit behind extensions with different labels
                return dataclasses.replace(cached, language=label)

        metric = classify(content, rule, path=path, language=label)

        if self.cache is not None:
            self.cache.set(content, rule, metric)
        return metric

    def _run(self, items: list, task: Callable, on_progress: Optional[ProgressCallback]) -> AnalysisResult:
        start = time.perf_counter()
        total = len(items)

        languages = MetricsAggregator()
        directories = MetricsAggregator(key=_by_directory) if self.config.group_by_dir else None

        # Slot i holds the output for the i-th discovered item
        slots: List[Optional[Measured]] = [None] * total
        done = 0

        def work(index: int) -> None:
            measured = task(items[index])
            if measured is None:
                return
            metric = measured[0]
            languages.merge(metric)
            if directories is not None:
                directories.merge(metric)
            slots[index] = measured

        workers = self.config.worker_count
        logger.debug(f"Analyzing {total} items on {workers} workers")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(work, i): i for i in range(total)}
            for future in as_completed(futures):
                future.result()
                done += 1
                if on_progress is not None:
                    on_progress(done, total)

        measured = [s for s in slots if s is not None]
        metrics = [metric for metric, _ in measured]
        encodings: Dict[str, int] = {}
        for _, label in measured:
            if label is not None:
                encodings[label] = encodings.get(label, 0) + 1
        skipped = total - len(metrics)
        language_map = languages.results()

        hotspots = HotspotRanker(self.config.thresholds).rank(metrics)
        quality = QualityComputer(self.config.thresholds).compute(language_map, metrics)

        lines = sum(m.total_lines for m in metrics)
        size = sum(m.size_bytes for m in metrics)
        performance = PerformanceMetrics.measure(len(metrics), lines, size, time.perf_counter() - start)

        logger.info(
            f"Analyzed {len(metrics)} files ({lines} lines) in "
            f"{performance.elapsed_seconds:.2f}s, {skipped} skipped"
        )

        return AnalysisResult(
            files=metrics,
            languages=language_map,
            directories=directories.results() if directories is not None else {},
            hotspots=hotspots,
            quality=quality,
            performance=performance,
            skipped=skipped,
            encodings=dict(sorted(encodings.items())),
        )
