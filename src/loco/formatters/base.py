"""Base formatter interface for loco output rendering."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..analysis.aggregator import LanguageAggregate
from ..analysis.engine import AnalysisResult

SORT_KEYS = ("lines", "files", "size", "name")


@dataclass(frozen=True)
class ReportOptions:
    """What to show and in which order.

    Attributes:
        sort_by: Language ordering: lines, files, size or name
        top: Keep only the first N languages after sorting
        min_lines: Hide languages with fewer total lines
        show_hotspots: Include the hotspot list
        top_files: Metric for a top-files listing (None = no listing)
        group_by_dir: Include the per-directory breakdown
        verbose: Include line length details
    """

    sort_by: str = "lines"
    top: Optional[int] = None
    min_lines: int = 0
    show_hotspots: bool = False
    top_files: Optional[str] = None
    group_by_dir: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.sort_by not in SORT_KEYS:
            raise ValueError(f"sort_by must be one of: {', '.join(SORT_KEYS)}")
        if self.top is not None and self.top < 1:
            raise ValueError("top must be at least 1")
        if self.min_lines < 0:
            raise ValueError("min_lines must be non-negative")


def order_languages(
    result: AnalysisResult, options: ReportOptions
) -> List[Tuple[str, LanguageAggregate]]:
    """Languages sorted, truncated and filtered as ``options`` asks.

    Sorting is descending for counts and alphabetical for ``name``; the
    top-N cut happens before the min-lines filter.
    """
    items = list(result.languages.items())
    if options.sort_by == "files":
        items.sort(key=lambda kv: -kv[1].files)
    elif options.sort_by == "size":
        items.sort(key=lambda kv: -kv[1].total_size)
    elif options.sort_by == "name":
        items.sort(key=lambda kv: kv[0])
    else:
        items.sort(key=lambda kv: -kv[1].total_lines)

    if options.top is not None:
        items = items[: options.top]
    return [(name, agg) for name, agg in items if agg.total_lines >= options.min_lines]


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: AnalysisResult, options: ReportOptions) -> None:
        """Write the report to the terminal."""

    @abstractmethod
    def format(self, result: AnalysisResult, options: ReportOptions) -> str:
        """Return the report as a string."""
