"""Output formatters for loco."""

from .base import BaseFormatter, ReportOptions, order_languages
from .csv_formatter import CsvFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter

FORMATTERS = {
    "rich": RichFormatter,
    "json": JsonFormatter,
    "csv": CsvFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json", "csv"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "ReportOptions",
    "order_languages",
    "RichFormatter",
    "JsonFormatter",
    "CsvFormatter",
    "FORMATTERS",
    "get_formatter",
]
