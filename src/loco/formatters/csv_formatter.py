"""CSV formatter for loco."""

import csv
import io

from .base import BaseFormatter, ReportOptions, order_languages

COLUMNS = [
    "language",
    "files",
    "total_lines",
    "code_lines",
    "comment_lines",
    "blank_lines",
    "total_size",
    "code_percentage",
    "comment_percentage",
    "blank_percentage",
    "functions",
    "classes",
    "imports",
    "todos",
    "fixmes",
    "complexity_score",
    "cyclomatic_complexity",
    "maintainability_index",
    "technical_debt_ratio",
]


class CsvFormatter(BaseFormatter):
    """Render one row per language."""

    def render(self, result, options: ReportOptions) -> None:
        print(self.format(result, options), end="")

    def format(self, result, options: ReportOptions) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(COLUMNS)
        for name, agg in order_languages(result, options):
            row = [name]
            for column in COLUMNS[1:]:
                value = getattr(agg, column)
                row.append(f"{value:.4f}" if isinstance(value, float) else value)
            writer.writerow(row)
        return output.getvalue()
