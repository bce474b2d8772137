"""JSON formatter for loco."""

import json
from dataclasses import asdict

from ..analysis.hotspots import top_files
from .base import BaseFormatter, ReportOptions, order_languages


class JsonFormatter(BaseFormatter):
    """Render an analysis result as JSON."""

    def render(self, result, options: ReportOptions) -> None:
        print(self.format(result, options))

    def format(self, result, options: ReportOptions) -> str:
        languages = order_languages(result, options)
        data = {
            "summary": {
                "total_files": result.total_files,
                "total_lines": result.total_lines,
                "total_code_lines": sum(f.code_lines for f in result.files),
                "total_comment_lines": sum(f.comment_lines for f in result.files),
                "total_blank_lines": sum(f.blank_lines for f in result.files),
                "total_size": result.total_size,
                "skipped": result.skipped,
            },
            "languages": {name: asdict(agg) for name, agg in languages},
            "quality": asdict(result.quality),
            "performance": asdict(result.performance),
        }
        if options.show_hotspots:
            data["hotspots"] = [
                {
                    "rank": h.rank,
                    "path": h.path,
                    "risk_score": h.risk_score,
                    "rank_score": h.rank_score,
                    "lines": h.metric.total_lines,
                    "complexity": h.metric.complexity_score,
                    "todos": h.metric.todos,
                    "maintainability_index": h.metric.maintainability_index,
                    "reasons": h.reasons,
                }
                for h in result.hotspots
            ]
        if options.top_files:
            data["top_files"] = {
                "metric": options.top_files,
                "files": [asdict(m) for m in top_files(result.files, options.top_files)],
            }
        if options.group_by_dir:
            data["directories"] = {name: asdict(agg) for name, agg in result.directories.items()}
        if result.encodings:
            data["encodings"] = result.encodings
        return json.dumps(data, indent=2)
