"""Rich terminal formatter for loco."""

import io
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..analysis.hotspots import top_files
from .base import BaseFormatter, ReportOptions, order_languages

_MB = 1_048_576


def _maintainability_label(mi: float) -> str:
    if mi >= 65:
        return f"[green]{mi:.1f}[/green]"
    elif mi >= 40:
        return f"[yellow]{mi:.1f}[/yellow]"
    else:
        return f"[red]{mi:.1f}[/red]"


def _risk_marker(rank: int) -> str:
    if rank <= 3:
        return "[red bold]high[/red bold]"
    elif rank <= 7:
        return "[yellow]medium[/yellow]"
    else:
        return "[dim]lower[/dim]"


def _share(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole > 0 else 0.0


class RichFormatter(BaseFormatter):
    """Summary panels plus per-language, hotspot and top-file tables."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, result, options: ReportOptions) -> None:
        self._print(self.console, result, options)

    def format(self, result, options: ReportOptions) -> str:
        buffer = Console(file=io.StringIO(), width=120, color_system=None)
        self._print(buffer, result, options)
        return buffer.file.getvalue()

    # -- private helpers --

    def _print(self, console: Console, result, options: ReportOptions) -> None:
        self._print_overview(console, result)
        self._print_languages(console, result, options)
        if options.top_files:
            self._print_top_files(console, result, options.top_files)
        if options.show_hotspots:
            self._print_hotspots(console, result)
        if options.group_by_dir and result.directories:
            self._print_directories(console, result)
        if result.encodings:
            self._print_encodings(console, result)

    def _print_overview(self, console: Console, result) -> None:
        perf = result.performance
        quality = result.quality
        overview = (
            f"[bold]{result.total_files}[/bold] files  |  "
            f"[bold]{result.total_lines}[/bold] lines  |  "
            f"[bold]{result.total_size / _MB:.2f}[/bold] MB"
        )
        if result.skipped:
            overview += f"  |  [yellow]{result.skipped}[/yellow] skipped"
        overview += (
            f"\n[dim]{perf.elapsed_seconds:.3f}s  |  "
            f"{perf.files_per_second:.1f} files/s  |  "
            f"{perf.lines_per_second:.0f} lines/s  |  "
            f"{perf.bytes_per_second / _MB:.1f} MB/s[/dim]"
        )
        console.print(Panel(overview, title="[bold cyan]Project Overview[/bold cyan]", expand=False))

        assessment = (
            f"Maintainability: {_maintainability_label(quality.overall_maintainability)}  |  "
            f"Technical debt: [yellow]{quality.technical_debt_ratio:.2f}%[/yellow]  |  "
            f"Test coverage (est.): [blue]{quality.test_coverage_estimate:.1f}%[/blue]  |  "
            f"Documentation: [green]{quality.documentation_ratio:.1f}%[/green]  |  "
            f"Duplication (est.): [magenta]{quality.code_duplication_ratio:.1f}%[/magenta]"
        )
        console.print(Panel(assessment, title="[bold green]Quality Assessment[/bold green]", expand=False))
        console.print()

    def _print_languages(self, console: Console, result, options: ReportOptions) -> None:
        languages = order_languages(result, options)
        if not languages:
            console.print("[yellow]No code files found.[/yellow]")
            return

        table = Table(title="Languages", expand=True)
        table.add_column("Language", style="bold white")
        table.add_column("Files", justify="right")
        table.add_column("Lines", justify="right", style="green")
        table.add_column("Code %", justify="right")
        table.add_column("Comment %", justify="right")
        table.add_column("Blank %", justify="right")
        table.add_column("Complexity", justify="right")
        table.add_column("MI", justify="right")
        table.add_column("TODO/FIXME", justify="right", style="yellow")
        if options.verbose:
            table.add_column("Avg len", justify="right", style="dim")
            table.add_column("Max len", justify="right", style="dim")

        for name, agg in languages:
            row = [
                escape(name),
                f"{agg.files} ({_share(agg.files, result.total_files):.1f}%)",
                f"{agg.total_lines} ({_share(agg.total_lines, result.total_lines):.1f}%)",
                f"{agg.code_percentage:.1f}",
                f"{agg.comment_percentage:.1f}",
                f"{agg.blank_percentage:.1f}",
                f"{agg.complexity_score:.3f}",
                _maintainability_label(agg.maintainability_index),
                f"{agg.todos}/{agg.fixmes}",
            ]
            if options.verbose:
                row += [f"{agg.avg_line_length:.1f}", str(agg.max_line_length)]
            table.add_row(*row)

        console.print(table)
        console.print()

    def _print_top_files(self, console: Console, result, metric: str) -> None:
        table = Table(title=f"Top Files by {metric}", expand=True)
        table.add_column("#", style="dim", width=4)
        table.add_column("File", style="yellow", ratio=3)
        table.add_column("Language")
        table.add_column("Lines", justify="right")
        table.add_column("Complexity", justify="right")
        table.add_column("TODOs", justify="right")
        table.add_column("Size (KB)", justify="right")
        table.add_column("MI", justify="right")

        for i, m in enumerate(top_files(result.files, metric), 1):
            table.add_row(
                str(i),
                escape(m.path),
                escape(m.language),
                str(m.total_lines),
                f"{m.complexity_score:.3f}",
                str(m.todos),
                f"{m.size_bytes / 1024:.1f}",
                _maintainability_label(m.maintainability_index),
            )

        console.print(table)
        console.print()

    def _print_hotspots(self, console: Console, result) -> None:
        if not result.hotspots:
            console.print("[green]No hotspots found.[/green]")
            console.print()
            return

        table = Table(title="Code Hotspots", expand=True)
        table.add_column("#", style="dim", width=4)
        table.add_column("Risk", justify="center", width=8)
        table.add_column("File", style="red", ratio=3)
        table.add_column("Lines", justify="right")
        table.add_column("Complexity", justify="right")
        table.add_column("TODOs", justify="right")
        table.add_column("MI", justify="right")
        table.add_column("Why", ratio=2)

        for hotspot in result.hotspots:
            m = hotspot.metric
            table.add_row(
                str(hotspot.rank),
                _risk_marker(hotspot.rank),
                escape(hotspot.path),
                str(m.total_lines),
                f"{m.complexity_score:.3f}",
                str(m.todos),
                f"{m.maintainability_index:.1f}",
                escape("; ".join(hotspot.reasons)),
            )

        console.print(table)
        console.print()

    def _print_directories(self, console: Console, result) -> None:
        table = Table(title="Directories", expand=True)
        table.add_column("Directory", style="cyan", ratio=3)
        table.add_column("Files", justify="right")
        table.add_column("Lines", justify="right")
        table.add_column("Code %", justify="right")
        table.add_column("Comment %", justify="right")

        ordered = sorted(result.directories.items(), key=lambda kv: -kv[1].total_lines)
        for name, agg in ordered:
            table.add_row(
                escape(name),
                str(agg.files),
                str(agg.total_lines),
                f"{agg.code_percentage:.1f}",
                f"{agg.comment_percentage:.1f}",
            )

        console.print(table)
        console.print()

    def _print_encodings(self, console: Console, result) -> None:
        console.print("[bold]Encodings:[/bold]")
        for label, count in result.encodings.items():
            console.print(f"  {escape(label):16s} {count}")
        console.print()
