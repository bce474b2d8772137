"""Main analysis command."""

import os
from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape

from ..analysis.engine import AnalysisEngine
from ..analysis.hotspots import TOP_FILE_METRICS
from ..core.progress import ProgressReporter, SilentReporter
from ..exceptions import LocoError
from ..file_ops import collect_files
from ..formatters import FORMATTERS, ReportOptions, get_formatter
from ..formatters.base import SORT_KEYS
from ..logging_config import get_logger, setup_logging
from . import app
from ._common import err_console, open_cache, resolve_config

logger = get_logger(__name__)


@app.callback(invoke_without_command=True, no_args_is_help=False)
def main(
    ctx: typer.Context,
    path: Path = typer.Option(
        Path("."),
        "-p",
        "--path",
        help="File or directory to analyze",
    ),
    output_format: str = typer.Option(
        "rich",
        "-f",
        "--format",
        help="Output format",
        click_type=click.Choice(sorted(FORMATTERS), case_sensitive=False),
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "-e",
        "--exclude",
        help="Regular expression; matching paths are skipped",
    ),
    include: Optional[str] = typer.Option(
        None,
        "-i",
        "--include",
        help="Comma-separated extensions to analyze (e.g. py,rs,go)",
    ),
    max_size: Optional[float] = typer.Option(
        None,
        "--max-size",
        help="Skip files larger than this many MB",
    ),
    threads: Optional[int] = typer.Option(
        None,
        "-t",
        "--threads",
        help="Worker threads (default: logical cores)",
        min=1,
    ),
    progress: bool = typer.Option(
        False,
        "-P",
        "--progress",
        help="Show a progress bar",
    ),
    hotspots: bool = typer.Option(
        False,
        "--hotspots",
        help="List files that stand out as risky",
    ),
    top_files: Optional[str] = typer.Option(
        None,
        "--top-files",
        help="List the top files by a metric",
        click_type=click.Choice(sorted(TOP_FILE_METRICS), case_sensitive=False),
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        help="Show only the first N languages",
        min=1,
    ),
    min_lines: int = typer.Option(
        0,
        "--min-lines",
        help="Hide languages with fewer lines",
        min=0,
    ),
    sort_by: str = typer.Option(
        "lines",
        "--sort-by",
        help="Language ordering",
        click_type=click.Choice(list(SORT_KEYS), case_sensitive=False),
    ),
    group_by_dir: bool = typer.Option(
        False,
        "-G",
        "--group-by-dir",
        help="Also break results down per directory",
    ),
    encoding: bool = typer.Option(
        False,
        "--encoding",
        help="Report file encodings",
    ),
    cache: Optional[bool] = typer.Option(
        None,
        "--cache/--no-cache",
        help="Reuse results for unchanged files",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the report to a file instead of the terminal",
    ),
    verbose: bool = typer.Option(
        False,
        "-v",
        "--verbose",
        help="Debug logging and line length details",
    ),
    quiet: bool = typer.Option(
        False,
        "-q",
        "--quiet",
        help="Only errors on stderr",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append debug logs to this file",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Count code, comment and blank lines per language and flag hotspots.

    [bold cyan]Examples:[/bold cyan]

      loco

      loco -p src --hotspots

      loco -f json -o report.json

      loco --include py,rs --top-files complexity
    """
    if ctx.invoked_subcommand is not None:
        return

    from .. import __version__

    if version:
        err_console.print(f"[bold cyan]Loco[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if not path.exists() or not os.access(path, os.R_OK):
        err_console.print(f"[red]Error:[/red] Path does not exist or is not readable: {escape(str(path))}")
        raise typer.Exit(1)

    analysis_cache = None
    try:
        cfg = resolve_config(
            config=config,
            threads=threads,
            max_size=max_size,
            include=include,
            exclude=exclude,
            cache=cache,
            group_by_dir=group_by_dir,
            encoding=encoding,
            verbose=verbose,
            quiet=quiet,
            log_file=log_file,
        )
        setup_logging(cfg.verbosity, log_file=cfg.log_file)
        quiet = cfg.verbosity == "quiet"

        options = ReportOptions(
            sort_by=sort_by.lower(),
            top=top,
            min_lines=min_lines,
            show_hotspots=hotspots,
            top_files=top_files.lower() if top_files else None,
            group_by_dir=cfg.group_by_dir,
            verbose=cfg.verbosity == "verbose",
        )

        if not quiet:
            err_console.print(f"[bold]Analyzing[/bold] {escape(str(path))}")

        files = collect_files(path, cfg)
        if not files:
            err_console.print("[yellow]No files found matching the criteria.[/yellow]")
            raise typer.Exit(0)

        if cfg.cache_enabled:
            analysis_cache = open_cache(cfg)
        engine = AnalysisEngine(cfg, cache=analysis_cache)

        reporter = ProgressReporter(err_console) if progress and not quiet else SilentReporter()
        result = reporter.run(lambda on_progress: engine.analyze_paths(files, on_progress))

        if analysis_cache is not None:
            stats = analysis_cache.stats()
            logger.info(f"Cache: {stats.get('hits', 0)} hits, {stats.get('misses', 0)} misses")

        formatter = get_formatter(output_format.lower())
        if output is not None:
            output.write_text(formatter.format(result, options), encoding="utf-8")
            if not quiet:
                err_console.print(f"[green]Report written to[/green] {escape(str(output))}")
        else:
            formatter.render(result, options)

    except typer.Exit:
        raise

    except LocoError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        err_console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    finally:
        if analysis_cache is not None:
            analysis_cache.close()
