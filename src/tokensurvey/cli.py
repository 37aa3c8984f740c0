"""Command-line entry point."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from tokensurvey.advisor import assess
from tokensurvey.config import FrameworkMode, load_config
from tokensurvey.logging_config import setup_logging
from tokensurvey.report import banner, file_line, render_json, render_text, render_yaml, report_data
from tokensurvey.scan.discovery import walk
from tokensurvey.scan.ignore import load_ignore_matcher
from tokensurvey.scan.stats import FileRecord
from tokensurvey.scan.tokens import make_token_counter

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="tokensurvey",
    help="Count tokens across a codebase and suggest CAG or RAG.",
    add_completion=False,
)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


@app.command()
def survey(
    root: Path = typer.Argument(Path("."), help="Directory to analyze."),
    encoding: Optional[str] = typer.Option(None, "--encoding", help="tiktoken encoding name."),
    max_file_size: Optional[int] = typer.Option(None, "--max-file-size", help="Skip files larger than this (bytes)."),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--quiet", help="Print a line per counted file."),
    gitignore: Optional[bool] = typer.Option(None, "--gitignore/--no-gitignore", help="Honor the root .gitignore."),
    hidden: Optional[bool] = typer.Option(None, "--hidden/--skip-hidden", help="Include dot files and directories."),
    framework: Optional[FrameworkMode] = typer.Option(None, "--framework", help="Framework classification."),
    config: Optional[Path] = typer.Option(None, "--config", help="TOML settings file."),
    output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--format", help="Report format."),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Append diagnostics to this file."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Walk ROOT, count tokens per file and print a CAG vs RAG report."""
    setup_logging(debug=debug, log_file=log_file)

    try:
        cfg = load_config(
            config,
            encoding_name=encoding,
            max_file_size=max_file_size,
            verbose=verbose,
            respect_gitignore=gitignore,
            skip_hidden=None if hidden is None else not hidden,
            framework=framework,
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        raise typer.Exit(code=1) from e

    text_mode = output_format is OutputFormat.TEXT
    resolved = root.resolve()
    if text_mode:
        console.out(banner(resolved), highlight=False)

    if not resolved.is_dir():
        logger.error("Directory does not exist: %s", root)
        raise typer.Exit(code=1)

    def show_file(rec: FileRecord) -> None:
        console.out(file_line(rec), highlight=False)

    try:
        count_tokens = make_token_counter(cfg.encoding_name)
        excluder = load_ignore_matcher(resolved, respect_gitignore=cfg.respect_gitignore)
        stats = walk(resolved, cfg, excluder, count_tokens, on_file=show_file if text_mode else None)
        assessment = assess(stats, cfg.advisor, cfg.framework)
        if text_mode:
            output = render_text(stats, assessment)
        elif output_format is OutputFormat.JSON:
            output = render_json(report_data(resolved, stats, assessment))
        else:
            output = render_yaml(report_data(resolved, stats, assessment))
    except Exception as e:
        logger.exception("Analysis failed")
        raise typer.Exit(code=1) from e

    console.out(output, highlight=False, end="")


def main() -> None:
    app()
