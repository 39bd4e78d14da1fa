"""Command line interface for code-excerpt.

Commands:
    lines   Render explicit start/end lines of a file.
    around  Render the lines around an anchor line.

Examples:
    code-excerpt lines src/index.ts 10 40 --line-numbers
    code-excerpt around src/creator.ts 120 --radius 5 --offset 2
    code-excerpt lines src/index.ts 1 80 --remote --config excerpt.yaml

"""

from pathlib import Path

import typer

from code_excerpt.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _read_local_file,
    _setup_logging,
    console,
)
from code_excerpt.core.config import Config, load_config
from code_excerpt.core.exceptions import ConfigError, SourceError
from code_excerpt.excerpt.types import (
    MIN_BUDGET,
    AnchorSelection,
    RangeSelection,
    Selection,
)
from code_excerpt.service import build_excerpt_message
from code_excerpt.sources.github import GitHubSource

app = typer.Typer(
    name="code-excerpt",
    help="Render budget-constrained source code excerpts",
    no_args_is_help=True,
)


def _load_config_or_exit(config_path: str | None) -> Config:
    try:
        return load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e


def _read_document(file: str, source: GitHubSource | None, remote: bool) -> str:
    """Read file from disk, or from the configured repository when remote."""
    if not remote:
        return _read_local_file(file)

    if source is None:
        _error("--remote requires a 'source' section in the config file")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    try:
        return source.fetch_text(file)
    except SourceError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from e


def _render(
    file: str,
    selection: Selection,
    config: Config,
    line_numbers: bool | None,
    budget: int | None,
    remote: bool,
) -> None:
    source = GitHubSource(config.source) if config.source is not None else None
    text = _read_document(file, source, remote)

    options = config.excerpt.formatting_options(
        include_line_numbers=line_numbers,
        budget=budget,
        link_target=source.code_file_url if source is not None else None,
    )
    message = build_excerpt_message(text, file, selection, options)

    console.print(
        message.content, markup=False, highlight=False, emoji=False, soft_wrap=True
    )
    if message.link_url:
        console.print(
            f"Open GitHub: {message.link_url}",
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )


@app.command("lines")
def lines_command(
    file: str = typer.Argument(..., help="File path (repository-relative with --remote)"),
    start: int = typer.Argument(..., min=1, help="Where to select from"),
    end: int = typer.Argument(..., min=1, help="Where to select to"),
    line_numbers: bool | None = typer.Option(
        None,
        "--line-numbers/--no-line-numbers",
        help="Prefix lines with their line numbers",
    ),
    budget: int | None = typer.Option(
        None,
        "--budget",
        "-b",
        min=MIN_BUDGET,
        help="Maximum excerpt length in characters",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML config file",
    ),
    remote: bool = typer.Option(
        False,
        "--remote",
        "-r",
        help="Fetch the file from the configured repository",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
) -> None:
    """Render specific lines of a file. Inverted ranges are swapped."""
    _setup_logging(verbose=verbose, quiet=quiet)
    loaded = _load_config_or_exit(config)
    _render(file, RangeSelection(start, end), loaded, line_numbers, budget, remote)


@app.command("around")
def around_command(
    file: str = typer.Argument(..., help="File path (repository-relative with --remote)"),
    line: int = typer.Argument(..., min=1, help="Anchor line"),
    radius: int | None = typer.Option(
        None,
        "--radius",
        "-a",
        min=1,
        help="How many lines to show around the anchor (default from config, 3)",
    ),
    offset: int | None = typer.Option(
        None,
        "--offset",
        "-o",
        help="Offset the selection view",
    ),
    line_numbers: bool | None = typer.Option(
        None,
        "--line-numbers/--no-line-numbers",
        help="Prefix lines with their line numbers",
    ),
    budget: int | None = typer.Option(
        None,
        "--budget",
        "-b",
        min=MIN_BUDGET,
        help="Maximum excerpt length in characters",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML config file",
    ),
    remote: bool = typer.Option(
        False,
        "--remote",
        "-r",
        help="Fetch the file from the configured repository",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
) -> None:
    """Render the lines around an anchor line, trimming both ends to fit."""
    _setup_logging(verbose=verbose, quiet=quiet)
    loaded = _load_config_or_exit(config)
    selection = AnchorSelection(
        anchor_line=line,
        radius=radius if radius is not None else loaded.excerpt.radius,
        offset=offset if offset is not None else loaded.excerpt.offset,
    )
    _render(file, selection, loaded, line_numbers, budget, remote)
