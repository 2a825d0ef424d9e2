"""CLI command implementations"""

import logging
from typing import Annotated, Optional

import typer

from notecheck.config import Settings, load_config
from notecheck.core.errors import DuplicateSlug, MalformedMetadata
from notecheck.core.index import CorpusIndex
from notecheck.core.pipeline import run_check, run_load
from notecheck.core.report import (
    Report, document_record, fatal_report, render_json, render_lines, render_summary,
)


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _guard(step, settings: Settings):
    """Run a pipeline step, turning fatal corpus errors into CLI failures."""
    try:
        return step(settings)
    except (MalformedMetadata, DuplicateSlug) as e:
        _fail(f"{type(e).__name__}: {e}")
    except RuntimeError as e:
        _fail(str(e))


def _echo_report(report: Report, fmt: str) -> None:
    """Print defects to stderr and a summary line to stdout, or the whole report as JSON."""
    if fmt == "json":
        typer.echo(render_json(report))
        return
    for line in render_lines(report):
        typer.echo(line, err=True)
    typer.echo(render_summary(report))


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log parsing progress to stderr")] = False,
    ):
    """Validate a corpus of session notes: metadata, doc links, images, and code fences."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def check_cmd(
    root: Annotated[Optional[str], typer.Argument(help="Corpus directory (or a single note)")] = None,
    assets: Annotated[Optional[str], typer.Option("--assets-dir", help="Image asset directory")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="Output format: text or json")] = None,
    require_language: Annotated[bool, typer.Option(
        "--require-fence-language", help="Report code fences without a language tag")] = False,
    ):
    """Validate the corpus; exit 0 with no defects, 1 otherwise."""
    settings = _settings(overrides={
        "corpus_root": root, "assets_dir": assets, "output_format": fmt,
        "require_fence_language": True if require_language else None,
    })
    try:
        report = run_check(settings)
    except (MalformedMetadata, DuplicateSlug) as e:
        if settings.output_format != "json":
            _fail(f"{type(e).__name__}: {e}")
        report = fatal_report(settings.corpus_root, e)
    except RuntimeError as e:
        _fail(str(e))
    _echo_report(report, settings.output_format)
    raise typer.Exit(report.exit_code)


def list_cmd(
    root: Annotated[Optional[str], typer.Argument(help="Corpus directory")] = None,
    ):
    """List notes in corpus order: slug, conference, session, title."""
    settings = _settings(overrides={"corpus_root": root})
    index: CorpusIndex = _guard(run_load, settings)
    if not len(index):
        typer.echo("No notes found.")
        raise typer.Exit(1)
    for doc in index:
        meta = doc.metadata
        typer.echo(f"{doc.slug}\t{meta.conference or '-'}\t{meta.session or '-'}\t{doc.title}")


def show_cmd(
    slug: Annotated[str, typer.Argument(help="Slug (or doc-link target) of the note")],
    root: Annotated[Optional[str], typer.Argument(help="Corpus directory")] = None,
    ):
    """Print one note's structured record as JSON."""
    settings = _settings(overrides={"corpus_root": root})
    index: CorpusIndex = _guard(run_load, settings)
    doc = index.resolve(slug)
    if doc is None:
        _fail(f"No note with slug '{slug}'")
    typer.echo(document_record(doc))
