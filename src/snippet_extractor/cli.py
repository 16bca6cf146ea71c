"""Typer-based CLI for extracting tagged snippets from a source tree."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from snippet_extractor.config import DEFAULT_CONFIG_NAME, build_config, load_config
from snippet_extractor.errors import ConfigError, SnippetExtractionError
from snippet_extractor.extractor import SnippetExtractor
from snippet_extractor.logging import configure_logging
from snippet_extractor.models import ExtractionConfig, TagSet
from snippet_extractor.scanner import scan
from snippet_extractor.writer import parse_module

app = typer.Typer(add_completion=False, help="snippet-extractor: publish tagged code regions as standalone snippets")

DEFAULT_OUTPUT_ROOT = Path("snippets")


def _echo_step(step: int, total: int, message: str) -> None:
    """Print a normalized progress step line."""
    typer.echo(f"[{step}/{total}] {message}")


def _discover_config_path(config_path: Path | None) -> Path | None:
    """Fall back to ``snippets.config.json`` in the working directory."""
    if config_path is None and Path(DEFAULT_CONFIG_NAME).exists():
        return Path(DEFAULT_CONFIG_NAME)
    return config_path


def _resolve_config(
    config_path: Path | None,
    overrides: dict[str, Any],
) -> ExtractionConfig:
    """Build the run config from an optional file plus CLI overrides.

    Without ``--config``, a ``snippets.config.json`` in the working directory
    is used when present; otherwise ``--root`` is required.
    """
    config_path = _discover_config_path(config_path)

    try:
        if config_path is not None:
            return load_config(config_path, overrides)
        if overrides.get("root_directory") is None:
            raise typer.BadParameter("Provide --root or a config file.")
        data = {"snippet_output_directory": DEFAULT_OUTPUT_ROOT}
        return build_config(data, overrides)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("extract")
def extract(
    config_path: Path | None = typer.Option(None, "--config", help="Path to snippets.config.json"),
    root: Path | None = typer.Option(None, "--root", help="Source tree to scan"),
    output: Path | None = typer.Option(None, "--output", help="Snippet output directory"),
    extensions: list[str] | None = typer.Option(None, "--ext", help="File extension to scan (repeatable)"),
    exclude: list[str] | None = typer.Option(None, "--exclude", help="Glob of paths to skip (repeatable)"),
    structure: str | None = typer.Option(None, "--structure", help="byLanguage or flat"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compose snippets without writing files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Extract every tagged snippet under the root directory."""
    configure_logging(verbose=verbose, log_file=log_file)
    total_steps = 3

    _echo_step(1, total_steps, "Loading configuration")
    config = _resolve_config(
        config_path,
        {
            "root_directory": root,
            "snippet_output_directory": output,
            "file_extensions": extensions or None,
            "exclude": exclude or None,
            "output_directory_structure": structure,
        },
    )
    typer.echo(f"Scanning {config.root_directory} for {', '.join(config.file_extensions)}")

    _echo_step(2, total_steps, "Extracting snippets")
    extractor = SnippetExtractor(config)
    try:
        report = extractor.extract_snippets(
            dry_run=dry_run,
            progress_callback=lambda msg: typer.echo(f"    {msg}"),
        )
    except (SnippetExtractionError, FileNotFoundError) as exc:
        typer.echo(f"Extraction aborted: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    _echo_step(3, total_steps, "Summary")
    for path in report.skipped:
        typer.echo(f"    skipped unreadable file: {path}")
    if report.orphan_prepends:
        typer.echo(f"    unreferenced prepends: {', '.join(report.orphan_prepends)}")
    if dry_run:
        for snippet in report.snippets:
            typer.echo(f"    {snippet.language}/{snippet.name} ({len(snippet.lines)} lines)")
    typer.echo(
        "Extraction complete. "
        f"files={report.files_scanned} snippets={len(report.snippets)} "
        f"written={len(report.written)} output={config.snippet_output_directory}"
    )


@app.command("scan")
def scan_file(
    path: Path = typer.Argument(..., help="Source file to scan"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to snippets.config.json"),
) -> None:
    """List the snippet and prepend regions found in one file."""
    tags = TagSet()
    config_path = _discover_config_path(config_path)
    if config_path is not None:
        try:
            tags = load_config(config_path).snippet_tags
        except ConfigError as exc:
            raise typer.BadParameter(str(exc)) from exc

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc

    try:
        regions = scan(text, tags, source_file=str(path))
    except SnippetExtractionError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    if not regions:
        typer.echo("No regions found.")
        return
    for region in regions:
        typer.echo(
            f"{region.kind.value:<8} {region.name} lines {region.start_line}-{region.end_line} "
            f"({len(region.raw_lines)} body lines)"
        )


@app.command("decode")
def decode(
    path: Path = typer.Argument(..., help="Written .snippet.js module"),
) -> None:
    """Print the snippet content stored in a written module."""
    if not path.exists():
        raise typer.BadParameter(f"Snippet file not found: {path}")
    typer.echo(parse_module(path.read_text(encoding="utf-8")))


if __name__ == "__main__":
    app()
