"""Typer CLI entrypoint for contentsage."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError

from contentsage.classifier import classify, classify_batch, classify_url
from contentsage.config import ClassifierConfig
from contentsage.fetcher import FetchError
from contentsage.input import InvalidUrlError

app = typer.Typer(help="Classify URLs into content-calendar posts.", no_args_is_help=True)


def configure_logging(level: str = "WARNING") -> None:
    """Route loguru output to stderr at the given level."""

    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="{time:HH:mm:ss} | {level: <7} | {message}")


def _build_config(
    timeout_seconds: float,
    content_limit: int,
    social_content_limit: int | None,
) -> ClassifierConfig:
    if social_content_limit is None:
        default_limit = ClassifierConfig.model_fields["social_content_limit"].default
        social_content_limit = min(default_limit, content_limit)

    try:
        return ClassifierConfig(
            fetch_timeout_seconds=timeout_seconds,
            content_limit=content_limit,
            social_content_limit=social_content_limit,
        )
    except ValidationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    quiet: bool = typer.Option(False, "--quiet", "-q"),
) -> None:
    """contentsage command group."""

    if verbose:
        configure_logging("DEBUG")
    elif quiet:
        configure_logging("ERROR")
    else:
        configure_logging("WARNING")


@app.command("classify")
def classify_command(
    url: str = typer.Argument(...),
    html_file: Path | None = typer.Option(None, exists=True, readable=True, dir_okay=False),
    render: bool = typer.Option(False, "--render/--no-render"),
    timeout_seconds: float = typer.Option(15.0),
    content_limit: int = typer.Option(5000),
    social_content_limit: int | None = typer.Option(None),
    user_id: str | None = typer.Option(None),
    organization_id: str | None = typer.Option(None),
) -> None:
    """Classify one URL and print the result as JSON."""

    config = _build_config(timeout_seconds, content_limit, social_content_limit)

    try:
        if html_file is not None:
            result = classify(html_file.read_text(encoding="utf-8"), url, config)
        else:
            result = classify_url(url, config, render=render)
    except (FetchError, InvalidUrlError) as exc:
        typer.echo(json.dumps({"error": str(exc)}), err=True)
        raise typer.Exit(code=1) from exc

    if user_id:
        record = result.to_post_record(url=url, user_id=user_id, organization_id=organization_id)
        typer.echo(json.dumps(record.as_row(), indent=2))
    else:
        typer.echo(json.dumps(result.as_payload(), indent=2))


@app.command()
def batch(
    url_file: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    render: bool = typer.Option(False, "--render/--no-render"),
    timeout_seconds: float = typer.Option(15.0),
    content_limit: int = typer.Option(5000),
    social_content_limit: int | None = typer.Option(None),
    continue_on_error: bool = typer.Option(False),
) -> None:
    """Classify every URL in a file, one JSON line per URL."""

    config = _build_config(timeout_seconds, content_limit, social_content_limit)

    try:
        report = classify_batch(
            url_file=url_file,
            config=config,
            render=render,
            continue_on_error=continue_on_error,
        )
    except (FetchError, ValueError) as exc:
        typer.echo(f"Batch failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for url, result in report.results.items():
        typer.echo(json.dumps({"url": url, **result.as_payload()}))

    typer.echo(
        f"Processed {report.total} URL(s): {report.succeeded} succeeded, {report.failed} failed.",
        err=True,
    )
    if report.failures:
        typer.echo("Failures:", err=True)
        for failure in report.failures:
            typer.echo(f"- {failure}", err=True)
