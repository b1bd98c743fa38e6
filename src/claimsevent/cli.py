"""Typer CLI entrypoint for claimsevent."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .client import ClaimsApiClient
from .config import load_config_bundle, load_validation_config
from .engine import publish_result, validate_submission, write_error_table, write_report
from .exceptions import ConfigError, UnknownAreaOfLawError
from .responses import to_error_response
from .submissions import load_submission, submission_to_dict


EXIT_SUCCESS = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_IO_ERROR = 4
EXIT_CONFIG_ERROR = 5


app = typer.Typer(help="Legal aid claim submission validation")
submission_app = typer.Typer(help="Submission commands")
app.add_typer(submission_app, name="submission")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for all commands."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@submission_app.command("validate")
def submission_validate(
    submission_file: Path = typer.Argument(..., help="Submission JSON or CSV file"),
    config_dir: Path = typer.Option(
        Path("config"),
        "--config",
        "-c",
        help="Path to configuration directory",
    ),
    report_path: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Optional path for the JSON validation report",
    ),
    errors_csv: Optional[Path] = typer.Option(
        None,
        "--errors-csv",
        help="Optional path for a CSV table of every validation message",
    ),
    today: Optional[str] = typer.Option(
        None,
        "--today",
        help="Date to validate against (YYYY-MM-DD, defaults to today)",
    ),
    history: bool = typer.Option(
        False,
        "--history",
        help="Check earlier submissions through the claims API",
    ),
    publish: bool = typer.Option(
        False,
        "--publish",
        help="Send claim and submission results to the claims API",
    ),
) -> None:
    """Validate a submission file."""

    as_of = _parse_today(today)
    needs_api = history or publish

    try:
        if needs_api:
            bundle = load_config_bundle(config_dir)
            validation_config = bundle.validation
        else:
            validation_config = load_validation_config(config_dir)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    try:
        submission = load_submission(submission_file)
        client = ClaimsApiClient(bundle.claims_api) if needs_api else None
        result = validate_submission(
            submission,
            validation_config,
            lookup=client if history else None,
            today=as_of,
        )
        published = publish_result(result, client) if publish and client is not None else None
    except UnknownAreaOfLawError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc
    except Exception as exc:
        _fail(exc)

    payload = result.as_dict()
    if published is not None:
        payload["published"] = published.as_dict()
    typer.echo(json.dumps(payload, indent=2))

    try:
        if report_path is not None:
            write_report(result, report_path)
        if errors_csv is not None:
            write_error_table(result, errors_csv)
    except OSError as exc:
        typer.echo(f"Failed to write report: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc

    if result.has_errors:
        raise typer.Exit(EXIT_VALIDATION_ERROR)


@submission_app.command("fetch")
def submission_fetch(
    submission_id: str = typer.Argument(..., help="Submission identifier"),
    config_dir: Path = typer.Option(
        Path("config"),
        "--config",
        "-c",
        help="Path to configuration directory",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Optional path to save the submission JSON",
    ),
) -> None:
    """Download a submission from the claims API."""

    try:
        bundle = load_config_bundle(config_dir)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    try:
        submission = ClaimsApiClient(bundle.claims_api).get_submission(submission_id)
    except Exception as exc:
        _fail(exc)

    json_payload = json.dumps(submission_to_dict(submission), indent=2)
    typer.echo(json_payload)

    if out is not None:
        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(json_payload + "\n", encoding="utf-8")
        except OSError as exc:
            typer.echo(f"Failed to write {out}: {exc}", err=True)
            raise typer.Exit(EXIT_IO_ERROR) from exc


def _parse_today(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid date '{value}'", param_hint="--today") from exc


def _fail(exc: Exception) -> NoReturn:
    response = to_error_response(exc)
    typer.echo(f"Error {response.status_code}: {response.message}", err=True)
    code = EXIT_UNEXPECTED_ERROR if response.status_code >= 500 else EXIT_IO_ERROR
    raise typer.Exit(code) from exc
