"""Command-line entrypoint."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule

from prepis import __version__
from prepis.application.services import TranscriptionOutcome
from prepis.bootstrap import build_transcription_service
from prepis.config import ProgressMode, Settings
from prepis.domain.errors import (
    CleanupError,
    CredentialsError,
    FetchError,
    JobSubmissionError,
    MediaValidationError,
    PollCancelledError,
    PollError,
    PrepisError,
    UploadError,
)

_EXIT_FAILURE = 1
_EXIT_INTERRUPTED = 130

_ERROR_HINTS: tuple[tuple[type[BaseException], str], ...] = (
    (MediaValidationError, "Please verify the file path and permissions."),
    (CredentialsError, "Please check your AWS credentials and configuration."),
    (UploadError, "Please verify the S3 bucket exists and you have access to it."),
    (CleanupError, "Please verify the S3 bucket exists and you have access to it."),
    (
        JobSubmissionError,
        "Please check the Amazon Transcribe service status and your permissions.",
    ),
    (PollError, "Please check the Amazon Transcribe service status and your permissions."),
    (FetchError, "Please check network access to the transcription result location."),
    (OSError, "Please check file permissions and disk space."),
)

app = typer.Typer(
    name="prepis",
    help="Transcribe video and audio files using Amazon Transcribe.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"prepis {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through rich."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    for noisy in ("botocore", "boto3", "urllib3", "s3transfer", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def error_hint(error: BaseException) -> str | None:
    """Return the follow-up hint shown below an error message."""

    for error_type, hint in _ERROR_HINTS:
        if isinstance(error, error_type):
            return hint
    return None


def display_error(error: BaseException) -> None:
    """Print an error and its hint to stderr."""

    err_console.print(f"[red]Error:[/red] {error}", highlight=False)
    hint = error_hint(error)
    if hint is not None:
        err_console.print(hint)


def _print_outcome(outcome: TranscriptionOutcome) -> None:
    console.print(f"Transcription completed! Result URI: {outcome.result_locator}")
    console.print()
    console.print("[bold]Transcription Results:[/bold]")
    console.print(Rule())
    if outcome.text:
        console.print(outcome.text, highlight=False, markup=False)
    else:
        console.print("[yellow]The transcription job produced no text.[/yellow]")
    console.print(Rule())
    if outcome.output_file is not None:
        console.print(f"Transcription saved to: {outcome.output_file}")


@app.command()
def transcribe(
    media_file: Path = typer.Argument(..., help="Path to the video or audio file"),
    s3_bucket: str = typer.Argument(..., help="S3 bucket name for temporary storage"),
    output_file: Optional[Path] = typer.Argument(
        None, help="Optional file to save the transcription to"
    ),
    language_code: Optional[str] = typer.Option(
        None, "--language-code", "-l", help="Transcription language code (default en-US)"
    ),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="AWS region"),
    progress: Optional[ProgressMode] = typer.Option(
        None, "--progress", help="Upload progress display", case_sensitive=False
    ),
    strict_cleanup: bool = typer.Option(
        False, "--strict-cleanup", help="Fail when the temporary S3 object cannot be deleted"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Upload MEDIA_FILE to S3_BUCKET, transcribe it and print the transcript."""

    _ = version
    configure_logging(verbose)

    overrides: dict[str, Any] = {}
    if language_code is not None:
        overrides["language_code"] = language_code
    if region is not None:
        overrides["aws_region"] = region
    if progress is not None:
        overrides["progress_mode"] = progress
    if strict_cleanup:
        overrides["strict_cleanup"] = True

    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {exc}", highlight=False)
        raise typer.Exit(_EXIT_FAILURE) from exc

    console.print("[bold]Video Transcription CLI[/bold]")
    console.print(f"Media file: {media_file}")
    console.print(f"S3 bucket: {s3_bucket}")
    if output_file is not None:
        console.print(f"Output file: {output_file}")

    service = build_transcription_service(settings, console=err_console)
    try:
        outcome = asyncio.run(service.transcribe(media_file, s3_bucket, output_file))
    except (KeyboardInterrupt, PollCancelledError) as exc:
        err_console.print("[yellow]Cancelled.[/yellow]")
        raise typer.Exit(_EXIT_INTERRUPTED) from exc
    except (PrepisError, OSError) as exc:
        display_error(exc)
        raise typer.Exit(_EXIT_FAILURE) from exc

    _print_outcome(outcome)


def run() -> None:
    """Console script entrypoint."""

    app()


__all__ = ["app", "configure_logging", "display_error", "error_hint", "run"]
