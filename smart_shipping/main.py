"""
Command-line front end.

Displays the state produced by the upload pipeline; all logic lives in the
core services.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger

from .application.pipeline import UploadPipeline
from .application.startup import ApplicationStartup
from .core.domain.events import Event
from .core.domain.notifications import Notification, NotificationLevel
from .core.domain.files import FileCandidate
from .core.domain.preview import PreviewKind
from .core.domain.upload import UploadPhase
from .core.exceptions import ConfigError
from .infrastructure.config.loader import ConfigLoader
from .infrastructure.config.models import ApplicationConfig
from .infrastructure.logging.setup import setup_logging

cli = typer.Typer(
    name="smart-shipping",
    help="Send files to a Smart Shipping upload session"
)

_COLORS = {
    NotificationLevel.INFO: typer.colors.BLUE,
    NotificationLevel.SUCCESS: typer.colors.GREEN,
    NotificationLevel.WARNING: typer.colors.YELLOW,
    NotificationLevel.ERROR: typer.colors.RED,
}


def _load(config_file: Optional[str], base_url: Optional[str],
          log_level: Optional[str]) -> ApplicationConfig:
    try:
        config = ConfigLoader().load_config(config_file)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e.message}", err=True)
        raise typer.Exit(1)

    if base_url:
        config.backend.base_url = base_url
    if log_level:
        config.logging.level = log_level.upper()
    setup_logging(config.logging)
    return config


def render_notification(event: Event) -> None:
    """Print notification events; progress updates are drawn on one line."""
    notification: Notification = event.data
    if notification.loading:
        percent = notification.percent if notification.percent is not None else 0
        typer.echo(f"\r{notification.message} {percent:3d}%", nl=False)
        return
    if event.name.endswith("dismissed"):
        return
    prefix = "\n" if event.name.endswith("updated") else ""
    typer.secho(f"{prefix}{notification.message}", fg=_COLORS[notification.level])


async def _send(pipeline: UploadPipeline, files: List[Path]) -> bool:
    await pipeline.event_bus.subscribe("notification.*", render_notification)

    if await pipeline.refresh_session() is None:
        return False
    typer.echo(f"Session: {pipeline.session.url}")  # type: ignore[union-attr]

    summary = await pipeline.add_files(files)
    typer.echo(f"{len(pipeline.candidates)} file(s) selected")
    if summary.has_oversized:
        typer.secho(summary.message, fg=typer.colors.RED)
        for line in summary.describe():
            typer.secho(line, fg=typer.colors.RED)

    task = await pipeline.send()
    return task is not None and task.phase is UploadPhase.SUCCEEDED


@cli.command()
def send(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True,
                                       help="Files to send"),
    config_file: Optional[str] = typer.Option(None, "--config", "-c",
                                              help="Configuration file path"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Backend base URL"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level")
) -> None:
    """Acquire a session and send FILES to it."""
    config = _load(config_file, base_url, log_level)

    async def run() -> bool:
        async with ApplicationStartup(config) as pipeline:
            return await _send(pipeline, files)

    if not asyncio.run(run()):
        raise typer.Exit(1)


@cli.command()
def session(
    config_file: Optional[str] = typer.Option(None, "--config", "-c",
                                              help="Configuration file path"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Backend base URL")
) -> None:
    """Acquire a new upload session and print it."""
    config = _load(config_file, base_url, None)

    async def run() -> bool:
        async with ApplicationStartup(config) as pipeline:
            acquired = await pipeline.refresh_session()
            if acquired is None:
                typer.secho(pipeline.state.session_error or "Session unavailable",
                            fg=typer.colors.RED, err=True)
                return False
            typer.echo(f"Session URL: {acquired.url}")
            typer.echo(f"Session ID: {acquired.id}")
            return True

    if not asyncio.run(run()):
        raise typer.Exit(1)


@cli.command()
def preview(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True,
                                help="File to preview")
) -> None:
    """Describe how FILE would be previewed."""
    config = _load(None, None, None)

    async def run() -> None:
        async with ApplicationStartup(config) as pipeline:
            await pipeline.add_files([file])
            candidate: FileCandidate = pipeline.candidates[0]
            resource = await pipeline.preview(0)
            typer.echo(f"{candidate.name}: {candidate.mime_type}, {candidate.size_mb}")
            if resource.kind is PreviewKind.UNSUPPORTED:
                typer.echo("Preview: unsupported")
            else:
                typer.echo(f"Preview: {resource.kind.value} ({resource.data.uri})")  # type: ignore[union-attr]
            await pipeline.dismiss_preview()

    asyncio.run(run())


@cli.command()
def init_config(
    output: str = typer.Option("config.yaml", "--output", "-o",
                               help="Output configuration file"),
    format: str = typer.Option("yaml", "--format", "-f",
                               help="Configuration format (yaml/json)")
) -> None:
    """Generate a default configuration file."""
    try:
        ConfigLoader().save_config(ApplicationConfig(), output, format)
        typer.echo(f"Default configuration saved to {output}")
    except ConfigError as e:
        typer.echo(f"Error saving configuration: {e.message}", err=True)
        sys.exit(1)


@cli.command()
def validate_config(
    config_file: str = typer.Argument(..., help="Configuration file to validate")
) -> None:
    """Validate a configuration file."""
    try:
        config = ConfigLoader().load_config(config_file)
    except ConfigError as e:
        typer.echo(f"Configuration validation failed: {e.message}", err=True)
        sys.exit(1)

    typer.echo(f"Configuration file {config_file} is valid")
    typer.echo(f"Backend: {config.backend.resolve_base_url()}")
    typer.echo(f"Max file size: {config.upload.max_file_size} bytes")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")


if __name__ == "__main__":
    main()
