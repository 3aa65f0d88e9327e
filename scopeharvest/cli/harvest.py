"""Command line entry point for the scope harvester."""

import logging
import sys
import uuid
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from scopeharvest.context import RunContext
from scopeharvest.credentials import Credentials
from scopeharvest.fetch.client import HttpRequester
from scopeharvest.fetch.config import FetchConfig
from scopeharvest.fetch.metrics import FetchMetrics
from scopeharvest.observability.logging import bind_run_context, configure_logging
from scopeharvest.platforms.constants import PLATFORM_HACKERONE
from scopeharvest.runner import HarvestRunner, build_default_fetchers, parse_platforms
from scopeharvest.settings import get_settings


logger = structlog.get_logger()


@click.command()
@click.version_option(version="0.1.0")
@click.option(
    "--program",
    "program",
    default=PLATFORM_HACKERONE,
    show_default=True,
    help="Comma separated platforms: hackerone,intigriti,bugcrowd.",
)
@click.option(
    "--username",
    default=None,
    help="HackerOne username (env: HACKERONE_USERNAME).",
)
@click.option(
    "--apikey",
    "api_key",
    default=None,
    help="API key (env: HACKERONE_API_KEY).",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File the assets are appended to (default: programs.txt).",
)
@click.option(
    "--timeout",
    "timeout_seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Overall run timeout in seconds (default: 30).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def main(  # noqa: PLR0913
    program: str,
    username: str | None,
    api_key: str | None,
    output_path: Path | None,
    timeout_seconds: float | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Append the bounty-eligible assets of every bounty program to a file.

    Runs one enumeration pass over the selected platforms and stops at the
    first error. Assets already written stay in the output file.
    """
    settings = get_settings()
    platforms = parse_platforms(program)
    api_key = api_key or settings.hackerone_api_key
    username = username or settings.hackerone_username
    output_path = output_path or Path(settings.output_path)
    timeout_seconds = timeout_seconds or settings.timeout_seconds

    if not api_key:
        click.echo("Error: --apikey is required", err=True)
        sys.exit(1)
    if PLATFORM_HACKERONE in platforms and not username:
        click.echo("Error: --username is required for HackerOne", err=True)
        sys.exit(1)

    try:
        credentials = Credentials(username=username or "", api_key=api_key)
    except ValidationError:
        click.echo("Error: --apikey is empty after removing whitespace", err=True)
        sys.exit(1)

    run_id = uuid.uuid4().hex[:12]
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        json_format=json_logs,
    )
    bind_run_context(run_id, platforms)
    log = logger.bind(component="cli", run_id=run_id)
    log.info(
        "harvest_started",
        output=str(output_path),
        timeout_seconds=timeout_seconds,
    )

    ctx = RunContext(timeout_seconds=timeout_seconds)

    try:
        with (
            HttpRequester(FetchConfig(), run_id=run_id) as requester,
            output_path.open("a", encoding="utf-8") as out,
        ):
            runner = HarvestRunner(build_default_fetchers(requester, run_id), run_id)
            result = runner.run(ctx, platforms, credentials, out)
    except OSError as e:
        log.error("output_error", output=str(output_path), error=str(e))
        click.echo(f"ERROR: cannot write {output_path}: {e}", err=True)
        sys.exit(1)

    log.info(
        "run_complete",
        success=result.success,
        total_processed=result.total_processed,
        metrics=FetchMetrics.get_instance().to_dict(),
    )

    if result.error is not None:
        click.echo(f"ERROR: {result.error.message}", err=True)
        sys.exit(1)

    click.echo(f"Total programs processed: {result.total_processed}")
