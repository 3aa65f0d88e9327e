"""Run coordinator: dispatches platform fetchers and stops on the first error."""

import time
from dataclasses import dataclass, field
from typing import TextIO

import structlog

from scopeharvest.context import RunContext
from scopeharvest.credentials import Credentials
from scopeharvest.errors import HarvestError
from scopeharvest.fetch.client import HttpRequester
from scopeharvest.platforms.base import FetchResult, ProgramFetcher
from scopeharvest.platforms.constants import (
    PLATFORM_BUGCROWD,
    PLATFORM_DISPLAY_NAMES,
    PLATFORM_HACKERONE,
    PLATFORM_INTIGRITI,
)
from scopeharvest.platforms.hackerone import HackerOneFetcher
from scopeharvest.platforms.placeholder import NotImplementedFetcher


logger = structlog.get_logger()


@dataclass
class RunResult:
    """Result of a complete run."""

    run_id: str
    total_processed: int = 0
    fetch_results: list[FetchResult] = field(default_factory=list)
    error: HarvestError | None = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Check if every selected fetcher succeeded."""
        return self.error is None


def parse_platforms(value: str) -> list[str]:
    """Split a comma separated platform list.

    Args:
        value: e.g. ``"hackerone, Bugcrowd"``.

    Returns:
        Lower-cased, trimmed, non-empty names in the given order.
    """
    names = (part.strip().lower() for part in value.split(","))
    return [name for name in names if name]


def build_default_fetchers(
    requester: HttpRequester,
    run_id: str = "",
) -> dict[str, ProgramFetcher]:
    """Build the platform dispatch table.

    Args:
        requester: Requester shared by the fetchers.
        run_id: Run identifier for logging.

    Returns:
        Mapping of platform name to fetcher.
    """
    return {
        PLATFORM_HACKERONE: HackerOneFetcher(
            requester,
            run_id=run_id,
            base_url=requester.config.base_url,
            page_size=requester.config.page_size,
        ),
        PLATFORM_INTIGRITI: NotImplementedFetcher(
            PLATFORM_INTIGRITI, PLATFORM_DISPLAY_NAMES[PLATFORM_INTIGRITI]
        ),
        PLATFORM_BUGCROWD: NotImplementedFetcher(
            PLATFORM_BUGCROWD, PLATFORM_DISPLAY_NAMES[PLATFORM_BUGCROWD]
        ),
    }


class HarvestRunner:
    """Runs the selected platform fetchers one after another.

    Provides:
    - Name based fetcher selection (unknown names are logged and skipped)
    - Per-platform credential strings
    - A shared run context and output sink
    - Fail-fast termination on the first fetcher error
    """

    def __init__(
        self,
        fetchers: dict[str, ProgramFetcher],
        run_id: str,
    ) -> None:
        """Initialize the runner.

        Args:
            fetchers: Mapping of platform name to fetcher.
            run_id: Unique run identifier.
        """
        self._fetchers = fetchers
        self._run_id = run_id
        self._log = logger.bind(component="runner", run_id=run_id)

    def run(
        self,
        ctx: RunContext,
        platforms: list[str],
        credentials: Credentials,
        out: TextIO,
    ) -> RunResult:
        """Run fetchers for the given platforms.

        Args:
            ctx: Run context with the overall deadline.
            platforms: Platform names in run order.
            credentials: Normalized user credentials.
            out: Output sink shared by all fetchers.

        Returns:
            RunResult with the total count, or the first error.
        """
        start_time_ns = time.perf_counter_ns()
        result = RunResult(run_id=self._run_id)

        self._log.info("runner_started", platforms=platforms)

        for name in platforms:
            fetcher = self._fetchers.get(name)
            if fetcher is None:
                self._log.warning("unknown_platform", platform=name)
                continue

            log = self._log.bind(platform=name)
            log.info("platform_started")

            fetch_result = fetcher.fetch(
                ctx, self._credentials_for(name, credentials), out
            )
            result.fetch_results.append(fetch_result)
            result.total_processed += fetch_result.processed_count

            if fetch_result.error is not None:
                log.error(
                    "platform_failed",
                    processed=fetch_result.processed_count,
                    error_class=fetch_result.error.error_class.value,
                    error=fetch_result.error.message,
                )
                result.error = fetch_result.error
                break

            log.info(
                "platform_complete",
                processed=fetch_result.processed_count,
                assets_written=fetch_result.assets_written,
            )

        result.duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._log.info(
            "runner_complete",
            total_processed=result.total_processed,
            success=result.success,
            duration_ms=round(result.duration_ms, 2),
        )
        return result

    def _credentials_for(self, platform: str, credentials: Credentials) -> str:
        """Build the credential string a platform expects.

        HackerOne authenticates with ``username:token``; the other platforms
        take the bare key.
        """
        if platform == PLATFORM_HACKERONE:
            return credentials.combined
        return credentials.api_key

    def get_supported_platforms(self) -> list[str]:
        """Get the registered platform names."""
        return list(self._fetchers.keys())
