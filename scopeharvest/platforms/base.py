"""Base fetcher interface and result type."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, TextIO, runtime_checkable

from scopeharvest.context import RunContext
from scopeharvest.errors import HarvestError
from scopeharvest.platforms.state_machine import FetchState


@dataclass(frozen=True)
class FetchResult:
    """Result of one platform fetch.

    On error, ``processed_count`` is the number of programs completed before
    the failure and the output for the failing program may be partial.
    """

    platform: str
    processed_count: int = 0
    assets_written: int = 0
    error: HarvestError | None = None
    state: FetchState = FetchState.DONE

    @property
    def success(self) -> bool:
        """Check if the fetch completed without error."""
        return self.error is None


@runtime_checkable
class ProgramFetcher(Protocol):
    """Protocol for platform fetchers.

    A fetcher enumerates the platform's bounty programs, writes every
    bounty-eligible asset to ``out`` one per line, and reports how many
    programs it processed.
    """

    def fetch(self, ctx: RunContext, credentials: str, out: TextIO) -> FetchResult:
        """Fetch eligible assets for the platform.

        Args:
            ctx: Run context shared by the whole run.
            credentials: Platform credential string.
            out: Output sink; the fetcher only appends.

        Returns:
            FetchResult with count and optional error.
        """
        ...


class BaseFetcher(ABC):
    """Abstract base class for fetchers."""

    platform: str = ""

    @abstractmethod
    def fetch(self, ctx: RunContext, credentials: str, out: TextIO) -> FetchResult:
        """Fetch eligible assets for the platform."""

    def write_asset(self, out: TextIO, asset_identifier: str) -> None:
        """Append one asset identifier as a line."""
        out.write(f"{asset_identifier}\n")
