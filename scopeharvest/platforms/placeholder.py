"""Fetchers for platforms that are not supported yet."""

from typing import TextIO

from scopeharvest.context import RunContext
from scopeharvest.errors import PlatformNotImplementedError
from scopeharvest.platforms.base import BaseFetcher, FetchResult
from scopeharvest.platforms.state_machine import FetchState


class NotImplementedFetcher(BaseFetcher):
    """Fetcher that always fails, so selecting the platform stops the run."""

    def __init__(self, platform: str, display_name: str) -> None:
        self.platform = platform
        self._display_name = display_name

    def fetch(self, ctx: RunContext, credentials: str, out: TextIO) -> FetchResult:
        return FetchResult(
            platform=self.platform,
            error=PlatformNotImplementedError(self._display_name),
            state=FetchState.FAILED,
        )
