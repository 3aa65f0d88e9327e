"""HackerOne fetcher.

Walks the hacker API programs listing page by page, and for every program
that offers bounties fetches its structured scopes and writes the
bounty-eligible asset identifiers to the output.

API documentation: https://api.hackerone.com/hacker-resources/
"""

from typing import TextIO
from urllib.parse import quote

import structlog

from scopeharvest.context import RunContext
from scopeharvest.credentials import build_basic_auth_token
from scopeharvest.decode import safe_decode
from scopeharvest.errors import HarvestError
from scopeharvest.fetch.client import Requester
from scopeharvest.fetch.metrics import FetchMetrics
from scopeharvest.models import ProgramsPage, ScopePage
from scopeharvest.platforms.base import BaseFetcher, FetchResult
from scopeharvest.platforms.constants import (
    FIRST_PAGE,
    HACKERONE_MAX_PAGE_SIZE,
    HACKERONE_PROGRAMS_PATH,
    HACKERONE_SCOPES_PATH,
    PLATFORM_HACKERONE,
)
from scopeharvest.platforms.state_machine import FetchState, FetchStateMachine


logger = structlog.get_logger()


class HackerOneFetcher(BaseFetcher):
    """Fetcher for HackerOne bounty programs and their eligible assets.

    Pages are processed one at a time and never accumulated. Programs that
    do not offer bounties are skipped without a scope request. The first
    error aborts the whole fetch.
    """

    platform = PLATFORM_HACKERONE

    def __init__(
        self,
        requester: Requester,
        run_id: str = "",
        base_url: str = "https://api.hackerone.com",
        page_size: int = HACKERONE_MAX_PAGE_SIZE,
    ) -> None:
        """Initialize the HackerOne fetcher.

        Args:
            requester: Requester used for every API call.
            run_id: Run identifier for logging.
            base_url: API base URL.
            page_size: Programs per page (capped at 100).
        """
        self._requester = requester
        self._run_id = run_id
        self._base_url = base_url.rstrip("/")
        self._page_size = min(page_size, HACKERONE_MAX_PAGE_SIZE)
        self._metrics = FetchMetrics.get_instance()

    def fetch(self, ctx: RunContext, credentials: str, out: TextIO) -> FetchResult:
        """Write the eligible assets of every bounty program to ``out``.

        Args:
            ctx: Run context; checked before every page.
            credentials: ``username:api_token``.
            out: Output sink, one asset identifier per line.

        Returns:
            FetchResult with the number of programs processed. On error the
            count covers the programs completed before the failure.
        """
        log = logger.bind(
            component="fetcher",
            platform=self.platform,
            run_id=self._run_id,
        )
        state_machine = FetchStateMachine(self.platform, self._run_id)
        processed = 0
        assets_written = 0
        page_number = FIRST_PAGE

        try:
            auth_token = build_basic_auth_token(credentials)
            state_machine.to_listing()

            while True:
                ctx.raise_if_done()

                page = self._fetch_programs_page(ctx, auth_token, page_number)
                log.info("page_fetched", page=page_number, programs=len(page.data))
                if not page.data:
                    state_machine.to_done()
                    break

                for program in page.items:
                    state_machine.to_filtering()
                    if not program.offers_bounties:
                        continue

                    state_machine.to_fetching_scope()
                    log.info("processing_program", handle=program.handle)
                    assets = self._fetch_eligible_assets(
                        ctx, auth_token, program.handle
                    )

                    state_machine.to_emitting()
                    for asset in assets:
                        self.write_asset(out, asset)
                    assets_written += len(assets)
                    processed += 1
                    self._metrics.record_program(len(assets))

                state_machine.to_listing()
                page_number += 1

        except HarvestError as e:
            state_machine.to_failed()
            log.warning(
                "fetch_failed",
                page=page_number,
                processed=processed,
                **e.to_dict(),
            )
            return FetchResult(
                platform=self.platform,
                processed_count=processed,
                assets_written=assets_written,
                error=e,
                state=FetchState.FAILED,
            )

        log.info(
            "fetch_complete",
            pages=page_number,
            processed=processed,
            assets_written=assets_written,
        )
        return FetchResult(
            platform=self.platform,
            processed_count=processed,
            assets_written=assets_written,
            state=FetchState.DONE,
        )

    def _programs_url(self, page_number: int) -> str:
        """Build the programs listing URL for a page."""
        return (
            f"{self._base_url}{HACKERONE_PROGRAMS_PATH}"
            f"?page[number]={page_number}&page[size]={self._page_size}"
        )

    def _scopes_url(self, handle: str) -> str:
        """Build the structured scopes URL for a program."""
        path = HACKERONE_SCOPES_PATH.format(handle=quote(handle, safe=""))
        return f"{self._base_url}{path}"

    def _fetch_programs_page(
        self,
        ctx: RunContext,
        auth_token: str,
        page_number: int,
    ) -> ProgramsPage:
        """Request and decode one programs page.

        Raises:
            HarvestError: Request or decode failure, tagged with the page.
        """
        label = f"programs page {page_number}"
        try:
            body = self._requester.request_with_retry(
                ctx, self._programs_url(page_number), auth_token
            )
        except HarvestError as e:
            e.wrap(f"{label} request failed", page=page_number)
            raise
        return safe_decode(body, ProgramsPage, context=label)

    def _fetch_eligible_assets(
        self,
        ctx: RunContext,
        auth_token: str,
        handle: str,
    ) -> list[str]:
        """Request a program's scopes and keep the bounty-eligible assets.

        Only the first scopes page is read.

        Raises:
            HarvestError: Request or decode failure, tagged with the handle.
        """
        try:
            body = self._requester.request_with_retry(
                ctx, self._scopes_url(handle), auth_token
            )
            scope = safe_decode(body, ScopePage, context=f"scopes of {handle}")
        except HarvestError as e:
            e.wrap(f"handle {handle} failed", handle=handle)
            raise

        return [
            entry.asset_identifier
            for entry in scope.items
            if entry.eligible_for_bounty
        ]
