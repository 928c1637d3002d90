"""Client for the League of Kingdoms land contribution API.

One GET is issued per (weekly window, land) pair. Pairs are fetched
concurrently behind a semaphore; a pair that fails for any reason is
logged, reported in the result's statuses and contributes no records.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import httpx

from .contributions import filter_to_kingdoms, filter_to_range, parse_contribution_payload
from .models import AggregationResult, ContributionRecord, DateRange, FetchStatus, Period, WeeklyWindow
from .periods import MAX_CUSTOM_DAYS, expand_weekly_windows, resolve_period

log = logging.getLogger(__name__)

DEFAULT_LOK_API_URL = "https://api-lok-live.leagueofkingdoms.com/api/stat/land/contribution"
DEFAULT_LAND_IDS: Tuple[str, ...] = ("134378", "135682", "145933", "134152", "137752")
DEFAULT_MAX_CONCURRENCY = 4
DEFAULT_TIMEOUT_SECONDS = 10.0

PairOutcome = Tuple[List[ContributionRecord], FetchStatus]


class ContributionAggregator:
    """Collect weekly contribution totals for a fixed set of lands."""

    def __init__(
        self,
        land_ids: Iterable[str] = DEFAULT_LAND_IDS,
        *,
        endpoint: str = DEFAULT_LOK_API_URL,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_custom_days: int = MAX_CUSTOM_DAYS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.land_ids: Tuple[str, ...] = tuple(str(land_id) for land_id in land_ids)
        if not self.land_ids:
            raise ValueError("At least one land id is required.")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1.")
        self.endpoint = endpoint
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self.max_custom_days = max_custom_days
        self._transport = transport
        self._clock = clock

    def resolve(self, period: Period | str | None, custom_days: Optional[int] = None) -> DateRange:
        now = self._clock() if self._clock else None
        return resolve_period(period, custom_days, now=now, max_custom_days=self.max_custom_days)

    async def _fetch_pair(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        window: WeeklyWindow,
        land_id: str,
    ) -> PairOutcome:
        params = {"landId": land_id, **window.query_params()}
        label = f"landId {land_id}, week {params['from']} to {params['to']}"
        async with semaphore:
            try:
                response = await client.get(self.endpoint, params=params)
            except httpx.HTTPError as exc:
                log.error("Error fetching data for %s: %s", label, exc)
                return [], FetchStatus(land_id, window, ok=False, error=str(exc) or type(exc).__name__)

        if response.status_code != 200:
            log.error("LOK API returned status %s for %s: %s", response.status_code, label, response.text)
            return [], FetchStatus(land_id, window, ok=False, error=f"HTTP {response.status_code}")
        try:
            payload = response.json()
        except (ValueError, RecursionError) as exc:
            log.error("JSON parsing error for %s: %s", label, exc)
            return [], FetchStatus(land_id, window, ok=False, error="invalid JSON")

        records, skipped = parse_contribution_payload(payload, window, land_id)
        if not records and not skipped:
            code = payload.get("err", {}).get("code") if isinstance(payload, dict) and isinstance(payload.get("err"), dict) else None
            log.info("LOK API returned no contribution data for %s (error code: %s)", label, code)
        else:
            log.debug("LOK API success for %s: %d valid items", label, len(records))
        return records, FetchStatus(land_id, window, ok=True, accepted=len(records), skipped=skipped)

    async def _isolated_pair(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        window: WeeklyWindow,
        land_id: str,
    ) -> PairOutcome:
        try:
            return await self._fetch_pair(client, semaphore, window, land_id)
        except Exception as exc:
            log.exception("Unexpected error fetching landId %s, week starting %s", land_id, window.start)
            return [], FetchStatus(land_id, window, ok=False, error=type(exc).__name__)

    async def collect(self, date_range: DateRange) -> Tuple[List[ContributionRecord], Tuple[FetchStatus, ...]]:
        """Fetch every (window, land) pair covering ``date_range`` and trim to it."""

        windows = expand_weekly_windows(date_range)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            outcomes = await asyncio.gather(
                *(
                    self._isolated_pair(client, semaphore, window, land_id)
                    for window in windows
                    for land_id in self.land_ids
                )
            )
        raw = [record for records, _ in outcomes for record in records]
        statuses = tuple(status for _, status in outcomes)
        in_range = filter_to_range(raw, date_range)
        log.info(
            "Collected %d raw contributions for %s..%s, %d in range, %d/%d pairs failed",
            len(raw),
            *date_range.as_strings(),
            len(in_range),
            sum(1 for status in statuses if not status.ok),
            len(statuses),
        )
        return in_range, statuses

    async def all_contributions(self, period: Period | str | None, custom_days: Optional[int] = None) -> AggregationResult:
        date_range = self.resolve(period, custom_days)
        records, statuses = await self.collect(date_range)
        return AggregationResult(records=tuple(records), date_range=date_range, statuses=statuses)

    async def contributions_for_kingdoms(
        self,
        kingdom_ids: Sequence[str],
        period: Period | str | None,
        custom_days: Optional[int] = None,
    ) -> AggregationResult:
        result = await self.all_contributions(period, custom_days)
        return result.replace_records(tuple(filter_to_kingdoms(result.records, kingdom_ids)))


__all__ = [
    "ContributionAggregator",
    "DEFAULT_LAND_IDS",
    "DEFAULT_LOK_API_URL",
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_TIMEOUT_SECONDS",
]
