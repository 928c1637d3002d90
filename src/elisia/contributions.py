"""Validation, filtering and summaries for land contribution records."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .models import AggregationResult, ContributionRecord, DateRange, WeeklyWindow

log = logging.getLogger(__name__)

UNKNOWN_KINGDOM_NAME = "Unknown Kingdom"
UNKNOWN_LAND = "unknown"
ALL = "all"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _continent(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def parse_contribution_payload(
    payload: Any, window: WeeklyWindow, land_id: str
) -> Tuple[List[ContributionRecord], int]:
    """Extract valid records from one upstream response body.

    Returns the accepted records, each stamped with the window start and the
    land it came from, and the number of entries that were skipped. A body
    without a ``contribution`` list yields no records and no skips.
    """

    if not isinstance(payload, dict) or not isinstance(payload.get("contribution"), list):
        return [], 0
    records: List[ContributionRecord] = []
    skipped = 0
    for item in payload["contribution"]:
        if not isinstance(item, dict) or not _is_number(item.get("total")) or not item.get("kingdomId"):
            log.warning("Invalid item for landId %s, week %s: %r", land_id, window.start, item)
            skipped += 1
            continue
        records.append(
            ContributionRecord(
                kingdom_id=str(item["kingdomId"]),
                total=item["total"],
                name=str(item.get("name") or UNKNOWN_KINGDOM_NAME),
                continent=_continent(item.get("continent")),
                date=window.start,
                land_id=land_id,
            )
        )
    return records, skipped


def filter_to_range(records: Iterable[ContributionRecord], date_range: DateRange) -> List[ContributionRecord]:
    """Keep records whose week overlaps ``date_range``."""

    kept: List[ContributionRecord] = []
    for record in records:
        if not isinstance(record.date, date) or not _is_number(record.total):
            continue
        if date_range.overlaps(record.date, record.week_end):
            kept.append(record)
    return kept


def filter_to_kingdoms(records: Iterable[ContributionRecord], kingdom_ids: Iterable[str]) -> List[ContributionRecord]:
    wanted: Set[str] = {str(kingdom_id) for kingdom_id in kingdom_ids}
    return [record for record in records if record.kingdom_id in wanted]


def filter_by_continent(records: Iterable[ContributionRecord], continent: Optional[str | int]) -> List[ContributionRecord]:
    if continent is None or str(continent).strip().lower() in {"", ALL}:
        return list(records)
    try:
        target = int(continent)
    except (TypeError, ValueError):
        return []
    return [record for record in records if record.continent == target]


def filter_by_land(records: Iterable[ContributionRecord], land_id: Optional[str]) -> List[ContributionRecord]:
    if land_id is None or str(land_id).strip().lower() in {"", ALL}:
        return list(records)
    return [record for record in records if record.land_id == str(land_id)]


def summarise_land_stats(result: AggregationResult) -> Dict[str, Any]:
    """Totals per continent and per land for the admin land dashboard."""

    continent_totals: Dict[int, float] = defaultdict(float)
    continent_kingdoms: Dict[int, Set[str]] = defaultdict(set)
    land_totals: Dict[str, float] = defaultdict(float)
    land_kingdoms: Dict[str, Set[str]] = defaultdict(set)
    land_continents: Dict[str, Set[int]] = defaultdict(set)
    for record in result.records:
        land = record.land_id or UNKNOWN_LAND
        continent_totals[record.continent] += record.total
        continent_kingdoms[record.continent].add(record.kingdom_id)
        land_totals[land] += record.total
        land_kingdoms[land].add(record.kingdom_id)
        land_continents[land].add(record.continent)

    start, end = result.date_range.as_strings()
    return {
        "from": start,
        "to": end,
        "continentStats": {
            str(continent): {"total": total, "kingdomCount": len(continent_kingdoms[continent])}
            for continent, total in sorted(continent_totals.items())
        },
        "landStats": {
            land: {
                "total": total,
                "kingdomCount": len(land_kingdoms[land]),
                "continentCount": len(land_continents[land]),
            }
            for land, total in sorted(land_totals.items())
        },
        "totalContributions": sum(record.total for record in result.records),
        "totalKingdoms": len({record.kingdom_id for record in result.records}),
    }


__all__ = [
    "filter_by_continent",
    "filter_by_land",
    "filter_to_kingdoms",
    "filter_to_range",
    "parse_contribution_payload",
    "summarise_land_stats",
]
