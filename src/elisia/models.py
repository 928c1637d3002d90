"""Domain models used by the Elisia land program."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, Optional, Tuple

WEEK_LENGTH = timedelta(days=7)
SUNDAY = 6  # date.weekday() value


class Period(str, Enum):
    """Reporting periods the dashboards can ask contributions for."""

    CURRENT_WEEK = "currentWeek"
    LAST_WEEK = "lastWeek"
    LAST_2_WEEKS = "last2Weeks"
    LAST_3_WEEKS = "last3Weeks"
    CURRENT_MONTH = "currentMonth"
    LAST_MONTH = "lastMonth"
    CUSTOM_DAYS = "customDays"

    @classmethod
    def parse(cls, raw: "Period | str | None") -> Optional["Period"]:
        """Return the matching period or ``None`` for unknown tags."""

        if isinstance(raw, cls):
            return raw
        if not raw:
            return None
        try:
            return cls(str(raw).strip())
        except ValueError:
            return None


class KingdomStatus(str, Enum):
    ACTIVE = "active"
    DEVELOPING = "developing"
    INACTIVE = "inactive"


class ContributionPeriod(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class PaymentRequestStatus(str, Enum):
    """Lifecycle for cash payout requests raised by users."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class PayoutStatus(str, Enum):
    """Lifecycle for payouts issued by administrators."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class RentalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    COMPLETED = "completed"


class DragoType(str, Enum):
    REGULAR = "regular"
    LEGENDARY = "legendary"
    WAR = "war"


class RentalDuration(str, Enum):
    ONE_WEEK = "1Week"
    TWO_WEEKS = "2Weeks"
    THREE_WEEKS = "3Weeks"
    ONE_MONTH = "1Month"


class AnnouncementType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    URGENT = "urgent"


def format_day(day: date) -> str:
    """Return ``day`` as ``YYYY-MM-DD``."""

    return day.isoformat()


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive range of UTC calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Date range start {self.start} is after end {self.end}.")

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def overlaps(self, start: date, end: date) -> bool:
        """True when ``[start, end]`` shares at least one day with this range."""

        return start <= self.end and self.start <= end

    def as_strings(self) -> Tuple[str, str]:
        return format_day(self.start), format_day(self.end)


@dataclass(frozen=True, slots=True)
class WeeklyWindow:
    """Sunday to Saturday bucket accepted by the contribution API."""

    start: date

    def __post_init__(self) -> None:
        if self.start.weekday() != SUNDAY:
            raise ValueError(f"Weekly windows must start on a Sunday, got {self.start}.")

    @property
    def end(self) -> date:
        return self.start + timedelta(days=6)

    def next(self) -> "WeeklyWindow":
        return WeeklyWindow(self.start + WEEK_LENGTH)

    def query_params(self) -> Dict[str, str]:
        return {"from": format_day(self.start), "to": format_day(self.end)}


@dataclass(frozen=True, slots=True)
class ContributionRecord:
    """Points a kingdom contributed to one land during one weekly window."""

    kingdom_id: str
    total: float
    name: str
    continent: int
    date: date
    land_id: Optional[str] = None

    @property
    def week_end(self) -> date:
        return self.date + timedelta(days=6)

    def to_dict(self, date_range: Optional[DateRange] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "kingdomId": self.kingdom_id,
            "total": self.total,
            "name": self.name,
            "continent": self.continent,
            "date": format_day(self.date),
            "landId": self.land_id,
        }
        if date_range is not None:
            payload["from"], payload["to"] = date_range.as_strings()
        return payload


@dataclass(frozen=True, slots=True)
class FetchStatus:
    """Outcome of one (window, land) query against the upstream API."""

    land_id: str
    window: WeeklyWindow
    ok: bool
    accepted: int = 0
    skipped: int = 0
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Contribution records in range plus the originally requested dates."""

    records: Tuple[ContributionRecord, ...]
    date_range: DateRange
    statuses: Tuple[FetchStatus, ...] = field(default_factory=tuple)

    @property
    def failed_pairs(self) -> int:
        return sum(1 for status in self.statuses if not status.ok)

    def replace_records(self, records: Tuple[ContributionRecord, ...]) -> "AggregationResult":
        return AggregationResult(records=tuple(records), date_range=self.date_range, statuses=self.statuses)

    def to_dict(self) -> Dict[str, Any]:
        start, end = self.date_range.as_strings()
        return {
            "data": [record.to_dict(self.date_range) for record in self.records],
            "from": start,
            "to": end,
            "pairs": {"requested": len(self.statuses), "failed": self.failed_pairs},
        }
