"""Elisia land program: weekly land contribution aggregation and payout tooling."""

from .api import ApiExporter
from .contributions import (
    filter_by_continent,
    filter_by_land,
    filter_to_kingdoms,
    filter_to_range,
    summarise_land_stats,
)
from .exceptions import (
    AccountLockedError,
    AuthenticationError,
    DuplicateKingdomError,
    DuplicateUserError,
    ElisiaError,
    InvalidStatusError,
    KingdomNotFoundError,
    PaymentSettingsMissingError,
    RequestNotFoundError,
    UserNotFoundError,
)
from .lok import ContributionAggregator
from .models import (
    AggregationResult,
    ContributionRecord,
    DateRange,
    FetchStatus,
    Period,
    WeeklyWindow,
)
from .ops import HealthMonitor, setup_logging
from .periods import expand_weekly_windows, resolve_period
from .security import AuthManager

__all__ = [
    "AccountLockedError",
    "AggregationResult",
    "ApiExporter",
    "AuthManager",
    "AuthenticationError",
    "ContributionAggregator",
    "ContributionRecord",
    "DateRange",
    "DuplicateKingdomError",
    "DuplicateUserError",
    "ElisiaError",
    "FetchStatus",
    "HealthMonitor",
    "InvalidStatusError",
    "KingdomNotFoundError",
    "PaymentSettingsMissingError",
    "Period",
    "RequestNotFoundError",
    "UserNotFoundError",
    "WeeklyWindow",
    "expand_weekly_windows",
    "filter_by_continent",
    "filter_by_land",
    "filter_to_kingdoms",
    "filter_to_range",
    "resolve_period",
    "setup_logging",
    "summarise_land_stats",
]
