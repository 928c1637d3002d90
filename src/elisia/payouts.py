"""Payout estimation from contribution points and drago rental pricing."""

from __future__ import annotations

from typing import Mapping, Optional

from .models import DragoType, RentalDuration

PAYOUT_TIER_POINTS = (1000, 5000, 8000, 10000)
DEFAULT_MINIMUM_PAYOUT_CENTS = 1000


def tier_payout_cents(points: float, tiers: Mapping[int, Optional[int]]) -> int:
    """Cash payout of the highest configured tier that ``points`` reaches."""

    payout = 0
    for threshold in sorted(tiers):
        amount = tiers[threshold]
        if amount is None:
            continue
        if points >= threshold:
            payout = amount
    return payout


def can_request_payout(estimate_cents: int, minimum_cents: Optional[int]) -> bool:
    minimum = DEFAULT_MINIMUM_PAYOUT_CENTS if minimum_cents is None else minimum_cents
    return estimate_cents >= minimum


def drago_points_key(drago_type: DragoType | str, duration: RentalDuration | str) -> str:
    """Return the settings key for a drago type and rental duration, e.g. ``warDrago2Weeks``."""

    kind = DragoType(drago_type).value
    span = RentalDuration(duration).value
    return f"{kind}Drago{span}"


def drago_points_required(
    drago_points: Mapping[str, int], drago_type: DragoType | str, duration: RentalDuration | str
) -> Optional[int]:
    points = drago_points.get(drago_points_key(drago_type, duration))
    if not points or points <= 0:
        return None
    return int(points)


__all__ = [
    "DEFAULT_MINIMUM_PAYOUT_CENTS",
    "PAYOUT_TIER_POINTS",
    "can_request_payout",
    "drago_points_key",
    "drago_points_required",
    "tier_payout_cents",
]
