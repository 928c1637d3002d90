"""Persistence and SQLModel definitions for the Elisia web dashboard."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel, create_engine

from ..models import (
    AnnouncementType,
    ContributionPeriod,
    KingdomStatus,
    PaymentRequestStatus,
    PayoutStatus,
    RentalStatus,
)
from ..payouts import DEFAULT_MINIMUM_PAYOUT_CENTS
from .config import SQLITE_FILE_NAME

# ---------------------------------------------------------------------------
# Database models
# ---------------------------------------------------------------------------
engine = create_engine(
    f"sqlite:///{SQLITE_FILE_NAME}",
    echo=False,
    connect_args={"check_same_thread": False},
)

# Ensure fresh metadata when re-importing in test contexts.
SQLModel.metadata.clear()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_approved: bool = False
    is_admin: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Kingdom(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True, foreign_key="user.id")
    name: str
    lok_kingdom_id: Optional[str] = Field(default=None, unique=True)
    level: int = 1
    image_url: Optional[str] = None
    status: str = KingdomStatus.ACTIVE.value  # active|developing|inactive
    total_contributions_cents: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Contribution(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    kingdom_id: int = Field(index=True, foreign_key="kingdom.id")
    amount_cents: int
    period: str = ContributionPeriod.WEEKLY.value  # weekly|biweekly|monthly
    description: Optional[str] = None
    is_paid: bool = False
    payout_id: Optional[int] = None
    created_at: datetime = Field(default_factory=utc_now)


class Wallet(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True, foreign_key="user.id")
    address: str
    is_primary: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)


class PaymentRequest(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True, foreign_key="user.id")
    kingdom_id: Optional[int] = None
    amount_cents: int
    wallet_address: str
    description: Optional[str] = None
    status: str = PaymentRequestStatus.PENDING.value  # pending|approved|rejected|paid
    admin_notes: Optional[str] = None
    requested_at: datetime = Field(default_factory=utc_now)
    processed_at: Optional[datetime] = None
    processed_by: Optional[int] = None


class PaymentSettings(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    payout_for_1000_points_cents: Optional[int] = None
    payout_for_5000_points_cents: Optional[int] = None
    payout_for_8000_points_cents: Optional[int] = None
    payout_for_10000_points_cents: Optional[int] = None
    minimum_payout_cents: int = DEFAULT_MINIMUM_PAYOUT_CENTS
    payout_frequency: str = ContributionPeriod.MONTHLY.value
    drago_points: str = "{}"  # JSON: {"regularDrago1Week": 5000, ...}
    is_active: bool = True
    updated_by: Optional[int] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Payout(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True, foreign_key="user.id")
    total_amount_cents: int
    wallet_address: Optional[str] = None
    status: str = PayoutStatus.PENDING.value  # pending|processing|completed|failed
    transaction_hash: Optional[str] = None
    admin_notes: Optional[str] = None
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)


class UserPayoutSummary(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(unique=True, foreign_key="user.id")
    last_payout_date: Optional[datetime] = None
    total_earned_cents: int = 0
    total_paid_cents: int = 0
    pending_amount_cents: int = 0
    unpaid_contributions_cents: int = 0
    updated_at: datetime = Field(default_factory=utc_now)


class DragoRentalRequest(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True, foreign_key="user.id")
    kingdom_id: int
    drago_type: str  # regular|legendary|war
    duration: str  # 1Week|2Weeks|3Weeks|1Month
    points_required: int
    status: str = RentalStatus.PENDING.value
    admin_notes: Optional[str] = None
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None
    rental_start_date: Optional[date] = None
    rental_end_date: Optional[date] = None
    requested_at: datetime = Field(default_factory=utc_now)


class Announcement(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    message: str
    type: str = AnnouncementType.INFO.value
    is_active: bool = True
    created_by: Optional[int] = None
    created_at: datetime = Field(default_factory=utc_now)


# ---------------------------------------------------------------------------
# Database initialisation
# ---------------------------------------------------------------------------
def create_db_and_tables() -> None:
    SQLModel.metadata.create_all(engine)


create_db_and_tables()


__all__ = [
    "engine",
    "User",
    "Kingdom",
    "Contribution",
    "Wallet",
    "PaymentRequest",
    "PaymentSettings",
    "Payout",
    "UserPayoutSummary",
    "DragoRentalRequest",
    "Announcement",
    "create_db_and_tables",
]
