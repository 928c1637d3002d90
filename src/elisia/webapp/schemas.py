# elisia/webapp/schemas.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import (
    AnnouncementType,
    ContributionPeriod,
    DragoType,
    KingdomStatus,
    PaymentRequestStatus,
    PayoutStatus,
    RentalDuration,
    RentalStatus,
)


class CamelModel(BaseModel):
    """Request bodies arrive with camelCase keys; snake_case is accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LoginBody(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterBody(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class KingdomBody(CamelModel):
    name: str = Field(..., min_length=1)
    lok_kingdom_id: Optional[str] = None
    level: int = Field(1, ge=1)
    image_url: Optional[str] = None
    status: KingdomStatus = KingdomStatus.ACTIVE


class KingdomUpdateBody(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    lok_kingdom_id: Optional[str] = None
    level: Optional[int] = Field(None, ge=1)
    image_url: Optional[str] = None
    status: Optional[KingdomStatus] = None


class ContributionBody(CamelModel):
    kingdom_id: int
    amount: Decimal = Field(..., gt=0)
    period: ContributionPeriod = ContributionPeriod.WEEKLY
    description: Optional[str] = None


class WalletBody(CamelModel):
    address: str = Field(..., min_length=1)
    is_primary: bool = False


class PaymentRequestBody(CamelModel):
    amount: Decimal = Field(..., gt=0)
    wallet_address: str = Field(..., min_length=1)
    kingdom_id: Optional[int] = None
    description: Optional[str] = None


class PaymentRequestReview(CamelModel):
    status: PaymentRequestStatus
    admin_notes: Optional[str] = None


class DragoRentalBody(CamelModel):
    kingdom_id: int
    drago_type: DragoType
    duration: RentalDuration


class DragoRentalReview(CamelModel):
    status: RentalStatus
    admin_notes: Optional[str] = None
    rental_start_date: Optional[date] = None
    rental_end_date: Optional[date] = None


class PaymentSettingsBody(CamelModel):
    """Payout tiers as decimal amounts plus drago pricing in points."""

    payout_for_1000_points: Optional[Decimal] = Field(None, ge=0)
    payout_for_5000_points: Optional[Decimal] = Field(None, ge=0)
    payout_for_8000_points: Optional[Decimal] = Field(None, ge=0)
    payout_for_10000_points: Optional[Decimal] = Field(None, ge=0)
    minimum_payout: Optional[Decimal] = Field(None, ge=0)
    payout_frequency: Optional[ContributionPeriod] = None

    regular_drago1_week: Optional[int] = Field(None, ge=0)
    regular_drago2_weeks: Optional[int] = Field(None, ge=0)
    regular_drago3_weeks: Optional[int] = Field(None, ge=0)
    regular_drago1_month: Optional[int] = Field(None, ge=0)
    legendary_drago1_week: Optional[int] = Field(None, ge=0)
    legendary_drago2_weeks: Optional[int] = Field(None, ge=0)
    legendary_drago3_weeks: Optional[int] = Field(None, ge=0)
    legendary_drago1_month: Optional[int] = Field(None, ge=0)
    war_drago1_week: Optional[int] = Field(None, ge=0)
    war_drago2_weeks: Optional[int] = Field(None, ge=0)
    war_drago3_weeks: Optional[int] = Field(None, ge=0)
    war_drago1_month: Optional[int] = Field(None, ge=0)


class PayoutBody(CamelModel):
    user_id: int
    total_amount: Decimal = Field(..., gt=0)
    wallet_address: Optional[str] = None
    admin_notes: Optional[str] = None


class PayoutReview(CamelModel):
    status: PayoutStatus
    transaction_hash: Optional[str] = None
    admin_notes: Optional[str] = None


class AnnouncementBody(CamelModel):
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: AnnouncementType = AnnouncementType.INFO
