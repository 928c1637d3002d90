"""Database accessors for users, kingdoms, contributions and payout workflows."""
from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, desc, select

from ..exceptions import (
    DuplicateKingdomError,
    DuplicateUserError,
    InvalidStatusError,
    KingdomNotFoundError,
    PaymentSettingsMissingError,
    RequestNotFoundError,
    UserNotFoundError,
)
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
from ..money import require_positive
from ..payouts import drago_points_required
from ..security import hash_password
from .persistence import (
    Announcement,
    Contribution,
    DragoRentalRequest,
    Kingdom,
    PaymentRequest,
    PaymentSettings,
    Payout,
    User,
    UserPayoutSummary,
    Wallet,
    engine,
    utc_now,
)

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)

KINGDOM_FIELDS = ("name", "lok_kingdom_id", "level", "image_url", "status")
PAYMENT_SETTINGS_FIELDS = (
    "payout_for_1000_points_cents",
    "payout_for_5000_points_cents",
    "payout_for_8000_points_cents",
    "payout_for_10000_points_cents",
    "minimum_payout_cents",
    "payout_frequency",
)
SUMMARY_FIELDS = (
    "last_payout_date",
    "total_earned_cents",
    "total_paid_cents",
    "pending_amount_cents",
    "unpaid_contributions_cents",
)


def _now() -> datetime:
    return utc_now()


def _status(enum_cls: Type[Any], value: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidStatusError(f"Unknown value {value!r}; expected one of: {allowed}.") from exc


def _get_or_raise(session: Session, model: Type[ModelT], row_id: int, error: Type[Exception]) -> ModelT:
    row = session.get(model, row_id)
    if row is None:
        raise error(f"{model.__name__} {row_id} not found.")
    return row


def _save(session: Session, row: ModelT) -> ModelT:
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
def create_user(
    username: str,
    password: str,
    *,
    email: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    is_admin: bool = False,
    is_approved: bool = False,
) -> User:
    with Session(engine) as session:
        if session.exec(select(User).where(User.username == username)).first():
            raise DuplicateUserError(f"Username {username!r} already exists.")
        user = User(
            username=username,
            password_hash=hash_password(password),
            email=email,
            first_name=first_name,
            last_name=last_name,
            is_admin=is_admin,
            is_approved=is_approved,
        )
        return _save(session, user)


def get_user(user_id: int) -> Optional[User]:
    with Session(engine) as session:
        return session.get(User, user_id)


def get_user_by_username(username: str) -> Optional[User]:
    with Session(engine) as session:
        return session.exec(select(User).where(User.username == username)).first()


def get_pending_users() -> List[User]:
    with Session(engine) as session:
        return list(session.exec(select(User).where(User.is_approved == False).order_by(User.created_at)))  # noqa: E712


def get_all_users() -> List[User]:
    with Session(engine) as session:
        return list(session.exec(select(User).order_by(desc(User.created_at))))


def get_all_users_with_details() -> List[Dict[str, Any]]:
    """Every user with their kingdoms and wallets, newest users first."""

    with Session(engine) as session:
        users = session.exec(select(User).order_by(desc(User.created_at))).all()
        kingdoms = session.exec(select(Kingdom).order_by(Kingdom.created_at)).all()
        wallets = session.exec(select(Wallet).order_by(Wallet.created_at)).all()
    by_user: Dict[int, Dict[str, Any]] = {user.id: {"user": user, "kingdoms": [], "wallets": []} for user in users}
    for kingdom in kingdoms:
        if kingdom.user_id in by_user:
            by_user[kingdom.user_id]["kingdoms"].append(kingdom)
    for wallet in wallets:
        if wallet.user_id in by_user:
            by_user[wallet.user_id]["wallets"].append(wallet)
    return list(by_user.values())


def approve_user(user_id: int) -> User:
    with Session(engine) as session:
        user = _get_or_raise(session, User, user_id, UserNotFoundError)
        user.is_approved = True
        user.updated_at = _now()
        return _save(session, user)


def reject_user(user_id: int) -> None:
    """Remove an account that is still waiting for approval."""

    user = get_user(user_id)
    if user is None:
        raise UserNotFoundError(f"User {user_id} not found.")
    if user.is_approved:
        raise InvalidStatusError("Only pending accounts can be rejected.")
    delete_user(user_id)


def delete_user(user_id: int) -> None:
    """Delete a user together with everything they own."""

    with Session(engine) as session:
        user = _get_or_raise(session, User, user_id, UserNotFoundError)
        kingdoms = session.exec(select(Kingdom).where(Kingdom.user_id == user_id)).all()
        kingdom_ids = [kingdom.id for kingdom in kingdoms]
        owned: List[SQLModel] = []
        if kingdom_ids:
            owned.extend(session.exec(select(Contribution).where(Contribution.kingdom_id.in_(kingdom_ids))).all())
        owned.extend(kingdoms)
        for model in (Wallet, PaymentRequest, Payout, UserPayoutSummary, DragoRentalRequest):
            owned.extend(session.exec(select(model).where(model.user_id == user_id)).all())
        for row in owned:
            session.delete(row)
        session.delete(user)
        session.commit()
    log.info("Deleted user %s and %d owned rows", user_id, len(owned))


def ensure_admin_user(username: str, password: str) -> User:
    existing = get_user_by_username(username)
    if existing is not None:
        return existing
    user = create_user(username, password, first_name="Admin", is_admin=True, is_approved=True)
    log.info("Admin user %r created", username)
    return user


# ---------------------------------------------------------------------------
# Kingdoms
# ---------------------------------------------------------------------------
def _check_lok_id_free(session: Session, lok_kingdom_id: Optional[str], *, exclude_id: Optional[int] = None) -> None:
    if not lok_kingdom_id:
        return
    clash = session.exec(select(Kingdom).where(Kingdom.lok_kingdom_id == lok_kingdom_id)).first()
    if clash is not None and clash.id != exclude_id:
        raise DuplicateKingdomError(f"LOK kingdom id {lok_kingdom_id!r} is already registered.")


def get_user_kingdoms(user_id: int) -> List[Kingdom]:
    with Session(engine) as session:
        return list(session.exec(select(Kingdom).where(Kingdom.user_id == user_id).order_by(Kingdom.created_at)))


def get_kingdom(kingdom_id: int) -> Optional[Kingdom]:
    with Session(engine) as session:
        return session.get(Kingdom, kingdom_id)


def get_kingdom_by_lok_id(lok_kingdom_id: str) -> Optional[Kingdom]:
    with Session(engine) as session:
        return session.exec(select(Kingdom).where(Kingdom.lok_kingdom_id == lok_kingdom_id)).first()


def get_all_kingdoms() -> List[Kingdom]:
    with Session(engine) as session:
        return list(session.exec(select(Kingdom).order_by(Kingdom.created_at)))


def create_kingdom(
    user_id: int,
    name: str,
    *,
    lok_kingdom_id: Optional[str] = None,
    level: int = 1,
    image_url: Optional[str] = None,
    status: str = KingdomStatus.ACTIVE.value,
) -> Kingdom:
    with Session(engine) as session:
        _get_or_raise(session, User, user_id, UserNotFoundError)
        lok_kingdom_id = (lok_kingdom_id or "").strip() or None
        _check_lok_id_free(session, lok_kingdom_id)
        kingdom = Kingdom(
            user_id=user_id,
            name=name,
            lok_kingdom_id=lok_kingdom_id,
            level=level,
            image_url=image_url,
            status=_status(KingdomStatus, status),
        )
        return _save(session, kingdom)


def update_kingdom(kingdom_id: int, changes: Mapping[str, Any]) -> Kingdom:
    with Session(engine) as session:
        kingdom = _get_or_raise(session, Kingdom, kingdom_id, KingdomNotFoundError)
        for field_name in KINGDOM_FIELDS:
            if field_name not in changes:
                continue
            value = changes[field_name]
            if field_name == "lok_kingdom_id":
                value = (value or "").strip() or None
                _check_lok_id_free(session, value, exclude_id=kingdom.id)
            elif field_name == "status":
                value = _status(KingdomStatus, value)
            setattr(kingdom, field_name, value)
        kingdom.updated_at = _now()
        return _save(session, kingdom)


# ---------------------------------------------------------------------------
# Contributions
# ---------------------------------------------------------------------------
def get_kingdom_contributions(kingdom_id: int) -> List[Contribution]:
    with Session(engine) as session:
        query = select(Contribution).where(Contribution.kingdom_id == kingdom_id).order_by(desc(Contribution.created_at))
        return list(session.exec(query))


def get_contributions_by_period(kingdom_id: int, period: str) -> List[Contribution]:
    with Session(engine) as session:
        query = (
            select(Contribution)
            .where(Contribution.kingdom_id == kingdom_id, Contribution.period == period)
            .order_by(desc(Contribution.created_at))
        )
        return list(session.exec(query))


def create_contribution(
    kingdom_id: int,
    amount_cents: int,
    *,
    period: str = ContributionPeriod.WEEKLY.value,
    description: Optional[str] = None,
) -> Contribution:
    require_positive(amount_cents)
    with Session(engine) as session:
        kingdom = _get_or_raise(session, Kingdom, kingdom_id, KingdomNotFoundError)
        contribution = Contribution(
            kingdom_id=kingdom_id,
            amount_cents=amount_cents,
            period=_status(ContributionPeriod, period),
            description=description,
        )
        kingdom.total_contributions_cents += amount_cents
        kingdom.updated_at = _now()
        session.add(kingdom)
        return _save(session, contribution)


# ---------------------------------------------------------------------------
# Wallets
# ---------------------------------------------------------------------------
def _demote_primary_wallets(session: Session, user_id: int, *, keep_id: Optional[int] = None) -> None:
    for wallet in session.exec(select(Wallet).where(Wallet.user_id == user_id, Wallet.is_primary == True)):  # noqa: E712
        if wallet.id != keep_id:
            wallet.is_primary = False
            session.add(wallet)


def get_user_wallets(user_id: int) -> List[Wallet]:
    with Session(engine) as session:
        return list(session.exec(select(Wallet).where(Wallet.user_id == user_id).order_by(Wallet.created_at)))


def create_wallet(user_id: int, address: str, *, is_primary: bool = False) -> Wallet:
    """Add a wallet; the first wallet of a user is always primary."""

    with Session(engine) as session:
        has_wallets = session.exec(select(Wallet).where(Wallet.user_id == user_id)).first() is not None
        primary = is_primary or not has_wallets
        if primary:
            _demote_primary_wallets(session, user_id)
        wallet = Wallet(user_id=user_id, address=address.strip(), is_primary=primary)
        return _save(session, wallet)


def update_wallet(wallet_id: int, *, is_primary: Optional[bool] = None, is_active: Optional[bool] = None) -> Wallet:
    with Session(engine) as session:
        wallet = _get_or_raise(session, Wallet, wallet_id, RequestNotFoundError)
        if is_primary:
            _demote_primary_wallets(session, wallet.user_id, keep_id=wallet.id)
        if is_primary is not None:
            wallet.is_primary = is_primary
        if is_active is not None:
            wallet.is_active = is_active
        return _save(session, wallet)


# ---------------------------------------------------------------------------
# Payment requests
# ---------------------------------------------------------------------------
def get_user_payment_requests(user_id: int) -> List[PaymentRequest]:
    with Session(engine) as session:
        query = select(PaymentRequest).where(PaymentRequest.user_id == user_id).order_by(desc(PaymentRequest.requested_at))
        return list(session.exec(query))


def create_payment_request(
    user_id: int,
    amount_cents: int,
    wallet_address: str,
    *,
    kingdom_id: Optional[int] = None,
    description: Optional[str] = None,
) -> PaymentRequest:
    require_positive(amount_cents)
    with Session(engine) as session:
        if kingdom_id is not None:
            kingdom = _get_or_raise(session, Kingdom, kingdom_id, KingdomNotFoundError)
            if kingdom.user_id != user_id:
                raise KingdomNotFoundError(f"Kingdom {kingdom_id} not found.")
        request = PaymentRequest(
            user_id=user_id,
            kingdom_id=kingdom_id,
            amount_cents=amount_cents,
            wallet_address=wallet_address.strip(),
            description=description,
        )
        return _save(session, request)


def get_pending_payment_requests() -> List[PaymentRequest]:
    with Session(engine) as session:
        query = (
            select(PaymentRequest)
            .where(PaymentRequest.status == PaymentRequestStatus.PENDING.value)
            .order_by(desc(PaymentRequest.requested_at))
        )
        return list(session.exec(query))


def get_all_payment_requests() -> List[PaymentRequest]:
    with Session(engine) as session:
        return list(session.exec(select(PaymentRequest).order_by(desc(PaymentRequest.requested_at))))


def update_payment_request_status(
    request_id: int,
    status: str,
    *,
    admin_notes: Optional[str] = None,
    processed_by: Optional[int] = None,
) -> PaymentRequest:
    with Session(engine) as session:
        request = _get_or_raise(session, PaymentRequest, request_id, RequestNotFoundError)
        request.status = _status(PaymentRequestStatus, status)
        request.admin_notes = admin_notes
        request.processed_by = processed_by
        request.processed_at = _now()
        return _save(session, request)


# ---------------------------------------------------------------------------
# Payment settings
# ---------------------------------------------------------------------------
def _clean_drago_points(raw: Optional[Mapping[str, Any]]) -> str:
    cleaned: Dict[str, int] = {}
    for drago_type in DragoType:
        for duration in RentalDuration:
            key = f"{drago_type.value}Drago{duration.value}"
            value = (raw or {}).get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
                cleaned[key] = int(value)
    return json.dumps(cleaned, sort_keys=True)


def drago_points_for(settings: PaymentSettings) -> Dict[str, int]:
    try:
        loaded = json.loads(settings.drago_points or "{}")
    except ValueError:
        return {}
    return loaded if isinstance(loaded, dict) else {}


def payout_tiers_for(settings: PaymentSettings) -> Dict[int, Optional[int]]:
    return {
        1000: settings.payout_for_1000_points_cents,
        5000: settings.payout_for_5000_points_cents,
        8000: settings.payout_for_8000_points_cents,
        10000: settings.payout_for_10000_points_cents,
    }


def get_active_payment_settings() -> Optional[PaymentSettings]:
    with Session(engine) as session:
        query = (
            select(PaymentSettings)
            .where(PaymentSettings.is_active == True)  # noqa: E712
            .order_by(desc(PaymentSettings.created_at), desc(PaymentSettings.id))
        )
        return session.exec(query).first()


def create_payment_settings(
    values: Mapping[str, Any],
    *,
    drago_points: Optional[Mapping[str, Any]] = None,
    updated_by: Optional[int] = None,
) -> PaymentSettings:
    """Store a new active settings row, deactivating the previous one."""

    with Session(engine) as session:
        for previous in session.exec(select(PaymentSettings).where(PaymentSettings.is_active == True)):  # noqa: E712
            previous.is_active = False
            session.add(previous)
        settings = PaymentSettings(
            **{key: values[key] for key in PAYMENT_SETTINGS_FIELDS if values.get(key) is not None},
            drago_points=_clean_drago_points(drago_points),
            updated_by=updated_by,
        )
        settings.payout_frequency = _status(ContributionPeriod, settings.payout_frequency)
        return _save(session, settings)


def update_payment_settings(
    settings_id: int,
    values: Mapping[str, Any],
    *,
    drago_points: Optional[Mapping[str, Any]] = None,
    updated_by: Optional[int] = None,
) -> PaymentSettings:
    with Session(engine) as session:
        settings = _get_or_raise(session, PaymentSettings, settings_id, PaymentSettingsMissingError)
        for key in PAYMENT_SETTINGS_FIELDS:
            if key in values:
                setattr(settings, key, values[key])
        if settings.minimum_payout_cents is None:
            settings.minimum_payout_cents = 0
        settings.payout_frequency = _status(ContributionPeriod, settings.payout_frequency)
        if drago_points is not None:
            settings.drago_points = _clean_drago_points({**drago_points_for(settings), **drago_points})
        settings.updated_by = updated_by
        settings.updated_at = _now()
        return _save(session, settings)


# ---------------------------------------------------------------------------
# Payouts and payout summaries
# ---------------------------------------------------------------------------
def get_user_payouts(user_id: int) -> List[Payout]:
    with Session(engine) as session:
        return list(session.exec(select(Payout).where(Payout.user_id == user_id).order_by(desc(Payout.created_at))))


def get_pending_payouts() -> List[Payout]:
    with Session(engine) as session:
        query = select(Payout).where(Payout.status == PayoutStatus.PENDING.value).order_by(desc(Payout.created_at))
        return list(session.exec(query))


def _unpaid_contributions(session: Session, user_id: int) -> List[Contribution]:
    query = (
        select(Contribution)
        .join(Kingdom, Contribution.kingdom_id == Kingdom.id)
        .where(Kingdom.user_id == user_id, Contribution.is_paid == False)  # noqa: E712
        .order_by(desc(Contribution.created_at))
    )
    return list(session.exec(query))


def calculate_unpaid_contributions(user_id: int) -> Tuple[int, List[Contribution]]:
    """Return the unpaid amount in cents and the unpaid contributions behind it."""

    with Session(engine) as session:
        contributions = _unpaid_contributions(session, user_id)
    return sum(item.amount_cents for item in contributions), contributions


def get_user_payout_summary(user_id: int) -> Optional[UserPayoutSummary]:
    with Session(engine) as session:
        return session.exec(select(UserPayoutSummary).where(UserPayoutSummary.user_id == user_id)).first()


def update_user_payout_summary(user_id: int, changes: Mapping[str, Any]) -> UserPayoutSummary:
    with Session(engine) as session:
        summary = session.exec(select(UserPayoutSummary).where(UserPayoutSummary.user_id == user_id)).first()
        if summary is None:
            summary = UserPayoutSummary(user_id=user_id)
        for key in SUMMARY_FIELDS:
            if key in changes:
                setattr(summary, key, changes[key])
        summary.updated_at = _now()
        return _save(session, summary)


def create_payout(
    user_id: int,
    total_amount_cents: int,
    *,
    wallet_address: Optional[str] = None,
    admin_notes: Optional[str] = None,
    processed_by: Optional[int] = None,
) -> Payout:
    """Record a payout, settle the user's unpaid contributions and refresh the summary."""

    require_positive(total_amount_cents)
    with Session(engine) as session:
        _get_or_raise(session, User, user_id, UserNotFoundError)
        payout = _save(
            session,
            Payout(
                user_id=user_id,
                total_amount_cents=total_amount_cents,
                wallet_address=wallet_address,
                admin_notes=admin_notes,
                processed_by=processed_by,
            ),
        )
        settled = _unpaid_contributions(session, user_id)
        for contribution in settled:
            contribution.is_paid = True
            contribution.payout_id = payout.id
            session.add(contribution)
        session.commit()
        session.refresh(payout)
        summary = session.exec(select(UserPayoutSummary).where(UserPayoutSummary.user_id == user_id)).first()
        total_paid = (summary.total_paid_cents if summary else 0) + total_amount_cents
        total_earned = (summary.total_earned_cents if summary else 0) + sum(item.amount_cents for item in settled)
    update_user_payout_summary(
        user_id,
        {
            "last_payout_date": _now(),
            "total_paid_cents": total_paid,
            "total_earned_cents": total_earned,
            "pending_amount_cents": 0,
            "unpaid_contributions_cents": 0,
        },
    )
    log.info("Payout %s of %d cents created for user %s, %d contributions settled", payout.id, total_amount_cents, user_id, len(settled))
    return payout


def update_payout_status(
    payout_id: int,
    status: str,
    *,
    transaction_hash: Optional[str] = None,
    admin_notes: Optional[str] = None,
    processed_by: Optional[int] = None,
) -> Payout:
    with Session(engine) as session:
        payout = _get_or_raise(session, Payout, payout_id, RequestNotFoundError)
        payout.status = _status(PayoutStatus, status)
        if transaction_hash is not None:
            payout.transaction_hash = transaction_hash
        if admin_notes is not None:
            payout.admin_notes = admin_notes
        payout.processed_by = processed_by
        payout.processed_at = _now()
        return _save(session, payout)


# ---------------------------------------------------------------------------
# Drago rentals
# ---------------------------------------------------------------------------
def get_user_drago_rental_requests(user_id: int) -> List[DragoRentalRequest]:
    with Session(engine) as session:
        query = (
            select(DragoRentalRequest)
            .where(DragoRentalRequest.user_id == user_id)
            .order_by(desc(DragoRentalRequest.requested_at))
        )
        return list(session.exec(query))


def get_all_drago_rental_requests() -> List[DragoRentalRequest]:
    with Session(engine) as session:
        return list(session.exec(select(DragoRentalRequest).order_by(desc(DragoRentalRequest.requested_at))))


def get_pending_drago_rental_requests() -> List[DragoRentalRequest]:
    with Session(engine) as session:
        query = (
            select(DragoRentalRequest)
            .where(DragoRentalRequest.status == RentalStatus.PENDING.value)
            .order_by(desc(DragoRentalRequest.requested_at))
        )
        return list(session.exec(query))


def create_drago_rental_request(user_id: int, kingdom_id: int, drago_type: str, duration: str) -> DragoRentalRequest:
    """Request a drago rental priced in points from the active settings."""

    kind = _status(DragoType, drago_type)
    span = _status(RentalDuration, duration)
    settings = get_active_payment_settings()
    if settings is None:
        raise PaymentSettingsMissingError("Drago rental pricing has not been configured.")
    points = drago_points_required(drago_points_for(settings), kind, span)
    if points is None:
        raise PaymentSettingsMissingError(f"No points configured for a {kind} drago for {span}.")
    with Session(engine) as session:
        kingdom = _get_or_raise(session, Kingdom, kingdom_id, KingdomNotFoundError)
        if kingdom.user_id != user_id:
            raise KingdomNotFoundError(f"Kingdom {kingdom_id} not found.")
        request = DragoRentalRequest(
            user_id=user_id,
            kingdom_id=kingdom_id,
            drago_type=kind,
            duration=span,
            points_required=points,
        )
        return _save(session, request)


def update_drago_rental_request_status(
    request_id: int,
    status: str,
    *,
    admin_notes: Optional[str] = None,
    processed_by: Optional[int] = None,
    rental_start_date: Optional[date] = None,
    rental_end_date: Optional[date] = None,
) -> DragoRentalRequest:
    with Session(engine) as session:
        request = _get_or_raise(session, DragoRentalRequest, request_id, RequestNotFoundError)
        request.status = _status(RentalStatus, status)
        if admin_notes is not None:
            request.admin_notes = admin_notes
        if processed_by is not None:
            request.processed_by = processed_by
        if rental_start_date is not None:
            request.rental_start_date = rental_start_date
        if rental_end_date is not None:
            request.rental_end_date = rental_end_date
        if request.status != RentalStatus.PENDING.value:
            request.processed_at = _now()
        return _save(session, request)


# ---------------------------------------------------------------------------
# Announcements
# ---------------------------------------------------------------------------
def create_announcement(
    title: str,
    message: str,
    *,
    type: str = AnnouncementType.INFO.value,
    created_by: Optional[int] = None,
) -> Announcement:
    with Session(engine) as session:
        announcement = Announcement(
            title=title,
            message=message,
            type=_status(AnnouncementType, type),
            created_by=created_by,
        )
        return _save(session, announcement)


def get_active_announcements() -> List[Announcement]:
    with Session(engine) as session:
        query = select(Announcement).where(Announcement.is_active == True).order_by(desc(Announcement.created_at))  # noqa: E712
        return list(session.exec(query))


# ---------------------------------------------------------------------------
# Admin statistics
# ---------------------------------------------------------------------------
def _count(session: Session, model: Type[SQLModel], *conditions: Any) -> int:
    query = select(func.count()).select_from(model)
    if conditions:
        query = query.where(*conditions)
    return int(session.exec(query).one())


def get_system_stats() -> Dict[str, Any]:
    with Session(engine) as session:
        approved_users = _count(session, User, User.is_approved == True)  # noqa: E712
        pending_users = _count(session, User, User.is_approved == False)  # noqa: E712
        pending_payments = _count(session, PaymentRequest, PaymentRequest.status == PaymentRequestStatus.PENDING.value)
        total_kingdoms = _count(session, Kingdom)
        paid_query = select(func.coalesce(func.sum(PaymentRequest.amount_cents), 0)).where(
            PaymentRequest.status == PaymentRequestStatus.PAID.value
        )
        total_paid_cents = int(session.exec(paid_query).one())
    return {
        "total_users": approved_users,
        "total_kingdoms": total_kingdoms,
        "pending_approvals": pending_users + pending_payments,
        "total_payouts_cents": total_paid_cents,
    }


def database_online() -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError:
        log.exception("Database health check failed")
        return False
    return True


def lok_kingdom_ids(kingdoms: Iterable[Kingdom]) -> List[str]:
    return [kingdom.lok_kingdom_id for kingdom in kingdoms if kingdom.lok_kingdom_id]
