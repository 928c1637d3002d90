"""FastAPI backend for the Elisia land development dashboard.

Users register kingdoms, log contributions, request payouts and drago
rentals; administrators approve accounts, configure payout rates and review
the weekly land contribution figures pulled from the League of Kingdoms API.
Everything is served as JSON under ``/api`` with a cookie session holding
the logged-in user id.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Sequence, Union

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from ..api import ApiExporter
from ..contributions import filter_by_continent, filter_by_land, summarise_land_stats
from ..exceptions import (
    AccountLockedError,
    AuthenticationError,
    ElisiaError,
    KingdomNotFoundError,
    RequestNotFoundError,
    UserNotFoundError,
)
from ..lok import ContributionAggregator
from ..models import AggregationResult, format_day
from ..money import to_cents
from ..ops import HealthMonitor, setup_logging
from ..payouts import can_request_payout, tier_payout_cents
from ..security import AuthManager, verify_password
from . import storage
from .config import (
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    LOG_LEVEL,
    LOGIN_LOCKOUT_MINUTES,
    LOGIN_MAX_ATTEMPTS,
    LOK_API_URL,
    LOK_LAND_IDS,
    LOK_MAX_CONCURRENCY,
    LOK_MAX_CUSTOM_DAYS,
    LOK_TIMEOUT_SECONDS,
    SESSION_SECRET,
    SESSION_USER_KEY,
)
from .persistence import Kingdom, User, utc_now
from .schemas import (
    AnnouncementBody,
    ContributionBody,
    DragoRentalBody,
    DragoRentalReview,
    KingdomBody,
    KingdomUpdateBody,
    LoginBody,
    PaymentRequestBody,
    PaymentRequestReview,
    PaymentSettingsBody,
    PayoutBody,
    PayoutReview,
    RegisterBody,
    WalletBody,
)

setup_logging(LOG_LEVEL)
log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# FastAPI application setup
# ---------------------------------------------------------------------------
app = FastAPI(title="Elisia Land Program")
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    same_site="lax",
    max_age=None,
)

_time_provider: Callable[[], datetime] = utc_now

exporter = ApiExporter()
auth_manager = AuthManager(max_attempts=LOGIN_MAX_ATTEMPTS, lockout_minutes=LOGIN_LOCKOUT_MINUTES)
health_monitor = HealthMonitor()

_contribution_aggregator = ContributionAggregator(
    LOK_LAND_IDS,
    endpoint=LOK_API_URL,
    max_concurrency=LOK_MAX_CONCURRENCY,
    timeout=LOK_TIMEOUT_SECONDS,
    max_custom_days=LOK_MAX_CUSTOM_DAYS,
)


def get_contribution_aggregator() -> ContributionAggregator:
    return _contribution_aggregator


def set_contribution_aggregator(aggregator: ContributionAggregator) -> None:
    """Swap the aggregator used by the land contribution routes."""

    global _contribution_aggregator
    _contribution_aggregator = aggregator


if ADMIN_USERNAME and ADMIN_PASSWORD:
    storage.ensure_admin_user(ADMIN_USERNAME, ADMIN_PASSWORD)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
_NOT_FOUND_ERRORS = (UserNotFoundError, KingdomNotFoundError, RequestNotFoundError)


def _message(text: str, status_code: int) -> JSONResponse:
    return JSONResponse({"message": text}, status_code=status_code)


@app.exception_handler(ElisiaError)
async def elisia_error_handler(request: Request, exc: ElisiaError) -> JSONResponse:
    if isinstance(exc, _NOT_FOUND_ERRORS):
        status_code = 404
    elif isinstance(exc, AccountLockedError):
        status_code = 429
    elif isinstance(exc, AuthenticationError):
        status_code = 401
    else:
        status_code = 400
    log.info("%s %s rejected with %s: %s", request.method, request.url.path, status_code, exc)
    return _message(str(exc), status_code)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    log.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return _message(str(exc), 400)


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------
def current_user(request: Request) -> Optional[User]:
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    user = storage.get_user(int(user_id))
    if user is None:
        request.session.pop(SESSION_USER_KEY, None)
    return user


def require_user(request: Request) -> Union[User, JSONResponse]:
    user = current_user(request)
    if user is None:
        return _message("Unauthorized", 401)
    return user


def require_approved(request: Request) -> Union[User, JSONResponse]:
    user = require_user(request)
    if isinstance(user, User) and not user.is_approved:
        return _message("Account pending approval", 403)
    return user


def require_admin(request: Request) -> Union[User, JSONResponse]:
    user = require_user(request)
    if isinstance(user, User) and not user.is_admin:
        return _message("Admin access required", 403)
    return user


def _owned_kingdom(user: User, kingdom_id: int) -> Kingdom:
    kingdom = storage.get_kingdom(kingdom_id)
    if kingdom is None or (kingdom.user_id != user.id and not user.is_admin):
        raise KingdomNotFoundError(f"Kingdom {kingdom_id} not found.")
    return kingdom


def _cents(amount: Optional[Decimal]) -> Optional[int]:
    return None if amount is None else to_cents(amount)


def _today() -> date:
    return _time_provider().date()


def _parse_custom_days(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer customDays %r", raw)
        return None


async def _aggregate(period: str, custom_days: Optional[str], kingdom_ids: Optional[Sequence[str]] = None) -> AggregationResult:
    aggregator = get_contribution_aggregator()
    days = _parse_custom_days(custom_days)
    if kingdom_ids is None:
        result = await aggregator.all_contributions(period, days)
    else:
        result = await aggregator.contributions_for_kingdoms(kingdom_ids, period, days)
    health_monitor.record_aggregation(result)
    return result


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------
@app.post("/api/register")
def register(request: Request, body: RegisterBody) -> JSONResponse:
    user = storage.create_user(
        body.username,
        body.password,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    request.session[SESSION_USER_KEY] = user.id
    log.info("Registered user %r awaiting approval", user.username)
    return JSONResponse(exporter.record(user), status_code=201)


@app.post("/api/login")
def login(request: Request, body: LoginBody) -> JSONResponse:
    if auth_manager.is_locked(body.username):
        raise AccountLockedError("Too many failed login attempts. Try again later.")
    user = storage.get_user_by_username(body.username)
    if user is None or not verify_password(body.password, user.password_hash):
        auth_manager.record_login_attempt(body.username, success=False)
        log.warning("Failed login for %r", body.username)
        raise AuthenticationError("Invalid username or password")
    auth_manager.record_login_attempt(body.username, success=True)
    request.session[SESSION_USER_KEY] = user.id
    return JSONResponse(exporter.record(user))


@app.post("/api/logout")
def logout(request: Request) -> JSONResponse:
    request.session.clear()
    return _message("Logged out", 200)


@app.get("/api/user")
def session_user(request: Request) -> JSONResponse:
    user = require_user(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.record(user))


@app.get("/api/auth/user")
def approved_user(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.record(user))


# ---------------------------------------------------------------------------
# Kingdoms and contributions
# ---------------------------------------------------------------------------
@app.get("/api/kingdoms")
def list_kingdoms(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_user_kingdoms(user.id)))


@app.post("/api/kingdoms")
def create_kingdom(request: Request, body: KingdomBody) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    kingdom = storage.create_kingdom(
        user.id,
        body.name,
        lok_kingdom_id=body.lok_kingdom_id,
        level=body.level,
        image_url=body.image_url,
        status=body.status.value,
    )
    return JSONResponse(exporter.record(kingdom))


@app.put("/api/kingdoms/{kingdom_id}")
def update_kingdom(request: Request, kingdom_id: int, body: KingdomUpdateBody) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    _owned_kingdom(user, kingdom_id)
    changes: Dict[str, Any] = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key in ("lok_kingdom_id", "image_url")
    }
    if "status" in changes:
        changes["status"] = body.status.value
    return JSONResponse(exporter.record(storage.update_kingdom(kingdom_id, changes)))


@app.get("/api/kingdoms/{kingdom_id}/contributions")
def kingdom_contributions(request: Request, kingdom_id: int, period: Optional[str] = Query(None)) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    _owned_kingdom(user, kingdom_id)
    if period:
        rows = storage.get_contributions_by_period(kingdom_id, period)
    else:
        rows = storage.get_kingdom_contributions(kingdom_id)
    return JSONResponse(exporter.records(rows))


@app.post("/api/contributions")
def create_contribution(request: Request, body: ContributionBody) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    _owned_kingdom(user, body.kingdom_id)
    contribution = storage.create_contribution(
        body.kingdom_id,
        to_cents(body.amount),
        period=body.period.value,
        description=body.description,
    )
    return JSONResponse(exporter.record(contribution))


# ---------------------------------------------------------------------------
# Wallets, payment requests, drago rentals
# ---------------------------------------------------------------------------
@app.get("/api/wallets")
def list_wallets(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_user_wallets(user.id)))


@app.post("/api/wallets")
def create_wallet(request: Request, body: WalletBody) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    wallet = storage.create_wallet(user.id, body.address, is_primary=body.is_primary)
    return JSONResponse(exporter.record(wallet))


@app.get("/api/payment-requests")
def list_payment_requests(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_user_payment_requests(user.id)))


@app.post("/api/payment-requests")
def create_payment_request(request: Request, body: PaymentRequestBody) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    payment_request = storage.create_payment_request(
        user.id,
        to_cents(body.amount),
        body.wallet_address,
        kingdom_id=body.kingdom_id,
        description=body.description,
    )
    log.info("User %s requested a payout of %s", user.id, body.amount)
    return JSONResponse(exporter.record(payment_request))


@app.get("/api/drago-rental-requests")
def list_drago_rentals(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_user_drago_rental_requests(user.id)))


@app.post("/api/drago-rental-requests")
def create_drago_rental(request: Request, body: DragoRentalBody) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    rental = storage.create_drago_rental_request(user.id, body.kingdom_id, body.drago_type.value, body.duration.value)
    return JSONResponse(exporter.record(rental))


@app.get("/api/payment-settings")
def active_payment_settings(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    settings = storage.get_active_payment_settings()
    return JSONResponse(exporter.payment_settings(settings) if settings else None)


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------
@app.get("/api/payouts")
def list_payouts(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_user_payouts(user.id)))


@app.get("/api/user/payout-summary")
def payout_summary(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    summary = storage.get_user_payout_summary(user.id)
    unpaid_cents, unpaid = storage.calculate_unpaid_contributions(user.id)
    settings = storage.get_active_payment_settings()
    if summary is None:
        summary_payload = exporter.record(
            {
                "user_id": user.id,
                "last_payout_date": None,
                "total_earned_cents": 0,
                "total_paid_cents": 0,
                "pending_amount_cents": 0,
                "unpaid_contributions_cents": 0,
            }
        )
    else:
        summary_payload = exporter.record(summary)
    payload: Dict[str, Any] = {
        "summary": summary_payload,
        "unpaidAmount": exporter.record({"amount_cents": unpaid_cents})["amount"],
        "unpaidContributions": exporter.records(unpaid),
        "canRequestPayout": False,
    }
    if settings is not None:
        payload["canRequestPayout"] = can_request_payout(unpaid_cents, settings.minimum_payout_cents)
    return JSONResponse(payload)


# ---------------------------------------------------------------------------
# Land contributions
# ---------------------------------------------------------------------------
@app.get("/api/user/land-contributions")
async def user_land_contributions(
    request: Request,
    period: str = Query("currentWeek"),
    custom_days: Optional[str] = Query(None, alias="customDays"),
) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    kingdom_ids = storage.lok_kingdom_ids(storage.get_user_kingdoms(user.id))
    if not kingdom_ids:
        today = format_day(_today())
        return JSONResponse({"data": [], "from": today, "to": today, "pairs": {"requested": 0, "failed": 0}})
    result = await _aggregate(period, custom_days, kingdom_ids)
    payload = exporter.aggregation(result)
    settings = storage.get_active_payment_settings()
    if settings is not None:
        points = sum(record.total for record in result.records)
        payload["estimatedPayout"] = exporter.record(
            {"amount_cents": tier_payout_cents(points, storage.payout_tiers_for(settings))}
        )["amount"]
    return JSONResponse(payload)


@app.get("/api/admin/land-contributions")
async def admin_land_contributions(
    request: Request,
    period: str = Query("currentWeek"),
    custom_days: Optional[str] = Query(None, alias="customDays"),
    continent: Optional[str] = Query(None),
    land_id: Optional[str] = Query(None, alias="landId"),
) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    result = await _aggregate(period, custom_days)
    records = filter_by_land(filter_by_continent(result.records, continent), land_id)
    return JSONResponse(exporter.aggregation(result.replace_records(tuple(records))))


@app.get("/api/admin/land-stats")
async def admin_land_stats(
    request: Request,
    period: str = Query("currentWeek"),
    custom_days: Optional[str] = Query(None, alias="customDays"),
) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    result = await _aggregate(period, custom_days)
    return JSONResponse(summarise_land_stats(result))


# ---------------------------------------------------------------------------
# Admin: users and kingdoms
# ---------------------------------------------------------------------------
@app.get("/api/admin/stats")
def admin_stats(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.record(storage.get_system_stats()))


@app.get("/api/admin/pending-users")
def admin_pending_users(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_pending_users()))


@app.post("/api/admin/approve-user/{user_id}")
def admin_approve_user(request: Request, user_id: int) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    approved = storage.approve_user(user_id)
    log.info("Admin %s approved user %s", admin.id, user_id)
    return JSONResponse(exporter.record(approved))


@app.delete("/api/admin/reject-user/{user_id}")
def admin_reject_user(request: Request, user_id: int) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    storage.reject_user(user_id)
    log.info("Admin %s rejected user %s", admin.id, user_id)
    return _message("User rejected", 200)


@app.get("/api/admin/all-users")
def admin_all_users(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    payload = []
    for entry in storage.get_all_users_with_details():
        row = exporter.record(entry["user"])
        row["kingdoms"] = exporter.records(entry["kingdoms"])
        row["wallets"] = exporter.records(entry["wallets"])
        payload.append(row)
    return JSONResponse(payload)


@app.delete("/api/admin/delete-user/{user_id}")
def admin_delete_user(request: Request, user_id: int) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    if user_id == admin.id:
        return _message("Administrators cannot delete their own account", 400)
    storage.delete_user(user_id)
    return _message("User deleted", 200)


@app.get("/api/admin/kingdoms")
def admin_kingdoms(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_all_kingdoms()))


# ---------------------------------------------------------------------------
# Admin: payment requests, settings, rentals, payouts, announcements
# ---------------------------------------------------------------------------
@app.get("/api/admin/pending-payments")
def admin_pending_payments(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_pending_payment_requests()))


@app.put("/api/admin/payment-requests/{request_id}")
def admin_review_payment_request(request: Request, request_id: int, body: PaymentRequestReview) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    updated = storage.update_payment_request_status(
        request_id,
        body.status.value,
        admin_notes=body.admin_notes,
        processed_by=admin.id,
    )
    return JSONResponse(exporter.record(updated))


def _settings_values(body: PaymentSettingsBody, *, only_set: bool) -> Dict[str, Any]:
    provided = body.model_dump(exclude_unset=only_set)
    values: Dict[str, Any] = {}
    for key in (
        "payout_for_1000_points",
        "payout_for_5000_points",
        "payout_for_8000_points",
        "payout_for_10000_points",
        "minimum_payout",
    ):
        if key in provided:
            values[f"{key}_cents"] = _cents(provided[key])
    if provided.get("payout_frequency") is not None:
        values["payout_frequency"] = body.payout_frequency.value
    return values


def _drago_values(body: PaymentSettingsBody) -> Dict[str, Any]:
    return {key: value for key, value in body.model_dump(by_alias=True, exclude_unset=True).items() if "Drago" in key}


@app.get("/api/admin/payment-settings")
def admin_payment_settings(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    settings = storage.get_active_payment_settings()
    return JSONResponse(exporter.payment_settings(settings) if settings else None)


@app.post("/api/admin/payment-settings")
def admin_create_payment_settings(request: Request, body: PaymentSettingsBody) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    settings = storage.create_payment_settings(
        _settings_values(body, only_set=False),
        drago_points=_drago_values(body),
        updated_by=admin.id,
    )
    log.info("Admin %s published payment settings %s", admin.id, settings.id)
    return JSONResponse(exporter.payment_settings(settings))


@app.put("/api/admin/payment-settings/{settings_id}")
def admin_update_payment_settings(request: Request, settings_id: int, body: PaymentSettingsBody) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    drago = _drago_values(body)
    settings = storage.update_payment_settings(
        settings_id,
        _settings_values(body, only_set=True),
        drago_points=drago or None,
        updated_by=admin.id,
    )
    return JSONResponse(exporter.payment_settings(settings))


@app.get("/api/admin/drago-rental-requests")
def admin_drago_rentals(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_all_drago_rental_requests()))


@app.get("/api/admin/pending-drago-rentals")
def admin_pending_drago_rentals(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_pending_drago_rental_requests()))


@app.put("/api/admin/drago-rental-requests/{request_id}")
def admin_review_drago_rental(request: Request, request_id: int, body: DragoRentalReview) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    updated = storage.update_drago_rental_request_status(
        request_id,
        body.status.value,
        admin_notes=body.admin_notes,
        processed_by=admin.id,
        rental_start_date=body.rental_start_date,
        rental_end_date=body.rental_end_date,
    )
    return JSONResponse(exporter.record(updated))


@app.get("/api/admin/pending-payouts")
def admin_pending_payouts(request: Request) -> JSONResponse:
    user = require_admin(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_pending_payouts()))


@app.post("/api/admin/payouts")
def admin_create_payout(request: Request, body: PayoutBody) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    payout = storage.create_payout(
        body.user_id,
        to_cents(body.total_amount),
        wallet_address=body.wallet_address,
        admin_notes=body.admin_notes,
        processed_by=admin.id,
    )
    return JSONResponse(exporter.record(payout))


@app.put("/api/admin/payouts/{payout_id}")
def admin_update_payout(request: Request, payout_id: int, body: PayoutReview) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    payout = storage.update_payout_status(
        payout_id,
        body.status.value,
        transaction_hash=body.transaction_hash,
        admin_notes=body.admin_notes,
        processed_by=admin.id,
    )
    return JSONResponse(exporter.record(payout))


@app.post("/api/admin/announcements")
def admin_create_announcement(request: Request, body: AnnouncementBody) -> JSONResponse:
    admin = require_admin(request)
    if isinstance(admin, JSONResponse):
        return admin
    announcement = storage.create_announcement(body.title, body.message, type=body.type.value, created_by=admin.id)
    return JSONResponse(exporter.record(announcement))


@app.get("/api/announcements")
def list_announcements(request: Request) -> JSONResponse:
    user = require_approved(request)
    if isinstance(user, JSONResponse):
        return user
    return JSONResponse(exporter.records(storage.get_active_announcements()))


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
@app.get("/api/health")
def health() -> JSONResponse:
    health_monitor.database_online = storage.database_online()
    return JSONResponse(health_monitor.status())


__all__ = [
    "app",
    "auth_manager",
    "current_user",
    "exporter",
    "get_contribution_aggregator",
    "health_monitor",
    "require_admin",
    "require_approved",
    "require_user",
    "set_contribution_aggregator",
]
