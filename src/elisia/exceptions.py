"""Custom exception hierarchy for the Elisia land program."""

from __future__ import annotations


class ElisiaError(Exception):
    """Base class for all Elisia specific errors."""


class DuplicateUserError(ElisiaError):
    """Raised when registering a username that is already taken."""


class DuplicateKingdomError(ElisiaError):
    """Raised when a LOK kingdom id is already linked to another kingdom."""


class UserNotFoundError(ElisiaError):
    """Raised when a user lookup fails."""


class KingdomNotFoundError(ElisiaError):
    """Raised when a kingdom lookup fails."""


class RequestNotFoundError(ElisiaError):
    """Raised when a payment, payout or rental request cannot be found."""


class InvalidStatusError(ElisiaError):
    """Raised when a status transition names an unknown status."""


class PaymentSettingsMissingError(ElisiaError):
    """Raised when an operation needs payment settings that were never configured."""


class AuthenticationError(ElisiaError):
    """Raised when credentials do not match."""


class AccountLockedError(AuthenticationError):
    """Raised when a username is locked out after repeated failed logins."""
