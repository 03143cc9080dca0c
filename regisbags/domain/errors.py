"""Exception hierarchy shared by every layer of the reporting pipeline."""
from __future__ import annotations


class RegisbagsError(Exception):
    """Base class for all errors raised by regisbags."""


class InvalidPeriodValue(RegisbagsError, ValueError):
    """The period value does not parse for the requested period type."""

    def __init__(self, period_type: str, value: str, reason: str = "") -> None:
        self.period_type = period_type
        self.value = value
        self.reason = reason
        message = f"Invalid {period_type} period value {value!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class RepositoryFetchError(RegisbagsError):
    """The record store failed to respond or returned unusable data."""


class RepositoryConnectivityError(RepositoryFetchError):
    """The record store could not be reached at all."""


class InvalidRecipient(RegisbagsError, ValueError):
    """An email recipient address failed validation."""


class EmailDeliveryError(RegisbagsError):
    """The email transport rejected or failed to send a report."""
