from __future__ import annotations


class TrackerError(Exception):
    """
    Base class for errors raised by the tracker domain and services.
    """


class ValidationError(TrackerError):
    """
    Invalid or missing user input (target, identifiers, dates).
    Shown to the user as-is, never retried.
    """


class NotFoundError(TrackerError):
    """
    The addressed row (entry, task, team, user, diary) does not exist.
    """


class StoreError(TrackerError):
    """
    The persistence layer failed (transport, pool or query error).
    """


class FetchError(StoreError):
    """
    Listing time entries failed; attached to a degraded aggregate.
    """
