"""Failure taxonomy for the apply flow.

None of these escape a single job attempt: the flow controller converts
every one of them into an abandoned application so the batch keeps going.
"""
from __future__ import annotations

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class ApplierError(Exception):
    """Base class for errors raised inside the apply pipeline."""


class TriggerNotFound(ApplierError):
    """No apply / continue / submit control could be located."""


class InteractionTimeout(ApplierError):
    """An element never became visible or interactable."""


class SessionLost(ApplierError):
    """The browser, context or tab went away under us."""


class StepCeilingExceeded(ApplierError):
    """The form never reached a terminal screen within the step limit."""


class PersistenceWriteFailure(ApplierError):
    """The answers or jobs file could not be written."""


class IllegalTransition(ApplierError):
    """The flow controller attempted a state change its table forbids."""


_SESSION_LOST_MARKERS: tuple[str, ...] = (
    "target closed",
    "target page, context or browser has been closed",
    "has been closed",
    "browser has been closed",
    "page closed",
    "context closed",
    "connection closed",
)


def classify_error(exc: BaseException) -> ApplierError:
    """Map a driver exception onto the taxonomy above."""
    if isinstance(exc, ApplierError):
        return exc
    msg = str(exc).lower()
    if any(m in msg for m in _SESSION_LOST_MARKERS):
        return SessionLost(str(exc))
    if isinstance(exc, PlaywrightTimeoutError):
        return InteractionTimeout(str(exc))
    if isinstance(exc, PlaywrightError) and "target" in msg:
        return SessionLost(str(exc))
    return ApplierError(str(exc))


def short_message(exc: BaseException, limit: int = 150) -> str:
    """First line of an exception message, clipped for log output."""
    return str(exc)[:limit].split("\n")[0]
