from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from applier.errors import (
    ApplierError,
    InteractionTimeout,
    SessionLost,
    TriggerNotFound,
    classify_error,
    short_message,
)


def test_closed_target_is_session_lost():
    err = classify_error(PlaywrightError("Target page, context or browser has been closed"))
    assert isinstance(err, SessionLost)
    assert isinstance(classify_error(RuntimeError("Target closed")), SessionLost)


def test_playwright_timeout_is_interaction_timeout():
    assert isinstance(classify_error(PlaywrightTimeoutError("Timeout 1000ms exceeded.")), InteractionTimeout)


def test_taxonomy_errors_pass_through():
    exc = TriggerNotFound("No Apply button found")
    assert classify_error(exc) is exc


def test_other_errors_are_generic():
    err = classify_error(ValueError("bad value"))
    assert type(err) is ApplierError


def test_short_message_keeps_first_line():
    assert short_message(Exception("line one\nline two")) == "line one"
    assert len(short_message(Exception("x" * 500))) == 150
