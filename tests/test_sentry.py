"""Sentry wiring and logging setup."""
from __future__ import annotations

import logging

from app.core import sentry_integration
from logging_config import setup_logging


def test_init_sentry_without_dsn_is_disabled(mocker):
    init = mocker.patch.object(sentry_integration.sentry_sdk, "init")

    assert sentry_integration.init_sentry(None) is False
    init.assert_not_called()


def test_init_sentry_passes_options(mocker):
    init = mocker.patch.object(sentry_integration.sentry_sdk, "init")

    assert sentry_integration.init_sentry("https://key@sentry.example.com/1", environment="staging")

    kwargs = init.call_args.kwargs
    assert kwargs["environment"] == "staging"
    assert kwargs["send_default_pii"] is False
    assert len(kwargs["integrations"]) == 1


def test_init_sentry_failure_is_logged(mocker, caplog):
    mocker.patch.object(sentry_integration.sentry_sdk, "init", side_effect=RuntimeError("bad dsn"))

    with caplog.at_level(logging.ERROR):
        assert sentry_integration.init_sentry("https://key@sentry.example.com/1") is False
    assert "bad dsn" in caplog.text


def test_capture_exception_attaches_context(mocker):
    capture = mocker.patch.object(sentry_integration.sentry_sdk, "capture_exception")
    error = ValueError("boom")

    sentry_integration.capture_exception(error, poller={"restaurant_id": "r1"})

    capture.assert_called_once_with(error)


def test_set_restaurant_context_tags_events(mocker):
    set_tag = mocker.patch.object(sentry_integration.sentry_sdk, "set_tag")
    set_context = mocker.patch.object(sentry_integration.sentry_sdk, "set_context")

    sentry_integration.set_restaurant_context("r1", slug="shawarma-house")

    set_tag.assert_called_once_with("restaurant_id", "r1")
    set_context.assert_called_once_with("restaurant", {"id": "r1", "slug": "shawarma-house"})


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    previous_level, previous_handlers = root.level, list(root.handlers)
    try:
        setup_logging("DEBUG")
        setup_logging("WARNING")

        ours = [h for h in root.handlers if getattr(h, "_orderdesk", False)]
        assert len(ours) == 1
        assert root.level == logging.WARNING
        assert logging.getLogger("psycopg.pool").level == logging.WARNING
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
