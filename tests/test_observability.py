import logging

from commitscrape.core.observability import HANDLER_NAME
from commitscrape.core.observability import LOG_FORMAT
from commitscrape.core.observability import configure_logging
from commitscrape.core.observability import init_observability
from commitscrape.core.observability import init_sentry
from commitscrape.settings import Settings


def test_init_sentry_skips_when_dsn_missing(monkeypatch) -> None:
    """Sentry initialization is skipped when DSN is absent."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("commitscrape.core.observability.sentry_sdk.init", fake_init)

    init_sentry(Settings(sentry_dsn=None))

    assert calls == []


def test_init_sentry_initializes_sdk_with_settings(monkeypatch) -> None:
    """Sentry SDK is initialized with configured runtime settings."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("commitscrape.core.observability.sentry_sdk.init", fake_init)

    settings = Settings(
        sentry_dsn="https://examplePublicKey@o0.ingest.sentry.io/0",
        environment="production",
        release="abc123",
        sentry_traces_sample_rate=0.2,
    )
    init_sentry(settings)

    assert calls == [
        {
            "dsn": "https://examplePublicKey@o0.ingest.sentry.io/0",
            "environment": "production",
            "release": "abc123",
            "traces_sample_rate": 0.2,
            "send_default_pii": False,
        }
    ]


def test_configure_logging_attaches_one_handler() -> None:
    root = logging.getLogger()
    original_level = root.level

    configure_logging("DEBUG")
    configure_logging("WARNING")

    named = [handler for handler in root.handlers if handler.get_name() == HANDLER_NAME]
    assert len(named) == 1
    assert named[0].formatter._fmt == LOG_FORMAT
    assert root.level == logging.WARNING
    root.setLevel(original_level)


def test_configure_logging_falls_back_to_info_for_unknown_level() -> None:
    root = logging.getLogger()
    original_level = root.level

    configure_logging("chatty")

    assert root.level == logging.INFO
    root.setLevel(original_level)


def test_init_observability_applies_log_level(monkeypatch) -> None:
    monkeypatch.setattr(
        "commitscrape.core.observability.sentry_sdk.init", lambda **kwargs: None
    )
    root = logging.getLogger()
    original_level = root.level

    init_observability(Settings(log_level="ERROR", sentry_dsn=None))

    assert root.level == logging.ERROR
    root.setLevel(original_level)
