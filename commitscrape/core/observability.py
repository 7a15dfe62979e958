import logging
import sys

import sentry_sdk

from commitscrape.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HANDLER_NAME = "commitscrape"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level_name: str = "INFO") -> None:
    """Attach one stdout handler to the root logger and apply the level.

    Safe to call repeatedly: only the level changes once the handler exists.
    """

    root = logging.getLogger()
    if not any(handler.get_name() == HANDLER_NAME for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)

    root.setLevel(getattr(logging, level_name.upper(), logging.INFO))


def init_sentry(app_settings: Settings) -> None:
    """Initialize Sentry SDK when DSN is configured."""

    if not app_settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=app_settings.sentry_dsn,
        environment=app_settings.environment,
        release=app_settings.release,
        traces_sample_rate=app_settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )


def init_observability(app_settings: Settings) -> None:
    configure_logging(app_settings.log_level)
    init_sentry(app_settings)
