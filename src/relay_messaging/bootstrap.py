"""Process-level startup: load settings, establish the topology or exit."""

from __future__ import annotations

import logging
import sys
import threading
import time
from pathlib import Path
from typing import Callable, NoReturn, Optional, Union

from .channel import ExchangeChannel
from .config import Settings
from .connection import RabbitMQConnection, RetryPolicy
from .results import Failure

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(handler)


def exit_for(failure: Failure) -> NoReturn:
    """Terminate the process for a failed startup outcome.

    Fatal failures exit with status 1. An aborted startup was asked for, so it
    exits cleanly.
    """
    if failure.kind.is_fatal:
        logger.error("Exiting: %s", failure.message)
        sys.exit(1)
    logger.info("Exiting: %s", failure.message)
    sys.exit(0)


def start(
    settings_path: Union[str, Path],
    *,
    retry_policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
    stop_event: Optional[threading.Event] = None,
) -> ExchangeChannel:
    """Load settings from ``settings_path`` and return an established channel.

    Does not return when the broker cannot be reached or the output exchange
    is missing: the process exits with status 1.
    """
    settings = Settings()
    settings.load(settings_path)
    return start_with_settings(
        settings, retry_policy=retry_policy, sleep=sleep, stop_event=stop_event
    )


def start_with_settings(
    settings: Settings,
    *,
    retry_policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
    stop_event: Optional[threading.Event] = None,
) -> ExchangeChannel:
    connection = RabbitMQConnection(
        settings.connection_parameters(),
        retry_policy=retry_policy,
        sleep=sleep,
        stop_event=stop_event,
    )
    channel = ExchangeChannel(settings, connection=connection)

    outcome = channel.establish()
    if outcome.failure is not None:
        exit_for(outcome.failure)
    return channel
