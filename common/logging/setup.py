# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import logging
import sys

from asgi_correlation_id import CorrelationIdFilter, correlation_id

from common.config import Config
from common.logging import splunk

_correlation_id_length = 16


def get_log_id() -> str:
    """Correlation id of the request currently processed; empty outside of requests."""
    return (correlation_id.get() or "")[:_correlation_id_length]


def configure_logging(config: Config) -> None:
    console_handler = logging.StreamHandler(stream=sys.stdout)

    _cid_filter = CorrelationIdFilter(uuid_length=_correlation_id_length)
    console_handler.addFilter(_cid_filter)

    if config.enable_splunk_log:
        _formatter = splunk.SplunkFormatter(defaults={"app_name": config.app_name})
        console_handler.setFormatter(_formatter)

    logging.basicConfig(handlers=[console_handler], level=config.log_level)

    # Statements are only of interest while debugging
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if config.enable_debug_mode else logging.WARNING)

    # Route every already created logger (uvicorn, sqlalchemy, ...) through the console handler
    for logger in logging.root.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and console_handler not in logger.handlers:
            logger.handlers = [console_handler]
            logger.propagate = False
