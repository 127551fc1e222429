"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every record is a single JSON line stamped with the service name and
environment, so shorten and redirect logs can be filtered per deployment.
Records logged without an `event` extra get UNCATEGORIZED_EVENT.

Logging format:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "urlshortener.lambdas.shorten_url.app",
    "service": "urlshortener",
    "environment": "dev",
    "event": "SHORTEN_SUCCESS",
    "message": "Short URL created. Responding with 200.",
    "shortcode": "q7RbT2"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from urlshortener.constants import ENV


UNCATEGORIZED_EVENT = 'UNCATEGORIZED'


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras

    Attributes:
        service (str | None): service name stamped on every record
        environment (str | None): deployment environment stamped on every record
        default_event (str): event code for records logged without one
    """

    # Attributes every LogRecord carries; anything else came in through `extra`
    RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None))) | {'message', 'asctime', 'taskName'}

    def __init__(self, service: str | None = None, environment: str | None = None, default_event: str = UNCATEGORIZED_EVENT):
        super().__init__()
        self.service = service
        self.environment = environment
        self.default_event = default_event

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
        extras = {key: value for key, value in vars(record).items() if key not in self.RESERVED_ATTRS}

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'service': self.service,
            'environment': self.environment,
            'event': extras.pop('event', self.default_event),
            'message': record.getMessage(),
            **extras,
        }

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Route all logging to stdout as JSON, at the level given by LOG_LEVEL (default INFO)"""
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'service': os.getenv(ENV.App.APP_NAME),
                    'environment': os.getenv(ENV.App.APP_ENV, 'local').lower(),
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper(),
                'handlers': ['stdout'],
            },
        }
    )
