"""
Eureka Client Structured Logging
JSON or console logging for the client and its command-line front end
"""

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Optional


class JSONFormatter(logging.Formatter):
    """One JSON object per record: time, level, logger, message"""

    def __init__(self, **static_fields):
        super().__init__()
        self.static_fields = static_fields

    def format(self, record: logging.LogRecord) -> str:
        entry = dict(self.static_fields)
        entry.update(
            time=datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        if record.exc_info:
            entry['error'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(log_level: str = 'INFO',
                  log_format: str = 'console',
                  log_file: Optional[str] = None,
                  service_name: str = 'eureka-client'):
    """
    Configure logging for the application

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: 'json' or 'console'
        log_file: Optional file path for logs
        service_name: Value of the ``service`` field in JSON records
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {
                '()': JSONFormatter,
                'service': service_name
            },
            'console': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': log_format,
                'stream': 'ext://sys.stderr'
            }
        },
        'loggers': {
            'eureka': {
                'level': level,
                'handlers': ['console'],
                'propagate': False
            }
        },
        'root': {
            'level': level,
            'handlers': ['console']
        }
    }

    if log_file:
        config['handlers']['file'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': level,
            'formatter': log_format,
            'filename': log_file,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 5
        }

        for logger in config['loggers'].values():
            logger['handlers'].append('file')

        config['root']['handlers'].append('file')

    logging.config.dictConfig(config)

    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured: level={log_level}, format={log_format}")


def get_logger(name: str) -> logging.Logger:
    """Get configured logger instance"""
    return logging.getLogger(name)
