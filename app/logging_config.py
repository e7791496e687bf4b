"""Logging configuration.

- Development: human-readable format
- Production: JSON format (log aggregator compatible)
- Log level: LOG_LEVEL config/env value
"""
import json
import logging
import sys
from datetime import datetime, timezone

from flask import Flask


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production / log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry['exception'] = self.formatException(record.exc_info)
        for key in ('table', 'record_id', 'project_id'):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        return json.dumps(log_entry, ensure_ascii=False)


class ReadableFormatter(logging.Formatter):
    """Plain formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime('%H:%M:%S')
        base = f'{ts} {record.levelname:<8} {record.name}: {record.getMessage()}'
        if record.exc_info and record.exc_info[0] is not None:
            base += '\n' + self.formatException(record.exc_info)
        return base


def configure_logging(app: Flask) -> None:
    """Set up logging for the Flask app.

    Uses LOG_LEVEL when set, otherwise DEBUG in development and INFO in
    production. Testing keeps the root handlers pytest installs.

    Args:
        app: The Flask application instance.
    """
    is_testing = app.config.get('TESTING', False)
    is_prod = not app.config.get('DEBUG', False) and not is_testing

    level_name = app.config.get('LOG_LEVEL') or ('INFO' if is_prod else 'DEBUG')
    level = getattr(logging, level_name.upper(), logging.INFO)

    app.logger.setLevel(level)
    logging.getLogger('app').setLevel(level)

    if is_testing:
        return

    formatter = JSONFormatter() if is_prod else ReadableFormatter()

    root = logging.getLogger()
    # Remove existing handlers to prevent duplicates on repeated create_app()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ('werkzeug', 'sqlalchemy.engine'):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    app.logger.info('Logging configured: level=%s format=%s',
                    level_name, 'JSON' if is_prod else 'readable')
