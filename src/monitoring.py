"""
Monitoring and observability configuration.

Provides Prometheus metrics and structured logging for the portal gateway.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
import logging
import os
from pythonjsonlogger import jsonlogger


# Prometheus Metrics
GUEST_AUTHORIZATIONS_TOTAL = Counter(
    'guest_authorizations_total',
    'Total number of guest authorization attempts',
    ['result', 'mode']
)

GUEST_AUTHORIZATION_DURATION_SECONDS = Histogram(
    'guest_authorization_duration_seconds',
    'Guest authorization duration in seconds, including controller calls',
    ['mode'],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0)
)

GUEST_AUTHORIZATION_ERRORS_TOTAL = Counter(
    'guest_authorization_errors_total',
    'Total number of guest authorization errors',
    ['error_type']
)

DB_CONNECTION_POOL = Gauge(
    'db_connection_pool_connections',
    'Database connection pool status',
    ['state']
)


def configure_logging(app=None):
    """
    Configure JSON structured logging for the process.

    Args:
        app: Optional Flask application whose logger should share the handler

    Returns:
        The root logger
    """
    log_handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        timestamp=True
    )
    log_handler.setFormatter(formatter)

    # Get log level from environment variable (default: INFO)
    log_level_name = os.environ.get('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    logging.root.handlers = []
    logging.root.addHandler(log_handler)
    logging.root.setLevel(log_level)

    if app is not None:
        app.logger.handlers = []
        app.logger.propagate = True
        app.logger.setLevel(log_level)

    return logging.root


def get_metrics():
    """
    Generate Prometheus metrics in exposition format.

    Returns:
        Tuple of (metrics_data, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
