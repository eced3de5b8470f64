"""
Flask application for the Frontier Tower captive portal gateway.

Grants registered guests network access through the building's network
controller and exposes the admin endpoints that configure it.
"""
import os
import logging
from typing import Optional
from flask import Flask
from dotenv import load_dotenv

# Load environment variables from .env file FIRST
load_dotenv()

import redis
from src.database.driver import PortalDB
from src.auth import AdminAuthenticator
from src.blueprints import guest_bp, portal_bp, admin_bp, health_bp, metrics_bp
from src.monitoring import configure_logging
from src.rate_limiter import RateLimiter, RedisBackend, DEFAULT_ATTEMPTS_PER_WINDOW
from src.settings_provider import SettingsProvider
from src.unifi import GuestAuthorizer
from src.unifi.transport import DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def _create_redis_client():
    """
    Create Redis client if configured.

    If REDIS_HOST is not configured, returns None.
    If REDIS_HOST is configured but connection fails, the application will exit.

    Returns:
        Redis client instance or None if not configured
    """
    redis_host = os.environ.get('REDIS_HOST')

    if not redis_host:
        return None

    redis_port = int(os.environ.get('REDIS_PORT', 6379))
    redis_password = os.environ.get('REDIS_PASSWORD')
    redis_db = int(os.environ.get('REDIS_DB', 0))

    redis_client = redis.Redis(
        host=redis_host,
        port=redis_port,
        password=redis_password,
        db=redis_db,
        decode_responses=True
    )
    redis_client.ping()

    logger.info("Redis connection established", extra={
        'redis_host': redis_host,
        'redis_port': redis_port
    })

    return redis_client


def _create_rate_limiter(redis_client):
    """
    Create the per-device authorization limiter.

    Args:
        redis_client: Redis client instance or None

    Returns:
        RateLimiter instance or None if Redis not available
    """
    if not redis_client:
        logger.info("Authorization rate limiting disabled (Redis not configured)")
        return None

    limit = int(os.environ.get('AUTHORIZE_ATTEMPTS_PER_HOUR', DEFAULT_ATTEMPTS_PER_WINDOW))
    logger.info("Authorization rate limiter initialized with Redis backend", extra={
        'attempts_per_hour': limit
    })

    return RateLimiter(RedisBackend(redis_client), limit=limit)


def _create_guest_authorizer(db):
    """
    Create the guest authorization bridge.

    Args:
        db: Database driver instance used as the settings store

    Returns:
        GuestAuthorizer instance
    """
    timeout = float(os.environ.get('UNIFI_TIMEOUT_SECONDS', DEFAULT_TIMEOUT_SECONDS))
    return GuestAuthorizer(SettingsProvider(db), timeout=timeout)


def create_app(
    db: Optional[PortalDB] = None,
    redis_client=None,
    rate_limiter=None,
    guest_authorizer: Optional[GuestAuthorizer] = None,
    admin_authenticator: Optional[AdminAuthenticator] = None
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        db: Optional database instance (for testing). If None, creates new connection.
        redis_client: Optional Redis client (for testing). If None, creates based on env.
        rate_limiter: Optional rate limiter instance (for testing). If None, creates based on env.
        guest_authorizer: Optional authorization bridge (for testing). If None, built on db.
        admin_authenticator: Optional admin authenticator (for testing). If None, uses ADMIN_API_KEY.

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    if db is None:
        from src.utils import get_db_connection
        db = get_db_connection(verbose=False)

    if redis_client is None:
        redis_client = _create_redis_client()

    if rate_limiter is None:
        rate_limiter = _create_rate_limiter(redis_client)

    if guest_authorizer is None:
        guest_authorizer = _create_guest_authorizer(db)

    if admin_authenticator is None:
        admin_authenticator = AdminAuthenticator(os.environ.get('ADMIN_API_KEY'))
        if not admin_authenticator.is_configured:
            logger.warning("ADMIN_API_KEY not set - admin endpoints are disabled")

    # Store in app config for access in route handlers
    app.config['DB'] = db
    app.config['GUEST_AUTHORIZER'] = guest_authorizer
    app.config['ADMIN_AUTHENTICATOR'] = admin_authenticator
    app.config['RATE_LIMITER'] = rate_limiter
    app.config['REDIS_CLIENT'] = redis_client

    app.register_blueprint(guest_bp)
    app.register_blueprint(portal_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_bp)

    return app


if __name__ == '__main__':
    configure_logging()
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    logger.info("Starting captive portal gateway", extra={
        'port': port,
        'endpoints': ['/api/authorize-guest', '/api/admin', '/health', '/metrics']
    })
    app.run(host='0.0.0.0', port=port, debug=False)
