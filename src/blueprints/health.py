"""
Health check endpoint blueprint.

/health is for operators and load balancers; /api/health is the liveness
check the controller's external portal integration polls.
"""
import logging
from typing import Optional
from flask import Blueprint, jsonify, current_app

from src.exceptions import MisconfiguredController

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)

PORTAL_SERVICE_NAME = 'Frontier Tower Captive Portal'


def _log_dependency_failure(dependency: str, error: Exception) -> None:
    logger.error(f"Health check failed - {dependency} error", extra={
        'dependency': dependency,
        'error_type': type(error).__name__,
        'error_message': str(error)
    }, exc_info=True)


def _controller_mode() -> str:
    """Which controller path the next authorization would take."""
    authorizer = current_app.config['GUEST_AUTHORIZER']
    try:
        return authorizer.resolve_settings().target().mode
    except MisconfiguredController:
        return 'misconfigured'


def _redis_status() -> Optional[str]:
    """
    Ping Redis if it is configured.

    Returns:
        'not_configured', 'connected', or None when the ping failed
    """
    redis_client = current_app.config.get('REDIS_CLIENT')
    if redis_client is None:
        return 'not_configured'

    try:
        redis_client.ping()
    except Exception as e:
        _log_dependency_failure('redis', e)
        return None
    return 'connected'


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Service health and controller mode.

    Returns:
        200 OK: {
            "status": "healthy",
            "database": "connected",
            "redis": "connected" | "not_configured",
            "settings_configured": N,
            "controller_mode": "mock" | "modern" | "legacy" | "misconfigured"
        }
        503 Service Unavailable: {"status": "unhealthy", "database": ..., "redis": ..., "message": ...}
    """
    try:
        settings = current_app.config['DB'].load_settings()
    except Exception as e:
        _log_dependency_failure('database', e)
        return jsonify({
            'status': 'unhealthy',
            'database': 'error',
            'redis': 'unknown',
            'message': 'Database connection failed'
        }), 503

    redis_status = _redis_status()
    if redis_status is None:
        return jsonify({
            'status': 'unhealthy',
            'database': 'connected',
            'redis': 'error',
            'message': 'Redis connection failed'
        }), 503

    return jsonify({
        'status': 'healthy',
        'database': 'connected',
        'redis': redis_status,
        'settings_configured': len(settings),
        'controller_mode': _controller_mode()
    }), 200


@health_bp.route('/api/health', methods=['GET'])
def portal_health():
    return jsonify({
        'status': 'ok',
        'service': PORTAL_SERVICE_NAME,
        'unifi_ready': True
    }), 200
