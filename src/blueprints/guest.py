"""
Guest endpoints blueprint.

Handles network authorization for registered guests and the optional
guest WiFi password check.
"""
import time
import logging
from flask import Blueprint, request, jsonify, current_app

from src.exceptions import GuestAuthorizationError, InvalidRequest
from src.models.authorization import AuthorizationRequest, normalize_mac
from src.models import setting as keys
from src.monitoring import (
    GUEST_AUTHORIZATIONS_TOTAL,
    GUEST_AUTHORIZATION_DURATION_SECONDS,
    GUEST_AUTHORIZATION_ERRORS_TOTAL
)

logger = logging.getLogger(__name__)

guest_bp = Blueprint('guest', __name__)


def _error_response(status_code: int, description: str, message: str):
    return jsonify({
        'response': status_code,
        'description': description,
        'message': message
    }), status_code


@guest_bp.route('/api/authorize-guest', methods=['POST'])
def authorize_guest():
    """
    Grant a registered device guest network access.

    Request JSON:
        acceptTou: must be the string "true"
        accessPointMacAddress, macAddress: required strings
        email, browser, operatingSystem, ipAddress: optional

    Returns:
        200 OK: {"response": 200, "description": "200 OK" | "200 OK (Mock Mode)", "payload": {...}}
        400 Bad Request: Invalid body
        404 Not Found: Device not yet visible to the controller
        429 Too Many Requests: Too many attempts for this device
        500 Internal Server Error: Controller or configuration failure
    """
    start_time = time.time()
    mac_address = None
    access_point = None

    try:
        try:
            auth_request = AuthorizationRequest.from_dict(request.get_json(silent=True))
        except ValueError as e:
            raise InvalidRequest(str(e))

        mac_address = auth_request.mac_address
        access_point = auth_request.access_point_mac_address

        rate_limiter = current_app.config.get('RATE_LIMITER')
        if rate_limiter is not None:
            allowed, reason = rate_limiter.check_rate_limit(normalize_mac(mac_address))
            if not allowed:
                GUEST_AUTHORIZATIONS_TOTAL.labels(result='rate_limited', mode='unknown').inc()
                return _error_response(429, "Too Many Requests", "Too many authorization attempts")

        authorizer = current_app.config['GUEST_AUTHORIZER']
        result = authorizer.authorize(auth_request)

        duration = time.time() - start_time
        GUEST_AUTHORIZATIONS_TOTAL.labels(result='authorized', mode=result.mode).inc()
        GUEST_AUTHORIZATION_DURATION_SECONDS.labels(mode=result.mode).observe(duration)

        logger.info("Guest authorization result", extra={
            'mac_address': mac_address,
            'access_point': access_point,
            'mode': result.mode,
            'duration_ms': round(duration * 1000, 2)
        })

        return jsonify({
            'response': 200,
            'description': "200 OK (Mock Mode)" if result.is_mock else "200 OK",
            'payload': result.to_dict()
        }), 200

    except GuestAuthorizationError as e:
        duration = time.time() - start_time
        GUEST_AUTHORIZATIONS_TOTAL.labels(result='failed', mode='unknown').inc()
        GUEST_AUTHORIZATION_ERRORS_TOTAL.labels(error_type=type(e).__name__).inc()

        logger.error("Authorization error", extra={
            'mac_address': mac_address,
            'access_point': access_point,
            'api_type': e.api_type,
            'error_type': type(e).__name__,
            'error_message': e.message,
            'duration_ms': round(duration * 1000, 2)
        })

        return jsonify(e.to_dict()), e.status_code

    except Exception as e:
        duration = time.time() - start_time
        GUEST_AUTHORIZATIONS_TOTAL.labels(result='failed', mode='unknown').inc()
        GUEST_AUTHORIZATION_ERRORS_TOTAL.labels(error_type=type(e).__name__).inc()

        logger.error("Unexpected authorization error", extra={
            'mac_address': mac_address,
            'access_point': access_point,
            'error_type': type(e).__name__,
            'error_message': str(e),
            'duration_ms': round(duration * 1000, 2)
        }, exc_info=True)

        return _error_response(500, "Internal Server Error", "Authorization failed")


@guest_bp.route('/api/verify-guest-password', methods=['POST'])
def verify_guest_password():
    """
    Check a guest-entered WiFi password.

    Request JSON:
        password: non-empty string

    Returns:
        200 OK: {"success": true} or {"success": false, "message": "Incorrect password"}
        400 Bad Request: {"success": false, "message": "..."}
    """
    data = request.get_json(silent=True)
    password = data.get('password') if isinstance(data, dict) else None

    if not isinstance(password, str) or not password:
        return jsonify({
            'success': False,
            'message': "password is required"
        }), 400

    db = current_app.config['DB']
    settings = db.load_settings()

    if settings.get(keys.PASSWORD_REQUIRED) != 'true':
        return jsonify({'success': True}), 200

    wifi_passwords = db.load_all_wifi_passwords(active_only=True)

    if any(wifi_password.matches(password) for wifi_password in wifi_passwords):
        return jsonify({'success': True}), 200

    logger.info("Guest password rejected")
    return jsonify({
        'success': False,
        'message': "Incorrect password"
    }), 200
