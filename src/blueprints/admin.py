"""
Admin endpoints blueprint.

Manages controller settings and guest WiFi passwords. Every route requires
the admin token.
"""
import logging
from functools import wraps
from typing import Callable, Optional
import psycopg2
from flask import Blueprint, request, jsonify, current_app

from src.models.controller_settings import ApiType
from src.models.wifi_password import WifiPassword
from src.models import setting as keys

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')

OPTIONAL_SETTING_KEYS = (
    keys.UNIFI_CONTROLLER_URL,
    keys.UNIFI_API_KEY,
    keys.UNIFI_USERNAME,
    keys.UNIFI_PASSWORD,
    keys.UNIFI_SITE,
    keys.GUEST_PASSWORD,
)


def require_admin(func: Callable) -> Callable:
    """
    Decorator rejecting requests without a valid admin token.

    Args:
        func: View function to protect

    Returns:
        Wrapped view returning 401 for unauthenticated requests
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        authenticator = current_app.config['ADMIN_AUTHENTICATOR']
        result = authenticator.authenticate(dict(request.headers))

        if not result.allowed:
            logger.warning("Admin request denied", extra={
                'route': request.path,
                'method': request.method,
                'reason': result.reason
            })
            return jsonify({'success': False, 'message': "Unauthorized"}), 401

        return func(*args, **kwargs)

    return wrapper


def _validate_settings(data) -> tuple[Optional[dict], Optional[str]]:
    """
    Validate an admin settings body.

    Args:
        data: Parsed JSON body

    Returns:
        Tuple of (settings_to_save, error_message); exactly one is None
    """
    if not isinstance(data, dict):
        return None, "Invalid settings data"

    api_type = data.get(keys.UNIFI_API_TYPE)
    valid_types = [t.value for t in ApiType]
    if api_type not in valid_types:
        return None, f"{keys.UNIFI_API_TYPE} must be one of: {', '.join(valid_types)}"

    values = {keys.UNIFI_API_TYPE: api_type}

    for key in OPTIONAL_SETTING_KEYS:
        if key not in data or data[key] is None:
            continue
        if not isinstance(data[key], str):
            return None, f"{key} must be a string"
        values[key] = data[key]

    if keys.GUEST_PASSWORD in values and not values[keys.GUEST_PASSWORD]:
        return None, f"{keys.GUEST_PASSWORD} must not be empty"

    password_required = data.get(keys.PASSWORD_REQUIRED)
    if password_required is not None:
        if password_required not in ('true', 'false'):
            return None, f"{keys.PASSWORD_REQUIRED} must be 'true' or 'false'"
        values[keys.PASSWORD_REQUIRED] = password_required

    if api_type == ApiType.MODERN.value:
        if not values.get(keys.UNIFI_CONTROLLER_URL) or not values.get(keys.UNIFI_API_KEY):
            return None, "Modern API requires Controller URL and API Key"
    elif api_type == ApiType.LEGACY.value:
        if (not values.get(keys.UNIFI_CONTROLLER_URL)
                or not values.get(keys.UNIFI_USERNAME)
                or not values.get(keys.UNIFI_PASSWORD)):
            return None, "Legacy API requires Controller URL, Username, and Password"

    return values, None


@admin_bp.route('/settings', methods=['GET'])
@require_admin
def get_settings():
    """
    Return all stored settings.

    Returns:
        200 OK: JSON object of setting key -> value
        500 Internal Server Error: {"success": false, "message": "..."}
    """
    try:
        db = current_app.config['DB']
        return jsonify(db.load_settings()), 200
    except Exception as e:
        logger.error("Failed to fetch settings", extra={
            'error_type': type(e).__name__,
            'error_message': str(e)
        }, exc_info=True)
        return jsonify({'success': False, 'message': "Failed to fetch settings"}), 500


@admin_bp.route('/settings', methods=['POST'])
@require_admin
def save_settings():
    """
    Save controller and guest access settings.

    Returns:
        200 OK: {"success": true, "message": "Settings saved successfully"}
        400 Bad Request: Validation failure
        500 Internal Server Error: Database failure
    """
    values, error = _validate_settings(request.get_json(silent=True))
    if error:
        return jsonify({'success': False, 'message': error}), 400

    try:
        db = current_app.config['DB']
        db.save_settings(values)
    except Exception as e:
        logger.error("Error saving settings", extra={
            'error_type': type(e).__name__,
            'error_message': str(e)
        }, exc_info=True)
        return jsonify({'success': False, 'message': "Failed to save settings"}), 500

    logger.info("Settings saved", extra={
        'api_type': values[keys.UNIFI_API_TYPE],
        'keys': sorted(values)
    })
    return jsonify({'success': True, 'message': "Settings saved successfully"}), 200


@admin_bp.route('/wifi-passwords', methods=['GET'])
@require_admin
def list_wifi_passwords():
    """Return every WiFi password, active or not."""
    try:
        db = current_app.config['DB']
        passwords = db.load_all_wifi_passwords()
        return jsonify([p.to_dict() for p in passwords]), 200
    except Exception as e:
        logger.error("Failed to fetch WiFi passwords", extra={
            'error_type': type(e).__name__,
            'error_message': str(e)
        }, exc_info=True)
        return jsonify({'success': False, 'message': "Failed to fetch WiFi passwords"}), 500


@admin_bp.route('/wifi-passwords', methods=['POST'])
@require_admin
def add_wifi_password():
    """
    Add a WiFi password.

    Request JSON:
        password: non-empty string
        description: optional string

    Returns:
        200 OK: {"success": true, "password": {...}, "message": "..."}
        400 Bad Request: Invalid body
        500 Internal Server Error: Duplicate password or database failure
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'message': "Invalid password data"}), 400

    description = data.get('description')
    if description is not None and not isinstance(description, str):
        return jsonify({'success': False, 'message': "Invalid password data"}), 400

    try:
        wifi_password = WifiPassword.create_new(data.get('password') or '', description)
    except (ValueError, AttributeError):
        return jsonify({'success': False, 'message': "Password is required"}), 400

    try:
        db = current_app.config['DB']
        db.save_wifi_password(wifi_password)
    except (psycopg2.Error, ValueError) as e:
        logger.error("Error adding WiFi password", extra={
            'error_type': type(e).__name__,
            'error_message': str(e)
        })
        return jsonify({
            'success': False,
            'message': "Failed to add WiFi password. Password may already exist."
        }), 500

    return jsonify({
        'success': True,
        'password': wifi_password.to_dict(),
        'message': "WiFi password added successfully"
    }), 200


@admin_bp.route('/wifi-passwords/<password_id>', methods=['DELETE'])
@require_admin
def delete_wifi_password(password_id: str):
    """
    Delete a WiFi password.

    Returns:
        200 OK: {"success": true, "message": "..."}
        400 Bad Request: Non-integer id
        404 Not Found: Unknown id
    """
    try:
        numeric_id = int(password_id)
    except ValueError:
        return jsonify({'success': False, 'message': "Invalid password ID"}), 400

    db = current_app.config['DB']
    if not db.delete_wifi_password(numeric_id):
        return jsonify({'success': False, 'message': "WiFi password not found"}), 404

    return jsonify({'success': True, 'message': "WiFi password deleted successfully"}), 200
