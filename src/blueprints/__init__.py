"""
Flask blueprints for the captive portal gateway endpoints.
"""

from .guest import guest_bp
from .portal import portal_bp
from .admin import admin_bp
from .health import health_bp
from .metrics import metrics_bp

__all__ = ['guest_bp', 'portal_bp', 'admin_bp', 'health_bp', 'metrics_bp']
