"""
Data models for the captive portal gateway.
"""
from .authorization import AuthorizationRequest, AuthorizationResult, normalize_mac
from .controller_settings import (
    ApiType,
    ControllerSettings,
    ControllerTarget,
    MockController,
    ModernController,
    LegacyController,
)
from .setting import Setting, SETTING_KEYS
from .wifi_password import WifiPassword

__all__ = [
    'AuthorizationRequest',
    'AuthorizationResult',
    'normalize_mac',
    'ApiType',
    'ControllerSettings',
    'ControllerTarget',
    'MockController',
    'ModernController',
    'LegacyController',
    'Setting',
    'SETTING_KEYS',
    'WifiPassword',
]
