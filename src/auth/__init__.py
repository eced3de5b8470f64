"""
Admin authentication components.
"""
from .models import AuthResult
from .admin import AdminAuthenticator
from .api_key_handler import APIKeyHandler

__all__ = [
    'AuthResult',
    'AdminAuthenticator',
    'APIKeyHandler',
]
