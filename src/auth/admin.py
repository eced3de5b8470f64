"""
Admin authentication for the settings and WiFi password endpoints.
"""
import hmac
from typing import Optional, Dict

from .models import AuthResult
from .api_key_handler import APIKeyHandler


class AdminAuthenticator:
    """
    Checks requests against the configured admin token.

    When no token is configured every request is denied.
    """

    def __init__(self, admin_token: Optional[str], api_key_handler: Optional[APIKeyHandler] = None):
        """
        Initialize the authenticator.

        Args:
            admin_token: Expected admin token (None disables admin access)
            api_key_handler: Optional token extractor (created if not provided)
        """
        self._admin_token = admin_token or None
        self.api_key_handler = api_key_handler or APIKeyHandler()

    @property
    def is_configured(self) -> bool:
        return self._admin_token is not None

    def authenticate(self, headers: Dict[str, str]) -> AuthResult:
        """
        Authenticate a request from its headers.

        Args:
            headers: HTTP headers dict

        Returns:
            AuthResult with the decision
        """
        if not self.is_configured:
            return AuthResult(allowed=False, reason="admin_not_configured")

        token = self.api_key_handler.extract(headers)
        if not token:
            return AuthResult(allowed=False, reason="missing_credentials")

        if not hmac.compare_digest(token.encode('utf-8'), self._admin_token.encode('utf-8')):
            return AuthResult(allowed=False, reason="invalid_credentials")

        return AuthResult(allowed=True, reason="authenticated")
