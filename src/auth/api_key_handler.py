"""
Admin token extraction.
"""
from typing import Optional


class APIKeyHandler:
    """
    Handler for admin token extraction.

    Supports extracting the token from:
    - Authorization header (Bearer or ApiKey format)
    - A dedicated token header (X-Admin-Token by default)
    """

    def __init__(
        self,
        header_name: str = "Authorization",
        token_header_name: str = "X-Admin-Token"
    ):
        """
        Initialize the handler.

        Args:
            header_name: Name of the authorization header (default: "Authorization")
            token_header_name: Name of the raw token header (default: "X-Admin-Token")
        """
        self.header_name = header_name
        self.token_header_name = token_header_name

    @staticmethod
    def _get_header(headers: dict, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        for key, value in headers.items():
            if key.lower() == name.lower():
                return value
        return None

    def extract_from_header(self, headers: dict) -> Optional[str]:
        """
        Extract the token from the Authorization header.

        Supports formats:
        - "Bearer <token>"
        - "ApiKey <token>"
        - "<token>" (raw token)

        Args:
            headers: Dictionary of HTTP headers (case-insensitive keys)

        Returns:
            Token if found, None otherwise
        """
        auth_header = self._get_header(headers, self.header_name)
        if not auth_header:
            return None

        auth_header = auth_header.strip()

        if auth_header.lower().startswith('bearer '):
            return auth_header[7:].strip() or None

        if auth_header.lower().startswith('apikey '):
            return auth_header[7:].strip() or None

        # Basic credentials are never admin tokens
        if auth_header.lower().startswith('basic '):
            return None

        return auth_header

    def extract(self, headers: dict) -> Optional[str]:
        """
        Extract the token from request headers.

        Priority: Authorization header takes precedence over the token header.

        Args:
            headers: Dictionary of HTTP headers

        Returns:
            Token if found, None otherwise
        """
        token = self.extract_from_header(headers)
        if token:
            return token

        token = self._get_header(headers, self.token_header_name)
        if token and token.strip():
            return token.strip()

        return None
