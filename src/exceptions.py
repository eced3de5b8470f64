"""
Guest authorization error taxonomy.

Each error carries the HTTP status and description used in the JSON
envelope returned to the captive portal.
"""


class GuestAuthorizationError(Exception):
    """Base class for failures of a guest authorization attempt."""

    status_code = 500
    description = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        # Set by the bridge once settings are resolved
        self.api_type = None

    def to_dict(self) -> dict:
        """Convert to the portal's error envelope."""
        return {
            'response': self.status_code,
            'description': self.description,
            'message': self.message
        }


class InvalidRequest(GuestAuthorizationError):
    """Request body failed validation."""

    status_code = 400
    description = "Bad Request"


class ClientNotFound(GuestAuthorizationError):
    """The device has not associated with the network yet."""

    status_code = 404
    description = "Client not found"

    def __init__(self, message: str = "Client not connected to network"):
        super().__init__(message)


class ControllerUnavailable(GuestAuthorizationError):
    """The controller could not be reached or answered with an HTTP error."""


class AuthenticationFailed(GuestAuthorizationError):
    """Every login endpoint variant rejected the configured credentials."""


class AuthorizationFailed(GuestAuthorizationError):
    """The controller rejected the authorize action on every attempted path."""


class MisconfiguredController(GuestAuthorizationError):
    """The selected API type lacks the credentials it needs."""
