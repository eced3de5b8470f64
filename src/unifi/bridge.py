"""
Guest network authorization bridge.

Takes a captive-portal registration and grants the device network access
through whichever controller API generation is configured, or pretends to
when no controller is configured.
"""
import logging
from typing import Callable, Optional
from datetime import datetime, timezone

import requests

from src.settings_provider import SettingsProvider
from src.models.authorization import AuthorizationRequest, AuthorizationResult
from src.models.controller_settings import (
    ControllerSettings,
    MockController,
    ModernController,
    LegacyController,
)
from src.exceptions import GuestAuthorizationError
from .transport import ControllerTransport, DEFAULT_TIMEOUT_SECONDS
from .modern import ModernControllerClient
from .legacy import LegacyControllerClient

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GuestAuthorizer:
    """
    Runs one authorization attempt per call.

    Steps, in order:
    1. Resolve effective controller settings
    2. Mock mode if no controller URL or API type 'none'
    3. Modern API if an API key is configured
    4. Legacy API if username and password are configured
    5. Otherwise MisconfiguredController

    Each call opens its own controller session and closes it before
    returning, so no cookies or connections outlive the call.
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        session_factory: Callable[[], requests.Session] = requests.Session,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the authorizer.

        Args:
            settings_provider: Source of controller settings
            session_factory: Builds the requests session for one call (for testing)
            timeout: Per-call controller timeout in seconds
            clock: Optional callable returning the current UTC time (for testing)
        """
        self.settings_provider = settings_provider
        self.session_factory = session_factory
        self.timeout = timeout
        self.clock = clock or _utc_now

    def authorize(self, request: AuthorizationRequest) -> AuthorizationResult:
        """
        Grant a device guest network access.

        Args:
            request: Validated authorization request

        Returns:
            AuthorizationResult (always valid)

        Raises:
            GuestAuthorizationError: Any failure; see src.exceptions
        """
        settings = self.settings_provider.resolve_controller_settings()

        logger.info("Guest authorization request", extra={
            'mac_address': request.mac_address,
            'access_point': request.access_point_mac_address,
            **settings.to_log_dict()
        })

        try:
            target = settings.target()

            if isinstance(target, MockController):
                logger.warning("UniFi controller not configured - returning mock authorization")
                return AuthorizationResult.grant(request.mac_address, self.clock(), target.mode)

            self._call_controller(target, request)
        except GuestAuthorizationError as e:
            e.api_type = settings.api_type
            raise

        return AuthorizationResult.grant(request.mac_address, self.clock(), target.mode)

    def _call_controller(self, target, request: AuthorizationRequest) -> None:
        """Run the modern or legacy flow on a session that lives for this call only."""
        transport = ControllerTransport(session=self.session_factory(), timeout=self.timeout)
        try:
            if isinstance(target, ModernController):
                ModernControllerClient(target, transport).authorize_guest(request.mac_address)
            elif isinstance(target, LegacyController):
                LegacyControllerClient(target, transport).authorize_guest(
                    request.mac_address,
                    request.access_point_mac_address
                )
        finally:
            transport.close()

    def resolve_settings(self) -> ControllerSettings:
        """Resolve the settings the next call would use."""
        return self.settings_provider.resolve_controller_settings()
