"""
Network controller connection settings.
"""
from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum

from src.exceptions import MisconfiguredController


class ApiType(Enum):
    """Controller API generations the bridge can talk to."""
    MODERN = "modern"
    LEGACY = "legacy"
    NONE = "none"


@dataclass(frozen=True)
class MockController:
    """No controller configured; authorizations succeed without network calls."""
    mode = 'mock'


@dataclass(frozen=True)
class ModernController:
    """Token-authenticated REST API (Network Application 9.1.105+)."""
    controller_url: str
    api_key: str
    site_id: str = 'default'
    mode = 'modern'


@dataclass(frozen=True)
class LegacyController:
    """Cookie-session REST API of classic controllers and UniFi OS consoles."""
    controller_url: str
    username: str
    password: str
    site_id: str = 'default'
    mode = 'legacy'


ControllerTarget = Union[MockController, ModernController, LegacyController]


@dataclass
class ControllerSettings:
    """
    Effective controller settings after store/environment resolution.

    Attributes:
        api_type: 'modern', 'legacy' or 'none'
        controller_url: Base URL of the controller (None disables the bridge)
        api_key: Bearer token for the modern API
        username: Login user for the legacy API
        password: Login password for the legacy API
        site_id: Controller site identifier
    """
    api_type: str
    controller_url: Optional[str] = None
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    site_id: str = 'default'

    def target(self) -> ControllerTarget:
        """
        Select the controller variant these settings describe.

        Mock mode wins whenever no controller URL is set or the API type
        is 'none'.

        Returns:
            MockController, ModernController or LegacyController

        Raises:
            MisconfiguredController: If the API type lacks its credentials
        """
        if not self.controller_url or self.api_type == ApiType.NONE.value:
            return MockController()

        controller_url = self.controller_url.rstrip('/')

        if self.api_type == ApiType.MODERN.value and self.api_key:
            return ModernController(
                controller_url=controller_url,
                api_key=self.api_key,
                site_id=self.site_id
            )

        if self.api_type == ApiType.LEGACY.value and self.username and self.password:
            return LegacyController(
                controller_url=controller_url,
                username=self.username,
                password=self.password,
                site_id=self.site_id
            )

        raise MisconfiguredController("UniFi credentials not configured")

    def to_log_dict(self) -> dict:
        """Describe the settings for logging without exposing secrets."""
        return {
            'api_type': self.api_type,
            'controller_configured': bool(self.controller_url),
            'has_api_key': bool(self.api_key),
            'has_username': bool(self.username),
            'site_id': self.site_id
        }
