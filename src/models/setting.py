"""
Setting model for the key-value configuration store.
"""
from typing import Optional
from dataclasses import dataclass
import time

# Keys the admin settings endpoint accepts
UNIFI_API_TYPE = 'unifi_api_type'
UNIFI_CONTROLLER_URL = 'unifi_controller_url'
UNIFI_API_KEY = 'unifi_api_key'
UNIFI_USERNAME = 'unifi_username'
UNIFI_PASSWORD = 'unifi_password'
UNIFI_SITE = 'unifi_site'
GUEST_PASSWORD = 'guest_password'
PASSWORD_REQUIRED = 'password_required'

SETTING_KEYS = (
    UNIFI_API_TYPE,
    UNIFI_CONTROLLER_URL,
    UNIFI_API_KEY,
    UNIFI_USERNAME,
    UNIFI_PASSWORD,
    UNIFI_SITE,
    GUEST_PASSWORD,
    PASSWORD_REQUIRED,
)


@dataclass
class Setting:
    """
    A single stored setting.

    Attributes:
        key: Setting name (unique)
        value: Stored value (None when cleared)
        updated_at: Unix timestamp of last update
    """
    key: str
    value: Optional[str]
    updated_at: int

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key is required")

    @classmethod
    def from_dict(cls, data: dict) -> 'Setting':
        """
        Create a Setting instance from a dictionary (e.g., from database).

        Args:
            data: Dictionary containing setting data

        Returns:
            Setting instance
        """
        return cls(
            key=data['key'],
            value=data.get('value'),
            updated_at=data['updated_at']
        )

    def to_dict(self) -> dict:
        return {
            'key': self.key,
            'value': self.value,
            'updated_at': self.updated_at
        }

    @classmethod
    def create_new(cls, key: str, value: Optional[str]) -> 'Setting':
        """Create a new setting stamped with the current time."""
        return cls(key=key, value=value, updated_at=int(time.time()))
