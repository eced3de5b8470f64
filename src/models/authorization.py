"""
Guest authorization request and result models.
"""
from typing import Optional
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# Guest access window granted by every successful authorization
GUEST_ACCESS_MINUTES = 1440


def normalize_mac(mac_address: str, upper: bool = False) -> str:
    """
    Normalize a MAC address to colon-delimited form.

    Args:
        mac_address: MAC address using ':' or '-' separators
        upper: Upper-case the result (lower-case otherwise)

    Returns:
        Normalized MAC address
    """
    mac = mac_address.replace('-', ':')
    return mac.upper() if upper else mac.lower()


def to_iso8601(moment: datetime) -> str:
    """Format a UTC datetime with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class AuthorizationRequest:
    """
    A captive-portal request to grant a device network access.

    Attributes:
        accept_tou: Terms-of-use acceptance, must be the string "true"
        access_point_mac_address: MAC address of the access point the device is on
        mac_address: MAC address of the device to authorize
        email: Optional guest email
        browser: Optional browser name reported by the portal
        operating_system: Optional OS name reported by the portal
        ip_address: Optional device IP address
    """
    accept_tou: str
    access_point_mac_address: str
    mac_address: str
    email: Optional[str] = None
    browser: Optional[str] = None
    operating_system: Optional[str] = None
    ip_address: Optional[str] = None

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate required fields."""
        if self.accept_tou != 'true':
            raise ValueError('acceptTou must be "true"')
        if not isinstance(self.access_point_mac_address, str) or not self.access_point_mac_address:
            raise ValueError("accessPointMacAddress is required")
        if not isinstance(self.mac_address, str) or not self.mac_address:
            raise ValueError("macAddress is required")
        for field_name in ('email', 'browser', 'operating_system', 'ip_address'):
            value = getattr(self, field_name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{field_name} must be a string")

    @classmethod
    def from_dict(cls, data: dict) -> 'AuthorizationRequest':
        """
        Create an AuthorizationRequest from a JSON request body.

        Args:
            data: Dictionary using the portal's camelCase field names

        Returns:
            AuthorizationRequest instance

        Raises:
            ValueError: If the body is not an object or fails validation
        """
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")

        return cls(
            accept_tou=data.get('acceptTou'),
            access_point_mac_address=data.get('accessPointMacAddress'),
            mac_address=data.get('macAddress'),
            email=data.get('email'),
            browser=data.get('browser'),
            operating_system=data.get('operatingSystem'),
            ip_address=data.get('ipAddress')
        )


@dataclass
class AuthorizationResult:
    """
    Outcome of a successful guest authorization.

    Attributes:
        mac_address: MAC address as supplied by the caller
        minutes_left: Minutes of access remaining
        seconds_left: Seconds component of the remaining access
        expire_on: When access expires (UTC)
        last_login: When access was granted (UTC)
        valid: Always True; failures are raised, never returned
        mode: Which path granted access ('mock', 'modern' or 'legacy')
    """
    mac_address: str
    minutes_left: int
    seconds_left: int
    expire_on: datetime
    last_login: datetime
    valid: bool = True
    mode: str = 'mock'

    @classmethod
    def grant(cls, mac_address: str, now: datetime, mode: str) -> 'AuthorizationResult':
        """
        Build the fixed 24-hour result shared by every success path.

        Args:
            mac_address: MAC address as supplied by the caller
            now: Current UTC time
            mode: Path that granted access

        Returns:
            AuthorizationResult instance
        """
        return cls(
            mac_address=mac_address,
            minutes_left=GUEST_ACCESS_MINUTES,
            seconds_left=59,
            expire_on=now + timedelta(minutes=GUEST_ACCESS_MINUTES),
            last_login=now,
            valid=True,
            mode=mode
        )

    @property
    def is_mock(self) -> bool:
        return self.mode == 'mock'

    def to_dict(self) -> dict:
        """
        Convert to the payload returned to the portal.

        Returns:
            Dictionary using the portal's camelCase field names
        """
        return {
            'macAddress': self.mac_address,
            'minutesLeft': self.minutes_left,
            'secondsLeft': self.seconds_left,
            'expireOn': to_iso8601(self.expire_on),
            'lastLogin': to_iso8601(self.last_login),
            'valid': self.valid
        }
