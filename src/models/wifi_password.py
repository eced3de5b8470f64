"""
WiFi password model for password-gated guest access.
"""
from typing import Optional
from dataclasses import dataclass
import time


@dataclass
class WifiPassword:
    """
    A password guests may enter on the portal.

    Attributes:
        password: The password text (unique)
        created_at: Unix timestamp of when the password was added
        description: Optional note shown to admins
        is_active: Inactive passwords are ignored during verification
        password_id: Database identifier (auto-generated if None)
    """
    password: str
    created_at: int
    description: Optional[str] = None
    is_active: bool = True
    password_id: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.password or not self.password.strip():
            raise ValueError("password is required")

    def matches(self, candidate: str) -> bool:
        """
        Compare a guest-entered password, ignoring case and surrounding whitespace.

        Args:
            candidate: Password entered on the portal

        Returns:
            True if the candidate matches this password
        """
        return self.password.strip().lower() == candidate.strip().lower()

    @classmethod
    def from_dict(cls, data: dict) -> 'WifiPassword':
        """
        Create a WifiPassword instance from a dictionary (e.g., from database).

        Args:
            data: Dictionary containing password data

        Returns:
            WifiPassword instance
        """
        return cls(
            password_id=data.get('id'),
            password=data['password'],
            description=data.get('description'),
            is_active=data.get('is_active', True),
            created_at=data['created_at']
        )

    def to_dict(self) -> dict:
        """
        Convert WifiPassword to a dictionary.

        Returns:
            Dictionary representation of the password
        """
        return {
            'id': self.password_id,
            'password': self.password,
            'description': self.description,
            'is_active': self.is_active,
            'created_at': self.created_at
        }

    @classmethod
    def create_new(cls, password: str, description: Optional[str] = None) -> 'WifiPassword':
        """
        Create a new active password with the current timestamp.

        Args:
            password: Password text
            description: Optional note

        Returns:
            New WifiPassword instance
        """
        return cls(
            password=password.strip(),
            description=description,
            is_active=True,
            created_at=int(time.time())
        )
