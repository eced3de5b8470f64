"""
Authentication data models.
"""
from dataclasses import dataclass


@dataclass
class AuthResult:
    """
    Result of an admin authentication check.

    Attributes:
        allowed: Whether the request is allowed
        reason: Machine-readable reason for the decision
    """
    allowed: bool
    reason: str

    def to_dict(self) -> dict:
        """
        Convert to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the auth result
        """
        return {
            'allowed': self.allowed,
            'reason': self.reason
        }
