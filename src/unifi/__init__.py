"""
Network controller integration.
"""
from .bridge import GuestAuthorizer
from .modern import ModernControllerClient
from .legacy import LegacyControllerClient, ControllerSession
from .transport import ControllerTransport

__all__ = [
    'GuestAuthorizer',
    'ModernControllerClient',
    'LegacyControllerClient',
    'ControllerSession',
    'ControllerTransport',
]
