"""
Database access layer.
"""
from .driver import PortalDB

__all__ = ['PortalDB']
