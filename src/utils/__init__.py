"""
Shared utilities for the application and operator scripts.
"""
from .db_connection import get_db_connection

__all__ = ['get_db_connection']
