"""
WSGI entry point.

Usage:
  gunicorn src.wsgi:app
"""
from src.monitoring import configure_logging
from src.app import create_app

configure_logging()

app = create_app()
