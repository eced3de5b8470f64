"""
Pytest configuration and fixtures for captive portal gateway tests.
CRITICAL: Database tests use the frontier_portal_test database to avoid affecting production data.
They are skipped when PORTAL_PG_PASSWORD is not set.
"""
import os
import json
from types import SimpleNamespace
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests
from urllib3._collections import HTTPHeaderDict
from dotenv import load_dotenv

from src.settings_provider import SettingsProvider
from src.unifi import GuestAuthorizer


load_dotenv()

FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_response(status_code=200, json_body=None, set_cookies=None, text=None):
    """
    Build a requests.Response as a controller would return it.

    Args:
        status_code: HTTP status
        json_body: Body serialized as JSON
        set_cookies: Raw Set-Cookie header values
        text: Raw body (used instead of json_body)
    """
    response = requests.Response()
    response.status_code = status_code
    if text is not None:
        response._content = text.encode('utf-8')
    elif json_body is not None:
        response._content = json.dumps(json_body).encode('utf-8')
        response.headers['Content-Type'] = 'application/json'
    else:
        response._content = b''

    if set_cookies:
        raw_headers = HTTPHeaderDict()
        for cookie in set_cookies:
            raw_headers.add('Set-Cookie', cookie)
        response.raw = SimpleNamespace(headers=raw_headers)
        response.headers['Set-Cookie'] = ', '.join(set_cookies)

    return response


@pytest.fixture
def controller_response():
    """Factory for controller responses."""
    return make_response


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def mock_session():
    """requests session whose calls are recorded and never hit the network."""
    return Mock(spec=requests.Session)


@pytest.fixture
def settings_store():
    """Settings store returning whatever the test puts in store.values."""
    store = Mock()
    store.values = {}
    store.load_settings.side_effect = lambda: dict(store.values)
    return store


@pytest.fixture
def settings_provider(settings_store):
    """Settings provider with an empty environment."""
    return SettingsProvider(settings_store, environ={})


@pytest.fixture
def authorizer(settings_provider, mock_session):
    """Guest authorizer with a mocked controller session and fixed clock."""
    return GuestAuthorizer(settings_provider, session_factory=lambda: mock_session, clock=lambda: FIXED_NOW)


@pytest.fixture(scope='session')
def test_db_config():
    """
    Provide test database configuration.
    Uses frontier_portal_test database to avoid affecting production data.
    """
    if not os.environ.get('PORTAL_PG_PASSWORD'):
        pytest.skip("PORTAL_PG_PASSWORD not set; database tests skipped")

    return {
        'db_host': os.environ.get('POSTGRES_HOST', 'localhost'),
        'db_port': int(os.environ.get('POSTGRES_PORT', '5432')),
        'db_name': 'frontier_portal_test',
        'db_user': os.environ.get('PORTAL_PG_USER', 'frontier_portal'),
        'db_password': os.environ['PORTAL_PG_PASSWORD']
    }


@pytest.fixture(scope='function')
def db(test_db_config):
    """
    Provide a database connection for each test.
    Automatically cleans up all data after each test to ensure isolation.
    This should have been created by running: python dev_scripts/setup_database.py --test-db
    """
    from src.database import PortalDB

    database = PortalDB(**test_db_config)

    yield database

    with database.get_cursor() as cursor:
        cursor.execute("DELETE FROM wifi_passwords")
        cursor.execute("DELETE FROM settings")

    database.close()


@pytest.fixture(scope='function')
def clean_db(db):
    """
    Provide a clean database connection with all tables emptied.
    Use this fixture when you want to ensure a completely clean state.
    """
    with db.get_cursor() as cursor:
        cursor.execute("DELETE FROM wifi_passwords")
        cursor.execute("DELETE FROM settings")
    return db
