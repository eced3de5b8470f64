#!/usr/bin/env python
"""
Script to authorize a device against the configured controller.

Useful for checking controller credentials without going through the portal.

Usage:
  python scripts/authorize_device.py <mac_address> [access_point_mac]
"""

import sys
from dotenv import load_dotenv

from src.utils import get_db_connection
from src.settings_provider import SettingsProvider
from src.unifi import GuestAuthorizer
from src.models.authorization import AuthorizationRequest
from src.exceptions import GuestAuthorizationError


def main():
    """Main function to authorize one device."""
    load_dotenv()

    if len(sys.argv) < 2:
        print("Usage: python scripts/authorize_device.py <mac_address> [access_point_mac]")
        sys.exit(1)

    try:
        auth_request = AuthorizationRequest(
            accept_tou='true',
            mac_address=sys.argv[1],
            access_point_mac_address=sys.argv[2] if len(sys.argv) > 2 else 'unknown'
        )
    except ValueError as e:
        print(f"✗ {e}")
        sys.exit(1)

    db = get_db_connection(verbose=False)

    try:
        authorizer = GuestAuthorizer(SettingsProvider(db))
        settings = authorizer.resolve_settings()
        print(f"Authorizing {auth_request.mac_address} (api type: {settings.api_type})...")

        result = authorizer.authorize(auth_request)

        print(f"\n✓ Authorized via {result.mode}")
        print(f"  Expires: {result.to_dict()['expireOn']}")
    except GuestAuthorizationError as e:
        print(f"\n✗ {type(e).__name__}: {e.message}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
