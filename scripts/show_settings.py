#!/usr/bin/env python
"""
Script to show stored settings and the controller settings the gateway would use.

Usage:
  python scripts/show_settings.py
"""

from dotenv import load_dotenv

from src.utils import get_db_connection
from src.settings_provider import SettingsProvider
from src.exceptions import MisconfiguredController
from src.models.setting import UNIFI_API_KEY, UNIFI_PASSWORD

SECRET_KEYS = (UNIFI_API_KEY, UNIFI_PASSWORD)


def mask(value: str) -> str:
    """Hide all but the first characters of a secret."""
    if not value:
        return value
    return f"{value[:4]}..." if len(value) > 4 else "****"


def main():
    """Main function to show settings."""
    load_dotenv()

    print("=" * 80)
    print("Stored Settings")
    print("=" * 80)
    print()

    db = get_db_connection()

    try:
        settings = db.load_settings()

        if not settings:
            print("No settings stored in the database.")
        for key, value in settings.items():
            shown = mask(value) if key in SECRET_KEYS else value
            print(f"  {key:22} {shown}")

        resolved = SettingsProvider(db).resolve_controller_settings()

        print()
        print("=" * 80)
        print("Effective Controller Settings (store, then environment)")
        print("=" * 80)
        print(f"  API type:        {resolved.api_type}")
        print(f"  Controller URL:  {resolved.controller_url or '(not set)'}")
        print(f"  Site:            {resolved.site_id}")
        print(f"  API key:         {'set' if resolved.api_key else 'not set'}")
        print(f"  Username:        {resolved.username or '(not set)'}")
        print(f"  Password:        {'set' if resolved.password else 'not set'}")

        try:
            mode = resolved.target().mode
        except MisconfiguredController as e:
            mode = f"misconfigured ({e.message})"
        print(f"\n  Authorization mode: {mode}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
