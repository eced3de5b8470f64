#!/usr/bin/env python
"""
Script to list guest WiFi passwords.

Usage:
  python scripts/list_wifi_passwords.py
"""

from datetime import datetime
from dotenv import load_dotenv

from src.utils import get_db_connection
from src.models.setting import PASSWORD_REQUIRED


def main():
    """Main function to list WiFi passwords."""
    load_dotenv()

    db = get_db_connection(verbose=False)

    try:
        settings = db.load_settings()
        required = settings.get(PASSWORD_REQUIRED) == 'true'
        passwords = db.load_all_wifi_passwords()

        print("=" * 80)
        print(f"WiFi Passwords ({len(passwords)}) - password {'required' if required else 'not required'}")
        print("=" * 80)

        if not passwords:
            print("\nNo WiFi passwords found. Add one with:")
            print("  python scripts/add_wifi_password.py")
            return

        print()
        for wifi_password in passwords:
            created = datetime.fromtimestamp(wifi_password.created_at).strftime('%Y-%m-%d %H:%M')
            status = "active" if wifi_password.is_active else "inactive"
            print(f"  {wifi_password.password_id:4}  {wifi_password.password:24} {status:9} {created}")
            if wifi_password.description:
                print(f"        {wifi_password.description}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
