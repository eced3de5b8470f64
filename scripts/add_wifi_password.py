#!/usr/bin/env python
"""
Script to add a guest WiFi password.

Usage:
  python scripts/add_wifi_password.py <password> [description]
  python scripts/add_wifi_password.py  # Interactive mode
"""

import sys
from dotenv import load_dotenv

from src.utils import get_db_connection
from src.models.wifi_password import WifiPassword


def main():
    """Main function to add a WiFi password."""
    load_dotenv()

    if len(sys.argv) > 1:
        password = sys.argv[1]
        description = sys.argv[2] if len(sys.argv) > 2 else None
    else:
        password = input("Password: ").strip()
        description = input("Description (optional): ").strip() or None

    try:
        wifi_password = WifiPassword.create_new(password, description)
    except ValueError as e:
        print(f"✗ {e}")
        sys.exit(1)

    db = get_db_connection(verbose=False)

    try:
        password_id = db.save_wifi_password(wifi_password)
        print(f"✓ WiFi password added (id {password_id})")
    except Exception as e:
        print(f"✗ Error adding WiFi password: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
