#!/usr/bin/env python
"""
Script to delete a guest WiFi password.

Usage:
  python scripts/delete_wifi_password.py <password_id>
  python scripts/delete_wifi_password.py  # Interactive mode
"""

import sys
from dotenv import load_dotenv

from src.utils import get_db_connection


def delete_wifi_password_by_id(password_id: int) -> bool:
    """Delete a WiFi password by its ID after confirmation."""
    db = get_db_connection(verbose=False)

    try:
        wifi_password = db.load_wifi_password_by_id(password_id)

        if not wifi_password:
            print(f"✗ WiFi password not found: {password_id}")
            return False

        print(f"\nPassword: {wifi_password.password}")
        if wifi_password.description:
            print(f"Description: {wifi_password.description}")
        response = input("Type 'delete' to confirm deletion: ").strip()
        if response != 'delete':
            print("Deletion cancelled.")
            return False

        if db.delete_wifi_password(password_id):
            print(f"\n✓ WiFi password deleted ({password_id})")
            return True

        print(f"\n✗ Failed to delete WiFi password: {password_id}")
        return False

    except Exception as e:
        print(f"\n✗ Error deleting WiFi password: {e}")
        return False
    finally:
        db.close()


def main():
    """Main function to delete a WiFi password."""
    load_dotenv()

    raw_id = sys.argv[1] if len(sys.argv) > 1 else input("WiFi password ID: ").strip()

    try:
        password_id = int(raw_id)
    except ValueError:
        print(f"✗ Invalid password ID: {raw_id}")
        sys.exit(1)

    success = delete_wifi_password_by_id(password_id)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
