#!/usr/bin/env python
"""
Interactive script to configure the network controller connection.

Usage:
  python scripts/set_controller.py
"""

from dotenv import load_dotenv

from src.utils import get_db_connection
from src.models import setting as keys
from src.models.controller_settings import ApiType


def get_input(prompt: str, default: str = None) -> str:
    """Get user input with optional default value."""
    if default:
        prompt = f"{prompt} [{default}]: "
    else:
        prompt = f"{prompt}: "

    value = input(prompt).strip()
    if not value and default:
        return default
    return value


def get_choice(prompt: str, choices: list, default: str = None) -> str:
    """Get a choice from a list of options."""
    print(f"\n{prompt}")
    for i, choice in enumerate(choices, 1):
        print(f"  {i}. {choice}")

    while True:
        if default:
            response = input(f"Enter choice (1-{len(choices)}) [{default}]: ").strip()
        else:
            response = input(f"Enter choice (1-{len(choices)}): ").strip()

        if not response and default:
            return default

        try:
            idx = int(response) - 1
            if 0 <= idx < len(choices):
                return choices[idx]
        except ValueError:
            pass

        print("Invalid choice. Please try again.")


def main():
    """Main function to configure the controller."""
    load_dotenv()

    print("=" * 80)
    print("Configure Network Controller")
    print("=" * 80)

    db = get_db_connection(verbose=False)

    try:
        current = db.load_settings()
        api_type = get_choice(
            "Controller API type:",
            [t.value for t in ApiType],
            default=current.get(keys.UNIFI_API_TYPE)
        )

        values = {keys.UNIFI_API_TYPE: api_type}

        if api_type != ApiType.NONE.value:
            values[keys.UNIFI_CONTROLLER_URL] = get_input(
                "Controller URL (e.g., https://192.168.1.1)",
                current.get(keys.UNIFI_CONTROLLER_URL)
            )
            values[keys.UNIFI_SITE] = get_input("Site ID", current.get(keys.UNIFI_SITE) or 'default')

            if not values[keys.UNIFI_CONTROLLER_URL]:
                print("\n✗ Controller URL is required")
                return

        if api_type == ApiType.MODERN.value:
            values[keys.UNIFI_API_KEY] = get_input("API key")
            if not values[keys.UNIFI_API_KEY]:
                print("\n✗ Modern API requires an API key")
                return

        if api_type == ApiType.LEGACY.value:
            values[keys.UNIFI_USERNAME] = get_input("Username", current.get(keys.UNIFI_USERNAME))
            values[keys.UNIFI_PASSWORD] = get_input("Password")
            if not values[keys.UNIFI_USERNAME] or not values[keys.UNIFI_PASSWORD]:
                print("\n✗ Legacy API requires a username and password")
                return

        db.save_settings(values)

        print("\n✓ Controller settings saved")
        print(f"  API type: {api_type}")
        if keys.UNIFI_CONTROLLER_URL in values:
            print(f"  Controller: {values[keys.UNIFI_CONTROLLER_URL]} (site {values[keys.UNIFI_SITE]})")

    except Exception as e:
        print(f"\n✗ Error saving settings: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
