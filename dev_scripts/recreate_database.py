#!/usr/bin/env python
"""
Drop and recreate the portal tables from src/database/schema.sql.

WARNING: WiFi passwords are always lost. Controller settings are lost too
unless --keep-settings is given, in which case they are copied out before
the drop and written back afterwards.

Usage:
  python dev_scripts/recreate_database.py                   # 'frontier_portal' (asks for confirmation)
  python dev_scripts/recreate_database.py --test-db         # 'frontier_portal_test'
  python dev_scripts/recreate_database.py --keep-settings   # preserve the settings table contents
"""

import os
import sys
import argparse
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from dotenv import load_dotenv

PORTAL_TABLES = ('wifi_passwords', 'settings')


def read_schema() -> str:
    """Load the schema shipped with the package."""
    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    schema_path = os.path.join(repo_root, 'src', 'database', 'schema.sql')
    if not os.path.exists(schema_path):
        print(f"Error: schema file not found at {schema_path}")
        sys.exit(1)
    with open(schema_path, 'r', encoding='utf-8') as f:
        return f.read()


def confirm(portal_db: str, pg_host: str, pg_port: str, keep_settings: bool) -> bool:
    print("\n⚠️  WARNING: This deletes every WiFi password in the database!")
    if not keep_settings:
        print("   Controller settings will be deleted as well (use --keep-settings to preserve them).")
    print(f"Database: {portal_db} on {pg_host}:{pg_port}")
    return input("\nType 'yes' to continue: ").strip().lower() == 'yes'


def main():
    """Recreate the portal tables."""
    load_dotenv()

    parser = argparse.ArgumentParser(description='Drop and recreate the captive portal tables')
    parser.add_argument('--test-db', action='store_true',
                        help="Operate on 'frontier_portal_test' instead of the main database")
    parser.add_argument('--keep-settings', action='store_true',
                        help='Restore stored controller settings after recreating the tables')
    parser.add_argument('--yes', '-y', action='store_true',
                        help='Skip confirmation prompt')
    args = parser.parse_args()

    pg_host = os.environ.get('POSTGRES_HOST', 'localhost')
    pg_port = os.environ.get('POSTGRES_PORT', '5432')
    portal_db = 'frontier_portal_test' if args.test_db else os.environ.get('PORTAL_PG_DB', 'frontier_portal')
    portal_user = os.environ.get('PORTAL_PG_USER', 'frontier_portal')
    portal_password = os.environ.get('PORTAL_PG_PASSWORD')

    if not portal_password:
        print("Error: PORTAL_PG_PASSWORD environment variable is required")
        sys.exit(1)

    # The test database is disposable, no prompt
    if not args.yes and not args.test_db:
        if not confirm(portal_db, pg_host, pg_port, args.keep_settings):
            print("Aborted.")
            sys.exit(0)

    schema_sql = read_schema()

    try:
        conn = psycopg2.connect(
            host=pg_host,
            port=pg_port,
            database=portal_db,
            user=portal_user,
            password=portal_password
        )
        conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)

        with conn.cursor() as cursor:
            saved_settings = []
            if args.keep_settings:
                cursor.execute("SELECT to_regclass('public.settings')")
                if cursor.fetchone()[0] is not None:
                    cursor.execute("SELECT key, value, updated_at FROM settings")
                    saved_settings = cursor.fetchall()
                print(f"✓ Saved {len(saved_settings)} setting(s)")

            for table in PORTAL_TABLES:
                cursor.execute(f"DROP TABLE IF EXISTS {table} CASCADE")
                print(f"✓ Dropped {table}")

            cursor.execute(schema_sql)
            print("✓ Schema applied")

            for key, value, updated_at in saved_settings:
                cursor.execute(
                    "INSERT INTO settings (key, value, updated_at) VALUES (%s, %s, %s)",
                    (key, value, updated_at)
                )
            if saved_settings:
                print(f"✓ Restored {len(saved_settings)} setting(s)")

        conn.close()
    except psycopg2.Error as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\n✓ Recreated tables in '{portal_db}' ({pg_host}:{pg_port}) as {portal_user}")
    if not args.keep_settings:
        print("Run scripts/set_controller.py to configure the network controller.")


if __name__ == "__main__":
    main()
