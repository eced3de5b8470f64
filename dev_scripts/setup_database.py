#!/usr/bin/env python
"""
Database setup script for captive portal gateway
Creates the frontier_portal database and user with proper permissions, then applies database/schema.sql

Usage:
  python setup_database.py                 # Sets up main 'frontier_portal' database
  python setup_database.py --test-db       # Sets up test 'frontier_portal_test' database
"""

import os
import sys
import argparse
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from dotenv import load_dotenv


def main():
    """Setup frontier_portal database and user"""
    # Load environment variables from .env file
    load_dotenv()

    parser = argparse.ArgumentParser(description='Setup portal database')
    parser.add_argument('--test-db', action='store_true',
                       help='Create frontier_portal_test database instead of main frontier_portal database')
    args = parser.parse_args()

    pg_host = os.environ.get('POSTGRES_HOST', 'localhost')
    pg_port = os.environ.get('POSTGRES_PORT', '5432')
    pg_user = os.environ.get('POSTGRES_USER', 'postgres')
    pg_password = os.environ.get('PG_PASSWORD', None)

    if args.test_db:
        portal_db = 'frontier_portal_test'
        print("Setting up TEST database 'frontier_portal_test'...")
    else:
        portal_db = os.environ.get('PORTAL_PG_DB', 'frontier_portal')
    portal_user = os.environ.get('PORTAL_PG_USER', 'frontier_portal')
    portal_password = os.environ.get('PORTAL_PG_PASSWORD', None)

    if pg_password is None:
        print("Error: PG_PASSWORD environment variable is required")
        sys.exit(1)
    if portal_password is None:
        print("Error: PORTAL_PG_PASSWORD environment variable is required")
        sys.exit(1)

    print(f"Setting up database '{portal_db}' and user '{portal_user}'...")
    print(f"Connecting to PostgreSQL at {pg_host}:{pg_port} as {pg_user}")

    try:
        conn = psycopg2.connect(
            host=pg_host,
            port=pg_port,
            database='postgres',
            user=pg_user,
            password=pg_password
        )
        conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)

        with conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM pg_roles WHERE rolname = %s", (portal_user,))
            if not cursor.fetchone():
                print(f"Creating user '{portal_user}'...")
                cursor.execute(f"CREATE USER {portal_user} WITH PASSWORD %s", (portal_password,))
                print(f"✓ User '{portal_user}' created")
            else:
                print(f"✓ User '{portal_user}' already exists")

            cursor.execute("SELECT 1 FROM pg_database WHERE datname = %s", (portal_db,))
            if not cursor.fetchone():
                print(f"Creating database '{portal_db}'...")
                cursor.execute(f"CREATE DATABASE {portal_db} OWNER {portal_user}")
                print(f"✓ Database '{portal_db}' created")
            else:
                print(f"✓ Database '{portal_db}' already exists")

            print("Setting permissions...")
            cursor.execute(f"GRANT ALL PRIVILEGES ON DATABASE {portal_db} TO {portal_user}")
            print(f"✓ Granted all privileges on database '{portal_db}' to user '{portal_user}'")

        conn.close()

        print(f"\nConnecting as '{portal_user}' to apply schema...")
        portal_conn = psycopg2.connect(
            host=pg_host,
            port=pg_port,
            database=portal_db,
            user=portal_user,
            password=portal_password
        )
        portal_conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)

        repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        schema_path = os.path.join(repo_root, 'src', 'database', 'schema.sql')
        if not os.path.exists(schema_path):
            print(f"Error: schema file not found at {schema_path}")
            sys.exit(1)

        with open(schema_path, 'r', encoding='utf-8') as f:
            schema_sql = f.read()

        with portal_conn.cursor() as cursor:
            print(f"Applying schema from {schema_path}...")
            cursor.execute(schema_sql)
            print("✓ Schema applied")

        portal_conn.close()
        print("✓ Database setup complete")
        print(f"Database: {portal_db}")
        print(f"User: {portal_user}")
        print(f"Host: {pg_host}:{pg_port}")

    except psycopg2.Error as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
