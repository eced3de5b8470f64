#!/usr/bin/env python3
"""
Quick script to verify database schema.
"""
from src.utils import get_db_connection

EXPECTED_TABLES = ('settings', 'wifi_passwords')

db = get_db_connection(verbose=False)

with db.get_cursor(commit=False) as cursor:
    cursor.execute("""
        SELECT tablename
        FROM pg_tables
        WHERE schemaname = 'public'
        ORDER BY tablename
    """)
    tables = [row[0] for row in cursor.fetchall()]

    print("Tables in database:")
    for table in tables:
        print(f"  - {table}")

    for table in EXPECTED_TABLES:
        if table not in tables:
            print(f"\n✗ Missing table: {table}")
            continue

        cursor.execute("""
            SELECT column_name, data_type, is_nullable
            FROM information_schema.columns
            WHERE table_name = %s
            ORDER BY ordinal_position
        """, (table,))
        print(f"\n{table} columns:")
        for col in cursor.fetchall():
            nullable = "NULL" if col[2] == 'YES' else "NOT NULL"
            print(f"  - {col[0]} ({col[1]}) {nullable}")

db.close()
print("\n✓ Schema verification complete")
