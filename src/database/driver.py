"""
Database driver for the captive portal gateway.
Provides connection pooling and database operations for settings and WiFi passwords.
"""
from typing import Optional, List, Dict
from contextlib import contextmanager
import time
from psycopg2.pool import ThreadedConnectionPool
from psycopg2.extras import RealDictCursor

from ..models.setting import Setting
from ..models.wifi_password import WifiPassword
from ..monitoring import DB_CONNECTION_POOL


class PortalDB:
    """Database driver for the captive portal gateway with connection pooling."""

    def __init__(
        self,
        db_host: str,
        db_name: str,
        db_user: str,
        db_password: str,
        db_port: int = 5432,
        min_conn: int = 2,
        max_conn: int = 10
    ):
        """
        Initialize database connection pool.

        Args:
            db_host: PostgreSQL host
            db_name: Database name
            db_user: Database user
            db_password: Database password
            db_port: PostgreSQL port (default: 5432)
            min_conn: Minimum number of connections in pool
            max_conn: Maximum number of connections in pool
        """
        self.pool = ThreadedConnectionPool(
            min_conn,
            max_conn,
            host=db_host,
            port=db_port,
            database=db_name,
            user=db_user,
            password=db_password
        )
        self._active_connections = 0
        self._max_conn = max_conn

        DB_CONNECTION_POOL.labels(state='active').set(0)
        DB_CONNECTION_POOL.labels(state='idle').set(min_conn)
        DB_CONNECTION_POOL.labels(state='max').set(max_conn)

    @contextmanager
    def _get_connection(self):
        """Context manager for getting a connection from the pool."""
        conn = self.pool.getconn()
        self._active_connections += 1
        DB_CONNECTION_POOL.labels(state='active').set(self._active_connections)
        DB_CONNECTION_POOL.labels(state='idle').set(self._max_conn - self._active_connections)
        try:
            yield conn
        finally:
            self.pool.putconn(conn)
            self._active_connections -= 1
            DB_CONNECTION_POOL.labels(state='active').set(self._active_connections)
            DB_CONNECTION_POOL.labels(state='idle').set(self._max_conn - self._active_connections)

    @contextmanager
    def get_cursor(self, commit: bool = True, cursor_factory=None):
        """
        Context manager for database cursors with automatic commit/rollback.

        Args:
            commit: Whether to commit on success
            cursor_factory: Optional cursor factory (e.g., RealDictCursor)

        Yields:
            Database cursor
        """
        with self._get_connection() as conn:
            cursor = conn.cursor(cursor_factory=cursor_factory)
            try:
                yield cursor
                if commit:
                    conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    # ========== Settings Operations ==========

    def load_settings(self) -> Dict[str, Optional[str]]:
        """
        Load every stored setting.

        Returns:
            Dictionary mapping setting keys to values
        """
        with self.get_cursor(commit=False, cursor_factory=RealDictCursor) as cursor:
            cursor.execute("SELECT key, value FROM settings ORDER BY key")
            return {row['key']: row['value'] for row in cursor.fetchall()}

    def load_setting(self, key: str) -> Optional[Setting]:
        """
        Load a single setting by key.

        Args:
            key: Setting key

        Returns:
            Setting object if found, None otherwise
        """
        with self.get_cursor(commit=False, cursor_factory=RealDictCursor) as cursor:
            cursor.execute(
                "SELECT key, value, updated_at FROM settings WHERE key = %s",
                (key,)
            )
            result = cursor.fetchone()
            if not result:
                return None
            return Setting.from_dict(dict(result))

    def save_settings(self, values: Dict[str, Optional[str]]) -> int:
        """
        Insert or update several settings in one transaction.

        Args:
            values: Dictionary mapping setting keys to values

        Returns:
            Number of settings written
        """
        updated_at = int(time.time())

        with self.get_cursor() as cursor:
            for key, value in values.items():
                cursor.execute(
                    """
                    INSERT INTO settings (key, value, updated_at)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (key)
                    DO UPDATE SET
                        value = EXCLUDED.value,
                        updated_at = EXCLUDED.updated_at
                    """,
                    (key, value, updated_at)
                )
        return len(values)

    def delete_setting(self, key: str) -> bool:
        """
        Delete a setting by key.

        Args:
            key: Setting key

        Returns:
            True if the setting was deleted, False if not found
        """
        with self.get_cursor() as cursor:
            cursor.execute("DELETE FROM settings WHERE key = %s", (key,))
            return cursor.rowcount > 0

    # ========== WiFi Password Operations ==========

    def load_all_wifi_passwords(self, active_only: bool = False) -> List[WifiPassword]:
        """
        Load WiFi passwords.

        Args:
            active_only: Only return active passwords

        Returns:
            List of WifiPassword objects, oldest first
        """
        query = "SELECT * FROM wifi_passwords"
        if active_only:
            query += " WHERE is_active = TRUE"
        query += " ORDER BY created_at, id"

        with self.get_cursor(commit=False, cursor_factory=RealDictCursor) as cursor:
            cursor.execute(query)
            return [WifiPassword.from_dict(dict(row)) for row in cursor.fetchall()]

    def load_wifi_password_by_id(self, password_id: int) -> Optional[WifiPassword]:
        """
        Load a WiFi password by its ID.

        Args:
            password_id: Password identifier

        Returns:
            WifiPassword object if found, None otherwise
        """
        with self.get_cursor(commit=False, cursor_factory=RealDictCursor) as cursor:
            cursor.execute(
                "SELECT * FROM wifi_passwords WHERE id = %s",
                (password_id,)
            )
            result = cursor.fetchone()
            if not result:
                return None
            return WifiPassword.from_dict(dict(result))

    def save_wifi_password(self, wifi_password: WifiPassword) -> int:
        """
        Insert or update a WiFi password.

        Args:
            wifi_password: WifiPassword object to save

        Returns:
            The password id (either provided or generated by database)

        Raises:
            psycopg2.IntegrityError: If another row already has the same password
        """
        password_dict = wifi_password.to_dict()

        with self.get_cursor() as cursor:
            if wifi_password.password_id is not None:
                cursor.execute(
                    """
                    UPDATE wifi_passwords
                    SET password = %(password)s,
                        description = %(description)s,
                        is_active = %(is_active)s
                    WHERE id = %(id)s
                    RETURNING id
                    """,
                    password_dict
                )
            else:
                cursor.execute(
                    """
                    INSERT INTO wifi_passwords (password, description, is_active, created_at)
                    VALUES (%(password)s, %(description)s, %(is_active)s, %(created_at)s)
                    RETURNING id
                    """,
                    password_dict
                )

            result = cursor.fetchone()
            if result is None:
                raise ValueError(f"WiFi password {wifi_password.password_id} does not exist")
            wifi_password.password_id = result[0]
            return wifi_password.password_id

    def delete_wifi_password(self, password_id: int) -> bool:
        """
        Delete a WiFi password by its ID.

        Args:
            password_id: Password identifier

        Returns:
            True if the password was deleted, False if not found
        """
        with self.get_cursor() as cursor:
            cursor.execute(
                "DELETE FROM wifi_passwords WHERE id = %s",
                (password_id,)
            )
            return cursor.rowcount > 0

    def close(self) -> None:
        """Close all connections in the pool."""
        if self.pool and not self.pool.closed:
            self.pool.closeall()

    def __del__(self):
        """Cleanup connection pool on deletion."""
        if hasattr(self, 'pool'):
            self.close()
