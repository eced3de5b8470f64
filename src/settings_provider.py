"""
Controller settings resolution.

Stored settings take precedence; anything missing falls back to the
process environment so older deployments configured only through
environment variables keep working.
"""
import os
from typing import Optional, Dict, Mapping

from src.models.controller_settings import ControllerSettings, ApiType
from src.models import setting as keys


# Stored setting key -> environment variable used when the store has no value
ENVIRONMENT_FALLBACKS = {
    keys.UNIFI_CONTROLLER_URL: 'UNIFI_CONTROLLER_URL',
    keys.UNIFI_API_KEY: 'UNIFI_API_KEY',
    keys.UNIFI_USERNAME: 'UNIFI_USERNAME',
    keys.UNIFI_PASSWORD: 'UNIFI_PASSWORD',
    keys.UNIFI_SITE: 'UNIFI_SITE',
}

DEFAULT_SITE_ID = 'default'


class SettingsProvider:
    """
    Resolves effective settings from a settings store and the environment.

    The store is any object exposing ``load_settings() -> Dict[str, str]``
    (the database driver in production).
    """

    def __init__(self, store, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the provider.

        Args:
            store: Settings store with a load_settings() method
            environ: Environment mapping (default: os.environ)
        """
        self._store = store
        self._environ = environ if environ is not None else os.environ

    def get_settings(self) -> Dict[str, str]:
        """Load the raw stored settings."""
        return self._store.load_settings()

    def _env(self, key: str) -> Optional[str]:
        env_name = ENVIRONMENT_FALLBACKS.get(key)
        if not env_name:
            return None
        return self._environ.get(env_name) or None

    def resolve_setting(self, key: str, stored: Optional[Dict[str, str]] = None) -> Optional[str]:
        """
        Resolve a single setting.

        Args:
            key: Setting key (e.g., 'unifi_controller_url')
            stored: Already-loaded stored settings (loaded if not provided)

        Returns:
            Stored value if non-empty, else the environment fallback, else None
        """
        if stored is None:
            stored = self.get_settings()
        return stored.get(key) or self._env(key)

    def resolve_controller_settings(self) -> ControllerSettings:
        """
        Resolve the effective controller settings for one request.

        When no API type is stored it is inferred from the environment:
        'modern' if UNIFI_API_KEY is set, else 'legacy' if UNIFI_USERNAME is
        set, else 'none'.

        Returns:
            ControllerSettings instance
        """
        stored = self.get_settings()

        api_type = stored.get(keys.UNIFI_API_TYPE)
        if not api_type:
            if self._env(keys.UNIFI_API_KEY):
                api_type = ApiType.MODERN.value
            elif self._env(keys.UNIFI_USERNAME):
                api_type = ApiType.LEGACY.value
            else:
                api_type = ApiType.NONE.value

        return ControllerSettings(
            api_type=api_type,
            controller_url=self.resolve_setting(keys.UNIFI_CONTROLLER_URL, stored),
            api_key=self.resolve_setting(keys.UNIFI_API_KEY, stored),
            username=self.resolve_setting(keys.UNIFI_USERNAME, stored),
            password=self.resolve_setting(keys.UNIFI_PASSWORD, stored),
            site_id=self.resolve_setting(keys.UNIFI_SITE, stored) or DEFAULT_SITE_ID
        )
