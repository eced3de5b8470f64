"""
Per-device rate limiting for guest authorization attempts, with a Redis backend.

Uses fixed windows that start at a device's first attempt.
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# 1 hour in seconds
DEFAULT_WINDOW_SECONDS = 3600
DEFAULT_ATTEMPTS_PER_WINDOW = 30


class RedisBackend:
    """Redis-based attempt counter storage."""

    def __init__(self, redis_client, key_prefix: str = "authorize"):
        """
        Initialize Redis backend.

        Args:
            redis_client: Redis client instance
            key_prefix: Prefix for Redis keys (default: "authorize")
        """
        self._redis = redis_client
        self._key_prefix = key_prefix

    def _get_key(self, identifier: str) -> str:
        """Generate Redis key for an attempt counter."""
        return f"{self._key_prefix}:{identifier}"

    def increment_and_check(self, identifier: str, limit: int, window_seconds: int) -> tuple[int, bool]:
        """
        Increment counter and check limit using Redis.

        The key expires window_seconds after the first attempt.

        Args:
            identifier: Device identifier (normalized MAC address)
            limit: Maximum attempts allowed per window
            window_seconds: Window length in seconds

        Returns:
            Tuple of (current_count, is_allowed)
        """
        key = self._get_key(identifier)

        pipe = self._redis.pipeline()
        pipe.incr(key)
        # Only set expiry if key is new (NX = only if not exists)
        pipe.expire(key, window_seconds, nx=True)

        results = pipe.execute()
        current_count = results[0]

        return current_count, current_count <= limit

    def get_current_count(self, identifier: str) -> int:
        """Get current count from Redis."""
        count = self._redis.get(self._get_key(identifier))
        return int(count) if count else 0


class RateLimiter:
    """
    Limits how often a single device may request authorization.

    Protects the controller from portal pages stuck in a retry loop.
    """

    def __init__(
        self,
        backend: RedisBackend,
        limit: int = DEFAULT_ATTEMPTS_PER_WINDOW,
        window_seconds: int = DEFAULT_WINDOW_SECONDS
    ):
        """
        Initialize rate limiter.

        Args:
            backend: Attempt counter storage backend (Redis)
            limit: Maximum attempts per device per window
            window_seconds: Window length in seconds
        """
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._backend = backend
        self.limit = limit
        self.window_seconds = window_seconds

    def check_rate_limit(self, identifier: str) -> tuple[bool, Optional[str]]:
        """
        Check if an attempt is allowed under the rate limit.

        This method increments the counter and checks the limit atomically.

        Args:
            identifier: Device identifier

        Returns:
            Tuple of (is_allowed, reason)
            - (True, None) if allowed
            - (False, "rate_limit_exceeded") if limit exceeded
        """
        current_count, is_allowed = self._backend.increment_and_check(
            identifier, self.limit, self.window_seconds
        )

        if not is_allowed:
            logger.warning("Rate limit exceeded", extra={
                'identifier': identifier,
                'limit': self.limit,
                'current_count': current_count
            })
            return False, "rate_limit_exceeded"

        return True, None

    def get_usage_info(self, identifier: str) -> dict:
        """
        Get current usage information for a device.

        Args:
            identifier: Device identifier

        Returns:
            Dictionary with usage info
        """
        current_count = self._backend.get_current_count(identifier)

        return {
            'identifier': identifier,
            'attempts': current_count,
            'limit': self.limit,
            'window_seconds': self.window_seconds,
            'remaining': max(self.limit - current_count, 0)
        }
