"""
HTTP transport for network controller calls.

Controllers are usually reached over a local network with a self-signed
certificate, so certificate verification is disabled here and only here.
"""
import logging
from typing import List, Optional

import requests

from src.exceptions import ControllerUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class ControllerTransport:
    """Thin wrapper around a requests session scoped to one controller."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS
    ):
        """
        Initialize the transport.

        Args:
            session: requests session (a new one is created if not provided)
            timeout: Per-call timeout in seconds
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Send a request to the controller.

        Args:
            method: HTTP method
            url: Absolute URL
            **kwargs: Passed through to requests (headers, json, ...)

        Returns:
            The response, whatever its status code

        Raises:
            ControllerUnavailable: On timeout, connection or other transport failure
        """
        logger.debug("Controller request", extra={'method': method, 'url': url})
        try:
            return self.session.request(
                method,
                url,
                timeout=self.timeout,
                verify=False,
                **kwargs
            )
        except requests.Timeout as e:
            raise ControllerUnavailable(f"Controller request timed out: {url}") from e
        except requests.RequestException as e:
            raise ControllerUnavailable(f"Controller request failed: {e}") from e

    def close(self) -> None:
        self.session.close()


def extract_set_cookies(response: requests.Response) -> List[str]:
    """
    Collect every raw Set-Cookie header from a response.

    requests folds repeated headers into one comma-joined value, so the
    underlying urllib3 headers are read when available.

    Args:
        response: Response to inspect

    Returns:
        List of raw Set-Cookie header values (may be empty)
    """
    raw_headers = getattr(response.raw, 'headers', None)
    if raw_headers is not None and hasattr(raw_headers, 'getlist'):
        return list(raw_headers.getlist('Set-Cookie'))

    header = response.headers.get('Set-Cookie')
    return [header] if header else []


def find_csrf_token(set_cookies: List[str]) -> Optional[str]:
    """
    Find a csrf_token value among raw Set-Cookie headers.

    Args:
        set_cookies: Raw Set-Cookie header values

    Returns:
        The token if present, None otherwise
    """
    for cookie in set_cookies:
        marker = cookie.find('csrf_token=')
        if marker == -1:
            continue
        token = cookie[marker + len('csrf_token='):].split(';', 1)[0]
        if token:
            return token
    return None
