"""
Client for the cookie-session controller API.

Older controllers and UniFi OS consoles expose the same commands under
different base paths, and only some of them require a CSRF header. Both
variants are probed in a fixed order, classic first.
"""
import logging
from typing import Optional, List, Tuple
from dataclasses import dataclass

import requests

from src.exceptions import AuthenticationFailed, AuthorizationFailed, ControllerUnavailable
from src.models.authorization import normalize_mac, GUEST_ACCESS_MINUTES
from src.models.controller_settings import LegacyController
from .transport import ControllerTransport, extract_set_cookies, find_csrf_token

logger = logging.getLogger(__name__)


@dataclass
class ControllerSession:
    """
    Login state captured from a successful login response.

    Attributes:
        cookies: All Set-Cookie values joined for reuse in a Cookie header
        csrf_token: CSRF token found among the cookies, if any
        login_url: Endpoint that accepted the credentials
    """
    cookies: str
    csrf_token: Optional[str]
    login_url: str

    def headers(self) -> dict:
        """Headers that authenticate a command request."""
        headers = {
            'Content-Type': 'application/json',
            'Cookie': self.cookies
        }
        if self.csrf_token:
            headers['X-CSRF-Token'] = self.csrf_token
        return headers


class LegacyControllerClient:
    """
    Authorizes guests through the session-based API.

    Flow:
    1. Log in via /api/login, falling back to /api/auth/login
    2. Send authorize-guest to the classic stamgr path, falling back to
       the UniFi OS proxied path
    """

    def __init__(self, config: LegacyController, transport: ControllerTransport):
        self.config = config
        self.transport = transport

    def _login_attempts(self) -> List[Tuple[str, dict]]:
        """Login endpoints in the order they are tried."""
        credentials = {
            'username': self.config.username,
            'password': self.config.password
        }
        return [
            (f"{self.config.controller_url}/api/login", credentials),
            (f"{self.config.controller_url}/api/auth/login", dict(credentials, remember=True)),
        ]

    def authorize_paths(self) -> List[str]:
        """stamgr command URLs in the order they are tried."""
        site = self.config.site_id
        return [
            f"{self.config.controller_url}/api/s/{site}/cmd/stamgr",
            f"{self.config.controller_url}/proxy/network/api/s/{site}/cmd/stamgr",
        ]

    def login(self) -> ControllerSession:
        """
        Log in to the controller.

        Returns:
            ControllerSession with the captured cookies and CSRF token

        Raises:
            AuthenticationFailed: If every login endpoint rejected the credentials
            ControllerUnavailable: If every login attempt failed at transport level
        """
        rejected = False
        last_transport_error = None

        for url, payload in self._login_attempts():
            try:
                response = self.transport.send(
                    'POST',
                    url,
                    headers={'Content-Type': 'application/json'},
                    json=payload
                )
            except ControllerUnavailable as e:
                logger.warning("Controller login request failed", extra={
                    'login_url': url,
                    'error_message': e.message
                })
                last_transport_error = e
                continue

            if not response.ok:
                logger.info("Controller login rejected, trying next endpoint", extra={
                    'login_url': url,
                    'status_code': response.status_code
                })
                rejected = True
                continue

            set_cookies = extract_set_cookies(response)
            csrf_token = find_csrf_token(set_cookies)
            if csrf_token:
                logger.info("CSRF token detected, will include in requests")

            return ControllerSession(
                cookies='; '.join(set_cookies),
                csrf_token=csrf_token,
                login_url=url
            )

        if not rejected and last_transport_error is not None:
            raise last_transport_error
        raise AuthenticationFailed("Failed to authenticate with UniFi controller")

    def build_authorize_payload(self, mac_address: str, access_point_mac: Optional[str]) -> dict:
        """
        Build the authorize-guest command.

        Args:
            mac_address: Device MAC address in any case, ':' or '-' separated
            access_point_mac: Access point MAC; omitted when empty or 'unknown'

        Returns:
            Command payload
        """
        payload = {
            'cmd': 'authorize-guest',
            'mac': normalize_mac(mac_address),
            'minutes': GUEST_ACCESS_MINUTES
        }
        if access_point_mac and access_point_mac != 'unknown':
            payload['ap_mac'] = access_point_mac
        return payload

    def authorize_guest(self, mac_address: str, access_point_mac: Optional[str] = None) -> None:
        """
        Log in and authorize a guest device.

        Args:
            mac_address: Device MAC address
            access_point_mac: Access point MAC reported by the portal

        Raises:
            AuthenticationFailed: If login fails on both endpoints
            AuthorizationFailed: If no stamgr path accepted the command
        """
        session = self.login()
        payload = self.build_authorize_payload(mac_address, access_point_mac)
        last_error = None

        for url in self.authorize_paths():
            try:
                response = self.transport.send(
                    'POST',
                    url,
                    headers=session.headers(),
                    json=payload
                )
                body = response.json()
            except (ControllerUnavailable, ValueError, requests.RequestException) as e:
                logger.info("Failed to authorize using path, trying next", extra={
                    'authorize_url': url,
                    'error_type': type(e).__name__
                })
                continue

            meta = body.get('meta') if isinstance(body, dict) else None
            meta = meta if isinstance(meta, dict) else {}
            if meta.get('rc') == 'ok':
                logger.info("Guest authorized (legacy API)", extra={
                    'mac_address': mac_address,
                    'path': 'unifi_os' if '/proxy/' in url else 'classic'
                })
                return

            last_error = meta.get('msg') or last_error
            logger.info("Authorize command rejected, trying next path", extra={
                'authorize_url': url,
                'controller_message': meta.get('msg')
            })

        raise AuthorizationFailed(last_error or 'Authorization failed on all paths')
