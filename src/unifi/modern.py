"""
Client for the token-authenticated controller API (Network Application 9.1.105+).
"""
import logging
from typing import Optional, List

from src.exceptions import ClientNotFound, ControllerUnavailable, AuthorizationFailed
from src.models.authorization import normalize_mac, GUEST_ACCESS_MINUTES
from src.models.controller_settings import ModernController
from .transport import ControllerTransport

logger = logging.getLogger(__name__)


class ModernControllerClient:
    """
    Authorizes guests through the modern REST API.

    Flow:
    1. Look up the client by upper-case MAC address
    2. Issue AUTHORIZE_GUEST_ACCESS against the client's controller id
    """

    def __init__(self, config: ModernController, transport: ControllerTransport):
        self.config = config
        self.transport = transport

    def _headers(self) -> dict:
        return {
            'Authorization': f'Bearer {self.config.api_key}',
            'Content-Type': 'application/json'
        }

    def _site_url(self) -> str:
        return f"{self.config.controller_url}/v1/sites/{self.config.site_id}"

    def find_client_id(self, mac_address: str) -> Optional[str]:
        """
        Find the controller-assigned id of a connected client.

        Args:
            mac_address: MAC address in any case, ':' or '-' separated

        Returns:
            Id of the first matching client, None if the device is not connected

        Raises:
            ControllerUnavailable: If the lookup fails at transport or HTTP level
        """
        mac = normalize_mac(mac_address, upper=True)
        url = f"{self._site_url()}/clients?filter=macAddress.eq('{mac}')"

        response = self.transport.send('GET', url, headers=self._headers())
        if not response.ok:
            raise ControllerUnavailable(f"Failed to get client: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise ControllerUnavailable("Failed to get client: invalid response body") from e

        clients = self._client_list(body)
        if not clients:
            return None

        first = clients[0]
        client_id = first.get('id') if isinstance(first, dict) else None
        if client_id is None:
            raise ControllerUnavailable("Failed to get client: response has no client id")

        return str(client_id)

    @staticmethod
    def _client_list(body) -> List[dict]:
        """Accept both a bare list and a paginated {'data': [...]} body."""
        if isinstance(body, dict):
            body = body.get('data')
        if not isinstance(body, list):
            return []
        return body

    def authorize_client(self, client_id: str) -> None:
        """
        Grant guest access to a client for the standard window.

        Args:
            client_id: Controller-assigned client id

        Raises:
            AuthorizationFailed: If the controller rejects the action
            ControllerUnavailable: On transport failure
        """
        url = f"{self._site_url()}/clients/{client_id}/actions"
        response = self.transport.send(
            'POST',
            url,
            headers=self._headers(),
            json={
                'action': 'AUTHORIZE_GUEST_ACCESS',
                'timeLimitMinutes': GUEST_ACCESS_MINUTES
            }
        )
        if not response.ok:
            raise AuthorizationFailed(f"Authorization failed: {response.status_code}")

    def authorize_guest(self, mac_address: str) -> None:
        """
        Look up and authorize a guest device.

        Args:
            mac_address: Device MAC address

        Raises:
            ClientNotFound: If the device is not visible to the controller
        """
        client_id = self.find_client_id(mac_address)
        if client_id is None:
            logger.warning("Client not found, may not be connected yet", extra={
                'mac_address': mac_address
            })
            raise ClientNotFound()

        self.authorize_client(client_id)
        logger.info("Guest authorized (modern API)", extra={
            'mac_address': mac_address,
            'client_id': client_id
        })
