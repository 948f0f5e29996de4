"""Client for the Clash external controller API."""

import json
import requests
import urllib3
from typing import Dict, Any, Iterator, List, Optional
from urllib.parse import quote

from .exceptions import (
    APIError, AuthenticationError, ClashError, ConfigurationError, ControllerConnectionError
)
from ..utils.logger import get_logger, update_logger_controller_context
from config.settings import settings

logger = get_logger(__name__)


class ClashClient:
    """Synchronous client for a single Clash controller."""

    def __init__(self, controller: str = None, secret: str = None, timeout: float = None,
                 verify_ssl: bool = None):
        """
        Initialize the controller client.

        Args:
            controller: Controller address, ``host:port`` or a full URL
            secret: Bearer secret configured on the daemon
            timeout: Request timeout in seconds (None waits indefinitely)
            verify_ssl: Verify TLS certificates for https controllers
        """
        controller_config = settings.get_controller()
        self.controller = controller or controller_config.get('address')
        self.secret = secret if secret is not None else controller_config.get('secret')
        self.timeout = timeout if timeout is not None else controller_config.get('timeout')
        self.verify_ssl = verify_ssl if verify_ssl is not None else controller_config.get('verify_ssl', True)
        self.base_url = self._build_base_url(self.controller)

        update_logger_controller_context(logger, self.base_url)

        # Disable SSL warnings if verification is disabled
        if not self.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.warning("SSL verification is disabled for the controller")

        self.session = self._new_session()
        # The traffic stream runs on its own thread and gets its own session
        self.stream_session = self._new_session()

    def _new_session(self) -> requests.Session:
        session = requests.Session()
        session.verify = self.verify_ssl
        if self.secret:
            session.headers['Authorization'] = f"Bearer {self.secret}"
        return session

    @staticmethod
    def _build_base_url(controller: Optional[str]) -> str:
        """Normalize a controller address into a base URL."""
        address = (controller or '').strip()
        if not address:
            raise ConfigurationError("Controller address must be specified")
        if not address.startswith('http'):
            address = f"http://{address}"
        return address.rstrip('/')

    def _make_request(self, method: str, endpoint: str, session: requests.Session = None,
                      **kwargs) -> requests.Response:
        """Send a request and translate transport and HTTP failures."""
        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = (session or self.session).request(method, url, **kwargs)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            raise ControllerConnectionError(f"Failed to reach controller at {self.base_url}") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            raise ClashError(f"Request to {endpoint} failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthenticationError(f"Controller rejected credentials ({response.status_code})")
        if not response.ok:
            raise APIError(
                f"{method} {endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
                response_text=response.text,
            )
        return response

    def _request_json(self, method: str, endpoint: str, **kwargs) -> Any:
        """Send a request and decode the JSON body."""
        response = self._make_request(method, endpoint, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"Failed to parse response from {endpoint}",
                status_code=response.status_code,
                response_text=response.text,
            ) from e

    # ========================================
    # Control API
    # ========================================

    def get_proxies(self) -> Dict[str, Dict[str, Any]]:
        """Get every proxy and group keyed by name."""
        data = self._request_json('GET', '/proxies')
        return data.get('proxies', {}) or {}

    def get_rules(self) -> List[Dict[str, Any]]:
        """Get the routing rules in daemon order."""
        data = self._request_json('GET', '/rules')
        return data.get('rules', []) or []

    def get_version(self) -> str:
        """Get the daemon version string."""
        data = self._request_json('GET', '/version')
        return str(data.get('version', 'unknown'))

    def select_proxy(self, group: str, name: str) -> None:
        """Set the active member of a selector group."""
        self._make_request('PUT', f"/proxies/{quote(group, safe='')}", json={'name': name})
        logger.info(f"Selected {name} for group {group}")

    def test_delay(self, name: str, url: str, timeout_ms: int) -> int:
        """
        Probe a proxy's latency through the daemon.

        Returns:
            Delay in milliseconds, or -1 when the daemon reports a timeout or error
        """
        endpoint = f"/proxies/{quote(name, safe='')}/delay"
        try:
            data = self._request_json('GET', endpoint, params={'url': url, 'timeout': timeout_ms})
        except (APIError, AuthenticationError) as e:
            logger.debug(f"Delay test for {name} failed: {e}")
            return -1
        return int(data.get('delay', -1))

    def get_config(self) -> Dict[str, Any]:
        """Get the running configuration (mode, ports)."""
        return self._request_json('GET', '/configs')

    def get_connections(self) -> Dict[str, Any]:
        """Get active connections and cumulative totals."""
        return self._request_json('GET', '/connections')

    def update_mode(self, mode: str) -> None:
        """Switch the routing mode."""
        self._make_request('PATCH', '/configs', json={'mode': mode})
        logger.info(f"Routing mode set to {mode}")

    # ========================================
    # Streaming
    # ========================================

    def stream_traffic(self, connect_timeout: float = 5, read_timeout: float = 30) -> Iterator[Dict[str, Any]]:
        """
        Yield decoded throughput messages from the live traffic endpoint.

        The generator ends when the daemon closes the stream. Read failures
        are raised as ControllerConnectionError.
        """
        params = {'token': self.secret} if self.secret else None
        response = self._make_request(
            'GET', '/traffic', session=self.stream_session, params=params,
            stream=True, timeout=(connect_timeout, read_timeout),
        )

        with response:
            try:
                for line in response.iter_lines():
                    if not line:
                        continue
                    try:
                        payload = json.loads(line)
                    except ValueError:
                        logger.debug(f"Skipping undecodable traffic message: {line!r}")
                        continue
                    if isinstance(payload, dict):
                        yield payload
            except requests.exceptions.RequestException as e:
                raise ControllerConnectionError(f"Traffic stream interrupted: {e}") from e
