"""
Shared HTTP plumbing for Keboola API clients.

Handles token authentication, optional GET retries, SSL settings and
translation of every transport failure into TransportError.
"""

import logging
from typing import Any, Dict, Optional

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from errors import TransportError

logger = logging.getLogger('orchestration_migrator.client')

TOKEN_HEADER = 'X-StorageApi-Token'


class BaseApiClient:
    """Token-authenticated JSON API client."""

    DEFAULT_TIMEOUT = None
    DEFAULT_MAX_RETRIES = 0
    DEFAULT_RETRY_BACKOFF = 0.5

    def __init__(
        self,
        base_url: str,
        token: str,
        verify_ssl: bool = True,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_backoff_factor: float = DEFAULT_RETRY_BACKOFF
    ):
        """
        Initialize API client.

        Args:
            base_url: API base URL
            token: Storage API token of the project
            verify_ssl: Whether to verify SSL certificates
            timeout: Request timeout in seconds (None blocks until the server answers)
            max_retries: Retries for idempotent GET requests on transient errors
            retry_backoff_factor: Backoff factor for retries
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            TOKEN_HEADER: token,
            'Accept': 'application/json'
        })

        self.session.verify = verify_ssl
        if not verify_ssl:
            logger.warning("SSL verification disabled - this is insecure!")
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        if max_retries > 0:
            retry_strategy = Retry(
                total=max_retries,
                backoff_factor=retry_backoff_factor,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"],
                raise_on_status=False
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self.session.mount('http://', adapter)
            self.session.mount('https://', adapter)

        logger.debug(f"Initialized {type(self).__name__} for {self.base_url} "
                     f"(timeout={timeout}, max_retries={max_retries})")

    @classmethod
    def client_options(cls, config: Dict[str, Any]) -> Dict[str, Any]:
        """Extract HTTP options from the 'advanced' config section."""
        advanced = config.get('advanced') or {}
        return {
            'verify_ssl': advanced.get('verify_ssl', True),
            'timeout': advanced.get('request_timeout', cls.DEFAULT_TIMEOUT),
            'max_retries': advanced.get('max_retries', cls.DEFAULT_MAX_RETRIES),
            'retry_backoff_factor': advanced.get('retry_backoff_factor', cls.DEFAULT_RETRY_BACKOFF)
        }

    def _make_request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make HTTP request and decode the JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: Path relative to base_url
            json: JSON payload for POST/PUT requests
            params: Query parameters

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            TransportError: For network, HTTP and decoding errors
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        logger.debug(f"{method} {url}")
        if json is not None:
            logger.debug(f"Payload: {json}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=json,
                params=params,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {method} {url} - {e}")
            raise TransportError(f"{method} {url} failed: {e}", method=method, url=url) from e

        logger.debug(f"Response status: {response.status_code}")

        if response.status_code >= 400:
            detail = self._error_detail(response)
            logger.error(f"HTTP Error {response.status_code}: {method} {url} - {detail}")
            raise TransportError(
                f"{method} {url} returned HTTP {response.status_code}: {detail}",
                method=method,
                url=url,
                status_code=response.status_code
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {url} returned a non-JSON response",
                method=method,
                url=url,
                status_code=response.status_code
            ) from e

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Extract a human readable error message from an error response."""
        try:
            body = response.json()
        except ValueError:
            return response.text[:500]
        if isinstance(body, dict):
            for key in ('message', 'error'):
                if body.get(key):
                    return str(body[key])
        return str(body)[:500]

    def close(self) -> None:
        self.session.close()


__all__ = ['BaseApiClient', 'TOKEN_HEADER']
