"""Keboola Storage API client (service index and token verification)."""

from typing import Any, Dict

from errors import TransportError
from .base_client import BaseApiClient


class StorageClient(BaseApiClient):
    """Minimal Storage API client used for endpoint discovery."""

    def index_action(self) -> Dict[str, Any]:
        """Get the Storage API index with the list of available services."""
        return self._expect_object('/v2/storage')

    def verify_token(self) -> Dict[str, Any]:
        """Get token detail including the owning project."""
        return self._expect_object('/v2/storage/tokens/verify')

    def _expect_object(self, endpoint: str) -> Dict[str, Any]:
        response = self._make_request('GET', endpoint)
        if not isinstance(response, dict):
            raise TransportError(
                f"Unexpected response format: {response!r}",
                method='GET',
                url=f"{self.base_url}{endpoint}"
            )
        return response

    @classmethod
    def from_config(cls, config: Dict[str, Any], url: str, token: str) -> 'StorageClient':
        return cls(base_url=url, token=token, **cls.client_options(config))


__all__ = ['StorageClient']
