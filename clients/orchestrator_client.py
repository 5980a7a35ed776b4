"""
Keboola Orchestrator REST API client.

CRUD operations on the orchestrations of one project. The base URL is the
orchestrator endpoint discovered through the Storage API index.
"""

import logging
from typing import Any, Dict, List

from errors import TransportError
from models import Orchestration, OrchestrationSummary
from .base_client import BaseApiClient

logger = logging.getLogger('orchestration_migrator.client.orchestrator')


class OrchestratorClient(BaseApiClient):
    """Orchestrator API client for a single project."""

    def list_orchestrations(self) -> List[OrchestrationSummary]:
        """List orchestrations (summaries, without tasks)."""
        response = self._make_request('GET', '/orchestrations')
        if not isinstance(response, list):
            raise TransportError(
                f"Unexpected orchestrations listing format: {response!r}",
                method='GET',
                url=f"{self.base_url}/orchestrations"
            )
        return [OrchestrationSummary.from_dict(item) for item in response]

    def get_orchestration(self, orchestration_id: Any) -> Orchestration:
        """Get orchestration detail including tasks."""
        response = self._expect_object('GET', f'/orchestrations/{orchestration_id}')
        return Orchestration.from_dict(response)

    def create_orchestration(self, name: str, options: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new orchestration.

        Args:
            name: Orchestration name
            options: Additional fields (crontabRecord, notifications, tasks, active)

        Returns:
            Created orchestration as returned by the API (contains 'id')
        """
        payload = dict(options)
        payload['name'] = name
        response = self._expect_object('POST', '/orchestrations', json=payload)
        if 'id' not in response:
            raise TransportError(
                "Orchestration create response has no id",
                method='POST',
                url=f"{self.base_url}/orchestrations"
            )
        logger.debug(f"Created orchestration {name!r} (ID: {response['id']})")
        return response

    def update_orchestration(self, orchestration_id: Any, fields: Dict[str, Any]) -> None:
        """Update orchestration properties."""
        self._make_request('PUT', f'/orchestrations/{orchestration_id}', json=fields)

    def delete_orchestration(self, orchestration_id: Any) -> None:
        """Delete an orchestration."""
        self._make_request('DELETE', f'/orchestrations/{orchestration_id}')

    def _expect_object(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        response = self._make_request(method, endpoint, **kwargs)
        if not isinstance(response, dict):
            raise TransportError(
                f"Unexpected response format: {response!r}",
                method=method,
                url=f"{self.base_url}/{endpoint.lstrip('/')}"
            )
        return response

    @classmethod
    def from_config(cls, config: Dict[str, Any], url: str, token: str) -> 'OrchestratorClient':
        """
        Create client from configuration dictionary.

        Args:
            config: Configuration dict; HTTP options come from 'advanced'
            url: Resolved orchestrator API URL
            token: Storage API token of the project

        Returns:
            Configured OrchestratorClient instance
        """
        return cls(base_url=url, token=token, **cls.client_options(config))


__all__ = ['OrchestratorClient']
