"""
Keboola API clients.

- base_client: token authenticated requests session and error translation
- orchestrator_client: CRUD on orchestrations of a project
- storage_client: Storage API index and token verification
- endpoint_resolver: discovers the orchestrator URL of a project
"""

from .base_client import BaseApiClient
from .orchestrator_client import OrchestratorClient
from .storage_client import StorageClient
from .endpoint_resolver import resolve_service_url

__all__ = [
    'BaseApiClient',
    'OrchestratorClient',
    'StorageClient',
    'resolve_service_url'
]
