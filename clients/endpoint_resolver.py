"""Discovery of the orchestrator endpoint of a project."""

import logging
from typing import Any, Dict, Optional

from errors import ServiceNotFound, TransportError
from models import ORCHESTRATOR_COMPONENT_ID
from .storage_client import StorageClient

logger = logging.getLogger('orchestration_migrator.client.resolver')


def resolve_service_url(
    token: str,
    base_url: str,
    config: Optional[Dict[str, Any]] = None,
    service_id: str = ORCHESTRATOR_COMPONENT_ID
) -> str:
    """
    Find the URL of a service advertised in the project's Storage API index.

    Args:
        token: Storage API token of the project
        base_url: Storage API (connection) URL
        config: Optional configuration for HTTP options
        service_id: Service identifier to look for

    Returns:
        Service URL

    Raises:
        ServiceNotFound: If the project's stack does not offer the service
        TransportError: If a Storage API call fails
    """
    client = StorageClient.from_config(config or {}, url=base_url, token=token)
    try:
        index = client.index_action()
        for component in index.get('components') or []:
            if component.get('id') != service_id:
                continue
            logger.debug(f"Found {service_id} service at {component.get('uri')}")
            return component['uri']

        token_data = client.verify_token()
        try:
            region = token_data['owner']['region']
        except (KeyError, TypeError) as e:
            raise TransportError(
                "Token verification response has no owner region",
                method='GET',
                url=f"{client.base_url}/v2/storage/tokens/verify"
            ) from e
        raise ServiceNotFound(region)
    finally:
        client.close()


__all__ = ['resolve_service_url']
