"""
ID mapping tracker for orchestration migration.

Tracks the mapping between source-project and destination-project
orchestration IDs. Filled during the creation pass and read during the
reference fix-up pass.
"""

import logging
from typing import Any, Dict, Optional


class IdMappingTracker:
    """Tracks mappings between source and destination orchestration IDs."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize ID mapping tracker.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger('orchestration_migrator.migration')

        # Keys are normalized to str; values are kept as the API returned them
        self._source_to_destination: Dict[str, Any] = {}
        self._frozen = False

    @staticmethod
    def _key(orchestration_id: Any) -> str:
        return str(orchestration_id)

    def add_mapping(self, source_id: Any, destination_id: Any) -> None:
        """
        Store mapping for a migrated orchestration.

        Args:
            source_id: Orchestration ID in the source project
            destination_id: Orchestration ID assigned in the destination project

        Raises:
            RuntimeError: If the tracker has been frozen
            ValueError: If the source ID is already mapped
        """
        if self._frozen:
            raise RuntimeError("ID mapping is read-only once reference fix-up started")

        key = self._key(source_id)
        if key in self._source_to_destination:
            raise ValueError(f"Source orchestration {source_id} is already mapped")

        self._source_to_destination[key] = destination_id
        self.logger.debug(f"Orchestration mapping added: {source_id} -> {destination_id}")

    def freeze(self) -> None:
        """Make the mapping read-only."""
        self._frozen = True

    def get_destination_id(self, source_id: Any) -> Optional[Any]:
        """
        Get destination ID for a source orchestration ID.

        Returns:
            Destination ID or None if not found
        """
        return self._source_to_destination.get(self._key(source_id))

    def __len__(self) -> int:
        return len(self._source_to_destination)


__all__ = ['IdMappingTracker']
