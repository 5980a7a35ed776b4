"""Safety gate run before any destination mutation."""

import logging
from typing import Optional

from errors import MigrationBlocked


class PreconditionChecker:
    """Verifies the destination project can receive a migration."""

    def __init__(self, destination_client, logger: Optional[logging.Logger] = None):
        self.destination_client = destination_client
        self.logger = logger or logging.getLogger('orchestration_migrator.migration')

    def check_destination_empty(self) -> None:
        """
        Ensure the destination project has no orchestrations.

        Migration is not idempotent: running it twice creates duplicates
        with fresh IDs.

        Raises:
            MigrationBlocked: If the destination already has orchestrations
        """
        self.logger.info("Checking destination project for existing orchestrations")
        orchestrations = self.destination_client.list_orchestrations()
        if orchestrations:
            self.logger.debug(f"Destination project has {len(orchestrations)} orchestrations")
            raise MigrationBlocked("Destination project has some existing orchestrations")


__all__ = ['PreconditionChecker']
