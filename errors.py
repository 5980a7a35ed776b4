"""Exception hierarchy for the orchestration migrator."""

from typing import Optional


class MigratorError(Exception):
    """Base exception for all migrator errors."""
    pass


class UserError(MigratorError):
    """Actionable error caused by the state of a project, not by a bug."""
    pass


class MigrationBlocked(UserError):
    """Destination project is not in a state that allows migration."""
    pass


class ServiceNotFound(UserError):
    """The orchestrator service is not available for a project."""

    def __init__(self, region: str):
        self.region = region
        super().__init__(f"Orchestrator not found in {region} region")


class TransportError(MigratorError):
    """Remote call failed (network, authentication or malformed response)."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    'MigratorError',
    'UserError',
    'MigrationBlocked',
    'ServiceNotFound',
    'TransportError'
]
