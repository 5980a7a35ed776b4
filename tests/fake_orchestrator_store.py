"""In-memory stand-in for OrchestratorClient used by the migration tests."""

import copy
from typing import Any, Dict, List

from models import Orchestration, OrchestrationSummary


class FakeOrchestratorStore:
    """Keeps orchestrations in a dict and records every call."""

    def __init__(self, first_id: int = 1):
        self._orchestrations: Dict[Any, Dict[str, Any]] = {}
        self._next_id = first_id
        self.calls: List[tuple] = []

    def add(self, name: str, tasks=None, active: bool = False, crontab_record=None,
            notifications=None) -> Any:
        """Seed an orchestration without recording a call."""
        orchestration_id = self._allocate_id()
        self._orchestrations[orchestration_id] = {
            'id': orchestration_id,
            'name': name,
            'crontabRecord': crontab_record,
            'notifications': notifications or [],
            'active': active,
            'tasks': copy.deepcopy(tasks or [])
        }
        return orchestration_id

    def raw(self, orchestration_id: Any) -> Dict[str, Any]:
        return copy.deepcopy(self._orchestrations[orchestration_id])

    def mutations(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in ('create', 'update', 'delete')]

    def _allocate_id(self) -> int:
        orchestration_id = self._next_id
        self._next_id += 1
        return orchestration_id

    def list_orchestrations(self) -> List[OrchestrationSummary]:
        self.calls.append(('list',))
        return [OrchestrationSummary(id=o['id'], name=o['name']) for o in self._orchestrations.values()]

    def get_orchestration(self, orchestration_id: Any) -> Orchestration:
        self.calls.append(('get', orchestration_id))
        return Orchestration.from_dict(copy.deepcopy(self._orchestrations[orchestration_id]))

    def create_orchestration(self, name: str, options: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(('create', name, copy.deepcopy(options)))
        orchestration_id = self._allocate_id()
        data = {
            'id': orchestration_id,
            'name': name,
            'crontabRecord': options.get('crontabRecord'),
            'notifications': copy.deepcopy(options.get('notifications') or []),
            # The service is allowed to ignore 'active' on create
            'active': True,
            'tasks': copy.deepcopy(options.get('tasks') or [])
        }
        self._orchestrations[orchestration_id] = data
        return {'id': orchestration_id, 'name': name}

    def update_orchestration(self, orchestration_id: Any, fields: Dict[str, Any]) -> None:
        self.calls.append(('update', orchestration_id, copy.deepcopy(fields)))
        self._orchestrations[orchestration_id].update(copy.deepcopy(fields))

    def delete_orchestration(self, orchestration_id: Any) -> None:
        self.calls.append(('delete', orchestration_id))
        del self._orchestrations[orchestration_id]
