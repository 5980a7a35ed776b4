"""Data models for orchestration migration."""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Component id of a task that runs another orchestration
ORCHESTRATOR_COMPONENT_ID = 'orchestrator'


@dataclass
class OrchestrationTask:
    """
    One phased step of an orchestration.

    The task is kept exactly as the API returned it, so it is written back
    unchanged unless its referenced orchestration is rewritten.
    """

    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrchestrationTask':
        """Build a task from its API representation."""
        return cls(data=copy.deepcopy(dict(data)))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize task to its API representation."""
        return copy.deepcopy(self.data)

    @property
    def component(self) -> Optional[str]:
        return self.data.get('component')

    def is_self_reference(self) -> bool:
        """Check whether this task runs another orchestration."""
        return self.component == ORCHESTRATOR_COMPONENT_ID

    @property
    def referenced_id(self) -> Any:
        """Orchestration id referenced by a self-reference task."""
        action_parameters = self.data.get('actionParameters')
        if not isinstance(action_parameters, dict):
            return None
        return action_parameters.get('config')

    @referenced_id.setter
    def referenced_id(self, value: Any) -> None:
        action_parameters = self.data.get('actionParameters')
        if not isinstance(action_parameters, dict):
            action_parameters = self.data['actionParameters'] = {}
        action_parameters['config'] = value


@dataclass
class OrchestrationSummary:
    """Orchestration as returned by the list call (no tasks)."""

    id: Any
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrchestrationSummary':
        return cls(id=data['id'], name=data.get('name', ''))


@dataclass
class Orchestration:
    """A named, schedulable collection of phased tasks."""

    id: Any
    name: str
    crontab_record: Optional[str] = None
    notifications: List[Any] = field(default_factory=list)
    active: bool = False
    tasks: List[OrchestrationTask] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Orchestration':
        """Build an orchestration from its API representation."""
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            crontab_record=data.get('crontabRecord'),
            notifications=copy.deepcopy(data.get('notifications') or []),
            active=bool(data.get('active', False)),
            tasks=[OrchestrationTask.from_dict(t) for t in data.get('tasks') or []]
        )

    def tasks_payload(self) -> List[Dict[str, Any]]:
        """Serialize the task list for a create or update call."""
        return [task.to_dict() for task in self.tasks]

    def has_self_references(self) -> bool:
        """Check if any task runs another orchestration."""
        return any(task.is_self_reference() for task in self.tasks)


__all__ = [
    'ORCHESTRATOR_COMPONENT_ID',
    'OrchestrationTask',
    'OrchestrationSummary',
    'Orchestration'
]
