"""Tests for orchestration data models."""

import unittest

from models import Orchestration, OrchestrationTask


class TestOrchestrationTask(unittest.TestCase):
    def test_task_round_trips_unchanged(self):
        data = {
            'id': 5,
            'component': None,
            'componentUrl': 'https://example.com/run',
            'phase': None,
            'timeoutMinutes': None
        }

        serialized = OrchestrationTask.from_dict(data).to_dict()

        self.assertEqual(serialized, data)

    def test_self_reference_detection(self):
        reference = OrchestrationTask.from_dict({'component': 'orchestrator',
                                                 'actionParameters': {'config': 3}})
        other = OrchestrationTask.from_dict({'component': 'orchestrator-like'})
        missing = OrchestrationTask.from_dict({'action': 'run'})

        self.assertTrue(reference.is_self_reference())
        self.assertEqual(reference.referenced_id, 3)
        self.assertFalse(other.is_self_reference())
        self.assertFalse(missing.is_self_reference())

    def test_missing_action_parameters(self):
        task = OrchestrationTask.from_dict({'component': 'orchestrator', 'actionParameters': None})

        self.assertIsNone(task.referenced_id)

    def test_rewrite_changes_only_config(self):
        data = {'component': 'orchestrator', 'phase': None,
                'actionParameters': {'config': 1, 'mode': 'full'}}
        task = OrchestrationTask.from_dict(data)

        task.referenced_id = 2

        self.assertEqual(task.to_dict(), {'component': 'orchestrator', 'phase': None,
                                          'actionParameters': {'config': 2, 'mode': 'full'}})
        self.assertEqual(data['actionParameters']['config'], 1)


class TestOrchestration(unittest.TestCase):
    def test_from_dict(self):
        orchestration = Orchestration.from_dict({
            'id': 10,
            'name': 'Main',
            'crontabRecord': '*/5 * * * *',
            'notifications': [],
            'active': True,
            'token': {'id': 1},
            'tasks': [
                {'component': 'keboola.csv-import', 'action': 'run'},
                {'component': 'orchestrator', 'action': 'run', 'actionParameters': {'config': 11}}
            ]
        })

        self.assertEqual(orchestration.crontab_record, '*/5 * * * *')
        self.assertTrue(orchestration.active)
        self.assertEqual(len(orchestration.tasks), 2)
        self.assertTrue(orchestration.has_self_references())
        self.assertEqual(orchestration.tasks_payload()[0],
                         {'component': 'keboola.csv-import', 'action': 'run'})

    def test_missing_tasks_and_notifications(self):
        orchestration = Orchestration.from_dict({'id': 1, 'name': 'Empty', 'tasks': None})

        self.assertEqual(orchestration.tasks, [])
        self.assertEqual(orchestration.notifications, [])
        self.assertFalse(orchestration.has_self_references())


if __name__ == '__main__':
    unittest.main()
