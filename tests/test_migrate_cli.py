"""End-to-end tests of the command line entry point with in-memory projects."""

import contextlib
import io
import json
import os
import tempfile
import unittest
from unittest import mock

import migrate
from errors import ServiceNotFound, TransportError
from fake_orchestrator_store import FakeOrchestratorStore

ENVIRONMENT = {
    'KBC_TOKEN': 'destination-token',
    'KBC_URL': 'https://connection.eu-central-1.keboola.com'
}


class TestMigrateCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

        self.config_path = os.path.join(self.tmp.name, 'config.json')
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump({'parameters': {
                '#sourceKbcToken': 'source-token',
                'sourceKbcUrl': 'https://connection.keboola.com'
            }}, f)

        self.source = FakeOrchestratorStore(first_id=1)
        self.destination = FakeOrchestratorStore(first_id=100)

        env_patcher = mock.patch.dict(os.environ, ENVIRONMENT)
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

    def _run(self, *argv, build_clients=None):
        if build_clients is None:
            build_clients = mock.Mock(return_value=(self.source, self.destination))
        self.source.close = mock.Mock()
        self.destination.close = mock.Mock()

        stdout, stderr = io.StringIO(), io.StringIO()
        with mock.patch.object(migrate, 'build_clients', build_clients), \
                contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            exit_code = migrate.main(['--config', self.config_path, *argv])
        return exit_code, stdout.getvalue(), stderr.getvalue()

    def test_successful_run(self):
        child_id = self.source.add('Child orchestration')
        self.source.add('Master orchestration', active=True, tasks=[{
            'component': 'orchestrator',
            'action': 'run',
            'continueOnFailure': False,
            'phase': 1,
            'active': True,
            'actionParameters': {'config': child_id}
        }])
        report_path = os.path.join(self.tmp.name, 'report.json')

        exit_code, stdout, stderr = self._run('--report-path', report_path)

        self.assertEqual(exit_code, migrate.EXIT_OK)
        self.assertIn('MIGRATION REPORT', stdout)
        self.assertIn('ORCHESTRATIONS TASKS FIX', stderr)
        self.assertIn('Migrating "Master orchestration" orchestration', stderr)

        orchestrations = {s.name: s.id for s in self.destination.list_orchestrations()}
        self.assertEqual(len(orchestrations), 2)
        master = self.destination.raw(orchestrations['Master orchestration'])
        self.assertFalse(master['active'])
        self.assertEqual(master['tasks'][0]['actionParameters']['config'],
                         orchestrations['Child orchestration'])

        with open(report_path, encoding='utf-8') as f:
            report = json.load(f)
        self.assertEqual(report['summary']['created'], 2)
        self.assertEqual(report['summary']['references_rewritten'], 1)

        self.source.close.assert_called_once_with()
        self.destination.close.assert_called_once_with()

    def test_not_empty_destination_fails_with_user_error(self):
        self.source.add('Child orchestration')
        self.destination.add('Child orchestration')

        exit_code, _, stderr = self._run()

        self.assertEqual(exit_code, migrate.EXIT_USER_ERROR)
        self.assertIn('Destination project has some existing orchestrations', stderr)
        self.assertEqual(self.destination.mutations(), [])

    def test_dry_run(self):
        self.source.add('Child orchestration')

        exit_code, stdout, _ = self._run('--dry-run')

        self.assertEqual(exit_code, migrate.EXIT_OK)
        self.assertIn('DRY RUN', stdout)
        self.assertEqual(self.destination.mutations(), [])

    def test_missing_service_is_a_user_error(self):
        exit_code, _, stderr = self._run(
            build_clients=mock.Mock(side_effect=ServiceNotFound('eu-central-1'))
        )

        self.assertEqual(exit_code, migrate.EXIT_USER_ERROR)
        self.assertIn('Orchestrator not found in eu-central-1 region', stderr)

    def test_transport_error_exit_code(self):
        exit_code, _, stderr = self._run(
            build_clients=mock.Mock(side_effect=TransportError('GET https://x returned HTTP 401'))
        )

        self.assertEqual(exit_code, migrate.EXIT_APPLICATION_ERROR)
        self.assertIn('HTTP 401', stderr)

    def test_missing_destination_environment(self):
        with mock.patch.dict(os.environ, {'KBC_TOKEN': ''}):
            exit_code, _, stderr = self._run()

        self.assertEqual(exit_code, migrate.EXIT_USER_ERROR)
        self.assertIn('KBC_TOKEN', stderr)

    def test_missing_config_file(self):
        os.remove(self.config_path)

        exit_code, _, stderr = self._run()

        self.assertEqual(exit_code, migrate.EXIT_USER_ERROR)
        self.assertIn('Configuration file not found', stderr)


if __name__ == '__main__':
    unittest.main()
