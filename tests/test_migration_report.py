"""Tests for migration report formatting."""

import json
import os
import tempfile
import unittest

from migration import MigrationReport


class TestMigrationReport(unittest.TestCase):
    def setUp(self):
        self.generator = MigrationReport()
        self.stats = {
            'source_orchestrations': 2,
            'created': 2,
            'fixed': 1,
            'references_rewritten': 1,
            'dangling_references': [
                {'destination_id': 101, 'name': 'Master', 'task_index': 1, 'referenced_id': 77}
            ],
            'orchestrations': [
                {'source_id': 1, 'destination_id': 100, 'name': 'Child', 'has_self_references': False},
                {'source_id': 2, 'destination_id': 101, 'name': 'Master', 'has_self_references': True}
            ]
        }

    def test_summary(self):
        report = self.generator.generate_report(self.stats, duration=75.0)

        summary = report['summary']
        self.assertEqual(summary['created'], 2)
        self.assertEqual(summary['dangling_references'], 1)
        self.assertEqual(summary['duration_formatted'], '1m 15s')
        self.assertFalse(summary['dry_run'])

    def test_console_report(self):
        report = self.generator.generate_report(self.stats, duration=1.0)

        text = self.generator.format_console_report(report)

        self.assertIn('1 -> 100  Child', text)
        self.assertIn('2 -> 101  Master *', text)
        self.assertIn('orchestration 77 not migrated', text)

    def test_console_report_marks_orchestrations_active_in_source(self):
        self.stats['orchestrations'][0]['source_active'] = True
        report = self.generator.generate_report(self.stats, duration=1.0)

        text = self.generator.format_console_report(report)

        self.assertIn('1 -> 100  Child [active in source]', text)
        self.assertNotIn('Master * [active in source]', text)

    def test_dry_run_console_report(self):
        stats = dict(self.stats, orchestrations=[
            {'source_id': 1, 'destination_id': None, 'name': 'Child', 'has_self_references': False}
        ])
        report = self.generator.generate_report(stats, duration=0.2, dry_run=True)

        text = self.generator.format_console_report(report)

        self.assertIn('MIGRATION REPORT (DRY RUN)', text)
        self.assertIn('1 -> -  Child', text)

    def test_export_json_report(self):
        report = self.generator.generate_report(self.stats, duration=1.0)

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'report.json')
            self.generator.export_json_report(report, path)
            with open(path, encoding='utf-8') as f:
                exported = json.load(f)

        self.assertEqual(exported['summary']['references_rewritten'], 1)
        self.assertEqual(len(exported['orchestrations']), 2)


if __name__ == '__main__':
    unittest.main()
