"""
Migration report generator.

Aggregates migration statistics into a report dictionary and formats it
for console display or JSON export.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional


class MigrationReport:
    """Builds and formats the report of a migration run."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('orchestration_migrator.migration')

    def generate_report(
        self,
        stats: Dict[str, Any],
        duration: float,
        dry_run: bool = False
    ) -> Dict[str, Any]:
        """
        Generate migration report.

        Args:
            stats: Statistics collected by OrchestrationMigrator
            duration: Migration duration in seconds
            dry_run: Whether the run made no changes

        Returns:
            Migration report dictionary
        """
        dangling = list(stats.get('dangling_references', []))
        return {
            'summary': {
                'source_orchestrations': stats.get('source_orchestrations', 0),
                'created': stats.get('created', 0),
                'fixed': stats.get('fixed', 0),
                'references_rewritten': stats.get('references_rewritten', 0),
                'dangling_references': len(dangling),
                'dry_run': dry_run,
                'duration': duration,
                'duration_formatted': self._format_duration(duration)
            },
            'orchestrations': list(stats.get('orchestrations', [])),
            'dangling_references': dangling,
            'timestamp': datetime.now().isoformat()
        }

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            secs = int(seconds % 60)
            return f"{hours}h {minutes}m {secs}s"

    def format_console_report(self, report: Dict[str, Any]) -> str:
        """
        Format report for console display.

        Args:
            report: Migration report dictionary

        Returns:
            Formatted console string
        """
        summary = report.get('summary', {})
        sections = [
            "=" * 60,
            "MIGRATION REPORT" + (" (DRY RUN)" if summary.get('dry_run') else ""),
            "=" * 60,
            "",
            "Summary:",
            f"  Source orchestrations: {summary.get('source_orchestrations', 0)}",
            f"  Created:               {summary.get('created', 0)}",
            f"  Tasks fixed in:        {summary.get('fixed', 0)}",
            f"  References rewritten:  {summary.get('references_rewritten', 0)}",
            f"  Dangling references:   {summary.get('dangling_references', 0)}",
            f"  Duration:              {summary.get('duration_formatted', '0s')}",
            ""
        ]

        orchestrations = report.get('orchestrations', [])
        if orchestrations:
            sections.append("Orchestrations:")
            sections.append("-" * 60)
            for row in orchestrations:
                destination = row.get('destination_id')
                target = destination if destination is not None else '-'
                marker = " *" if row.get('has_self_references') else ""
                if row.get('source_active'):
                    marker += " [active in source]"
                sections.append(f"  {row.get('source_id')} -> {target}  {row.get('name')}{marker}")
            sections.append("  (* runs other orchestrations; destination copies are all inactive)")
            sections.append("")

        dangling = report.get('dangling_references', [])
        if dangling:
            sections.append("References left unchanged:")
            sections.append("-" * 60)
            for ref in dangling:
                sections.append(
                    f"  \"{ref.get('name')}\" task {ref.get('task_index')}: "
                    f"orchestration {ref.get('referenced_id')} not migrated"
                )
            sections.append("")

        sections.append("=" * 60)
        return "\n".join(sections)

    def export_json_report(self, report: Dict[str, Any], filepath: str) -> None:
        """
        Export report to JSON file.

        Args:
            report: Migration report dictionary
            filepath: Output file path

        Raises:
            OSError: If the file cannot be written
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False, default=str)

        self.logger.info(f"JSON report exported to {filepath}")


__all__ = ['MigrationReport']
