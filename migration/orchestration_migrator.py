"""
Orchestration migrator: copies every orchestration of a source project
into an empty destination project.

Migration runs in two strictly ordered passes:

1. Creation: each source orchestration is created in the destination
   (always inactive) and its new ID recorded in the ID map.
2. Reference fix-up: orchestrations whose tasks run other orchestrations
   are re-read from the destination and their referenced source IDs are
   rewritten to destination IDs.

Pass 2 starts only after pass 1 finished for all orchestrations, because
a task may reference an orchestration that is created later in pass 1.
"""

import logging
import sys
import time
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from logger import log_section
from models import Orchestration
from .id_mapping_tracker import IdMappingTracker
from .migration_report import MigrationReport
from .precondition_checker import PreconditionChecker


class OrchestrationMigrator:
    """Two-pass migration of orchestrations between two projects."""

    def __init__(
        self,
        source_client,
        destination_client,
        logger: Optional[logging.Logger] = None,
        dry_run: bool = False,
        show_progress: Optional[bool] = None
    ):
        """
        Initialize the migrator.

        Args:
            source_client: Orchestrator client of the source project
            destination_client: Orchestrator client of the destination project
            logger: Optional logger instance
            dry_run: If True, read everything but never create or update
            show_progress: Show tqdm progress bars (defaults to stderr being a TTY)
        """
        self.source_client = source_client
        self.destination_client = destination_client
        self.logger = logger or logging.getLogger('orchestration_migrator.migration')
        self.dry_run = dry_run
        self.show_progress = sys.stderr.isatty() if show_progress is None else show_progress

        self.checker = PreconditionChecker(destination_client, self.logger)
        self.id_mapper = IdMappingTracker(self.logger)
        self.stats = self._reset_stats()

    def _reset_stats(self) -> Dict[str, Any]:
        """Reset statistics for a new migration run."""
        return {
            'source_orchestrations': 0,
            'created': 0,
            'fixed': 0,
            'references_rewritten': 0,
            'dangling_references': [],
            'orchestrations': []
        }

    def run(self) -> Dict[str, Any]:
        """
        Execute the complete migration.

        Returns:
            Report dictionary (see MigrationReport.generate_report)

        Raises:
            MigrationBlocked: If the destination project is not empty
            TransportError: If any remote call fails
        """
        start_time = time.time()
        self.stats = self._reset_stats()
        self.id_mapper = IdMappingTracker(self.logger)

        self.checker.check_destination_empty()

        self.logger.info("Loading orchestrations from current project")
        summaries = self.source_client.list_orchestrations()
        self.stats['source_orchestrations'] = len(summaries)

        if not summaries:
            self.logger.info("Current project contains no orchestrations")
            return self._build_report(start_time)

        # Pass 1: creation
        log_section("Orchestrations migration" + (" (dry run)" if self.dry_run else ""))
        to_fix: List[Any] = []
        total = len(summaries)
        for i, summary in enumerate(self._progress(summaries, "Migrating"), start=1):
            self.logger.info(f"Orchestration ({i}/{total})")

            orchestration = self.source_client.get_orchestration(summary.id)
            has_references = orchestration.has_self_references()

            if self.dry_run:
                self.logger.info(f'[DRY RUN] Would migrate "{orchestration.name}" orchestration')
                destination_id = None
            else:
                destination_id = self.migrate_one(orchestration)
                self.id_mapper.add_mapping(orchestration.id, destination_id)
                self.stats['created'] += 1
                if has_references:
                    to_fix.append(destination_id)

            self.stats['orchestrations'].append({
                'source_id': orchestration.id,
                'destination_id': destination_id,
                'name': orchestration.name,
                'source_active': orchestration.active,
                'has_self_references': has_references
            })

        # Barrier: the map is complete from here on
        self.id_mapper.freeze()
        self.logger.debug(f"ID map complete with {len(self.id_mapper)} orchestrations")

        # Pass 2: reference fix-up
        if to_fix:
            log_section("Orchestrations tasks fix")
            total = len(to_fix)
            for i, destination_id in enumerate(self._progress(to_fix, "Fixing tasks"), start=1):
                self.logger.info(f"Orchestration ({i}/{total})")
                self.fix_references(destination_id, self.id_mapper)

        return self._build_report(start_time)

    def migrate_one(self, orchestration: Orchestration) -> Any:
        """
        Create a destination copy of a fully loaded source orchestration.

        The copy is always inactive, whatever the source's active flag, and
        an explicit update re-asserts that right after creation.

        Args:
            orchestration: Source orchestration including tasks

        Returns:
            Destination orchestration ID
        """
        self.logger.info(f'Migrating "{orchestration.name}" orchestration')

        response = self.destination_client.create_orchestration(orchestration.name, {
            'crontabRecord': orchestration.crontab_record,
            'notifications': orchestration.notifications,
            'tasks': orchestration.tasks_payload(),
            'active': False
        })

        destination_id = response['id']
        self.destination_client.update_orchestration(destination_id, {'active': False})

        self.logger.debug(f"Orchestration {orchestration.id} migrated as {destination_id}")
        return destination_id

    def fix_references(self, destination_id: Any, id_map: IdMappingTracker) -> int:
        """
        Rewrite orchestration references in the tasks of a destination orchestration.

        References missing from the map are left untouched: they point to an
        orchestration outside the migrated set.

        Args:
            destination_id: Destination orchestration ID
            id_map: Complete source -> destination ID map

        Returns:
            Number of rewritten task references
        """
        orchestration = self.destination_client.get_orchestration(destination_id)

        self.logger.info(f'Fixing "{orchestration.name}" orchestration tasks')
        rewritten = 0
        for position, task in enumerate(orchestration.tasks):
            if not task.is_self_reference():
                continue

            source_id = task.referenced_id
            new_id = None if source_id is None else id_map.get_destination_id(source_id)
            if new_id is None:
                self.logger.warning(
                    f'Task {position} of "{orchestration.name}" references orchestration '
                    f'{source_id} which was not migrated; reference left unchanged'
                )
                self.stats['dangling_references'].append({
                    'destination_id': destination_id,
                    'name': orchestration.name,
                    'task_index': position,
                    'referenced_id': source_id
                })
                continue

            task.referenced_id = new_id
            rewritten += 1
            self.logger.debug(f"Task {position}: orchestration {source_id} -> {new_id}")

        if rewritten:
            self.destination_client.update_orchestration(
                destination_id, {'tasks': orchestration.tasks_payload()}
            )
            self.stats['fixed'] += 1
            self.stats['references_rewritten'] += rewritten

        return rewritten

    def _progress(self, items: List[Any], desc: str):
        return tqdm(items, desc=desc, disable=not self.show_progress, leave=False)

    def _build_report(self, start_time: float) -> Dict[str, Any]:
        report = MigrationReport(self.logger).generate_report(
            self.stats,
            duration=time.time() - start_time,
            dry_run=self.dry_run
        )
        self._log_summary(report)
        return report

    def _log_summary(self, report: Dict[str, Any]) -> None:
        """Log migration summary statistics."""
        summary = report['summary']
        self.logger.info("=" * 60)
        self.logger.info(f"MIGRATION SUMMARY (Dry Run: {self.dry_run})")
        self.logger.info("=" * 60)
        self.logger.info(f"Source orchestrations: {summary['source_orchestrations']}")
        self.logger.info(f"Orchestrations created: {summary['created']}")
        self.logger.info(f"Orchestrations with fixed tasks: {summary['fixed']}")
        self.logger.info(f"Task references rewritten: {summary['references_rewritten']}")

        dangling = report['dangling_references']
        if dangling:
            self.logger.warning(f"References left unchanged: {len(dangling)}")
        self.logger.info("=" * 60)


__all__ = ['OrchestrationMigrator']
