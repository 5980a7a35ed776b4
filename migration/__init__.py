"""
Migration package: two-pass copy of orchestrations between projects.

Pass 1 creates destination orchestrations and builds the ID map; pass 2
rewrites orchestration references in tasks once the map is complete.
"""

from .id_mapping_tracker import IdMappingTracker
from .precondition_checker import PreconditionChecker
from .migration_report import MigrationReport
from .orchestration_migrator import OrchestrationMigrator

__all__ = [
    'IdMappingTracker',
    'PreconditionChecker',
    'MigrationReport',
    'OrchestrationMigrator'
]
