"""
==========================
Utility Functions Package.
==========================

Reusable helpers for running external commands, polling readiness,
checking database connectivity and locating SQL files.

Modules:
    process: Command execution and stdout matching
    readiness: Bounded condition polling
    database_utils: Connectivity checks and admin engine
    resources: SQL file lookup
"""

__version__ = "1.0.0"
__all__ = [
    'CommandError',
    'ProcessResult',
    'run_process',
    'stdout_contains',
    'execute_expecting',
    'execute_without',
    'execute_expect_empty',
    'condition_loop',
    'check_connectivity',
    'wait_for_connectivity',
    'create_admin_engine',
    'find_sql_file'
]

from .database_utils import check_connectivity, create_admin_engine, wait_for_connectivity
from .process import (
    CommandError,
    ProcessResult,
    execute_expect_empty,
    execute_expecting,
    execute_without,
    run_process,
    stdout_contains,
)
from .readiness import condition_loop
from .resources import find_sql_file
