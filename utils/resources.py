"""
Lookup of SQL files given as a filesystem path or a bundled resource path.

A resource path is resolved against every sys.path entry, so a file shipped
inside a package or test resources directory on the path can be referred to
as 'mypackage/sql/init.sql' or '/mypackage/sql/init.sql'.
"""

import sys
from pathlib import Path
from typing import Iterable, Optional

from core.logger import get_logger

logger = get_logger(__name__)


def find_sql_file(sql_file: str, search_paths: Optional[Iterable[str]] = None) -> Optional[Path]:
    """
    Locate a SQL file, filesystem first and then as a bundled resource.

    Args:
        sql_file: File path or resource path
        search_paths: Resource roots (defaults to sys.path)

    Returns:
        Path of the file, or None when it cannot be found
    """
    path = Path(sql_file)
    if path.is_file():
        return path

    found = _find_resource(sql_file, sys.path if search_paths is None else search_paths)
    if found is None:
        logger.error(f"Could not find SQL file. No file exists at location or resource path for: {sql_file}")
    return found


def _find_resource(sql_file: str, search_paths: Iterable[str]) -> Optional[Path]:
    relative = sql_file.lstrip('/')
    try:
        for root in search_paths:
            candidate = Path(root or '.') / relative
            if candidate.is_file():
                return candidate
    except (OSError, TypeError) as e:
        logger.error(f"Failed to obtain file from resource for init SQL file: {sql_file}", exc_info=e)
    return None
