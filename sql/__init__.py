"""
====================================================
SQL utilities package for test database provisioning.
====================================================

Pure functions generating SQL strings, executed by the engine variants in
the containers package through SQLAlchemy.

The package follows a clear organization:
    - ddl.py: CREATE/DROP of databases, roles, users and extensions
    - query_builder.py: existence queries

Example:
    >>> from sql.ddl import create_role_sql
    >>> from sql.query_builder import check_role_exists_sql
    >>>
    >>> check_role_exists_sql('test_user')
    "SELECT 1 FROM pg_roles WHERE rolname = 'test_user'"
"""

__version__ = "1.0.0"
__all__ = [
    # DDL functions
    'create_database_sql', 'drop_database_sql', 'terminate_connections_sql',
    'create_role_sql', 'drop_role_sql', 'create_extension_sql',
    'create_user_sql', 'drop_user_sql', 'grant_user_sql',
    # Queries
    'check_database_exists_sql', 'check_role_exists_sql', 'check_user_exists_sql'
]

from .ddl import (
    create_database_sql,
    create_extension_sql,
    create_role_sql,
    create_user_sql,
    drop_database_sql,
    drop_role_sql,
    drop_user_sql,
    grant_user_sql,
    terminate_connections_sql,
)
from .query_builder import (
    check_database_exists_sql,
    check_role_exists_sql,
    check_user_exists_sql,
)
