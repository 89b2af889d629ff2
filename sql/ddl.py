"""
=======================================================================
Data Definition Language (DDL) for provisioning test databases.
=======================================================================

Pure functions generating the statements used to create and drop the
database, user and extensions a test run needs. Statements are returned as
strings; database and role DDL must be executed on an AUTOCOMMIT
connection (see utils.database_utils.create_admin_engine).

Functions:
    create_database_sql: Generate CREATE DATABASE statement (Postgres)
    drop_database_sql: Generate DROP DATABASE statement (Postgres)
    terminate_connections_sql: Terminate sessions on a database (Postgres)
    create_role_sql: Generate CREATE ROLE ... LOGIN (Postgres)
    drop_role_sql: Generate DROP ROLE (Postgres)
    create_extension_sql: Generate CREATE EXTENSION (Postgres)
    create_user_sql: Generate CREATE USER ... IDENTIFIED BY (Oracle)
    drop_user_sql: Generate DROP USER ... CASCADE (Oracle)
    grant_user_sql: Generate the grants a test user needs (Oracle)

Example:
    >>> from sql.ddl import create_role_sql, create_database_sql
    >>>
    >>> create_role_sql('test_user', 'test')
    'CREATE ROLE "test_user" WITH LOGIN PASSWORD \\'test\\';'
    >>> create_database_sql('test_db', owner='test_user')
    'CREATE DATABASE "test_db" WITH OWNER = "test_user";'
"""

from typing import List, Optional


def _quote_literal(value: str) -> str:
    return "'" + str(value).replace("'", "''") + "'"


def create_database_sql(database_name: str, owner: Optional[str] = None) -> str:
    """
    Generate CREATE DATABASE statement.

    Args:
        database_name: Name of the database to create
        owner: Optional role owning the database

    Returns:
        SQL CREATE DATABASE statement
    """
    sql = f'CREATE DATABASE "{database_name}"'
    if owner:
        sql += f' WITH OWNER = "{owner}"'
    return sql + ";"


def drop_database_sql(database_name: str, if_exists: bool = True) -> str:
    """Generate DROP DATABASE statement, IF EXISTS by default."""
    if_exists_clause = "IF EXISTS " if if_exists else ""
    return f'DROP DATABASE {if_exists_clause}"{database_name}";'


def terminate_connections_sql(database_name: str) -> str:
    """
    Generate SQL to terminate all other sessions on a database.

    Args:
        database_name: Name of the database

    Returns:
        SQL to terminate connections
    """
    return f"""SELECT pg_terminate_backend(pid)
FROM pg_stat_activity
WHERE datname = {_quote_literal(database_name)}
  AND pid <> pg_backend_pid();"""


def create_role_sql(role_name: str, password: str) -> str:
    """Generate CREATE ROLE statement for a login role."""
    return f'CREATE ROLE "{role_name}" WITH LOGIN PASSWORD {_quote_literal(password)};'


def drop_role_sql(role_name: str, if_exists: bool = True) -> str:
    """Generate DROP ROLE statement."""
    if_exists_clause = "IF EXISTS " if if_exists else ""
    return f'DROP ROLE {if_exists_clause}"{role_name}";'


def create_extension_sql(extension: str, if_not_exists: bool = True) -> str:
    """Generate CREATE EXTENSION statement."""
    if_not_exists_clause = "IF NOT EXISTS " if if_not_exists else ""
    return f'CREATE EXTENSION {if_not_exists_clause}"{extension}";'


# Oracle


def create_user_sql(user_name: str, password: str) -> str:
    """Generate Oracle CREATE USER statement."""
    return f'CREATE USER {user_name} IDENTIFIED BY "{password}"'


def drop_user_sql(user_name: str) -> str:
    """Generate Oracle DROP USER statement removing the user's objects."""
    return f"DROP USER {user_name} CASCADE"


def grant_user_sql(user_name: str, privileges: Optional[List[str]] = None) -> str:
    """
    Generate Oracle GRANT statement for a test user.

    Args:
        user_name: User receiving the grants
        privileges: Privileges/roles (defaults to CONNECT, RESOURCE,
            UNLIMITED TABLESPACE)

    Returns:
        SQL GRANT statement
    """
    privileges = privileges or ['CONNECT', 'RESOURCE', 'UNLIMITED TABLESPACE']
    return f"GRANT {', '.join(privileges)} TO {user_name}"
