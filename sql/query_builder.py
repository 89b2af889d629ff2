"""
============================
Existence queries.
============================

Queries used to decide whether provisioning work is needed. Each returns
a row when the object exists and no rows otherwise.

Functions:
- check_database_exists_sql: Check if a database exists (Postgres)
- check_role_exists_sql: Check if a login role exists (Postgres)
- check_user_exists_sql: Check if a user exists (Oracle)
"""


def _quote_literal(value: str) -> str:
    return "'" + str(value).replace("'", "''") + "'"


def check_database_exists_sql(database_name: str) -> str:
    """
    Generate SQL to check if a database exists.

    Args:
        database_name: Name of the database to check

    Returns:
        SQL query that returns 1 if database exists, nothing if not
    """
    return f"SELECT 1 FROM pg_database WHERE datname = {_quote_literal(database_name)}"


def check_role_exists_sql(role_name: str) -> str:
    """Generate SQL returning 1 when the role exists."""
    return f"SELECT 1 FROM pg_roles WHERE rolname = {_quote_literal(role_name)}"


def check_user_exists_sql(user_name: str) -> str:
    """Generate Oracle SQL returning 1 when the user exists (names are stored upper case)."""
    return f"SELECT 1 FROM all_users WHERE username = UPPER({_quote_literal(user_name)})"
