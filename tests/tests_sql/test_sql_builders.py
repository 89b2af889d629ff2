"""
Tests for sql/ddl.py and sql/query_builder.py statement generation.
"""

import pytest

from sql.ddl import (
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
from sql.query_builder import (
    check_database_exists_sql,
    check_role_exists_sql,
    check_user_exists_sql,
)


@pytest.mark.unit
def test_create_database_with_owner():
    assert create_database_sql('test_db', owner='test_user') == 'CREATE DATABASE "test_db" WITH OWNER = "test_user";'


@pytest.mark.unit
def test_create_database_plain():
    assert create_database_sql('test_db') == 'CREATE DATABASE "test_db";'


@pytest.mark.unit
def test_drop_database_variants():
    assert drop_database_sql('test_db') == 'DROP DATABASE IF EXISTS "test_db";'
    assert drop_database_sql('test_db', if_exists=False) == 'DROP DATABASE "test_db";'


@pytest.mark.unit
def test_role_statements():
    assert create_role_sql('test_user', 'test') == 'CREATE ROLE "test_user" WITH LOGIN PASSWORD \'test\';'
    assert drop_role_sql('test_user') == 'DROP ROLE IF EXISTS "test_user";'
    assert drop_role_sql('test_user', if_exists=False) == 'DROP ROLE "test_user";'


@pytest.mark.edge_case
def test_password_quotes_escaped():
    assert create_role_sql('u', "it's") == 'CREATE ROLE "u" WITH LOGIN PASSWORD \'it\'\'s\';'


@pytest.mark.unit
def test_extension_statement():
    assert create_extension_sql('uuid-ossp') == 'CREATE EXTENSION IF NOT EXISTS "uuid-ossp";'
    assert create_extension_sql('hstore', if_not_exists=False) == 'CREATE EXTENSION "hstore";'


@pytest.mark.unit
def test_terminate_connections_excludes_own_session():
    sql = terminate_connections_sql('test_db')

    assert "datname = 'test_db'" in sql
    assert 'pg_backend_pid()' in sql


@pytest.mark.unit
def test_oracle_user_statements():
    assert create_user_sql('test_user', 'test') == 'CREATE USER test_user IDENTIFIED BY "test"'
    assert drop_user_sql('test_user') == 'DROP USER test_user CASCADE'
    assert grant_user_sql('test_user', ['CONNECT']) == 'GRANT CONNECT TO test_user'


@pytest.mark.unit
def test_existence_queries():
    assert check_database_exists_sql('test_db') == "SELECT 1 FROM pg_database WHERE datname = 'test_db'"
    assert check_role_exists_sql('test_user') == "SELECT 1 FROM pg_roles WHERE rolname = 'test_user'"
    assert check_user_exists_sql('test_user') == "SELECT 1 FROM all_users WHERE username = UPPER('test_user')"

