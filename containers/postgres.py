"""
==============================
Postgres database container.
==============================

Readiness is read from the tools inside the container (pg_isready, psql),
provisioning runs over an AUTOCOMMIT admin connection and init SQL files
are executed with psql inside the container.

Provisioning steps:
    - dropcreate: terminate sessions, drop database, drop role
    - create role with login if missing
    - create database owned by the role if missing
    - create configured extensions inside the database

Example:
    >>> from containers.postgres import PostgresContainer
    >>> from core.config import PostgresConfig
    >>>
    >>> config = PostgresConfig(version='15', extensions=('hstore', 'pgcrypto'))
    >>> PostgresContainer(config).start()
    True
"""

from typing import List

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from containers.db_container import DbContainer, ProvisioningError
from core.logger import get_logger
from sql.ddl import (
    create_database_sql,
    create_extension_sql,
    create_role_sql,
    drop_database_sql,
    drop_role_sql,
    terminate_connections_sql,
)
from sql.query_builder import check_database_exists_sql, check_role_exists_sql
from utils.database_utils import create_admin_engine
from utils.process import CommandError, execute_expecting

logger = get_logger(__name__)


class PostgresContainer(DbContainer):
    """Postgres engine variant of the container lifecycle."""

    def run_args(self) -> List[str]:
        config = self.config
        return self.docker_args(
            'run', '-d',
            '--name', config.container_name,
            '-p', f"{config.port}:{config.internal_port}",
            '-e', f"POSTGRES_USER={config.admin_user}",
            '-e', f"POSTGRES_PASSWORD={config.admin_password}",
            config.image
        )

    def is_database_ready(self) -> bool:
        return execute_expecting(
            self.docker_args('exec', self.name, 'pg_isready', '-h', 'localhost', '-p', str(self.config.internal_port)),
            'accepting connections',
            executor=self.executor
        )

    def is_database_admin_ready(self) -> bool:
        return execute_expecting(
            self.docker_args('exec', self.name, 'psql', '-U', self.config.admin_user, '-c', 'select 1'),
            '(1 row)',
            executor=self.executor
        )

    def is_fast_start_database_exists(self) -> bool:
        """Return True if psql lists the database (first column of psql -lqt)."""
        result = self.executor(self.docker_args('exec', self.name, 'psql', '-U', self.config.admin_user, '-lqt'))
        return any(line.split('|')[0].strip() == self.config.db_name for line in result.out_lines)

    def create_database(self, with_drop: bool) -> None:
        config = self.config
        engine = create_admin_engine(config)
        try:
            with engine.connect() as conn:
                if with_drop:
                    self._drop_database(conn)
                if not self._exists(conn, check_role_exists_sql(config.db_user)):
                    logger.info(f"Creating role {config.db_user}")
                    conn.exec_driver_sql(create_role_sql(config.db_user, config.db_password))
                if not self._exists(conn, check_database_exists_sql(config.db_name)):
                    logger.info(f"Creating database {config.db_name} with owner {config.db_user}")
                    conn.exec_driver_sql(create_database_sql(config.db_name, owner=config.db_user))
        except SQLAlchemyError as e:
            raise ProvisioningError(f"Failed to create database {config.db_name}: {e}")
        finally:
            engine.dispose()

        if config.extensions:
            self._create_extensions()

    def _drop_database(self, conn: Connection) -> None:
        config = self.config
        logger.info(f"Dropping database {config.db_name} and role {config.db_user}")
        conn.exec_driver_sql(terminate_connections_sql(config.db_name))
        conn.exec_driver_sql(drop_database_sql(config.db_name, if_exists=True))
        conn.exec_driver_sql(drop_role_sql(config.db_user, if_exists=True))

    def _create_extensions(self) -> None:
        config = self.config
        engine = create_admin_engine(config, database=config.db_name)
        try:
            with engine.connect() as conn:
                for extension in config.extensions:
                    logger.info(f"Creating extension {extension} in {config.db_name}")
                    conn.exec_driver_sql(create_extension_sql(extension))
        except SQLAlchemyError as e:
            raise ProvisioningError(f"Failed to create extensions {list(config.extensions)}: {e}")
        finally:
            engine.dispose()

    @staticmethod
    def _exists(conn: Connection, query: str) -> bool:
        return conn.exec_driver_sql(query).fetchone() is not None

    def execute_sql_file(self, db_user: str, db_name: str, container_file_path: str) -> None:
        """Run a SQL file inside the container with psql as the given user."""
        args = self.docker_args(
            'exec', '-i', self.name,
            'psql', '-v', 'ON_ERROR_STOP=1', '-U', db_user, '-d', db_name, '-f', container_file_path
        )
        try:
            self.executor(args)
            logger.info(f"Executed SQL file {container_file_path} in {self.name}")
        except CommandError as e:
            logger.error(f"Failed to execute SQL file {container_file_path} in {self.name}: {e}")
