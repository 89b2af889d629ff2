"""
Oracle database container.

Oracle takes minutes to initialize a fresh container, so readiness is read
from the container log and the wait is stretched to cover
startup_wait_minutes. The database (SID) is fixed by the image; provisioning
only manages the test user. Running init SQL files is not supported.
"""

from typing import List

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from containers.db_container import DbContainer, ProvisioningError
from core.logger import get_logger
from sql.ddl import create_user_sql, drop_user_sql, grant_user_sql
from sql.query_builder import check_user_exists_sql
from utils.database_utils import create_admin_engine
from utils.process import stdout_contains
from utils.readiness import PAUSE_SECONDS

logger = get_logger(__name__)

READY_LOG_MESSAGE = 'Database ready to use'


class OracleContainer(DbContainer):
    """Oracle engine variant of the container lifecycle."""

    def run_args(self) -> List[str]:
        config = self.config
        return self.docker_args(
            'run', '-d',
            '--name', config.container_name,
            '-p', f"{config.port}:{config.internal_port}",
            '-p', f"{config.apex_port}:{config.internal_apex_port}",
            config.image
        )

    def ready_attempts(self) -> int:
        startup_attempts = int(self.config.startup_wait_minutes * 60 / PAUSE_SECONDS)
        return max(self.config.max_ready_attempts, startup_attempts)

    def is_database_ready(self) -> bool:
        return stdout_contains(self.logs(), READY_LOG_MESSAGE)

    def is_database_admin_ready(self) -> bool:
        return self.check_connectivity(use_admin=True)

    def create_database(self, with_drop: bool) -> None:
        config = self.config
        engine = create_admin_engine(config)
        try:
            with engine.connect() as conn:
                exists = self._user_exists(conn)
                if exists and with_drop:
                    logger.info(f"Dropping user {config.db_user}")
                    conn.exec_driver_sql(drop_user_sql(config.db_user))
                    exists = False
                if not exists:
                    logger.info(f"Creating user {config.db_user}")
                    conn.exec_driver_sql(create_user_sql(config.db_user, config.db_password))
                    conn.exec_driver_sql(grant_user_sql(config.db_user))
        except SQLAlchemyError as e:
            raise ProvisioningError(f"Failed to create user {config.db_user}: {e}")
        finally:
            engine.dispose()

    def _user_exists(self, conn: Connection) -> bool:
        return conn.exec_driver_sql(check_user_exists_sql(self.config.db_user)).fetchone() is not None
