"""
=====================================================
Lifecycle of a database container for a test run.
=====================================================

Drives a database container from "maybe not running" to "ready for the
test workload under the configured user":

    1. Select the start mode (create, dropcreate, container)
    2. Fast start: with create mode, accept an existing database as is
    3. Run, start or attach to the container by name
    4. Wait until the engine takes commands, then admin commands
    5. Create (or drop and create) database, user and extensions, then
       run the configured init SQL file (skipped in container mode)
    6. Confirm the db user can connect
    7. Register the shutdown action for the container

Waiting is bounded by max_ready_attempts per phase. Running out of
attempts is reported as a warning and a False result, never an exception,
so the caller decides whether the test run can continue.

Engine variants implement is_database_ready, is_database_admin_ready,
create_database and run_args, and optionally execute_sql_file and
is_fast_start_database_exists.

Example:
    >>> from containers import create_container
    >>> from core.config import PostgresConfig
    >>>
    >>> container = create_container(PostgresConfig(start_mode='dropcreate', shutdown_mode='remove'))
    >>> if not container.start():
    ...     raise SystemExit("database container not ready")
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from containers.base import BaseContainer
from containers.shutdown import ShutdownMode, ShutdownRegistry
from core.config import DbConfig
from core.logger import get_logger
from utils.database_utils import check_connectivity, wait_for_connectivity
from utils.process import CommandError, Executor, execute_expect_empty, run_process
from utils.readiness import condition_loop
from utils.resources import find_sql_file

logger = get_logger(__name__)

CONTAINER_TMP_DIR = '/tmp'


class StartMode(Enum):
    """How much provisioning a start performs."""
    CREATE = "create"
    DROP_CREATE = "dropcreate"
    CONTAINER_ONLY = "container"

    @classmethod
    def parse(cls, value: Optional[str]) -> "StartMode":
        """Case/whitespace-insensitive parse, unknown values map to CREATE."""
        normalized = (value or '').strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        return cls.CREATE


class ProvisioningError(Exception):
    """Exception raised when creating or dropping the database or user fails."""
    pass


class UnsupportedOperationError(NotImplementedError):
    """Exception raised when an engine is asked for an operation it does not support."""
    pass


class DbContainer(BaseContainer):
    """Container lifecycle state machine shared by all database engines.

    Attributes:
        config: Container configuration
        start_mode: Mode selected by the current start, None before start
    """

    def __init__(
        self,
        config: DbConfig,
        executor: Executor = run_process,
        registry: Optional[ShutdownRegistry] = None
    ):
        super().__init__(config, executor, registry)
        self.start_mode: Optional[StartMode] = None

    def start(self) -> bool:
        """Start the container and make the database ready for tests.

        Returns:
            True when the db user can connect to a provisioned database
        """
        return self.register_shutdown(self.log_started(self.start_for_mode()))

    def start_for_mode(self) -> bool:
        """Start with the configured mode, create being the default."""
        mode = StartMode.parse(self.config.start_mode)
        if mode is StartMode.DROP_CREATE:
            return self.start_with_drop_create()
        if mode is StartMode.CONTAINER_ONLY:
            return self.start_container_only()
        return self.start_with_create()

    def start_with_create(self) -> bool:
        """Start ensuring the database and user exist, creating them if necessary."""
        self.start_mode = StartMode.CREATE
        return self.start_with_connectivity()

    def start_with_drop_create(self) -> bool:
        """Start dropping and then creating the database and user."""
        self.start_mode = StartMode.DROP_CREATE
        return self.start_with_connectivity()

    def start_container_only(self) -> bool:
        """Start the container without creating database, user or extensions."""
        self.start_mode = StartMode.CONTAINER_ONLY
        if not self.start_if_needed():
            return False
        if not self.wait_for_database_ready():
            logger.warning(f"Failed waiting for database ready in container {self.name}")
            return False
        if not self.wait_for_connectivity():
            logger.warning(f"Failed waiting for connectivity for {self.name}")
            return False
        return True

    def start_with_connectivity(self) -> bool:
        if self.start_mode is StartMode.CREATE and self.fast_start():
            logger.info(f"Container {self.name} fast start, database {self.config.db_name} exists")
            return True

        if not self.start_if_needed():
            return False
        if not self.wait_for_database_ready():
            logger.warning(f"Failed waiting for database ready in container {self.name}")
            return False
        if not self.wait_for_connectivity(use_admin=True):
            logger.warning(f"Failed waiting for admin connectivity for {self.name}")
            return False
        if not self.provision():
            return False
        if not self.wait_for_connectivity():
            logger.warning(f"Failed waiting for connectivity for {self.name}")
            return False
        return True

    def provision(self) -> bool:
        """Create database, user and extensions then run the init SQL file."""
        with_drop = self.start_mode is StartMode.DROP_CREATE
        try:
            self.create_database(with_drop)
        except ProvisioningError as e:
            logger.error(f"Failed to create database for container {self.name}: {e}")
            return False
        self.run_db_sql_file(self.config.db_name, self.config.db_user, self.config.init_sql_file)
        return True

    def fast_start(self) -> bool:
        """Return True when fast start is enabled and the database already exists.

        Any failure of the check means fast start is not available and the
        normal startup is used.
        """
        if not self.config.fast_start:
            return False
        try:
            return self.is_fast_start_database_exists()
        except Exception as e:
            logger.debug(f"Failed fast start check - using normal startup: {e}")
            return False

    def is_fast_start_database_exists(self) -> bool:
        """Engine check used by fast start, unsupported engines return False."""
        return False

    def is_database_ready(self) -> bool:
        """Return True when the database is ready to take commands."""
        raise NotImplementedError

    def is_database_admin_ready(self) -> bool:
        """Return True when the database is ready to take admin commands."""
        raise NotImplementedError

    def create_database(self, with_drop: bool) -> None:
        """Create database, user and extensions, dropping them first if with_drop.

        Raises:
            ProvisioningError: If a statement fails
        """
        raise NotImplementedError

    def execute_sql_file(self, db_user: str, db_name: str, container_file_path: str) -> None:
        """Run a SQL file already copied into the container."""
        raise UnsupportedOperationError(
            f"execute_sql_file is not implemented for {self.config.engine} - Postgres only at this stage"
        )

    def ready_attempts(self) -> int:
        """Attempts allowed for each readiness phase."""
        return self.config.max_ready_attempts

    def wait_for_database_ready(self) -> bool:
        """Return True once the database takes commands and admin commands."""
        attempts = self.ready_attempts()
        return (condition_loop(self.is_database_ready, attempts)
                and condition_loop(self.is_database_admin_ready, attempts))

    def check_connectivity(self, use_admin: bool = False) -> bool:
        """Check a connection can be opened with the admin or db user credentials."""
        return check_connectivity(self.config, use_admin)

    def wait_for_connectivity(self, use_admin: bool = False) -> bool:
        return wait_for_connectivity(self.config, use_admin, self.config.max_ready_attempts)

    def run_db_sql_file(self, db_name: str, db_user: str, sql_file: Optional[str]) -> None:
        """Copy a SQL file into the container and execute it, if one is defined."""
        if not sql_file or not sql_file.strip():
            return
        path = find_sql_file(sql_file)
        if path is not None:
            self.run_sql_file(path, db_user, db_name)

    def run_sql_file(self, path: Path, db_user: str, db_name: str) -> None:
        if self.copy_file_to_container(path):
            self.execute_sql_file(db_user, db_name, f"{CONTAINER_TMP_DIR}/{path.name}")

    def copy_file_to_container(self, source: Path) -> bool:
        """Copy a file to /tmp in the container, True if docker cp succeeded."""
        source_path = str(Path(source).resolve())
        args = self.docker_args('cp', source_path, f"{self.name}:{CONTAINER_TMP_DIR}/{Path(source).name}")
        try:
            return execute_expect_empty(
                args,
                f"Failed to copy file {source_path} to container",
                executor=self.executor
            )
        except CommandError as e:
            logger.error(f"Failed to copy file {source_path} to container {self.name}: {e}")
            return False

    def log_started(self, started: bool) -> bool:
        if started:
            logger.info(f"Container {self.name} ready with {self.config.summary()} mode:{self.mode_name()}")
        else:
            logger.warning(f"Container {self.name} not ready with {self.config.summary()} mode:{self.mode_name()}")
        return started

    def mode_name(self) -> str:
        return self.start_mode.name if self.start_mode else ''

    def shutdown_name(self) -> str:
        return ShutdownMode.parse(self.config.shutdown_mode).value

    def log_run(self) -> None:
        logger.info(f"Run container {self.name} with {self.config.summary()} "
                    f"mode:{self.mode_name()} shutdown:{self.shutdown_name()}")

    def log_start(self) -> None:
        logger.info(f"Start container {self.name} with {self.config.summary()} "
                    f"mode:{self.mode_name()} shutdown:{self.shutdown_name()}")

    def log_running(self) -> None:
        logger.info(f"Container {self.name} running with {self.config.summary()} "
                    f"mode:{self.mode_name()} shutdown:{self.shutdown_name()}")
