"""
===============================================
Configuration for ephemeral database containers.
===============================================

Defines the immutable configuration record consumed by the container
lifecycle, with one variant per supported database engine, and a loader
that builds a variant from environment variables (.env file supported).

The configuration system ensures:
- Engine-specific defaults (ports, image, admin credentials, database name)
- Port and database name are always present once constructed
- No field can be reassigned after construction

Environment variables:
    DBTEST_<ENGINE>_<FIELD>   engine specific, e.g. DBTEST_POSTGRES_PORT
    DBTEST_<FIELD>            fallback for START_MODE, SHUTDOWN_MODE,
                              MAX_READY_ATTEMPTS, FAST_START, DOCKER

Example:
    >>> from core.config import PostgresConfig, load_config
    >>>
    >>> config = PostgresConfig(version='15', start_mode='dropcreate')
    >>> print(config.summary())
    port:6432 db:test_db user:test_user/test
    >>>
    >>> # Build from DBTEST_POSTGRES_* variables
    >>> config = load_config('postgres')
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Tuple, Type

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection
from sqlalchemy.pool import NullPool

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

ENV_PREFIX = 'DBTEST'

# Settings that may be given once for every engine
SHARED_SETTINGS = ('start_mode', 'shutdown_mode', 'max_ready_attempts', 'fast_start', 'docker')


class ConfigError(ValueError):
    """Exception raised for invalid or incomplete container configuration."""
    pass


@dataclass(frozen=True)
class DbConfig:
    """Settings shared by every database engine.

    Attributes:
        engine: Engine kind tag ('postgres', 'oracle')
        container_name: Docker container name, the only handle on the container
        host: Host the exposed port is reachable on
        port: Host port mapped to the database port
        internal_port: Database port inside the container
        version: Image version (tag)
        image: Image reference, derived from version when empty
        admin_user: Administrative user
        admin_password: Administrative password
        db_user: User the tests connect as
        db_password: Password of db_user
        db_name: Database the tests use
        extensions: Database extensions to create (Postgres)
        init_sql_file: SQL file run after the database and user are created
        start_mode: 'create', 'dropcreate' or 'container'
        shutdown_mode: 'none', 'stop' or 'remove'
        max_ready_attempts: Attempts per readiness phase (100ms apart)
        fast_start: Skip provisioning when the database already exists
        docker: Docker executable
    """

    engine: str = ''
    container_name: str = ''
    host: str = 'localhost'
    port: int = 0
    internal_port: int = 0
    version: str = ''
    image: str = ''
    admin_user: str = ''
    admin_password: str = ''
    db_user: str = ''
    db_password: str = ''
    db_name: str = ''
    extensions: Tuple[str, ...] = ()
    init_sql_file: Optional[str] = None
    start_mode: str = 'create'
    shutdown_mode: str = 'none'
    max_ready_attempts: int = 300
    fast_start: bool = False
    docker: str = 'docker'

    drivername = ''

    def __post_init__(self):
        if not self.port:
            raise ConfigError(f"Port is required for {self.engine or 'database'} container")
        if not self.db_name or not str(self.db_name).strip():
            raise ConfigError(f"Database name is required for {self.engine or 'database'} container")
        if not self.image:
            # frozen dataclass, so bypass __setattr__ for the derived value
            object.__setattr__(self, 'image', self.default_image())
        extensions = self.extensions
        if isinstance(extensions, str):
            extensions = parse_extensions(extensions)
        object.__setattr__(self, 'extensions', tuple(extensions or ()))

    def default_image(self) -> str:
        """Image reference used when none is configured."""
        return f"{self.engine}:{self.version}" if self.version else self.engine

    def admin_database(self) -> str:
        """Database the admin user connects to."""
        return self.db_name

    def connection_url(self, admin: bool = False) -> URL:
        """Get SQLAlchemy URL for the user or admin credentials.

        Args:
            admin: If True, use admin credentials and the admin database

        Returns:
            SQLAlchemy URL object
        """
        return URL.create(
            drivername=self.drivername,
            username=self.admin_user if admin else self.db_user,
            password=self.admin_password if admin else self.db_password,
            host=self.host,
            port=self.port,
            database=self.admin_database() if admin else self.db_name
        )

    def jdbc_url(self) -> str:
        """JDBC-style URL for tooling that expects one."""
        return f"jdbc:{self.engine}://{self.host}:{self.port}/{self.db_name}"

    def create_connection(self) -> Connection:
        """Open a connection using the db user credentials."""
        return self._connect(admin=False)

    def create_admin_connection(self) -> Connection:
        """Open a connection using the admin credentials."""
        return self._connect(admin=True)

    def _connect(self, admin: bool) -> Connection:
        # NullPool: dispose leaves the checked-out connection open
        engine = create_engine(self.connection_url(admin=admin), poolclass=NullPool)
        try:
            return engine.connect()
        finally:
            engine.dispose()

    def summary(self) -> str:
        """One line description used in lifecycle log messages."""
        return f"port:{self.port} db:{self.db_name} user:{self.db_user}/{self.db_password}"


@dataclass(frozen=True)
class PostgresConfig(DbConfig):
    """Postgres container settings."""

    engine: str = 'postgres'
    container_name: str = 'ut_postgres'
    port: int = 6432
    internal_port: int = 5432
    version: str = '15'
    admin_user: str = 'postgres'
    admin_password: str = 'admin'
    db_user: str = 'test_user'
    db_password: str = 'test'
    db_name: str = 'test_db'

    drivername = 'postgresql+psycopg2'

    def admin_database(self) -> str:
        return 'postgres'

    def jdbc_url(self) -> str:
        return f"jdbc:postgresql://{self.host}:{self.port}/{self.db_name}"


@dataclass(frozen=True)
class OracleConfig(DbConfig):
    """Oracle container settings.

    Attributes:
        apex_port: Host port mapped to the Apex web port
        internal_apex_port: Apex web port inside the container
        startup_wait_minutes: Time allowed for Oracle to start from scratch
    """

    engine: str = 'oracle'
    container_name: str = 'ut_oracle'
    port: int = 1521
    internal_port: int = 1521
    version: str = 'latest'
    admin_user: str = 'system'
    admin_password: str = 'oracle'
    db_user: str = 'test_user'
    db_password: str = 'test'
    db_name: str = 'XE'
    apex_port: int = 8181
    internal_apex_port: int = 8080
    startup_wait_minutes: int = 8

    drivername = 'oracle+oracledb'

    def default_image(self) -> str:
        return f"sath89/oracle-12c:{self.version}"

    def jdbc_url(self) -> str:
        return f"jdbc:oracle:thin:@{self.host}:{self.port}:{self.db_name}"


CONFIG_TYPES: Dict[str, Type[DbConfig]] = {
    'postgres': PostgresConfig,
    'oracle': OracleConfig,
}


def parse_bool(value: str) -> bool:
    """Convert an environment string to bool."""
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def parse_extensions(value: str) -> Tuple[str, ...]:
    """Convert a comma-separated list to a tuple of names."""
    return tuple(part.strip() for part in str(value).split(',') if part.strip())


def _converter(field_type) -> Callable[[str], object]:
    if field_type is int:
        return int
    if field_type is bool:
        return parse_bool
    if field_type == Tuple[str, ...]:
        return parse_extensions
    return str


def load_config(
    engine: str,
    version: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides
) -> DbConfig:
    """Build the configuration for an engine from environment variables.

    Args:
        engine: Engine kind ('postgres' or 'oracle'), case-insensitive
        version: Optional image version, overrides DBTEST_<ENGINE>_VERSION
        environ: Mapping to read from (defaults to os.environ)
        **overrides: Explicit field values, applied last

    Returns:
        DbConfig variant for the engine

    Raises:
        ConfigError: If the engine is unknown or a value cannot be converted

    Example:
        >>> config = load_config('postgres', environ={'DBTEST_POSTGRES_PORT': '7432'})
        >>> config.port
        7432
    """
    kind = (engine or '').strip().lower()
    config_type = CONFIG_TYPES.get(kind)
    if config_type is None:
        raise ConfigError(f"Unsupported database engine '{engine}'. Valid engines: {sorted(CONFIG_TYPES)}")

    environ = os.environ if environ is None else environ
    values = {}
    for config_field in fields(config_type):
        if config_field.name == 'engine':
            continue
        key = f"{ENV_PREFIX}_{kind.upper()}_{config_field.name.upper()}"
        raw = environ.get(key)
        if raw is None and config_field.name in SHARED_SETTINGS:
            raw = environ.get(f"{ENV_PREFIX}_{config_field.name.upper()}")
        if raw is None:
            continue
        try:
            values[config_field.name] = _converter(config_field.type)(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {key}: {raw!r} ({e})")

    if version:
        values['version'] = version
    values.update(overrides)
    return config_type(**values)
