"""
==================================================
Database connectivity utilities for containers.
==================================================

Provides the protocol-level connectivity check used to confirm a container's
database answers connections (not merely that its process is up), the
polling wrapper around it, and the AUTOCOMMIT admin engine used for
provisioning DDL.

A failed connection is never escalated: it is a boolean signal consumed by
readiness polling and by the final check before a container is declared
started.

Example:
    >>> from core.config import PostgresConfig
    >>> from utils.database_utils import check_connectivity, wait_for_connectivity
    >>>
    >>> config = PostgresConfig()
    >>> if check_connectivity(config, use_admin=True):
    ...     print("Admin connection ready")
    >>>
    >>> wait_for_connectivity(config, max_attempts=50)
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from core.config import DbConfig
from core.logger import get_logger
from utils.readiness import condition_loop

logger = get_logger(__name__)


def check_connectivity(config: DbConfig, use_admin: bool = False) -> bool:
    """
    Check a connection can be opened with the admin or db user credentials.

    Args:
        config: Container configuration
        use_admin: If True, connect as the admin user to the admin database

    Returns:
        True if a connection was opened and closed, False otherwise
    """
    logger.debug(f"Checking connectivity on {config.container_name} ...")
    try:
        connection = config.create_admin_connection() if use_admin else config.create_connection()
        connection.close()
        logger.debug(f"Connectivity confirmed for {config.container_name}")
        return True
    except SQLAlchemyError as e:
        logger.debug(f"Connection failed: {e}")
        return False


def wait_for_connectivity(
    config: DbConfig,
    use_admin: bool = False,
    max_attempts: Optional[int] = None
) -> bool:
    """
    Poll check_connectivity until it succeeds or attempts are exhausted.

    Args:
        config: Container configuration
        use_admin: If True, check the admin credentials
        max_attempts: Attempts (defaults to config.max_ready_attempts)

    Returns:
        True once connected, False if attempts were exhausted
    """
    attempts = max_attempts if max_attempts is not None else config.max_ready_attempts
    return condition_loop(lambda: check_connectivity(config, use_admin), attempts)


def create_admin_engine(config: DbConfig, database: Optional[str] = None) -> Engine:
    """
    Create an AUTOCOMMIT engine connected as the admin user.

    CREATE/DROP DATABASE cannot run inside a transaction block, so
    provisioning statements go through this engine.

    Args:
        config: Container configuration
        database: Database to connect to (defaults to the admin database)

    Returns:
        SQLAlchemy Engine; callers dispose it
    """
    url = config.connection_url(admin=True)
    if database:
        url = url.set(database=database)
    return create_engine(
        url,
        isolation_level='AUTOCOMMIT',
        poolclass=NullPool,
        echo=False
    )
