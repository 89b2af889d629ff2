"""
========================================================
Database containers for integration test runs.
========================================================

Starts a disposable database container, waits for it to become reachable,
provisions the test database and user, and registers how the container is
disposed of when the process exits.

Modules:
    base: Docker commands for a named container
    shutdown: Process-exit teardown registry and shutdown modes
    db_container: Lifecycle state machine shared by all engines
    postgres: Postgres variant
    oracle: Oracle variant

Example:
    >>> from containers import create_container
    >>> from core.config import load_config
    >>>
    >>> container = create_container(load_config('postgres'))
    >>> container.start()
    True
"""

from typing import Dict, Optional, Type

from core.config import ConfigError, DbConfig
from utils.process import Executor, run_process

from .base import BaseContainer
from .db_container import DbContainer, ProvisioningError, StartMode, UnsupportedOperationError
from .oracle import OracleContainer
from .postgres import PostgresContainer
from .shutdown import ShutdownMode, ShutdownRegistry, shutdown_registry

__version__ = "0.1.0"
__all__ = [
    'BaseContainer', 'DbContainer', 'PostgresContainer', 'OracleContainer',
    'StartMode', 'ShutdownMode', 'ShutdownRegistry', 'shutdown_registry',
    'ProvisioningError', 'UnsupportedOperationError', 'create_container'
]

CONTAINER_TYPES: Dict[str, Type[DbContainer]] = {
    'postgres': PostgresContainer,
    'oracle': OracleContainer,
}


def create_container(
    config: DbConfig,
    executor: Executor = run_process,
    registry: Optional[ShutdownRegistry] = None
) -> DbContainer:
    """
    Create the container variant for the configured engine.

    Args:
        config: Engine configuration
        executor: Command executor (defaults to running real processes)
        registry: Shutdown registry (defaults to the process-wide one)

    Returns:
        DbContainer for the engine

    Raises:
        ConfigError: If no container variant exists for the engine
    """
    container_type = CONTAINER_TYPES.get(config.engine)
    if container_type is None:
        raise ConfigError(f"No container support for engine '{config.engine}'")
    return container_type(config, executor=executor, registry=registry)
