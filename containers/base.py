"""
==========================================
Docker commands for a named container.
==========================================

A container is known only by its name. Every question about its state
(running, present but stopped) is answered by asking the docker daemon
through the command executor, so nothing is cached between calls and a
run interrupted half way can simply be started again.

Example:
    >>> from containers.postgres import PostgresContainer
    >>> from core.config import PostgresConfig
    >>>
    >>> container = PostgresContainer(PostgresConfig())
    >>> container.is_running()
    False
    >>> container.start_if_needed()
    True
"""

from typing import Callable, List, Optional

from containers.shutdown import ShutdownMode, ShutdownRegistry, shutdown_registry
from core.config import DbConfig
from core.logger import get_logger
from utils.process import CommandError, Executor, execute_expecting, run_process

logger = get_logger(__name__)


class BaseContainer:
    """Start, stop and inspect a docker container by name.

    Attributes:
        config: Container configuration
        executor: Command executor used for every docker command
        registry: Shutdown registry receiving the teardown action
    """

    def __init__(
        self,
        config: DbConfig,
        executor: Executor = run_process,
        registry: Optional[ShutdownRegistry] = None
    ):
        self.config = config
        self.executor = executor
        self.registry = registry if registry is not None else shutdown_registry

    @property
    def name(self) -> str:
        return self.config.container_name

    def docker_args(self, *args: str) -> List[str]:
        """Prefix arguments with the docker executable."""
        return [self.config.docker, *args]

    def run_args(self) -> List[str]:
        """Command line that creates and starts the container."""
        raise NotImplementedError(f"{type(self).__name__} does not define a run command")

    def is_running(self) -> bool:
        """Return True if the container is running."""
        return execute_expecting(
            self.docker_args('ps', '--filter', f'name=^{self.name}$', '--format', '{{.Names}}'),
            self.name,
            executor=self.executor
        )

    def is_present(self) -> bool:
        """Return True if the container exists, running or stopped."""
        return execute_expecting(
            self.docker_args('ps', '-a', '--filter', f'name=^{self.name}$', '--format', '{{.Names}}'),
            self.name,
            executor=self.executor
        )

    def start_if_needed(self) -> bool:
        """Attach to a running container, start a stopped one or run a new one.

        Returns:
            True when the container is running afterwards, False if a
            docker command failed
        """
        try:
            if self.is_running():
                self.log_running()
            elif self.is_present():
                self.log_start()
                self.executor(self.docker_args('start', self.name))
            else:
                self.log_run()
                self.executor(self.run_args())
            return True
        except CommandError as e:
            logger.error(f"Failed to start container {self.name}: {e}")
            return False

    def stop(self) -> bool:
        """Stop the container."""
        logger.info(f"Stopping container {self.name}")
        return self._docker('stop')

    def remove(self) -> bool:
        """Remove the (stopped) container."""
        logger.info(f"Removing container {self.name}")
        return self._docker('rm')

    def stop_remove(self) -> bool:
        """Stop and then remove the container."""
        stopped = self.stop()
        return self.remove() and stopped

    def logs(self) -> List[str]:
        """Container log lines (docker logs writes to stdout and stderr)."""
        result = self.executor(self.docker_args('logs', self.name))
        return result.out_lines + result.err_lines

    def _docker(self, command: str) -> bool:
        try:
            self.executor(self.docker_args(command, self.name))
            return True
        except CommandError as e:
            logger.error(f"docker {command} {self.name} failed: {e}")
            return False

    def shutdown_action(self) -> Callable[[], None]:
        """Teardown for the configured shutdown mode."""
        mode = ShutdownMode.parse(self.config.shutdown_mode)
        if mode is ShutdownMode.REMOVE:
            return self.stop_remove
        if mode is ShutdownMode.STOP:
            return self.stop
        return lambda: None

    def register_shutdown(self, started: bool) -> bool:
        """Register the teardown action when the container started.

        Args:
            started: Result of the start sequence

        Returns:
            The started value, unchanged
        """
        if started:
            self.registry.register(self.name, self.shutdown_action())
        return started

    def log_run(self) -> None:
        logger.info(f"Run container {self.name}")

    def log_start(self) -> None:
        logger.info(f"Start container {self.name}")

    def log_running(self) -> None:
        logger.info(f"Container {self.name} running")
