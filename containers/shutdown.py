"""
Process-exit teardown of containers.

Containers register their teardown action here, keyed by container name.
A later registration for the same name replaces the earlier one, and the
first registration installs a single atexit hook that runs every action.
"""

import atexit
from enum import Enum
from typing import Callable, Dict, List, Optional

from core.logger import get_logger

logger = get_logger(__name__)


class ShutdownMode(Enum):
    """Container disposal policy applied at process exit."""
    NONE = "none"
    STOP = "stop"
    REMOVE = "remove"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ShutdownMode":
        """Case/whitespace-insensitive parse, unknown values map to NONE."""
        normalized = (value or '').strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        return cls.NONE


class ShutdownRegistry:
    """Teardown actions keyed by container name.

    Attributes:
        actions: Registered actions by container name, in registration order
    """

    def __init__(self, register_atexit: bool = True):
        self.actions: Dict[str, Callable[[], None]] = {}
        self._register_atexit = register_atexit
        self._hooked = False

    def register(self, container_name: str, action: Callable[[], None]) -> None:
        """Register the teardown action for a container, replacing any previous one."""
        self.actions.pop(container_name, None)
        self.actions[container_name] = action
        if self._register_atexit and not self._hooked:
            atexit.register(self.run_all)
            self._hooked = True

    def unregister(self, container_name: str) -> bool:
        """Remove the action for a container, returning True if one was registered."""
        return self.actions.pop(container_name, None) is not None

    def registered(self) -> List[str]:
        """Container names with a registered action."""
        return list(self.actions)

    def run_all(self) -> None:
        """Run and clear every registered action.

        An action that raises is logged and the remaining actions still run.
        """
        while self.actions:
            container_name = next(iter(self.actions))
            action = self.actions.pop(container_name)
            try:
                action()
            except Exception:
                logger.exception(f"Shutdown of container {container_name} failed")


# Process-wide registry
shutdown_registry = ShutdownRegistry()
