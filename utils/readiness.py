"""
Bounded polling of readiness conditions.

A condition is a zero-argument callable returning a bool. Errors raised by
the condition (connection refused while the engine boots, a docker exec
against a container that is still starting) count as a failed attempt and
polling continues; only running out of attempts ends the wait.
"""

import time
from typing import Callable

from core.logger import get_logger

logger = get_logger(__name__)

PAUSE_SECONDS = 0.1


def condition_loop(
    condition: Callable[[], bool],
    max_attempts: int,
    pause: float = PAUSE_SECONDS
) -> bool:
    """
    Poll a condition until it holds or attempts are exhausted.

    Args:
        condition: Zero-argument callable returning True when ready
        max_attempts: Maximum number of evaluations
        pause: Seconds to sleep between evaluations

    Returns:
        True on the first successful evaluation, False after max_attempts

    Example:
        >>> condition_loop(lambda: check_connectivity(config), max_attempts=50)
    """
    for attempt in range(1, max_attempts + 1):
        try:
            if condition():
                return True
        except Exception as e:
            logger.debug(f"Condition not met (attempt {attempt}/{max_attempts}): {e}")

        if attempt < max_attempts:
            time.sleep(pause)

    return False
