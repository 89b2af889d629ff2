"""
=================================================
External command execution and output matching.
=================================================

Runs docker and engine command line tools, captures their output as lines
and provides the matching primitives the container lifecycle uses to
interpret it. Matching is plain substring containment on stdout lines so
extra surrounding text (timestamps, padding) never breaks a check.

No retries happen at this level; retrying belongs to utils.readiness.

Example:
    >>> from utils.process import run_process, execute_expecting
    >>>
    >>> result = run_process(['docker', 'ps', '--format', '{{.Names}}'])
    >>> 'ut_postgres' in result.out_lines
    >>>
    >>> execute_expecting(
    ...     ['docker', 'exec', 'ut_postgres', 'pg_isready'],
    ...     'accepting connections'
    ... )
"""

import subprocess
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from core.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ProcessResult:
    """Captured result of an external process.

    Attributes:
        args: Command line that was executed
        returncode: Exit status
        out_lines: stdout split into lines
        err_lines: stderr split into lines
    """
    args: List[str]
    returncode: int
    out_lines: List[str] = field(default_factory=list)
    err_lines: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandError(Exception):
    """Exception raised when an external command cannot run or fails.

    Attributes:
        result: ProcessResult when the process ran, None otherwise
    """

    def __init__(self, message: str, result: Optional[ProcessResult] = None):
        super().__init__(message)
        self.result = result


Executor = Callable[[Sequence[str]], ProcessResult]


def run_process(args: Sequence[str], timeout: Optional[int] = None, check: bool = True) -> ProcessResult:
    """Run a command and capture its output.

    Args:
        args: Command line arguments
        timeout: Optional timeout in seconds
        check: If True, a non-zero exit status raises CommandError

    Returns:
        ProcessResult with stdout/stderr lines

    Raises:
        CommandError: If the executable is missing, the timeout expires or
            (with check) the exit status is non-zero
    """
    args = [str(arg) for arg in args]
    logger.debug(f"Running: {' '.join(args)}")
    try:
        completed = subprocess.run(
            args, capture_output=True, encoding='utf-8', errors='replace', timeout=timeout
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        raise CommandError(f"Failed to run {' '.join(args)}: {e}")

    result = ProcessResult(
        args=args,
        returncode=completed.returncode,
        out_lines=completed.stdout.splitlines(),
        err_lines=completed.stderr.splitlines()
    )
    if check and not result.success:
        raise CommandError(
            f"Command {' '.join(args)} exited with {result.returncode}: {' '.join(result.err_lines)}",
            result
        )
    return result


def stdout_contains(out_lines: Sequence[str], expected: str) -> bool:
    """Return True if any line contains the expected text."""
    return any(expected in line for line in out_lines)


def execute_expecting(
    args: Sequence[str],
    expected: str,
    error_message: Optional[str] = None,
    executor: Executor = run_process
) -> bool:
    """Run a command and check some stdout line contains the expected text.

    Args:
        args: Command line arguments
        expected: Text one of the stdout lines must contain
        error_message: Logged when the text is missing, nothing logged if None
        executor: Command executor

    Returns:
        True if the text was found
    """
    out_lines = executor(args).out_lines
    if not stdout_contains(out_lines, expected):
        if error_message is not None:
            logger.error(f"{error_message} stdOut:{out_lines} Expected message:{expected}")
        return False
    return True


def execute_without(
    args: Sequence[str],
    error_match: str,
    error_message: str,
    executor: Executor = run_process
) -> bool:
    """Run a command and check no stdout line contains error_match."""
    out_lines = executor(args).out_lines
    if stdout_contains(out_lines, error_match):
        logger.error(f"{error_message} stdOut:{out_lines}")
        return False
    return True


def execute_expect_empty(
    args: Sequence[str],
    error_message: str,
    executor: Executor = run_process
) -> bool:
    """Run a command expecting no output on stdout."""
    out_lines = executor(args).out_lines
    if out_lines:
        logger.error(f"{error_message} stdOut:{out_lines}")
        return False
    return True
