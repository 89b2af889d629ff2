"""
Shared fixtures and fakes for container tests.

Key fixtures:
- executor: FakeExecutor answering docker commands from canned responses.
- registry: ShutdownRegistry that does not install an atexit hook.
- fake_engine_factory: builds FakeEngine objects recording executed SQL.
"""

from unittest.mock import MagicMock

import pytest

from containers.shutdown import ShutdownRegistry
from utils.process import ProcessResult


class FakeExecutor:
    """
    Command executor returning canned stdout by substring match on the command line.

    Responses are checked in insertion order; an outcome is a list of
    stdout lines, an exception to raise, or a callable taking the args.
    Commands without a match return empty output.
    """

    def __init__(self):
        self.responses = []
        self.calls = []

    def respond(self, match, outcome):
        self.responses.append((match, outcome))
        return self

    def __call__(self, args):
        args = list(args)
        self.calls.append(args)
        command_line = ' '.join(args)
        for match, outcome in self.responses:
            if match in command_line:
                if isinstance(outcome, BaseException):
                    raise outcome
                if callable(outcome):
                    outcome = outcome(args)
                return ProcessResult(args, 0, list(outcome))
        return ProcessResult(args, 0, [])

    def commands(self, match):
        """Calls whose command line contains match."""
        return [call for call in self.calls if match in ' '.join(call)]


class FakeResult:
    def __init__(self, row=None):
        self.row = row

    def fetchone(self):
        return self.row


class FakeConnection:
    """Connection recording statements; existence queries answer from `existing`."""

    def __init__(self, existing=(), error=None):
        self.existing = set(existing)
        self.error = error
        self.statements = []

    def exec_driver_sql(self, statement):
        self.statements.append(statement)
        if self.error is not None:
            raise self.error
        if statement.startswith('SELECT 1'):
            hit = any(f"'{name}'" in statement for name in self.existing)
            return FakeResult((1,) if hit else None)
        return FakeResult()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeEngine:
    def __init__(self, connection):
        self.connection = connection
        self.dispose = MagicMock()

    def connect(self):
        return self.connection


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def registry():
    return ShutdownRegistry(register_atexit=False)


@pytest.fixture
def fake_engine_factory():
    def factory(existing=(), error=None):
        return FakeEngine(FakeConnection(existing=existing, error=error))
    return factory
