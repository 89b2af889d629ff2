"""
==========================================
Comprehensive pytest suite for containers/base.py
==========================================

Docker is replaced by a FakeExecutor; assertions are made on the docker
command lines issued.

Available markers:
------------------
unit, integration, edge_case
"""

import pytest

from containers.base import BaseContainer
from core.config import PostgresConfig
from utils.process import CommandError, ProcessResult

RUNNING = 'ps --filter'
PRESENT = 'ps -a --filter'


class RunnableContainer(BaseContainer):
    def run_args(self):
        return self.docker_args('run', '-d', '--name', self.name, 'postgres:15')


def make_container(executor, registry, **config):
    return RunnableContainer(PostgresConfig(**config), executor=executor, registry=registry)


# ================
# 1. Unit tests
# ================


@pytest.mark.unit
def test_is_running_queries_exact_name(executor, registry):
    executor.respond(RUNNING, ['ut_postgres'])
    container = make_container(executor, registry)

    assert container.is_running() is True
    assert executor.calls[0] == [
        'docker', 'ps', '--filter', 'name=^ut_postgres$', '--format', '{{.Names}}'
    ]


@pytest.mark.unit
def test_is_present_includes_stopped(executor, registry):
    executor.respond(PRESENT, ['ut_postgres'])
    container = make_container(executor, registry)

    assert container.is_running() is False
    assert container.is_present() is True


@pytest.mark.unit
def test_custom_docker_executable(executor, registry):
    container = make_container(executor, registry, docker='podman')

    container.stop()

    assert executor.calls == [['podman', 'stop', 'ut_postgres']]


@pytest.mark.unit
def test_base_container_has_no_run_command(executor, registry):
    container = BaseContainer(PostgresConfig(), executor=executor, registry=registry)

    with pytest.raises(NotImplementedError):
        container.run_args()


@pytest.mark.unit
def test_logs_merge_stdout_and_stderr(registry):
    def executor(args):
        return ProcessResult(list(args), 0, ['out line'], ['Database ready to use'])

    container = make_container(executor, registry)

    assert container.logs() == ['out line', 'Database ready to use']


# ========================
# 2. Integration tests
# ========================


@pytest.mark.integration
def test_start_if_needed_attaches_to_running(executor, registry):
    executor.respond(RUNNING, ['ut_postgres'])
    container = make_container(executor, registry)

    assert container.start_if_needed() is True
    assert executor.commands('run -d') == []
    assert executor.commands('start') == []


@pytest.mark.integration
def test_start_if_needed_starts_stopped(executor, registry):
    executor.respond(PRESENT, ['ut_postgres'])
    container = make_container(executor, registry)

    assert container.start_if_needed() is True
    assert executor.commands('docker start') == [['docker', 'start', 'ut_postgres']]
    assert executor.commands('run -d') == []


@pytest.mark.integration
def test_start_if_needed_runs_new_container(executor, registry):
    container = make_container(executor, registry)

    assert container.start_if_needed() is True
    assert executor.commands('run -d') == [['docker', 'run', '-d', '--name', 'ut_postgres', 'postgres:15']]


@pytest.mark.integration
@pytest.mark.parametrize("shutdown_mode, expected", [
    ('remove', [['docker', 'stop', 'ut_postgres'], ['docker', 'rm', 'ut_postgres']]),
    ('stop', [['docker', 'stop', 'ut_postgres']]),
    ('none', []),
])
def test_shutdown_action_per_mode(executor, registry, shutdown_mode, expected):
    container = make_container(executor, registry, shutdown_mode=shutdown_mode)

    assert container.register_shutdown(True) is True
    assert registry.registered() == ['ut_postgres']

    registry.run_all()

    assert executor.calls == expected


# ====================
# 3. Edge case tests
# ====================


@pytest.mark.edge_case
def test_start_if_needed_docker_failure(executor, registry):
    executor.respond(RUNNING, CommandError('Cannot connect to the Docker daemon'))
    container = make_container(executor, registry)

    assert container.start_if_needed() is False


@pytest.mark.edge_case
def test_run_failure_reported(executor, registry):
    executor.respond('run -d', CommandError('port is already allocated'))
    container = make_container(executor, registry)

    assert container.start_if_needed() is False


@pytest.mark.edge_case
def test_not_started_registers_nothing(executor, registry):
    container = make_container(executor, registry, shutdown_mode='remove')

    assert container.register_shutdown(False) is False
    assert registry.registered() == []


@pytest.mark.edge_case
def test_stop_remove_still_removes_after_failed_stop(executor, registry):
    executor.respond('docker stop', CommandError('not running'))
    container = make_container(executor, registry)

    assert container.stop_remove() is False
    assert executor.commands('docker rm') == [['docker', 'rm', 'ut_postgres']]
