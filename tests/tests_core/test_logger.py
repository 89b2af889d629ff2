"""
Tests for core/logger.py logging setup.
"""

import logging

import pytest

from core.logger import ColoredFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
def test_get_logger_level_override():
    logger = get_logger('containers.test_override', level='debug')

    assert logger.name == 'containers.test_override'
    assert logger.level == logging.DEBUG


@pytest.mark.unit
def test_colored_formatter_restores_levelname():
    record = logging.LogRecord('containers', logging.WARNING, __file__, 1, 'not ready', None, None)

    output = ColoredFormatter('%(marker)s %(levelname)s %(message)s').format(record)

    assert '\033[33mWARNING\033[0m' in output
    assert output.endswith('not ready')
    assert record.levelname == 'WARNING'


@pytest.mark.integration
def test_setup_logging_file_output(restore_root_logger, tmp_path):
    setup_logging(log_level='DEBUG', log_file='containers.log', log_dir=str(tmp_path), console_output=False)

    get_logger('containers.test_file').debug('Run container ut_postgres')
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert restore_root_logger.level == logging.DEBUG
    assert 'Run container ut_postgres' in (tmp_path / 'containers.log').read_text(encoding='utf-8')


@pytest.mark.integration
def test_setup_logging_level_from_environment(restore_root_logger, monkeypatch):
    monkeypatch.setenv('DBTEST_LOG_LEVEL', 'warning')

    setup_logging(use_colors=False)

    assert restore_root_logger.level == logging.WARNING
    assert len(restore_root_logger.handlers) == 1
