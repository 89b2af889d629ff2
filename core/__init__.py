"""
=================================================
Core infrastructure package for db test containers.
=================================================

This package provides container configuration and logging infrastructure
used throughout the project.

Modules:
    config: Engine configuration variants and environment loading
    logger: Centralized logging configuration and utilities

Example:
    >>> from core.config import load_config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> config = load_config('postgres')
    >>> logger.info(f"Using {config.summary()}")
"""

__version__ = "0.1.0"
__all__ = [
    'ConfigError', 'DbConfig', 'OracleConfig', 'PostgresConfig', 'load_config',
    'get_logger', 'setup_logging'
]

from core.config import ConfigError, DbConfig, OracleConfig, PostgresConfig, load_config
from core.logger import get_logger, setup_logging
