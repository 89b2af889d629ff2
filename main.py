"""
=========================================================
Command line entry point for database test containers.
=========================================================

Thin wrapper around the containers package for use outside a test
framework, e.g. to warm up a container before a test run or to clean one
up afterwards.

Usage:
    # Start Postgres, creating database and user if missing
    python main.py start --engine postgres

    # Drop and recreate database and user
    python main.py start --engine postgres --mode dropcreate

    # Container state
    python main.py status --engine oracle

    # Stop / stop and remove
    python main.py stop --engine postgres
    python main.py remove --engine postgres

Settings not given on the command line come from DBTEST_* environment
variables (see core.config).

The container started by the start action outlives the command; it is
torn down with the stop or remove actions, so a configured shutdown mode
is never applied here.
"""

import argparse
import sys

from containers import ShutdownRegistry, create_container
from core.config import ConfigError, load_config
from core.logger import get_logger, setup_logging
from utils.process import CommandError

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ephemeral database containers for integration tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py start --engine postgres --mode dropcreate
  python main.py status --engine postgres
  python main.py remove --engine postgres
        """
    )
    parser.add_argument(
        'action',
        choices=['start', 'stop', 'remove', 'status'],
        help='Operation to perform on the container'
    )
    parser.add_argument(
        '--engine',
        choices=['postgres', 'oracle'],
        default='postgres',
        help='Database engine'
    )
    parser.add_argument('--version', help='Image version (tag)')
    parser.add_argument(
        '--mode',
        help='Start mode: create, dropcreate or container'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )
    return parser


def main(argv=None) -> int:
    """
    Run a container operation.

    Exit Codes:
        0: Success
        1: Error or container not ready
        130: User interrupt (Ctrl+C)
    """
    args = build_parser().parse_args(argv)
    setup_logging(log_level='DEBUG' if args.verbose else None)

    overrides = {}
    if args.mode:
        overrides['start_mode'] = args.mode

    try:
        config = load_config(args.engine, version=args.version, **overrides)
        # No exit hook: the started container outlives this process
        container = create_container(config, registry=ShutdownRegistry(register_atexit=False))

        if args.action == 'start':
            return 0 if container.start() else 1
        if args.action == 'stop':
            return 0 if container.stop() else 1
        if args.action == 'remove':
            return 0 if container.stop_remove() else 1

        if container.is_running():
            state = 'running'
        elif container.is_present():
            state = 'stopped'
        else:
            state = 'not present'
        logger.info(f"Container {config.container_name}: {state}")
        return 0

    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except CommandError as e:
        logger.error(f"Docker command failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
