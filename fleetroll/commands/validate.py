"""Validate command: check a fleet and plan without running anything."""

import logging
import sys

from fleetroll.commands.common import add_plan_arguments, build_run, validate_run
from fleetroll.errors import ConfigurationError

logger = logging.getLogger(__name__)


def handle_validate(args):
    try:
        settings, manager = build_run(args.fleet, args.plan)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if validate_run(manager).has_errors:
        sys.exit(1)
    logger.info(
        f"Plan is valid: {len(manager.local_sequences)} local and "
        f"{len(manager.remote_sequences)} remote sequence(s), {len(settings.servers)} server(s)."
    )


def register_validate_command(subparsers):
    parser = subparsers.add_parser("validate", help="Validate fleet and plan files")
    add_plan_arguments(parser)
    parser.set_defaults(func=handle_validate)
