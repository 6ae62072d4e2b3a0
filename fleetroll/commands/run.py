"""Run command: execute (or dry-run) a plan against the fleet."""

import asyncio
import contextlib
import logging
import signal
import sys

from fleetroll.cancellation import CancellationToken
from fleetroll.commands.common import add_plan_arguments, build_run, validate_run
from fleetroll.config.types import RunOptions
from fleetroll.errors import ConfigurationError, FleetrollError, RunCancelledError
from fleetroll.reporting import StatusReporter

logger = logging.getLogger(__name__)


def handle_run(args):
    """Handle the run command."""
    options = RunOptions(
        stop_after_marked_server=args.stop_after_marked_server,
        continue_after_marked_server=args.continue_after_marked_server,
    )
    try:
        settings, manager = build_run(args.fleet, args.plan, options)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if validate_run(manager).has_errors:
        sys.exit(1)

    if args.dry_run:
        manager.dry_run(settings)
        return

    sys.exit(asyncio.run(_run(manager, settings)))


async def _run(manager, settings) -> int:
    token = CancellationToken()
    with contextlib.suppress(NotImplementedError):
        asyncio.get_running_loop().add_signal_handler(signal.SIGINT, token.cancel)

    status = StatusReporter()
    try:
        await manager.execute(status, settings, token)
    except RunCancelledError:
        logger.error("Run cancelled. Servers are left in their current load balancer state.")
        return 130
    except FleetrollError as e:
        logger.error(f"Deployment failed: {e}")
        return 1

    logger.info("Deployment complete.")
    return 0


def register_run_command(subparsers):
    """Register the run command."""
    parser = subparsers.add_parser("run", help="Run a deployment plan against the fleet")
    add_plan_arguments(parser)
    partial = parser.add_mutually_exclusive_group()
    partial.add_argument(
        "--stop-after-marked-server",
        action="store_true",
        help="Deploy only to the server marked stop_server (or the first one) and leave it offline",
    )
    partial.add_argument(
        "--continue-after-marked-server",
        action="store_true",
        help="Bring the marked server back online and deploy to the rest of the fleet",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the run without executing")
    parser.set_defaults(func=handle_run)
