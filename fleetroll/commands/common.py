"""Helpers shared by the run and validate commands."""

import logging

from fleetroll.config.loader import load_plan, load_settings
from fleetroll.config.types import RunOptions
from fleetroll.loadbalancer.registry import get_load_balancer
from fleetroll.reporting import Notification
from fleetroll.sequence.manager import ExecutionSequenceManager

logger = logging.getLogger(__name__)


def add_plan_arguments(parser):
    parser.add_argument("--fleet", required=True, help="Path to fleet YAML (servers, load_balancer)")
    parser.add_argument("--plan", required=True, help="Path to plan YAML (local/remote sequences)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging with logger names")


def build_run(fleet_path, plan_path, options=None):
    """Load settings and plan. Returns (settings, manager).

    Raises ConfigurationError before anything executes.
    """
    settings = load_settings(fleet_path, options or RunOptions())
    manager = ExecutionSequenceManager(settings.servers, get_load_balancer(settings.load_balancer))
    load_plan(plan_path, manager)
    return settings, manager


def validate_run(manager) -> Notification:
    """Validate local and remote sequences; log and return the diagnostics."""
    notification = Notification()
    local_ok = manager.is_valid(notification)
    remote_ok = manager.is_remote_valid(notification)
    if not (local_ok and remote_ok):
        logger.error("Plan is invalid:")
        for error in notification.errors:
            logger.error(f"  - {error}")
    return notification
