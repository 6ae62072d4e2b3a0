#!/usr/bin/env python3
"""Rolling deployment orchestrator: CLI entrypoint."""

import argparse

from fleetroll.commands.run import register_run_command
from fleetroll.commands.validate import register_validate_command
from fleetroll.logging_setup import setup_cli_logging


def main():
    parser = argparse.ArgumentParser(description="Rolling deployments behind a load balancer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_run_command(subparsers)
    register_validate_command(subparsers)

    args = parser.parse_args()
    setup_cli_logging(verbose=getattr(args, "verbose", False))
    args.func(args)


if __name__ == "__main__":
    main()
