"""CLI logging setup."""

import logging
import sys

from fleetroll.redact import SecretRedactingFilter


def setup_cli_logging(verbose=False):
    """Configure the root logger for CLI runs.

    Plain ``%(message)s`` on stdout: section indentation is already part of
    the message. ``verbose`` adds logger names and DEBUG records.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    fmt = "[%(name)s] %(message)s" if verbose else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)
