"""Secret redaction for log output."""

import logging
import os
import re

# Env vars whose values are redacted; extended by register_secret_env()
_SECRET_ENV_VARS = [
    "FLEETROLL_LB_API_KEY",
    "FLEETROLL_LB_PASSWORD",
    "FLEETROLL_SSH_PASSWORD",
]

_MIN_SECRET_LENGTH = 8  # skip short values to avoid false positives

_patterns: list[re.Pattern] | None = None


def register_secret_env(var: str):
    """Treat the value of ``var`` as a secret from now on.

    Used for balancer credentials read from a configured env var name.
    """
    global _patterns
    if var and var not in _SECRET_ENV_VARS:
        _SECRET_ENV_VARS.append(var)
        _patterns = None


def _get_patterns() -> list[re.Pattern]:
    global _patterns
    if _patterns is None:
        values = {os.environ.get(var, "") for var in _SECRET_ENV_VARS}
        values = {v for v in values if len(v) >= _MIN_SECRET_LENGTH}
        # Longer values first so a secret containing another is fully masked
        _patterns = [re.compile(re.escape(v)) for v in sorted(values, key=len, reverse=True)]
    return _patterns


def _apply(text: str, patterns: list[re.Pattern]) -> str:
    for p in patterns:
        text = p.sub("***", text)
    return text


def redact_secrets(text: str) -> str:
    """Replace known secret env var values with '***'."""
    return _apply(text, _get_patterns())


class SecretRedactingFilter(logging.Filter):
    """Logging filter that masks secret values in log records.

    Covers both pre-formatted messages and %-style args.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        patterns = _get_patterns()
        if patterns:
            record.msg = _apply(str(record.msg), patterns)
            if isinstance(record.args, dict):
                record.args = {k: _apply(v, patterns) if isinstance(v, str) else v for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(_apply(a, patterns) if isinstance(a, str) else a for a in record.args)
        return True
