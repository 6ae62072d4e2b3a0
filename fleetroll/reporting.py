"""Status reporting scopes and validation notifications."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

INDENT = "  "


@dataclass
class StatusEvent:
    """One entry in a run's audit trail."""

    kind: str  # "start" | "end" | "failed" | "info" | "warning"
    name: str
    depth: int


class StatusReporter:
    """Write-only progress sink with explicit section nesting.

    Each reporter knows its own depth. ``section()`` yields a child reporter
    one level deeper, so indentation travels with the object passed down the
    call chain instead of living in global state. All reporters derived from
    the same root share one event list.
    """

    def __init__(self, log=None, depth=0, events=None):
        self.log = log or logger
        self.depth = depth
        self.events = events if events is not None else []

    def _prefix(self) -> str:
        return INDENT * self.depth

    def info(self, message):
        self.events.append(StatusEvent("info", message, self.depth))
        self.log.info(f"{self._prefix()}{message}")

    def warning(self, message):
        self.events.append(StatusEvent("warning", message, self.depth))
        self.log.warning(f"{self._prefix()}{message}")

    @contextmanager
    def section(self, name):
        """Open a named section; yields the nested reporter."""
        self.events.append(StatusEvent("start", name, self.depth))
        self.log.info(f"{self._prefix()}{name}")
        child = StatusReporter(self.log, self.depth + 1, self.events)
        try:
            yield child
        except BaseException:
            self.events.append(StatusEvent("failed", name, self.depth))
            raise
        self.events.append(StatusEvent("end", name, self.depth))

    def names(self, kind="start") -> list[str]:
        """Names of all recorded events of the given kind, in order."""
        return [e.name for e in self.events if e.kind == kind]


@dataclass
class Notification:
    """Accumulates validation diagnostics. Callers inspect it after is_valid()."""

    errors: list[str] = field(default_factory=list)

    def add_error(self, message):
        self.errors.append(message)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
