"""Cooperative cancellation token threaded through every execution call."""

from fleetroll.errors import RunCancelledError


class CancellationToken:
    """Cancellation flag checked at well-defined points of a run.

    Cancelling never interrupts an operation that is already running; the
    next check point raises ``RunCancelledError`` instead.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self):
        if self._cancelled:
            raise RunCancelledError("Run cancelled.")
