"""Built-in command operations: local shell and remote SSH."""

import logging

from fleetroll.errors import DeploymentError
from fleetroll.operations.base import Operation
from fleetroll.operations.transport import run_local, run_remote

logger = logging.getLogger(__name__)


class _CommandOperation(Operation):
    kind = "command"

    def __init__(self, command, name=None, timeout=None):
        self.command = command
        self._name = name
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self._name or f"{self.kind}: {self.command}"

    def is_valid(self, notification) -> bool:
        if not self.command or not str(self.command).strip():
            notification.add_error(f"Operation '{self.name}' has an empty command.")
            return False
        return True

    def _check(self, rc, stderr, server=None):
        if rc != 0:
            where = f" on {server.name}" if server is not None else ""
            detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
            raise DeploymentError(
                f"Command failed{where} (exit {rc}): {self.command}{detail}",
                operation=self.name,
                server=server.name if server is not None else None,
            )


class LocalCommandOperation(_CommandOperation):
    """Run a shell command on the control host."""

    kind = "run"

    async def execute(self, server, status, settings, token):
        logger.debug(f"Running locally: {self.command}")
        rc, _, stderr = await run_local(self.command, timeout=self.timeout)
        self._check(rc, stderr)

    def dry_run(self) -> str:
        return f"[dry-run] local: {self.command}"


class RemoteCommandOperation(_CommandOperation):
    """Run a command on the target server over SSH."""

    kind = "ssh"

    async def execute(self, server, status, settings, token):
        if server is None:
            raise DeploymentError(f"Remote operation '{self.name}' needs a server.", operation=self.name)
        logger.debug(f"Running on {server.name}: {self.command}")
        rc, _, stderr = await run_remote(server, self.command, timeout=self.timeout)
        self._check(rc, stderr, server)

    def dry_run(self) -> str:
        return f"[dry-run] ssh: {self.command}"
