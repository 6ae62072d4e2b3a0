"""Condition script evaluation for conditional sequences."""

import logging

from fleetroll.operations.transport import run_local, run_remote

logger = logging.getLogger(__name__)


class ScriptEvaluator:
    """Evaluates a condition script; exit code 0 means the condition holds.

    The script runs on the target over SSH, or on the control host when
    there is no server (local phase).
    """

    async def evaluate(self, server, script) -> bool:
        if server is None:
            rc, _, _ = await run_local(script)
        else:
            rc, _, _ = await run_remote(server, script)
        logger.debug(f"Condition [{script}] exited {rc}")
        return rc == 0
