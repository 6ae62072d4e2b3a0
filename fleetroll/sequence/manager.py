"""Execution manager: drives the local phase, then the remote phase across the fleet."""

import logging

from fleetroll.config.types import LoadBalancerMode
from fleetroll.errors import ConfigurationError
from fleetroll.loadbalancer.base import DefaultLoadBalancer
from fleetroll.loadbalancer.executor import (
    DefaultLoadBalancerExecutor,
    RoundRobinLoadBalancerExecutor,
    StickyLoadBalancerExecutor,
)
from fleetroll.reporting import INDENT
from fleetroll.sequence.composite import LocalSequence, RemoteSequence

logger = logging.getLogger(__name__)


class ExecutionSequenceManager:
    """Owns one deployment run.

    Local sequences run once before any server is touched. Remote sequences
    then run per server, in the order chosen by the load balancer executor,
    with each server taken out of traffic first and restored afterward.
    """

    def __init__(self, servers, load_balancer=None, evaluator=None):
        self.servers = list(servers)
        self.load_balancer = load_balancer
        self.evaluator = evaluator
        self.local_sequences: list[LocalSequence] = []
        self.remote_sequences: list[RemoteSequence] = []
        self.executor = self._get_executor(load_balancer)

    def _get_executor(self, load_balancer):
        if load_balancer is None:
            return DefaultLoadBalancerExecutor(DefaultLoadBalancer())

        mode = load_balancer.mode
        if mode == LoadBalancerMode.STICKY:
            return StickyLoadBalancerExecutor(load_balancer)
        if mode == LoadBalancerMode.ROUND_ROBIN:
            return RoundRobinLoadBalancerExecutor(self.servers, load_balancer)
        raise ConfigurationError(f"Load balancer mode [{mode}] not supported.")

    def new_local_sequence(self, name) -> LocalSequence:
        sequence = LocalSequence(name, evaluator=self.evaluator)
        self.local_sequences.append(sequence)
        return sequence

    def new_remote_sequence(self, name, parallel=False) -> RemoteSequence:
        # TODO: run parallel=True sequences as concurrent per-server tasks
        sequence = RemoteSequence(name, parallel=parallel, evaluator=self.evaluator)
        self.remote_sequences.append(sequence)
        return sequence

    async def execute(self, status, settings, token):
        await self._execute_local_operations(status, settings, token)
        await self._execute_remote_operations(status, settings, token)

    async def _execute_local_operations(self, status, settings, token):
        with status.section("Local Operations") as section:
            for sequence in self.local_sequences:
                token.raise_if_cancelled()
                await sequence.execute(section, settings, token)

    async def _execute_remote_operations(self, status, settings, token):
        with status.section("Remote Operations") as section:
            servers = await self.executor.get_server_execution_order(section, settings, token)

            for server in servers:
                with section.section(server.name) as server_section:
                    # Any error leaves this server in its current state and stops the run.
                    await self.executor.bring_offline(server, server_section, settings, token)

                    if server.load_balancer_state.prevent_deployment:
                        server_section.warning(f"Load balancer prevented deployment to [{server.name}], skipping.")
                    else:
                        for sequence in self.remote_sequences:
                            token.raise_if_cancelled()
                            await sequence.execute(server, server_section, settings, token)

                    if not settings.options.stop_after_marked_server:
                        await self.executor.bring_online(server, server_section, settings, token)

    def is_valid(self, notification) -> bool:
        results = [sequence.is_valid(notification) for sequence in self.local_sequences]
        return all(results)

    def is_remote_valid(self, notification) -> bool:
        results = [sequence.is_valid(notification) for sequence in self.remote_sequences]
        return all(results)

    def dry_run(self, settings) -> list[str]:
        """Render the whole run without side effects. Returns the rendered lines.

        Every configured server is rendered, regardless of partial rollout
        options, and no balancer is contacted. Traffic transitions are only
        rendered when a load balancer is configured.
        """
        executor = DefaultLoadBalancerExecutor(DefaultLoadBalancer())
        balanced = settings.load_balancer is not None
        lines = ["Local Operations"]
        for sequence in self.local_sequences:
            lines.append(f"{INDENT}{sequence.title}")
            lines.extend(sequence.dry_run(depth=2))

        lines.append("Remote Operations")
        for server in settings.servers:
            lines.append(f"{INDENT}{server.name}")
            if balanced:
                lines.append(f"{INDENT * 2}{executor.dry_run_bring_offline(server)}")
            for sequence in self.remote_sequences:
                lines.append(f"{INDENT * 2}{sequence.title}")
                lines.extend(sequence.dry_run(depth=3))
            if balanced:
                lines.append(f"{INDENT * 2}{executor.dry_run_bring_online(server)}")

        for line in lines:
            logger.info(line)
        return lines
