"""Load balancer executors: server ordering and per-server online/offline transitions."""

import logging
from abc import ABC, abstractmethod

from fleetroll.config.types import LoadBalanceState
from fleetroll.errors import ConfigurationError
from fleetroll.loadbalancer.base import SuspendMethod

logger = logging.getLogger(__name__)


def find_marked_server(servers):
    """The server flagged with stop_server, or the first server when none is."""
    marked = [s for s in servers if s.stop_server]
    if len(marked) > 1:
        names = ", ".join(s.name for s in marked)
        raise ConfigurationError(f"Only one server may be marked with stop_server, got: {names}")
    return marked[0] if marked else servers[0]


class LoadBalancerExecutor(ABC):
    """Decides which servers get deployed to, in what order, and moves each
    server in and out of traffic.

    This is the only writer of ``server.load_balancer_state.current_state``.
    Transitions are idempotent: asking for the state a server already has
    makes no balancer call.
    """

    def __init__(self, load_balancer):
        self.load_balancer = load_balancer

    @abstractmethod
    async def bring_offline(self, server, status, settings, token):
        pass

    @abstractmethod
    async def bring_online(self, server, status, settings, token):
        pass

    async def get_server_execution_order(self, status, settings, token) -> list:
        servers = list(settings.servers)
        if not servers:
            return []

        # stop_after_marked_server wins when both options are set
        if settings.options.stop_after_marked_server:
            return [find_marked_server(servers)]

        if settings.options.continue_after_marked_server:
            marked = find_marked_server(servers)
            # Left offline by the stopped run that deployed it.
            await self.bring_online(marked, status, settings, token)
            return [s for s in servers if s is not marked]

        logger.debug(f"Execution order: {', '.join(s.name for s in servers)}")
        return servers

    async def _bring_offline(self, server, status, settings, suspend_method):
        if settings.load_balancer is None:
            return
        state = server.load_balancer_state
        if state.current_state == LoadBalanceState.OFFLINE:
            return

        with status.section(f"Taking server [{server.name}] offline in load balancer."):
            result = await self.load_balancer.suspend(server.name, server.load_balancer_farm, suspend_method)
            state.current_state = LoadBalanceState.OFFLINE
            if result is not None and result.prevent_deployment:
                state.prevent_deployment = True

    async def _bring_online(self, server, status, settings):
        if settings.load_balancer is None:
            return
        state = server.load_balancer_state
        if state.current_state == LoadBalanceState.ONLINE:
            return

        with status.section(f"Taking server [{server.name}] online in load balancer."):
            await self.load_balancer.resume(server.name, server.load_balancer_farm)
            state.current_state = LoadBalanceState.ONLINE

    def dry_run_bring_offline(self, server) -> str:
        return f"Taking server [{server.name}] offline in load balancer."

    def dry_run_bring_online(self, server) -> str:
        return f"Taking server [{server.name}] online in load balancer."


class StickyLoadBalancerExecutor(LoadBalancerExecutor):
    """Per-server rollout for balancers with session affinity.

    Servers are suspended gracefully so sticky sessions can drain first.
    """

    async def bring_offline(self, server, status, settings, token):
        await self._bring_offline(server, status, settings, SuspendMethod.GRACEFUL)

    async def bring_online(self, server, status, settings, token):
        await self._bring_online(server, status, settings)


class RoundRobinLoadBalancerExecutor(LoadBalancerExecutor):
    """Per-server rollout for balancers without session affinity.

    There are no sticky sessions to drain, so servers are suspended
    outright. Constructed with the full fleet.
    """

    def __init__(self, servers, load_balancer):
        super().__init__(load_balancer)
        self.servers = list(servers)

    async def bring_offline(self, server, status, settings, token):
        await self._bring_offline(server, status, settings, SuspendMethod.SUSPEND)

    async def bring_online(self, server, status, settings, token):
        await self._bring_online(server, status, settings)


class DefaultLoadBalancerExecutor(LoadBalancerExecutor):
    """Executor that never changes traffic state. Used for dry runs."""

    async def bring_offline(self, server, status, settings, token):
        pass

    async def bring_online(self, server, status, settings, token):
        pass
