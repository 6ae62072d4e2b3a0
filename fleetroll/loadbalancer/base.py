"""External load balancer interface and the no-op default."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from fleetroll.config.types import LoadBalancerMode


class SuspendMethod(str, Enum):
    """How the balancer takes a server out of traffic."""

    GRACEFUL = "graceful"  # stop new sessions, let existing ones drain
    SUSPEND = "suspend"
    SUSPEND_CLEAR_CONNECTIONS = "suspend_clear_connections"


@dataclass
class SuspendResult:
    """Balancer answer to a suspend request."""

    # e.g. the server is already being drained/serviced elsewhere
    prevent_deployment: bool = False


class LoadBalancer(ABC):
    """External balancer seam. Failures raise LoadBalancerError."""

    mode: LoadBalancerMode = LoadBalancerMode.STICKY

    @abstractmethod
    async def suspend(self, server_name, farm, suspend_method=SuspendMethod.SUSPEND) -> SuspendResult | None:
        pass

    @abstractmethod
    async def resume(self, server_name, farm):
        pass


class DefaultLoadBalancer(LoadBalancer):
    """Balancer used when none is configured. Never talks to anything."""

    def __init__(self, mode=LoadBalancerMode.STICKY):
        self.mode = mode

    async def suspend(self, server_name, farm, suspend_method=SuspendMethod.SUSPEND) -> SuspendResult | None:
        return None

    async def resume(self, server_name, farm):
        pass
