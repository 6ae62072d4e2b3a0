"""Load balancer providers and executors."""

from fleetroll.loadbalancer.base import DefaultLoadBalancer, LoadBalancer, SuspendMethod, SuspendResult
from fleetroll.loadbalancer.executor import (
    DefaultLoadBalancerExecutor,
    LoadBalancerExecutor,
    RoundRobinLoadBalancerExecutor,
    StickyLoadBalancerExecutor,
)
from fleetroll.loadbalancer.registry import get_load_balancer, register_provider

__all__ = [
    "DefaultLoadBalancer",
    "LoadBalancer",
    "SuspendMethod",
    "SuspendResult",
    "DefaultLoadBalancerExecutor",
    "LoadBalancerExecutor",
    "RoundRobinLoadBalancerExecutor",
    "StickyLoadBalancerExecutor",
    "get_load_balancer",
    "register_provider",
]
