"""Fleet configuration: types and YAML loading."""

from fleetroll.config.types import (
    LoadBalanceState,
    LoadBalancerConfig,
    LoadBalancerMode,
    LoadBalancerState,
    RunOptions,
    RunSettings,
    ServerTarget,
)
from fleetroll.config.loader import load_plan, load_settings, plan_from_dict, settings_from_dict

__all__ = [
    "LoadBalanceState",
    "LoadBalancerConfig",
    "LoadBalancerMode",
    "LoadBalancerState",
    "RunOptions",
    "RunSettings",
    "ServerTarget",
    "load_plan",
    "load_settings",
    "plan_from_dict",
    "settings_from_dict",
]
