"""Load balancer provider registry: configuration name -> factory."""

from fleetroll.errors import ConfigurationError
from fleetroll.loadbalancer.base import DefaultLoadBalancer
from fleetroll.loadbalancer.http import HttpLoadBalancer


def _default_factory(config):
    return DefaultLoadBalancer(mode=config.mode)


_PROVIDERS = {
    "default": _default_factory,
    "none": _default_factory,
    "http": HttpLoadBalancer,
}


def register_provider(name, factory):
    """Register a factory(config) -> LoadBalancer under ``name``."""
    _PROVIDERS[name.lower()] = factory


def available_providers() -> list[str]:
    return sorted(_PROVIDERS)


def get_load_balancer(config):
    """Resolve the balancer for a LoadBalancerConfig.

    No config, or no provider, gives the no-op DefaultLoadBalancer.
    """
    if config is None:
        return DefaultLoadBalancer()
    if not config.provider.strip():
        return DefaultLoadBalancer(mode=config.mode)

    factory = _PROVIDERS.get(config.provider.strip().lower())
    if factory is None:
        available = ", ".join(available_providers())
        raise ConfigurationError(f"Unknown load balancer provider '{config.provider}'. Available providers: {available}")

    load_balancer = factory(config)
    load_balancer.mode = config.mode
    return load_balancer
