"""Fleet and run configuration dataclass types."""

import os
from dataclasses import dataclass, field
from enum import Enum

from fleetroll.errors import ConfigurationError

DEFAULT_API_KEY_ENV = "FLEETROLL_LB_API_KEY"


class LoadBalanceState(str, Enum):
    """Traffic state of a server in the load balancer."""

    ONLINE = "online"
    OFFLINE = "offline"


class LoadBalancerMode(str, Enum):
    """Selects which load balancer executor drives the run."""

    STICKY = "sticky"
    ROUND_ROBIN = "round_robin"

    @classmethod
    def parse(cls, value) -> "LoadBalancerMode":
        """Parse a mode name (case-insensitive, '-' or '_')."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ConfigurationError(f"Load balancer mode [{value}] not supported.")


@dataclass
class LoadBalancerState:
    """Per-server load balancer state. Servers are assumed online before a run."""

    current_state: LoadBalanceState = LoadBalanceState.ONLINE
    prevent_deployment: bool = False


@dataclass
class ServerTarget:
    """One fleet member."""

    name: str
    load_balancer_farm: str = ""
    stop_server: bool = False
    address: str = ""  # user@host; defaults to name
    ssh_key: str | None = None
    ssh_port: int = 22
    metadata: dict = field(default_factory=dict)
    load_balancer_state: LoadBalancerState = field(default_factory=LoadBalancerState)

    def __post_init__(self):
        if not self.address:
            self.address = self.name

    @classmethod
    def from_dict(cls, d: dict) -> "ServerTarget":
        """Build a ServerTarget from a fleet file entry."""
        if "name" not in d:
            raise ConfigurationError(f"Server entry is missing 'name': {d}")
        ssh_key = d.get("ssh_key")
        if ssh_key:
            ssh_key = os.path.expanduser(os.path.expandvars(ssh_key))
        return cls(
            name=str(d["name"]),
            load_balancer_farm=str(d.get("farm", "")),
            stop_server=bool(d.get("stop_server", False)),
            address=d.get("address", ""),
            ssh_key=ssh_key,
            ssh_port=int(d.get("ssh_port", 22)),
            metadata=dict(d.get("metadata") or {}),
        )


@dataclass
class LoadBalancerConfig:
    """External load balancer settings."""

    provider: str = ""
    mode: LoadBalancerMode = LoadBalancerMode.STICKY
    api_url: str = ""
    api_key_env: str = DEFAULT_API_KEY_ENV
    timeout: float = 30.0

    @classmethod
    def from_dict(cls, d: dict) -> "LoadBalancerConfig":
        return cls(
            provider=str(d.get("provider", "")),
            mode=LoadBalancerMode.parse(d.get("mode", LoadBalancerMode.STICKY.value)),
            api_url=str(d.get("api_url", "")).rstrip("/"),
            api_key_env=d.get("api_key_env", DEFAULT_API_KEY_ENV),
            timeout=float(d.get("timeout", 30.0)),
        )

    @property
    def api_key(self) -> str:
        return os.environ.get(self.api_key_env, "") if self.api_key_env else ""


@dataclass(frozen=True)
class RunOptions:
    """Partial rollout switches. Both false means a full rolling rollout.

    When both are set, stop_after_marked_server wins.
    """

    stop_after_marked_server: bool = False
    continue_after_marked_server: bool = False


@dataclass(frozen=True)
class RunSettings:
    """Everything a single run needs besides the sequences themselves."""

    servers: list[ServerTarget] = field(default_factory=list)
    load_balancer: LoadBalancerConfig | None = None
    options: RunOptions = field(default_factory=RunOptions)
