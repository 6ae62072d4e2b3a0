"""Fleet and plan file loading."""

import logging

import yaml

from fleetroll.config.types import LoadBalancerConfig, RunOptions, RunSettings, ServerTarget
from fleetroll.errors import ConfigurationError
from fleetroll.operations.commands import LocalCommandOperation, RemoteCommandOperation
from fleetroll.redact import register_secret_env

logger = logging.getLogger(__name__)


def load_yaml(path) -> dict:
    """Load a YAML mapping from ``path``."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Config file '{path}' not found.") from None
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing YAML in '{path}': {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must contain a mapping at the top level.")
    return data


def settings_from_dict(config: dict, options: RunOptions | None = None) -> RunSettings:
    """Build RunSettings from a parsed fleet config."""
    entries = config.get("servers", [])
    if not isinstance(entries, list):
        raise ConfigurationError("'servers' must be a list.")

    servers = [ServerTarget.from_dict(entry) for entry in entries]
    seen = set()
    for server in servers:
        if server.name in seen:
            raise ConfigurationError(f"Duplicate server name '{server.name}'.")
        seen.add(server.name)

    lb_dict = config.get("load_balancer")
    load_balancer = LoadBalancerConfig.from_dict(lb_dict) if lb_dict else None
    if load_balancer is not None:
        register_secret_env(load_balancer.api_key_env)

    return RunSettings(servers=servers, load_balancer=load_balancer, options=options or RunOptions())


def load_settings(path, options: RunOptions | None = None) -> RunSettings:
    """Load a fleet file into RunSettings."""
    return settings_from_dict(load_yaml(path), options)


# ── plan files ─────────────────────────────────────────────────────


def _metadata_predicate(expected: dict):
    def predicate(server):
        metadata = server.metadata if server is not None else {}
        return all(metadata.get(k) == v for k, v in expected.items())

    predicate.description = ", ".join(f"{k}={v}" for k, v in expected.items())
    return predicate


def _populate(sequence, operations, where):
    if not isinstance(operations, list):
        raise ConfigurationError(f"{where}: 'operations' must be a list.")

    for i, entry in enumerate(operations):
        label = f"{where}[{i}]"
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{label}: operation must be a mapping, got {entry!r}")

        if "run" in entry:
            sequence.add(LocalCommandOperation(entry["run"], name=entry.get("name"), timeout=entry.get("timeout")))
        elif "ssh" in entry:
            sequence.add(RemoteCommandOperation(entry["ssh"], name=entry.get("name"), timeout=entry.get("timeout")))
        elif "operations" in entry:
            name = entry.get("name", label)
            if "when" in entry:
                child = sequence.new_conditional_composite_sequence(condition_script=entry["when"], name=name)
            elif "when_metadata" in entry:
                child = sequence.new_conditional_composite_sequence(
                    condition=_metadata_predicate(entry["when_metadata"]), name=name
                )
            else:
                child = sequence.new_composite_sequence(name)
            _populate(child, entry["operations"], f"{label}.{name}")
        else:
            raise ConfigurationError(f"{label}: expected one of 'run', 'ssh' or 'operations'")


def _require_mapping(entry, label):
    if not isinstance(entry, dict):
        raise ConfigurationError(f"{label}: sequence must be a mapping, got {entry!r}")


def plan_from_dict(plan: dict, manager):
    """Register the plan's local and remote sequences on ``manager``."""
    for i, entry in enumerate(plan.get("local") or []):
        _require_mapping(entry, f"local[{i}]")
        name = entry.get("name", f"local[{i}]")
        _populate(manager.new_local_sequence(name), entry.get("operations", []), name)

    for i, entry in enumerate(plan.get("remote") or []):
        _require_mapping(entry, f"remote[{i}]")
        name = entry.get("name", f"remote[{i}]")
        sequence = manager.new_remote_sequence(name, parallel=bool(entry.get("parallel", False)))
        _populate(sequence, entry.get("operations", []), name)

    logger.debug(
        f"Loaded plan: {len(manager.local_sequences)} local, {len(manager.remote_sequences)} remote sequence(s)"
    )
    return manager


def load_plan(path, manager):
    """Load a plan file into an ExecutionSequenceManager."""
    return plan_from_dict(load_yaml(path), manager)
