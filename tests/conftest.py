"""Shared pytest fixtures for all test modules."""

import os
import subprocess
import sys

import pytest
import yaml

from fleetroll.cancellation import CancellationToken
from fleetroll.config.types import LoadBalancerConfig, LoadBalancerMode, RunOptions, RunSettings, ServerTarget
from fleetroll.errors import DeploymentError, LoadBalancerError
from fleetroll.loadbalancer.base import LoadBalancer, SuspendMethod, SuspendResult
from fleetroll.operations.base import Operation
from fleetroll.reporting import StatusReporter

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))


# ── Fakes ──────────────────────────────────────────────────────────


class FakeLoadBalancer(LoadBalancer):
    """Records every balancer call instead of talking to a real one."""

    def __init__(self, mode=LoadBalancerMode.STICKY, fail_on=(), prevent=()):
        self.mode = mode
        self.calls = []
        self.fail_on = set(fail_on)  # {("suspend", "B"), ("resume", "A"), ...}
        self.prevent = set(prevent)  # server names answered with prevent_deployment

    async def suspend(self, server_name, farm, suspend_method=SuspendMethod.SUSPEND):
        self.calls.append(("suspend", server_name, farm, suspend_method))
        if ("suspend", server_name) in self.fail_on:
            raise LoadBalancerError(f"suspend failed for {server_name}")
        return SuspendResult(prevent_deployment=server_name in self.prevent)

    async def resume(self, server_name, farm):
        self.calls.append(("resume", server_name, farm))
        if ("resume", server_name) in self.fail_on:
            raise LoadBalancerError(f"resume failed for {server_name}")

    def call_names(self):
        return [(c[0], c[1]) for c in self.calls]


class RecordingOperation(Operation):
    """Appends (name, server name) to a shared journal when executed."""

    def __init__(self, name, journal, fail_on=(), valid=True, on_execute=None):
        self._name = name
        self.journal = journal
        self.fail_on = set(fail_on)  # server names (None for local) that make it fail
        self.valid = valid
        self.on_execute = on_execute

    @property
    def name(self):
        return self._name

    async def execute(self, server, status, settings, token):
        server_name = server.name if server is not None else None
        self.journal.append((self._name, server_name))
        if self.on_execute is not None:
            self.on_execute()
        if server_name in self.fail_on:
            raise DeploymentError(f"{self._name} failed on {server_name}", operation=self._name, server=server_name)

    def dry_run(self):
        return f"would run {self._name}"

    def is_valid(self, notification):
        if not self.valid:
            notification.add_error(f"{self._name} is invalid")
        return self.valid


# ── Unit-test fixtures ──────────────────────────────────────────────


@pytest.fixture
def journal():
    return []


@pytest.fixture
def make_op(journal):
    """Factory for RecordingOperation sharing the test's journal."""

    def _make(name, **kwargs):
        return RecordingOperation(name, journal, **kwargs)

    return _make


@pytest.fixture
def make_servers():
    """Factory: make_servers("A", "B", marked="B") -> list[ServerTarget]."""

    def _make(*names, marked=None, farm="web"):
        return [ServerTarget(name=n, load_balancer_farm=farm, stop_server=(n == marked)) for n in names]

    return _make


@pytest.fixture
def make_settings():
    """Factory for RunSettings; ``lb=True`` adds a load balancer config."""

    def _make(servers, lb=True, stop=False, cont=False, mode=LoadBalancerMode.STICKY):
        return RunSettings(
            servers=servers,
            load_balancer=LoadBalancerConfig(provider="fake", mode=mode) if lb else None,
            options=RunOptions(stop_after_marked_server=stop, continue_after_marked_server=cont),
        )

    return _make


@pytest.fixture
def make_lb():
    """Factory for FakeLoadBalancer with failure/prevent knobs."""

    def _make(**kwargs):
        return FakeLoadBalancer(**kwargs)

    return _make


@pytest.fixture
def fake_lb(make_lb):
    return make_lb()


@pytest.fixture
def status():
    return StatusReporter()


@pytest.fixture
def token():
    return CancellationToken()


# ── CLI fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def run_cli():
    """Return a callable that invokes the fleetroll CLI as a subprocess."""

    def _run(*args):
        result = subprocess.run(
            [sys.executable, "-m", "fleetroll.fleetroll", *args],
            capture_output=True,
            text=True,
            cwd=PROJECT_ROOT,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


@pytest.fixture
def write_yaml(tmp_path):
    """Write a dict to a YAML file under tmp_path and return its path."""

    def _write(name, data):
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.dump(data, f)
        return str(path)

    return _write
