"""Unit tests for load balancer executors: server order and online/offline transitions."""

import pytest

from fleetroll.config.types import LoadBalanceState, LoadBalancerMode
from fleetroll.errors import ConfigurationError, LoadBalancerError
from fleetroll.loadbalancer.base import SuspendMethod
from fleetroll.loadbalancer.executor import (
    DefaultLoadBalancerExecutor,
    RoundRobinLoadBalancerExecutor,
    StickyLoadBalancerExecutor,
)

OFFLINE = LoadBalanceState.OFFLINE
ONLINE = LoadBalanceState.ONLINE


def _names(servers):
    return [s.name for s in servers]


# ── get_server_execution_order ──────────────────────────────────────


@pytest.mark.parametrize("count", [1, 2, 5])
async def test_default_order_is_every_server_once_in_order(count, make_servers, make_settings, fake_lb, status, token):
    servers = make_servers(*[f"s{i}" for i in range(count)])
    executor = StickyLoadBalancerExecutor(fake_lb)

    order = await executor.get_server_execution_order(status, make_settings(servers), token)

    assert _names(order) == _names(servers)
    assert fake_lb.calls == []


async def test_stop_after_marked_server_without_mark_uses_first(make_servers, make_settings, fake_lb, status, token):
    servers = make_servers("A", "B", "C")
    executor = StickyLoadBalancerExecutor(fake_lb)

    order = await executor.get_server_execution_order(status, make_settings(servers, stop=True), token)

    assert _names(order) == ["A"]


async def test_stop_after_marked_server_returns_marked(make_servers, make_settings, fake_lb, status, token):
    servers = make_servers("A", "B", "C", marked="C")
    executor = StickyLoadBalancerExecutor(fake_lb)

    order = await executor.get_server_execution_order(status, make_settings(servers, stop=True), token)

    assert _names(order) == ["C"]


async def test_continue_after_marked_server_brings_marked_online_and_excludes_it(
    make_servers, make_settings, fake_lb, status, token
):
    servers = make_servers("A", "B", "C", marked="B")
    servers[1].load_balancer_state.current_state = OFFLINE  # left offline by the stopped run
    executor = StickyLoadBalancerExecutor(fake_lb)

    order = await executor.get_server_execution_order(status, make_settings(servers, cont=True), token)

    assert _names(order) == ["A", "C"]
    assert fake_lb.call_names() == [("resume", "B")]
    assert servers[1].load_balancer_state.current_state == ONLINE


async def test_continue_after_marked_server_single_server_gives_empty_order(
    make_servers, make_settings, fake_lb, status, token
):
    servers = make_servers("A")
    servers[0].load_balancer_state.current_state = OFFLINE
    executor = StickyLoadBalancerExecutor(fake_lb)

    order = await executor.get_server_execution_order(status, make_settings(servers, cont=True), token)

    assert order == []
    assert servers[0].load_balancer_state.current_state == ONLINE


async def test_stop_takes_precedence_over_continue(make_servers, make_settings, fake_lb, status, token):
    servers = make_servers("A", "B", "C", marked="B")
    executor = StickyLoadBalancerExecutor(fake_lb)

    order = await executor.get_server_execution_order(status, make_settings(servers, stop=True, cont=True), token)

    assert _names(order) == ["B"]
    assert fake_lb.calls == []


async def test_more_than_one_marked_server_is_a_configuration_error(make_servers, make_settings, fake_lb, status, token):
    servers = make_servers("A", "B")
    for s in servers:
        s.stop_server = True
    executor = StickyLoadBalancerExecutor(fake_lb)

    with pytest.raises(ConfigurationError, match="A, B"):
        await executor.get_server_execution_order(status, make_settings(servers, stop=True), token)


@pytest.mark.parametrize("stop,cont", [(False, False), (True, False), (False, True)])
async def test_empty_fleet_gives_empty_order(stop, cont, make_settings, fake_lb, status, token):
    executor = StickyLoadBalancerExecutor(fake_lb)
    order = await executor.get_server_execution_order(status, make_settings([], stop=stop, cont=cont), token)
    assert order == []


# ── transitions ─────────────────────────────────────────────────────


async def test_bring_offline_twice_makes_one_call(make_servers, make_settings, fake_lb, status, token):
    server = make_servers("A")[0]
    settings = make_settings([server])
    executor = StickyLoadBalancerExecutor(fake_lb)

    await executor.bring_offline(server, status, settings, token)
    await executor.bring_offline(server, status, settings, token)

    assert fake_lb.calls == [("suspend", "A", "web", SuspendMethod.GRACEFUL)]
    assert server.load_balancer_state.current_state == OFFLINE


async def test_bring_online_twice_makes_one_call(make_servers, make_settings, fake_lb, status, token):
    server = make_servers("A")[0]
    settings = make_settings([server])
    executor = StickyLoadBalancerExecutor(fake_lb)
    await executor.bring_offline(server, status, settings, token)

    await executor.bring_online(server, status, settings, token)
    await executor.bring_online(server, status, settings, token)

    assert fake_lb.call_names() == [("suspend", "A"), ("resume", "A")]
    assert server.load_balancer_state.current_state == ONLINE


async def test_bring_online_when_already_online_is_noop(make_servers, make_settings, fake_lb, status, token):
    server = make_servers("A")[0]
    await StickyLoadBalancerExecutor(fake_lb).bring_online(server, status, make_settings([server]), token)
    assert fake_lb.calls == []


async def test_no_load_balancer_configured_makes_no_calls_and_keeps_state(
    make_servers, make_settings, fake_lb, status, token
):
    server = make_servers("A")[0]
    settings = make_settings([server], lb=False)
    executor = StickyLoadBalancerExecutor(fake_lb)

    await executor.bring_offline(server, status, settings, token)
    assert server.load_balancer_state.current_state == ONLINE
    server.load_balancer_state.current_state = OFFLINE
    await executor.bring_online(server, status, settings, token)

    assert fake_lb.calls == []
    assert server.load_balancer_state.current_state == OFFLINE


async def test_failed_suspend_leaves_state_unchanged(make_servers, make_settings, make_lb, status, token):
    server = make_servers("A")[0]
    lb = make_lb(fail_on={("suspend", "A")})

    with pytest.raises(LoadBalancerError):
        await StickyLoadBalancerExecutor(lb).bring_offline(server, status, make_settings([server]), token)
    assert server.load_balancer_state.current_state == ONLINE


async def test_suspend_result_can_prevent_deployment(make_servers, make_settings, make_lb, status, token):
    server = make_servers("A")[0]
    lb = make_lb(prevent={"A"})

    await StickyLoadBalancerExecutor(lb).bring_offline(server, status, make_settings([server]), token)

    assert server.load_balancer_state.prevent_deployment is True
    assert server.load_balancer_state.current_state == OFFLINE


async def test_transitions_are_reported_as_sections(make_servers, make_settings, fake_lb, status, token):
    server = make_servers("A")[0]
    settings = make_settings([server])
    executor = StickyLoadBalancerExecutor(fake_lb)

    await executor.bring_offline(server, status, settings, token)
    await executor.bring_online(server, status, settings, token)

    assert status.names() == [
        "Taking server [A] offline in load balancer.",
        "Taking server [A] online in load balancer.",
    ]


# ── round robin ─────────────────────────────────────────────────────


async def test_round_robin_transitions_only_touch_the_given_server(make_servers, make_settings, fake_lb, status, token):
    servers = make_servers("A", "B", "C", "D")
    settings = make_settings(servers, mode=LoadBalancerMode.ROUND_ROBIN)
    executor = RoundRobinLoadBalancerExecutor(servers, fake_lb)
    a, b = servers[0], servers[1]

    await executor.bring_offline(a, status, settings, token)
    assert fake_lb.call_names() == [("suspend", "A")]
    assert b.load_balancer_state.current_state == ONLINE

    await executor.bring_online(a, status, settings, token)
    assert fake_lb.call_names() == [("suspend", "A"), ("resume", "A")]
    assert a.load_balancer_state.current_state == ONLINE


async def test_round_robin_suspends_without_draining(make_servers, make_settings, fake_lb, status, token):
    server = make_servers("A")[0]
    executor = RoundRobinLoadBalancerExecutor([server], fake_lb)

    await executor.bring_offline(server, status, make_settings([server], mode=LoadBalancerMode.ROUND_ROBIN), token)

    assert fake_lb.calls == [("suspend", "A", "web", SuspendMethod.SUSPEND)]


async def test_round_robin_transitions_are_idempotent(make_servers, make_settings, fake_lb, status, token):
    servers = make_servers("A", "B")
    settings = make_settings(servers, mode=LoadBalancerMode.ROUND_ROBIN)
    executor = RoundRobinLoadBalancerExecutor(servers, fake_lb)

    for _ in range(2):
        await executor.bring_offline(servers[1], status, settings, token)
    for _ in range(2):
        await executor.bring_online(servers[1], status, settings, token)

    assert fake_lb.call_names() == [("suspend", "B"), ("resume", "B")]


async def test_round_robin_order_matches_base(make_servers, make_settings, fake_lb, status, token):
    servers = make_servers("A", "B", "C", marked="B")
    executor = RoundRobinLoadBalancerExecutor(servers, fake_lb)

    full = await executor.get_server_execution_order(status, make_settings(servers), token)
    stop = await executor.get_server_execution_order(status, make_settings(servers, stop=True), token)

    assert _names(full) == ["A", "B", "C"]
    assert _names(stop) == ["B"]


# ── default executor / dry run text ─────────────────────────────────


async def test_default_executor_never_calls_balancer(make_servers, make_settings, fake_lb, status, token):
    server = make_servers("A")[0]
    settings = make_settings([server])
    executor = DefaultLoadBalancerExecutor(fake_lb)

    await executor.bring_offline(server, status, settings, token)
    await executor.bring_online(server, status, settings, token)

    assert fake_lb.calls == []
    assert server.load_balancer_state.current_state == ONLINE


def test_dry_run_text_has_no_side_effects(make_servers, fake_lb):
    server = make_servers("web01")[0]
    executor = StickyLoadBalancerExecutor(fake_lb)

    assert executor.dry_run_bring_offline(server) == "Taking server [web01] offline in load balancer."
    assert executor.dry_run_bring_online(server) == "Taking server [web01] online in load balancer."
    assert fake_lb.calls == []
    assert server.load_balancer_state.current_state == ONLINE
