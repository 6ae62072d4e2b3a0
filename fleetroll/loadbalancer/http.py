"""Generic REST load balancer provider over httpx."""

import logging

import httpx

from fleetroll.errors import ConfigurationError, LoadBalancerError
from fleetroll.loadbalancer.base import LoadBalancer, SuspendMethod, SuspendResult

logger = logging.getLogger(__name__)


class HttpLoadBalancer(LoadBalancer):
    """Talks to a balancer exposing a small REST API.

    POST {api_url}/farms/{farm}/servers/{name}/suspend  body: {"method": ...}
    POST {api_url}/farms/{farm}/servers/{name}/resume

    A suspend response may carry ``{"prevent_deployment": true}`` to keep
    the server out of the deployment.
    """

    def __init__(self, config, transport=None):
        if not config.api_url:
            raise ConfigurationError("Load balancer provider 'http' requires 'api_url'")
        self.config = config
        self.mode = config.mode
        self._transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        api_key = self.config.api_key
        if api_key:
            headers["X-API-Key"] = api_key
        return headers

    async def _post(self, path, payload):
        url = f"{self.config.api_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.config.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._headers())
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LoadBalancerError(f"Load balancer returned {e.response.status_code} for POST {url}") from e
        except httpx.HTTPError as e:
            raise LoadBalancerError(f"Load balancer request failed for POST {url}: {e}") from e
        return resp

    async def suspend(self, server_name, farm, suspend_method=SuspendMethod.SUSPEND) -> SuspendResult | None:
        logger.debug(f"Suspending {server_name} in farm {farm} ({suspend_method.value})")
        resp = await self._post(f"/farms/{farm}/servers/{server_name}/suspend", {"method": suspend_method.value})
        if not resp.content:
            return SuspendResult()
        try:
            body = resp.json()
        except ValueError:
            return SuspendResult()
        if not isinstance(body, dict):
            return SuspendResult()
        return SuspendResult(prevent_deployment=bool(body.get("prevent_deployment", False)))

    async def resume(self, server_name, farm):
        logger.debug(f"Resuming {server_name} in farm {farm}")
        await self._post(f"/farms/{farm}/servers/{server_name}/resume", {})
