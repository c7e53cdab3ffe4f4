"""Shared fixtures: a fake producer server and a mocked Kubernetes API."""

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from kubernetes import client

from aggregator.config import Settings
from aggregator.context import AggregatorContext

STATE_METRICS = """# HELP kube_node_info Information about a cluster node.
# TYPE kube_node_info gauge
kube_node_info{node="worker-1"} 1
"""

NODE_METRICS = """# HELP node_load1 1m load average.
# TYPE node_load1 gauge
node_load1 0.42
node_cpu_seconds_total{cpu="0",mode="idle"} 123.5
"""

CADVISOR_METRICS = """# TYPE container_memory_rss gauge
container_memory_rss{container="app",pod="web-0"} 1024
machine_cpu_cores 4
"""


class FakeProxyResponse:
    """Stands in for the urllib3 response returned with _preload_content=False"""

    def __init__(self, body: str) -> None:
        self.lines = body.encode("utf-8").splitlines(keepends=True)
        self.released = False

    def __iter__(self):
        return iter(self.lines)

    def release_conn(self) -> None:
        self.released = True


def make_endpoints(*addresses: tuple[str, str | None]) -> client.V1Endpoints:
    subset = client.V1EndpointSubset(
        addresses=[client.V1EndpointAddress(ip=ip, node_name=name) for ip, name in addresses]
    )
    return client.V1Endpoints(subsets=[subset])


@pytest.fixture
def core_v1():
    api = MagicMock(spec=client.CoreV1Api)
    api.read_namespaced_endpoints.return_value = make_endpoints()
    api.connect_get_node_proxy_with_path.side_effect = (
        lambda name, path, **kwargs: FakeProxyResponse(CADVISOR_METRICS)
    )
    return api


@pytest_asyncio.fixture
async def producer():
    """HTTP server playing kube-state-metrics and node-exporter.

    ``server.responses`` maps a path to ``(status, body)``.
    """
    responses = {
        "/state": (200, STATE_METRICS),
        "/metrics": (200, NODE_METRICS),
    }

    async def handler(request: web.Request) -> web.Response:
        status, body = responses[request.path]
        if isinstance(body, bytes):
            return web.Response(status=status, body=body)
        return web.Response(status=status, text=body)

    app = web.Application()
    app.router.add_get("/{tail:.*}", handler)
    async with TestServer(app) as server:
        server.responses = responses
        yield server


@pytest.fixture
def make_context(core_v1):
    def _make(server=None, **overrides) -> AggregatorContext:
        values = {"fetch_timeout": 5.0}
        if server is not None:
            values["state_metrics_url"] = str(server.make_url("/state"))
            values["node_exporter_port"] = server.port
        values.update(overrides)
        return AggregatorContext(namespace="monitoring", core_v1=core_v1, settings=Settings(**values))

    return _make
