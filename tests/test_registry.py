"""Tests for node discovery."""

import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from aggregator.exceptions import ProducerLookupError
from aggregator.models.node import NodeIdentity
from aggregator.registry import require_name, resolve
from conftest import make_endpoints


@pytest.mark.asyncio
async def test_resolve_returns_addresses_in_directory_order(core_v1):
    core_v1.read_namespaced_endpoints.return_value = make_endpoints(
        ("10.0.0.2", "worker-2"), ("10.0.0.1", "worker-1")
    )

    nodes = await resolve(core_v1, "monitoring", "node-exporter")

    assert nodes == [
        NodeIdentity(ip="10.0.0.2", name="worker-2"),
        NodeIdentity(ip="10.0.0.1", name="worker-1"),
    ]
    core_v1.read_namespaced_endpoints.assert_called_once_with("node-exporter", "monitoring")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "endpoints",
    [
        client.V1Endpoints(subsets=None),
        client.V1Endpoints(subsets=[]),
        client.V1Endpoints(subsets=[client.V1EndpointSubset(addresses=None)]),
    ],
)
async def test_resolve_without_addresses_is_empty(core_v1, endpoints):
    core_v1.read_namespaced_endpoints.return_value = endpoints

    assert await resolve(core_v1, "monitoring", "node-exporter") == []


@pytest.mark.asyncio
async def test_resolve_wraps_api_errors(core_v1):
    core_v1.read_namespaced_endpoints.side_effect = ApiException(status=404, reason="Not Found")

    with pytest.raises(ProducerLookupError, match="monitoring/node-exporter"):
        await resolve(core_v1, "monitoring", "node-exporter")


def test_lookup_error_is_a_lookup_error():
    assert issubclass(ProducerLookupError, LookupError)


def test_require_name():
    assert require_name(NodeIdentity(ip="10.0.0.1", name="worker-1")) == "worker-1"

    with pytest.raises(ProducerLookupError, match="10.0.0.9 has no node name"):
        require_name(NodeIdentity(ip="10.0.0.9"))


def test_node_identity_json_omits_empty_fields():
    node = NodeIdentity(ip="10.0.0.1", name="worker-1", hostname=None)

    assert node.to_json() == {"ip": "10.0.0.1", "nodeName": "worker-1"}


def test_node_identity_keeps_target_ref():
    address = client.V1EndpointAddress(
        ip="10.0.0.1",
        node_name="worker-1",
        target_ref=client.V1ObjectReference(
            kind="Pod", namespace="monitoring", name="node-exporter-abcde"
        ),
    )

    assert NodeIdentity.from_endpoint_address(address).to_json() == {
        "ip": "10.0.0.1",
        "nodeName": "worker-1",
        "targetRef": {"kind": "Pod", "namespace": "monitoring", "name": "node-exporter-abcde"},
    }
