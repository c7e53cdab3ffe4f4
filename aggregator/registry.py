"""Node discovery through the node-exporter Endpoints object"""

import asyncio
import logging

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from aggregator.exceptions import ProducerLookupError
from aggregator.models.node import NodeIdentity

logger = logging.getLogger(__name__)


async def resolve(
    core_v1: client.CoreV1Api, namespace: str, service: str
) -> list[NodeIdentity]:
    """Return the addresses registered for ``service``, in directory order.

    Only the first endpoint subset is read. One API round trip per call;
    no caching and no retry.
    """
    try:
        endpoints = await asyncio.to_thread(
            core_v1.read_namespaced_endpoints, service, namespace
        )
    except (ApiException, HTTPError, OSError) as exc:
        raise ProducerLookupError(
            f"looking up endpoints {namespace}/{service} failed: {exc}"
        ) from exc

    subsets = endpoints.subsets or []
    addresses = (subsets[0].addresses or []) if subsets else []
    nodes = [NodeIdentity.from_endpoint_address(a) for a in addresses]
    logger.debug("Resolved %d node(s) from %s/%s", len(nodes), namespace, service)
    return nodes


def require_name(node: NodeIdentity) -> str:
    """Return the node name, failing the lookup if the directory omitted it."""
    if not node.name:
        raise ProducerLookupError(f"endpoint address {node.ip} has no node name")
    return node.name
