"""Fetch, annotate and merge every producer into one exposition document.

Stages run in a fixed order: state metrics, node discovery, node-exporter
blocks, cAdvisor blocks. The first failure aborts the whole aggregation;
nothing is returned for a partially scraped cluster.
"""

import asyncio
import logging
import time
from typing import Awaitable, Sequence, TypeVar

import aiohttp

from aggregator.context import AggregatorContext
from aggregator.exceptions import AggregationError, AggregatorError
from aggregator.models.node import NodeIdentity
from aggregator.registry import require_name, resolve
from aggregator.sources.base import BaseSource
from aggregator.sources.cadvisor import CAdvisorSource
from aggregator.sources.http import NodeSource, StateSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _run_stage(stage: str, step: Awaitable[T]) -> T:
    try:
        return await step
    except AggregatorError as exc:
        raise AggregationError(stage, exc) from exc


async def _fetch_all(
    sources: Sequence[BaseSource],
    session: aiohttp.ClientSession,
    concurrency: int,
) -> list[str]:
    """Fetch ``sources`` with at most ``concurrency`` in flight.

    Blocks come back in ``sources`` order. When several fetches fail, the
    error of the earliest source is raised.
    """
    if concurrency <= 1:
        return [await source.fetch(session) for source in sources]

    semaphore = asyncio.Semaphore(concurrency)

    async def bounded(source: BaseSource) -> str:
        async with semaphore:
            return await source.fetch(session)

    results = await asyncio.gather(
        *(bounded(source) for source in sources), return_exceptions=True
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


async def scrape_nodes(
    context: AggregatorContext,
    nodes: Sequence[NodeIdentity],
    session: aiohttp.ClientSession,
) -> list[str]:
    settings = context.settings
    sources = [
        NodeSource(node.ip, require_name(node), settings.node_exporter_port, settings.fetch_timeout)
        for node in nodes
    ]
    return await _fetch_all(sources, session, settings.fetch_concurrency)


async def scrape_cadvisors(
    context: AggregatorContext,
    nodes: Sequence[NodeIdentity],
    session: aiohttp.ClientSession,
) -> list[str]:
    settings = context.settings
    sources = [
        CAdvisorSource(context.core_v1, require_name(node), settings.fetch_timeout)
        for node in nodes
    ]
    return await _fetch_all(sources, session, settings.fetch_concurrency)


async def aggregate(context: AggregatorContext) -> str:
    """Return the merged, labeled exposition text of the whole cluster.

    Raises:
        AggregationError: naming the stage that failed first
    """
    settings = context.settings
    started = time.monotonic()

    async with aiohttp.ClientSession() as session:
        state = StateSource(settings.state_metrics_url, settings.fetch_timeout)
        state_block = await _run_stage("state", state.fetch(session))
        nodes = await _run_stage(
            "resolve", resolve(context.core_v1, context.namespace, settings.node_exporter_service)
        )
        node_blocks = await _run_stage("node", scrape_nodes(context, nodes, session))
        cadvisor_blocks = await _run_stage("cadvisor", scrape_cadvisors(context, nodes, session))

    document = state_block + "\n" + "".join(node_blocks) + "\n" + "".join(cadvisor_blocks)
    logger.info(
        "Aggregated %d node(s): %d bytes in %.3fs",
        len(nodes), len(document), time.monotonic() - started,
    )
    return document
