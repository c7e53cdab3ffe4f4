"""Cluster Metrics Aggregator - Entrypoint

/metrics   : kube-state-metrics + node-exporter + cAdvisor of every node, labeled
/endpoints : node addresses currently registered for node-exporter
/healthz   : liveness
"""

import asyncio
import logging
import sys

from aiohttp import web

from aggregator.annotator import encode_document
from aggregator.config import LISTEN_PORT, LOG_LEVEL
from aggregator.context import AggregatorContext, build_context
from aggregator.engine import aggregate
from aggregator.exceptions import AggregatorError, StartupError
from aggregator.registry import resolve

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

CONTEXT_KEY = web.AppKey("context", AggregatorContext)


def _error_response(exc: AggregatorError) -> web.Response:
    logger.error("%s", exc)
    return web.Response(status=500, text=str(exc), content_type="text/plain")


async def handle_healthz(request: web.Request) -> web.Response:
    return web.Response(text="ok")


async def handle_metrics(request: web.Request) -> web.Response:
    context = request.app[CONTEXT_KEY]
    try:
        document = await aggregate(context)
    except AggregatorError as exc:
        return _error_response(exc)
    return web.Response(
        body=encode_document(document), content_type="text/plain", charset="utf-8"
    )


async def handle_endpoints(request: web.Request) -> web.Response:
    context = request.app[CONTEXT_KEY]
    try:
        nodes = await resolve(
            context.core_v1, context.namespace, context.settings.node_exporter_service
        )
    except AggregatorError as exc:
        return _error_response(exc)
    return web.json_response([node.to_json() for node in nodes])


def create_app(context: AggregatorContext) -> web.Application:
    app = web.Application()
    app[CONTEXT_KEY] = context
    app.router.add_get("/healthz", handle_healthz)
    app.router.add_get("/metrics", handle_metrics)
    app.router.add_get("/endpoints", handle_endpoints)
    return app


async def main() -> None:
    app = create_app(build_context())

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", LISTEN_PORT)
    await site.start()

    logger.info("Metrics aggregator started on port %d", LISTEN_PORT)
    await asyncio.Event().wait()


def run() -> None:
    try:
        asyncio.run(main())
    except StartupError as exc:
        logger.critical("Startup failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    run()
