"""Sources scraped with a plain HTTP GET"""

import io

import aiohttp

from aggregator.annotator import annotate_async
from aggregator.models.labels import LabelSet
from aggregator.sources.base import BaseSource


class HTTPSource(BaseSource):
    """Streams ``url`` through the annotator; non-2xx statuses are errors"""

    scrape_errors = BaseSource.scrape_errors + (aiohttp.ClientError,)

    def __init__(self, url: str, labels: LabelSet, timeout: float) -> None:
        super().__init__(labels, timeout)
        self.url = url

    def describe(self) -> str:
        return self.url

    async def scrape(self, session: aiohttp.ClientSession) -> str:
        buffer = io.StringIO()
        async with session.get(
            self.url, timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as response:
            response.raise_for_status()
            async for line in annotate_async(response.content, self.label_text):
                buffer.write(line)
        return buffer.getvalue()


class StateSource(HTTPSource):
    """kube-state-metrics"""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(url, LabelSet({"component": "state"}), timeout)


class NodeSource(HTTPSource):
    """node-exporter on one node, addressed by IP"""

    def __init__(self, address: str, name: str, port: int, timeout: float) -> None:
        super().__init__(
            f"http://{address}:{port}/metrics",
            LabelSet({"component": "node", "node": name}),
            timeout,
        )
        self.address = address
        self.name = name

    def describe(self) -> str:
        return f"node-exporter on {self.name} ({self.url})"
