"""cAdvisor metrics read through the API server's node proxy"""

import asyncio
import io

import aiohttp
from kubernetes import client
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from aggregator.annotator import annotate
from aggregator.models.labels import LabelSet
from aggregator.sources.base import BaseSource

CADVISOR_PATH = "metrics/cadvisor"


class CAdvisorSource(BaseSource):
    """cAdvisor of one node, proxied by the control plane.

    Unlike the plain HTTP sources this goes through the cluster API
    credentials, so the blocking client call runs in a worker thread.
    """

    scrape_errors = BaseSource.scrape_errors + (ApiException, HTTPError)

    def __init__(self, core_v1: client.CoreV1Api, name: str, timeout: float) -> None:
        super().__init__(LabelSet({"component": "cadvisor", "node": name}), timeout)
        self.core_v1 = core_v1
        self.name = name

    def describe(self) -> str:
        return f"cadvisor on {self.name} (/api/v1/nodes/{self.name}/proxy/{CADVISOR_PATH})"

    async def scrape(self, session: aiohttp.ClientSession) -> str:
        return await asyncio.to_thread(self._scrape_blocking)

    def _scrape_blocking(self) -> str:
        response = self.core_v1.connect_get_node_proxy_with_path(
            self.name,
            CADVISOR_PATH,
            _preload_content=False,
            _request_timeout=self.timeout,
        )
        buffer = io.StringIO()
        try:
            for line in annotate(response, self.label_text):
                buffer.write(line)
        finally:
            response.release_conn()
        return buffer.getvalue()
