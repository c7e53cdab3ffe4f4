"""Abstract base for scrape sources"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod

import aiohttp

from aggregator.exceptions import FetchError
from aggregator.models.labels import LabelSet

logger = logging.getLogger(__name__)


class BaseSource(ABC):
    """One producer of exposition text.

    Subclasses open the producer's stream and feed it through the annotator
    with ``label_text``; :meth:`fetch` times the scrape and turns any of
    ``scrape_errors`` into a :class:`FetchError`. Partial output of a failed
    scrape is dropped.
    """

    scrape_errors: tuple[type[BaseException], ...] = (
        OSError,
        ValueError,
        asyncio.TimeoutError,
    )

    def __init__(self, labels: LabelSet, timeout: float) -> None:
        self.labels = labels
        self.timeout = timeout
        self.label_text = labels.to_prometheus_labels()

    @abstractmethod
    def describe(self) -> str:
        """Human-readable identity used in logs and error messages"""
        ...

    @abstractmethod
    async def scrape(self, session: aiohttp.ClientSession) -> str:
        """Return the annotated exposition text of this producer"""
        ...

    async def fetch(self, session: aiohttp.ClientSession) -> str:
        started = time.monotonic()
        try:
            text = await self.scrape(session)
        except self.scrape_errors as exc:
            logger.warning("Scrape of %s failed: %s", self.describe(), exc)
            raise FetchError(self.describe(), exc) from exc
        logger.debug(
            "Scraped %s: %d bytes in %.3fs",
            self.describe(), len(text), time.monotonic() - started,
        )
        return text
