"""Aggregator error taxonomy"""


class AggregatorError(Exception):
    """Base class for every error served back as a 500."""


class StartupError(AggregatorError):
    """Raised when the process cannot build its runtime context."""


class ProducerLookupError(AggregatorError, LookupError):
    """Raised when node discovery fails or returns an unusable entry."""


class FetchError(AggregatorError):
    """Raised when a single producer cannot be scraped."""

    def __init__(self, source: str, cause: BaseException) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"fetching {source} failed: {str(cause) or type(cause).__name__}")


class AggregationError(AggregatorError):
    """Raised when a pipeline stage fails; wraps the first failure seen."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} stage failed: {cause}")
