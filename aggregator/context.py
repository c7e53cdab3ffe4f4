"""Runtime context built once at process start"""

import logging
from dataclasses import dataclass, field

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from aggregator.config import KUBECONFIG, NAMESPACE, NAMESPACE_FILE, Settings
from aggregator.exceptions import StartupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatorContext:
    """Read-only state shared by all requests"""

    namespace: str
    core_v1: client.CoreV1Api
    settings: Settings = field(default_factory=Settings)


def read_namespace(path: str) -> str:
    try:
        with open(path, encoding="utf-8") as fp:
            namespace = fp.read().strip()
    except OSError as exc:
        raise StartupError(f"cannot read namespace from {path}: {exc}") from exc
    if not namespace:
        raise StartupError(f"namespace file {path} is empty")
    return namespace


def load_core_v1(kubeconfig: str | None = None) -> client.CoreV1Api:
    """In-cluster service account, or ``kubeconfig`` when given."""
    try:
        if kubeconfig:
            config.load_kube_config(config_file=kubeconfig)
        else:
            config.load_incluster_config()
    except (ConfigException, OSError) as exc:
        raise StartupError(f"cannot load Kubernetes configuration: {exc}") from exc
    return client.CoreV1Api()


def build_context() -> AggregatorContext:
    namespace = NAMESPACE or read_namespace(NAMESPACE_FILE)
    core_v1 = load_core_v1(KUBECONFIG)
    logger.info("Aggregating metrics for namespace %s", namespace)
    return AggregatorContext(namespace=namespace, core_v1=core_v1, settings=Settings())
