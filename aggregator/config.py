"""Aggregator settings"""

import os
from dataclasses import dataclass


LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
LISTEN_PORT: int = int(os.environ.get("LISTEN_PORT", "7878"))

STATE_METRICS_URL: str = os.environ.get(
    "STATE_METRICS_URL", "http://kube-state-metrics:8080/metrics"
)
NODE_EXPORTER_SERVICE: str = os.environ.get("NODE_EXPORTER_SERVICE", "node-exporter")
NODE_EXPORTER_PORT: int = int(os.environ.get("NODE_EXPORTER_PORT", "9100"))

FETCH_TIMEOUT: float = float(os.environ.get("FETCH_TIMEOUT", "30"))
FETCH_CONCURRENCY: int = int(os.environ.get("FETCH_CONCURRENCY", "1"))

NAMESPACE_FILE: str = os.environ.get(
    "NAMESPACE_FILE", "/var/run/secrets/kubernetes.io/serviceaccount/namespace"
)
NAMESPACE: str | None = os.environ.get("NAMESPACE")
KUBECONFIG: str | None = os.environ.get("KUBECONFIG")


@dataclass(frozen=True)
class Settings:
    """Scrape settings shared by every request"""

    state_metrics_url: str = STATE_METRICS_URL
    node_exporter_service: str = NODE_EXPORTER_SERVICE
    node_exporter_port: int = NODE_EXPORTER_PORT
    fetch_timeout: float = FETCH_TIMEOUT
    fetch_concurrency: int = FETCH_CONCURRENCY
