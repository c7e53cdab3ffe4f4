"""Node identities discovered from the node-exporter endpoints"""

from dataclasses import dataclass
from typing import Any


def _object_reference(ref: Any) -> dict[str, str] | None:
    if ref is None:
        return None
    fields = {"kind": ref.kind, "namespace": ref.namespace, "name": ref.name, "uid": ref.uid}
    return {k: v for k, v in fields.items() if v}


@dataclass(frozen=True)
class NodeIdentity:
    """One scrape target as listed by the cluster directory"""

    ip: str
    name: str | None = None
    hostname: str | None = None
    target_ref: dict[str, str] | None = None

    @classmethod
    def from_endpoint_address(cls, address: Any) -> "NodeIdentity":
        return cls(
            ip=address.ip,
            name=address.node_name,
            hostname=address.hostname,
            target_ref=_object_reference(address.target_ref),
        )

    def to_json(self) -> dict[str, Any]:
        """EndpointAddress JSON shape; empty fields are omitted."""
        data = {
            "ip": self.ip,
            "hostname": self.hostname,
            "nodeName": self.name,
            "targetRef": self.target_ref,
        }
        return {k: v for k, v in data.items() if v}
