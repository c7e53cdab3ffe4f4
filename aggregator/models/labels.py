"""Labels injected into every sample line of one scrape"""

from dataclasses import dataclass, field


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


@dataclass(frozen=True)
class LabelSet:
    """Ordered label name -> value pairs identifying a producer"""

    labels: dict[str, str] = field(default_factory=dict)

    def to_prometheus_labels(self) -> str:
        # Insertion order is kept: component first, then node.
        return ",".join(
            f'{k}="{escape_label_value(v)}"' for k, v in self.labels.items()
        )
