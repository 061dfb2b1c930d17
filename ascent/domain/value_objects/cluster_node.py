"""
Cluster Node Value Object

Architectural Intent:
- Minimal view of a cluster-visible node used for membership checks
- Carries the node group the cluster believes the node belongs to
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClusterNode:
    """
    Value Object representing a node as the cluster sees it.
    """
    name: str
    provider_id: str
    node_group: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Cluster node name cannot be empty")

    def __str__(self) -> str:
        return f"{self.name} ({self.provider_id})"
