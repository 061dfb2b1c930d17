"""
Cloud Provider Port

Architectural Intent:
- Read and sync surface of the node-group registry, consumed by the scaling
  decision engine and by membership reconciliation
- Implemented by AWSCloudProvider

Design Decisions:
- Uses Protocol for structural typing (no inheritance needed)
- Lookup absence is a boolean result, not an error
"""

from typing import Optional, Protocol, runtime_checkable

from ascent.domain.value_objects.cluster_node import ClusterNode


@runtime_checkable
class NodeGroupPort(Protocol):
    """A single cloud scaling group tracked by a registry."""

    @property
    def id(self) -> str:
        ...

    @property
    def target_size(self) -> int:
        ...

    async def nodes(self) -> list[str]:
        """Provider IDs of the group's current instances."""
        ...

    async def belongs(self, node: ClusterNode) -> None:
        """Raise NodeNotInAutoScalingGroup if the node is not in this group."""
        ...


@runtime_checkable
class CloudProviderPort(Protocol):
    """Port for the node-group registry."""

    def name(self) -> str:
        ...

    def node_groups(self) -> list[NodeGroupPort]:
        """Snapshot of all registered node groups."""
        ...

    def get_node_group(self, id: str) -> tuple[Optional[NodeGroupPort], bool]:
        ...

    async def register_node_groups(self, *ids: str) -> None:
        ...

    async def refresh(self) -> None:
        ...
