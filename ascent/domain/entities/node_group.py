"""
Node Group Entity

Architectural Intent:
- Entity (identity by id) for one cloud scaling group tracked by a registry
- Caches the backend's desired capacity; the cache is only ever written by
  the owning registry during a successful register/refresh cycle
- Holds a non-owning handle to its registry for group-scoped remote calls

Design Decisions:
- The owner is held through weakref.ref so an entity never extends the
  registry's lifetime
- Size mutation goes through _set_sizes(), which is private to the registry
- Entities carry no lock; the registry serializes every write
"""

from __future__ import annotations
import logging
import weakref
from typing import TYPE_CHECKING, Optional

from ascent.domain.errors import CloudProviderError, NodeNotInAutoScalingGroup
from ascent.domain.value_objects.auto_scaling_group import AutoScalingGroup
from ascent.domain.value_objects.cluster_node import ClusterNode
from ascent.domain.value_objects.provider_id import provider_id_for

if TYPE_CHECKING:
    from ascent.infrastructure.adapters.aws_cloud_provider import AWSCloudProvider

logger = logging.getLogger(__name__)


class NodeGroup:
    """A cloud scaling group and its last-synchronized sizes."""

    def __init__(
        self,
        id: str,
        group: AutoScalingGroup,
        owner: Optional[AWSCloudProvider] = None,
    ) -> None:
        self._id = id
        self._owner = weakref.ref(owner) if owner is not None else None
        self._target_size = 0
        self._min_size = 0
        self._max_size = 0
        self._set_sizes(group)

    @property
    def id(self) -> str:
        return self._id

    @property
    def target_size(self) -> int:
        """Desired capacity as of the last successful register/refresh."""
        return self._target_size

    @property
    def min_size(self) -> int:
        return self._min_size

    @property
    def max_size(self) -> int:
        return self._max_size

    def _set_sizes(self, group: AutoScalingGroup) -> None:
        self._target_size = group.desired_capacity
        self._min_size = group.min_size
        self._max_size = group.max_size

    def _get_owner(self) -> AWSCloudProvider:
        owner = self._owner() if self._owner is not None else None
        if owner is None:
            raise CloudProviderError(f"node group {self._id} has no cloud provider")
        return owner

    async def nodes(self) -> list[str]:
        """
        Return the provider IDs of the group's current instances.

        Issues one describe call scoped to this group. Cached sizes are not
        touched; use the registry's refresh() for that.
        """
        owner = self._get_owner()
        groups = await owner.describe_groups([self._id])
        provider_ids: list[str] = []
        for group in groups:
            if group.name != self._id:
                continue
            provider_ids.extend(provider_id_for(inst) for inst in group.instances)
        logger.debug("node group %s has %d instance(s)", self._id, len(provider_ids))
        return provider_ids

    async def belongs(self, node: ClusterNode) -> None:
        """Raise NodeNotInAutoScalingGroup if the node is not an instance of this group."""
        if node.provider_id not in await self.nodes():
            raise NodeNotInAutoScalingGroup(
                node_name=node.name,
                provider_id=node.provider_id,
                node_group=self._id,
            )

    def __repr__(self) -> str:
        return f"NodeGroup(id={self._id!r}, target_size={self._target_size})"
