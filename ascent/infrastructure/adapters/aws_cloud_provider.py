"""
AWS Cloud Provider (Node-Group Registry)

Architectural Intent:
- Implements CloudProviderPort on top of an AutoscalingServicePort
- Owns the mapping from node group id to NodeGroup entity
- Keeps cached desired capacities in sync with the backend through a single
  batched describe call per register_node_groups()/refresh()

Design Decisions:
- The remote call is awaited outside the lock; the lock guards only the
  in-memory map transition, so readers never wait behind network I/O
- threading.Lock rather than asyncio.Lock: readers are plain methods and may
  run on other threads than the event loop
- A failed call leaves the map exactly as it was: every write is prepared
  before entering the critical section and applied as a whole
- Groups the backend does not return are skipped silently on register and
  keep their last-known size on refresh
"""

from __future__ import annotations
import logging
import threading
from typing import Optional

from ascent.domain.entities.node_group import NodeGroup
from ascent.domain.ports.autoscaling_port import AutoscalingServicePort
from ascent.domain.value_objects.auto_scaling_group import AutoScalingGroup

logger = logging.getLogger(__name__)

PROVIDER_NAME = "aws"


class AWSCloudProvider:
    """
    Registry of AWS auto scaling groups backing the cluster.

    Construct it explicitly and inject it into its consumers; there is no
    process-wide instance.
    """

    def __init__(self, service: AutoscalingServicePort) -> None:
        self.service = service
        self._node_groups: dict[str, NodeGroup] = {}
        self._lock = threading.Lock()

    def name(self) -> str:
        return PROVIDER_NAME

    def node_groups(self) -> list[NodeGroup]:
        """Return a snapshot of all registered node groups, in no particular order."""
        with self._lock:
            return list(self._node_groups.values())

    def get_node_group(self, id: str) -> tuple[Optional[NodeGroup], bool]:
        with self._lock:
            node_group = self._node_groups.get(id)
        return node_group, node_group is not None

    async def describe_groups(self, names: list[str]) -> list[AutoScalingGroup]:
        """Issue one describe call for the given names; failures propagate unchanged."""
        return await self.service.describe_auto_scaling_groups(list(names))

    async def register_node_groups(self, *ids: str) -> None:
        """
        Fetch the named groups in one call and register those the backend knows.

        Ids the backend does not return stay unregistered. An empty id list is
        passed to the backend as is.
        """
        requested = list(ids)
        try:
            groups = await self.describe_groups(requested)
        except Exception as e:
            logger.warning("failed to describe node groups %s: %s", requested, e)
            raise

        created: dict[str, NodeGroup] = {}
        for group in groups:
            created[group.name] = NodeGroup(group.name, group, self)

        with self._lock:
            self._node_groups.update(created)

        for group_id in requested:
            if group_id not in created:
                logger.debug("node group %s not found in %s, not registering", group_id, PROVIDER_NAME)
        logger.info("registered %d of %d requested node group(s)", len(created), len(requested))

    async def refresh(self) -> None:
        """
        Re-sync the cached sizes of every currently registered node group.

        Groups missing from the backend's response keep their last-known sizes.
        """
        with self._lock:
            captured = dict(self._node_groups)
        ids = list(captured)

        try:
            groups = await self.describe_groups(ids)
        except Exception as e:
            logger.warning("failed to refresh node groups: %s", e)
            raise

        updated = 0
        with self._lock:
            for group in groups:
                node_group = captured.get(group.name)
                if node_group is None:
                    continue
                # Replaced by a register while the call was in flight: its sizes are newer
                if self._node_groups.get(group.name) is not node_group:
                    logger.debug("node group %s re-registered during refresh, skipping", group.name)
                    continue
                node_group._set_sizes(group)
                updated += 1

        if updated != len(ids):
            logger.debug("refresh updated %d of %d node group(s)", updated, len(ids))
        else:
            logger.debug("refreshed %d node group(s)", updated)
