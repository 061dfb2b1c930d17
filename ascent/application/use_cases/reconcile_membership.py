"""
Reconcile Membership Use Case

Architectural Intent:
- Correlates cluster-visible nodes with the cloud instances of their groups
- Produces NodeNotInAutoScalingGroup reports; never removes or drains nodes
- Nodes claiming an unregistered group are skipped: the registry, not the
  cluster, is the authority on which groups exist
"""

import logging
from typing import Iterable

from ascent.domain.errors import NodeNotInAutoScalingGroup
from ascent.domain.ports.cloud_provider_port import CloudProviderPort
from ascent.domain.value_objects.cluster_node import ClusterNode

logger = logging.getLogger(__name__)


class ReconcileMembership:
    def __init__(self, cloud_provider: CloudProviderPort):
        self.cloud_provider = cloud_provider

    async def execute(
        self, nodes: Iterable[ClusterNode]
    ) -> list[NodeNotInAutoScalingGroup]:
        """
        Check each node against the group it claims. Returns one error per
        mismatched node. Backend failures propagate.
        """
        by_group: dict[str, list[ClusterNode]] = {}
        for node in nodes:
            by_group.setdefault(node.node_group, []).append(node)

        mismatches: list[NodeNotInAutoScalingGroup] = []
        for group_id, group_nodes in by_group.items():
            node_group, ok = self.cloud_provider.get_node_group(group_id)
            if not ok:
                logger.debug(
                    "Skipping %d node(s) in unregistered node group %r",
                    len(group_nodes),
                    group_id,
                )
                continue

            # One describe per group, not per node
            provider_ids = set(await node_group.nodes())
            for node in group_nodes:
                if node.provider_id in provider_ids:
                    continue
                err = NodeNotInAutoScalingGroup(
                    node_name=node.name,
                    provider_id=node.provider_id,
                    node_group=group_id,
                )
                logger.warning(
                    "%s", err,
                    extra={"node_group": group_id, "provider_id": node.provider_id},
                )
                mismatches.append(err)

        return mismatches
