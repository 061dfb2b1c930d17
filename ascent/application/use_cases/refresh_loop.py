"""
Refresh Loop Use Case

Architectural Intent:
- Periodic driver that keeps the registry's cached sizes in sync
- Registration is retried on every tick until all configured groups are known
- Backend failures are logged and the loop continues; retry policy lives here,
  not in the registry
"""

import asyncio
import logging
from typing import Optional, Sequence

from ascent.domain.ports.cloud_provider_port import CloudProviderPort

logger = logging.getLogger(__name__)


class RefreshLoop:
    def __init__(
        self,
        cloud_provider: CloudProviderPort,
        node_groups: Sequence[str] = (),
        interval_seconds: int = 60,
    ):
        self.cloud_provider = cloud_provider
        self.node_groups = tuple(node_groups)
        self.interval_seconds = interval_seconds

    async def tick(self, node_groups: Optional[Sequence[str]] = None) -> bool:
        """
        Run one sync cycle. Returns True if the cycle completed without error.

        Groups named in node_groups (default: the configured groups) but not
        yet registered are (re)registered first; cluster configuration may
        reference groups that do not exist yet.
        """
        if node_groups is None:
            node_groups = self.node_groups
        missing = [
            group_id for group_id in node_groups
            if not self.cloud_provider.get_node_group(group_id)[1]
        ]
        try:
            if missing:
                logger.info("Registering %d node group(s): %s", len(missing), missing)
                await self.cloud_provider.register_node_groups(*missing)
            await self.cloud_provider.refresh()
        except Exception as e:
            logger.error("Failed to refresh %s node groups: %s", self.cloud_provider.name(), e)
            return False
        return True

    async def execute(
        self,
        node_groups: Optional[Sequence[str]] = None,
        interval_seconds: Optional[int] = None,
        run_once: bool = False,
        max_iterations: Optional[int] = None,
    ):
        if interval_seconds is None:
            interval_seconds = self.interval_seconds

        iterations = 0
        while True:
            ok = await self.tick(node_groups)
            if ok:
                for node_group in self.cloud_provider.node_groups():
                    logger.debug(
                        "node group %s target size %d",
                        node_group.id,
                        node_group.target_size,
                        extra={"node_group": node_group.id},
                    )

            iterations += 1
            if run_once or (max_iterations is not None and iterations >= max_iterations):
                break

            await asyncio.sleep(interval_seconds)
