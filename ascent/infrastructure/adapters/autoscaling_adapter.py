"""
Autoscaling Service Adapters

Architectural Intent:
- Implements AutoscalingServicePort for the AWS Auto Scaling API
- AutoScalingGroupsClientAdapter wraps any client exposing the boto3
  describe_auto_scaling_groups() call shape; the client is injected so this
  module never creates sessions or handles credentials
- InMemoryAutoscalingService plays the role of the backend for local
  development and tests, with zero cloud credentials

Design Decisions:
- The blocking client call runs in a worker thread (asyncio.to_thread) so the
  event loop keeps serving readers during the round trip
- NextToken pagination is followed until exhausted; the whole batch is one
  logical describe call from the registry's point of view
- No retries here: failures surface to the caller unchanged
"""

import asyncio
import copy
import logging
from typing import Any, Optional

from ascent.domain.ports.autoscaling_port import AutoscalingServicePort
from ascent.domain.value_objects.auto_scaling_group import AutoScalingGroup

logger = logging.getLogger(__name__)


class AutoScalingGroupsClientAdapter(AutoscalingServicePort):
    """
    Adapter over a boto3-shaped autoscaling client.

    The real wiring looks like:
        client = boto3.client("autoscaling", region_name=region)
        service = AutoScalingGroupsClientAdapter(client, region=region)

    The client already carries its region; `region` mirrors it so log lines
    can name the endpoint being described. It does not change the request.
    """

    def __init__(self, client: Any, region: str = "us-east-1") -> None:
        self.client = client
        self.region = region

    def _describe_pages(self, names: list[str]) -> list[dict]:
        groups: list[dict] = []
        kwargs: dict[str, Any] = {"AutoScalingGroupNames": names}
        while True:
            response = self.client.describe_auto_scaling_groups(**kwargs)
            groups.extend(response.get("AutoScalingGroups", []))
            next_token = response.get("NextToken")
            if not next_token:
                return groups
            kwargs["NextToken"] = next_token

    async def describe_auto_scaling_groups(
        self, names: list[str]
    ) -> list[AutoScalingGroup]:
        logger.debug(
            "AWS autoscaling describe_auto_scaling_groups (region=%s, names=%s)",
            self.region,
            names,
        )
        raw_groups = await asyncio.to_thread(self._describe_pages, list(names))
        logger.debug("describe_auto_scaling_groups returned %d group(s)", len(raw_groups))
        return [AutoScalingGroup.from_dict(g) for g in raw_groups]


class InMemoryAutoscalingService(AutoscalingServicePort):
    """
    In-process autoscaling backend.

    Groups are stored as DescribeAutoScalingGroups-shaped dicts so the same
    parsing path as the real adapter is exercised. Every describe call is
    recorded in `calls`. Setting `error` makes the next calls raise it.
    """

    def __init__(self, groups: Optional[list[dict]] = None) -> None:
        self._groups: dict[str, dict] = {}
        self.calls: list[list[str]] = []
        self.error: Optional[Exception] = None
        for group in groups or []:
            self.put_group(group)

    def put_group(self, group: dict) -> None:
        """Create or replace a group, keyed by its AutoScalingGroupName."""
        self._groups[group["AutoScalingGroupName"]] = copy.deepcopy(group)

    def add_group(
        self,
        name: str,
        desired_capacity: int = 0,
        min_size: int = 0,
        max_size: int = 0,
        instances: Optional[list[tuple[str, str]]] = None,
    ) -> None:
        """Convenience wrapper around put_group(); instances are (zone, instance_id) pairs."""
        self.put_group(
            {
                "AutoScalingGroupName": name,
                "DesiredCapacity": desired_capacity,
                "MinSize": min_size,
                "MaxSize": max_size,
                "Instances": [
                    {
                        "InstanceId": instance_id,
                        "AvailabilityZone": zone,
                        "LifecycleState": "InService",
                    }
                    for zone, instance_id in instances or []
                ],
            }
        )

    def remove_group(self, name: str) -> None:
        self._groups.pop(name, None)

    def set_desired_capacity(self, name: str, desired_capacity: int) -> None:
        self._groups[name]["DesiredCapacity"] = desired_capacity

    async def describe_auto_scaling_groups(
        self, names: list[str]
    ) -> list[AutoScalingGroup]:
        self.calls.append(list(names))
        if self.error is not None:
            raise self.error

        # An empty name list describes every group, as the AWS API does
        wanted = names or list(self._groups)
        return [
            AutoScalingGroup.from_dict(self._groups[name])
            for name in wanted
            if name in self._groups
        ]
