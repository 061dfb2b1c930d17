"""
Auto Scaling Group Value Objects

Architectural Intent:
- Immutable snapshots of what the cloud backend reports for a scaling group
- Only the fields the registry consumes are modelled; everything else in the
  backend payload is dropped at the adapter boundary

Design Decisions:
- desired_capacity is treated as opaque: no clamping, negative values pass through
- from_dict() accepts the DescribeAutoScalingGroups response shape so adapters
  stay thin
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Instance:
    """A single cloud instance that is a member of a scaling group."""
    instance_id: str
    availability_zone: str
    lifecycle_state: str = "InService"

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Instance":
        return Instance(
            instance_id=data.get("InstanceId", ""),
            availability_zone=data.get("AvailabilityZone", ""),
            lifecycle_state=data.get("LifecycleState", "InService"),
        )


@dataclass(frozen=True)
class AutoScalingGroup:
    """
    Value Object for one scaling group as seen by the backend.
    """
    name: str
    desired_capacity: int = 0
    min_size: int = 0
    max_size: int = 0
    instances: tuple[Instance, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "AutoScalingGroup":
        """Parse one entry of a DescribeAutoScalingGroups 'AutoScalingGroups' list."""
        return AutoScalingGroup(
            name=data.get("AutoScalingGroupName", ""),
            desired_capacity=int(data.get("DesiredCapacity") or 0),
            min_size=int(data.get("MinSize") or 0),
            max_size=int(data.get("MaxSize") or 0),
            instances=tuple(
                Instance.from_dict(inst) for inst in data.get("Instances", [])
            ),
        )
