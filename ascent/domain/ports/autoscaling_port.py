"""
Autoscaling Service Port

Architectural Intent:
- Port interface for the remote describe-by-name call against scaling groups
- One call per batch of names; the registry never issues per-group calls
- Transport, authentication, timeouts and retries belong to the adapter
"""

from abc import ABC, abstractmethod
from typing import List
from ascent.domain.value_objects.auto_scaling_group import AutoScalingGroup


class AutoscalingServicePort(ABC):
    """
    Port interface for describing cloud scaling groups.
    """

    @abstractmethod
    async def describe_auto_scaling_groups(
        self, names: List[str]
    ) -> List[AutoScalingGroup]:
        """
        Describes the scaling groups with the given names.
        Names the backend does not know are omitted from the result.
        Any transport or backend failure is raised to the caller.
        """
        pass
