"""
Provider ID Value Object

Architectural Intent:
- Canonical identifier correlating cluster-visible nodes with cloud instances
- Format is aws:///<availability-zone>/<instance-id>, triple slash kept literally
- Encoding performs no validation or escaping; malformed inputs yield a
  malformed but well-formed-looking identifier
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ascent.domain.value_objects.auto_scaling_group import Instance

PROVIDER_ID_PREFIX = "aws:///"


def instance_to_provider_id(availability_zone: str, instance_id: str) -> str:
    """Build the provider ID for an instance in the given availability zone."""
    return PROVIDER_ID_PREFIX + availability_zone + "/" + instance_id


def provider_id_for(instance: Instance) -> str:
    return instance_to_provider_id(instance.availability_zone, instance.instance_id)


def parse_provider_id(provider_id: str) -> tuple[str, str]:
    """
    Split a provider ID back into (availability_zone, instance_id).

    The instance ID is everything after the last '/', the zone is everything
    between the prefix and that separator.
    """
    if not provider_id.startswith(PROVIDER_ID_PREFIX):
        raise ValueError(f"Provider ID must start with {PROVIDER_ID_PREFIX!r}: {provider_id!r}")
    remainder = provider_id[len(PROVIDER_ID_PREFIX):]
    zone, sep, instance_id = remainder.rpartition("/")
    if not sep:
        raise ValueError(f"Provider ID has no availability zone: {provider_id!r}")
    return zone, instance_id
