"""
Composition Root

Architectural Intent:
- Dependency injection composition root for the Ascent application
- Single place where the backend adapter, registry and use cases are wired
- The registry is one explicitly constructed object handed to every consumer

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- Backend selection: an injected service wins, then a boto3-shaped client
  wrapped for the configured region, then the in-memory backend
- Logging is configured here from config.log_level / config.log_json
"""

from dataclasses import dataclass
from typing import Any, Optional

from ascent.application.use_cases.reconcile_membership import ReconcileMembership
from ascent.application.use_cases.refresh_loop import RefreshLoop
from ascent.domain.ports.autoscaling_port import AutoscalingServicePort
from ascent.infrastructure.adapters.autoscaling_adapter import (
    AutoScalingGroupsClientAdapter,
    InMemoryAutoscalingService,
)
from ascent.infrastructure.adapters.aws_cloud_provider import AWSCloudProvider
from ascent.infrastructure.config import AscentConfig
from ascent.infrastructure.logging import configure_logging


@dataclass
class AscentContainer:
    """DI container holding all wired dependencies."""

    config: AscentConfig
    autoscaling_service: AutoscalingServicePort
    cloud_provider: AWSCloudProvider
    refresh_loop: RefreshLoop
    reconcile_membership: ReconcileMembership


def _build_autoscaling_service(
    config: AscentConfig,
    autoscaling_service: Optional[AutoscalingServicePort],
    client: Any,
) -> AutoscalingServicePort:
    if autoscaling_service is not None:
        return autoscaling_service
    if client is not None:
        return AutoScalingGroupsClientAdapter(client, region=config.aws.region)
    return InMemoryAutoscalingService()


def create_container(
    config: Optional[AscentConfig] = None,
    autoscaling_service: Optional[AutoscalingServicePort] = None,
    client: Any = None,
) -> AscentContainer:
    """Create and wire all dependencies.

    Args:
        config: Loaded configuration. Defaults to AscentConfig().
        autoscaling_service: Ready-made backend port, used as is.
        client: boto3-shaped autoscaling client, e.g.
            boto3.client("autoscaling", region_name=config.aws.region).
    """
    config = config or AscentConfig()
    configure_logging(config.log_level, json_format=config.log_json)

    service = _build_autoscaling_service(config, autoscaling_service, client)
    cloud_provider = AWSCloudProvider(service)
    refresh_loop = RefreshLoop(
        cloud_provider,
        node_groups=config.aws.node_groups,
        interval_seconds=config.refresh.interval_seconds,
    )
    reconcile_membership = ReconcileMembership(cloud_provider)

    return AscentContainer(
        config=config,
        autoscaling_service=service,
        cloud_provider=cloud_provider,
        refresh_loop=refresh_loop,
        reconcile_membership=reconcile_membership,
    )
