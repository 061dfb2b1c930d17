"""Global test configuration.

Shared fixtures for building autoscaling backends and registries.
"""

from unittest.mock import AsyncMock

import pytest

from ascent.domain.ports.autoscaling_port import AutoscalingServicePort
from ascent.infrastructure.adapters.autoscaling_adapter import InMemoryAutoscalingService
from ascent.infrastructure.adapters.aws_cloud_provider import AWSCloudProvider


@pytest.fixture
def mock_service():
    """An AutoscalingServicePort whose describe call returns an empty list."""
    service = AsyncMock(spec=AutoscalingServicePort)
    service.describe_auto_scaling_groups = AsyncMock(return_value=[])
    return service


@pytest.fixture
def backend():
    return InMemoryAutoscalingService()


@pytest.fixture
def cloud_provider(backend):
    return AWSCloudProvider(backend)
