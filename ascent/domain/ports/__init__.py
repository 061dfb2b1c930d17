"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from ascent.domain.ports.autoscaling_port import AutoscalingServicePort
from ascent.domain.ports.cloud_provider_port import CloudProviderPort, NodeGroupPort

__all__ = [
    "AutoscalingServicePort",
    "CloudProviderPort",
    "NodeGroupPort",
]
