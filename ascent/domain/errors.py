"""
Domain Errors

Architectural Intent:
- Typed failures raised by the node-group registry and its entities
- Backend call failures are NOT wrapped here; they propagate unchanged
"""


class CloudProviderError(Exception):
    pass


class NodeNotInAutoScalingGroup(CloudProviderError):
    """
    Raised when a node is not inside the node group it is expected to be in.

    Carries no remediation; callers surface it to an operator or exclude the
    node from scaling decisions.
    """

    def __init__(self, node_name: str, provider_id: str, node_group: str) -> None:
        self.node_name = node_name
        self.provider_id = provider_id
        self.node_group = node_group
        super().__init__(str(self))

    def __setattr__(self, name, value):
        if name in ("node_name", "provider_id", "node_group") and name in self.__dict__:
            raise AttributeError(f"{name} is read-only")
        super().__setattr__(name, value)

    def __str__(self) -> str:
        return (
            f"node {self.node_name}, {self.provider_id} "
            f"belongs in a different asg than {self.node_group}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeNotInAutoScalingGroup):
            return NotImplemented
        return (
            self.node_name == other.node_name
            and self.provider_id == other.provider_id
            and self.node_group == other.node_group
        )

    def __hash__(self) -> int:
        return hash((self.node_name, self.provider_id, self.node_group))
