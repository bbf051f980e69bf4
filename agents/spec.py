from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class AgentSpec:
    """
    Declarative description of the agent that drives every player.

    Attributes:
        type: Registry key of the agent class (see ``register_agent``)
        name: Optional display name
        init_params: Extra keyword arguments passed to the agent constructor
    """

    type: str = "tag"
    name: Optional[str] = None
    init_params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "init_params": dict(self.init_params),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentSpec:
        if "type" not in data:
            raise ValueError("AgentSpec dict must contain 'type'")
        return cls(
            type=data["type"],
            name=data.get("name"),
            init_params=dict(data.get("init_params") or {}),
        )
