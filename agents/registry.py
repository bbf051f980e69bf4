from __future__ import annotations

from typing import Callable, Dict, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from .base_agent import BaseAgent

_AGENT_REGISTRY: Dict[str, Type["BaseAgent"]] = {}


def register_agent(name: str) -> Callable[[Type["BaseAgent"]], Type["BaseAgent"]]:
    """Class decorator that makes an agent available under ``name``."""

    def decorator(cls: Type["BaseAgent"]) -> Type["BaseAgent"]:
        key = name.lower()
        existing = _AGENT_REGISTRY.get(key)
        if existing is not None and existing is not cls:
            raise ValueError(f"Agent type '{key}' already registered by {existing.__name__}")
        _AGENT_REGISTRY[key] = cls
        return cls

    return decorator


def resolve_agent_class(name: str) -> Type["BaseAgent"]:
    """Look up a registered agent class by name."""
    try:
        return _AGENT_REGISTRY[name.lower()]
    except KeyError:
        known = ", ".join(sorted(_AGENT_REGISTRY)) or "<none>"
        raise ValueError(f"Unknown agent type '{name}' (registered: {known})") from None


def registered_agent_types() -> list[str]:
    return sorted(_AGENT_REGISTRY)
