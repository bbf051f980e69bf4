from .tag_agent import TagAgent

__all__ = ["TagAgent"]
