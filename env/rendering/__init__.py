"""
Rendering toolkit for the tag environment.

This package provides two viewers for simulation frames:
- AsciiRenderer: text frames (``*`` for IT, ``.`` for runners)
- WebRenderer: a Flask/SocketIO server with a small HTML client for live
  viewing or replay
"""

from .ascii_renderer import AsciiRenderer, TagCanvas, DrawCell
from .render_state import RenderStateBuilder
from .web_renderer import WebRenderer

__all__ = ["AsciiRenderer", "TagCanvas", "DrawCell", "RenderStateBuilder", "WebRenderer"]
