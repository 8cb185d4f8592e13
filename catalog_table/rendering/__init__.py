"""Rendering utilities: render tree construction and Streamlit drawing."""

from .bridge import render_component
from .tree import RenderTree, build_render_tree

__all__ = [
    "render_component",
    "build_render_tree",
    "RenderTree",
]
