"""
Renderers for reconstructed text state.
"""

from .viewer import TextViewer, RichTextViewer, build_text

__all__ = [
    "TextViewer",
    "RichTextViewer",
    "build_text",
]
