"""Render contexts consuming finalized rope render paths."""

from .base_render_context import BaseRenderContext
from .dict_render_context import DictRenderContext
from .json_render_context import JSONRenderContext
from .binary_render_context import BinaryRenderContext, hex_to_rgb

__all__ = [
    'BaseRenderContext',
    'DictRenderContext',
    'JSONRenderContext',
    'BinaryRenderContext',
    'hex_to_rgb',
]
