"""
Binary Render Context for Tangle.

This render context outputs rope render paths as packed binary data that can
be loaded directly into Float32Arrays for tube-mesh generation on the client,
without JSON parsing.

Binary Format v1:
    Header (20 bytes):
        - Magic: 4 bytes "TNGL"
        - Version: uint32 (1)
        - Flags: uint32 (bit 0 = colors, bit 1 = smoothed)
        - Rope count: uint32
        - Vertex count: uint32 (total over all ropes)

    For each rope:
        - ID length: uint16
        - Reserved: uint16
        - Vertex count: uint32
        - Color RGB: 3x float32 (only if FLAG_COLORS)
        - Rope ID: variable (UTF-8, padded to 4-byte alignment)
        - Vertices: vertex_count * 3 * float32
"""

import struct
import numpy as np
from .base_render_context import BaseRenderContext
from profiling import perf_marker


def hex_to_rgb(hex_color: str) -> tuple:
    """Convert hex color string to RGB floats (0-1 range)."""
    hex_color = (hex_color or '').lstrip('#')
    if len(hex_color) == 6:
        r = int(hex_color[0:2], 16) / 255.0
        g = int(hex_color[2:4], 16) / 255.0
        b = int(hex_color[4:6], 16) / 255.0
        return (r, g, b)
    return (0.5, 0.5, 0.5)


class BinaryRenderContext(BaseRenderContext):
    """
    Render context that outputs rope paths as packed binary data.

    Args:
        include_colors: If True, include per-rope RGB colors in output.
        smooth: If True, paths are Catmull-Rom resampled before packing.
        samples_per_segment: Resampling density when smoothing.

    Examples:
        # Raw woven paths with colors (default)
        ctx = BinaryRenderContext()

        # Smoothed paths for tube meshes
        ctx = BinaryRenderContext(smooth=True, samples_per_segment=6)
    """

    MAGIC = b'TNGL'
    VERSION = 1

    # Flag bits
    FLAG_COLORS = 0x01
    FLAG_SMOOTHED = 0x02

    HEADER_FORMAT = '<4sIIII'
    ROPE_HEADER_FORMAT = '<HHI'

    def __init__(self, include_colors: bool = True, smooth: bool = False, **kwargs):
        super().__init__(smooth=smooth, **kwargs)
        self.include_colors = include_colors

        # Each rope: (id_bytes, color_rgb, vertices float32 array of shape (N, 3))
        self._ropes = []

    def create_path(self, id, points, color=None):
        """Store a rope path as a float32 vertex array."""
        with perf_marker('binary_pack_path'):
            vertices = np.asarray(points, dtype=np.float32).reshape(-1, 3)
        self._ropes.append((str(id).encode('utf-8'), hex_to_rgb(color), vertices))

    def get_output(self) -> bytes:
        """Get collected geometry as binary data."""
        with perf_marker('binary_to_bytes'):
            return self.to_bytes()

    def to_bytes(self) -> bytes:
        """Convert collected rope paths to binary format."""
        parts = []

        # Build flags
        flags = 0
        if self.include_colors:
            flags |= self.FLAG_COLORS
        if self.smooth:
            flags |= self.FLAG_SMOOTHED

        vertex_count = sum(len(vertices) for _, _, vertices in self._ropes)

        # Header (20 bytes)
        parts.append(struct.pack(self.HEADER_FORMAT,
            self.MAGIC,
            self.VERSION,
            flags,
            len(self._ropes),
            vertex_count,
        ))

        for id_bytes, color_rgb, vertices in self._ropes:
            parts.append(struct.pack(self.ROPE_HEADER_FORMAT, len(id_bytes), 0, len(vertices)))

            # Optional color
            if self.include_colors:
                parts.append(struct.pack('<3f', *color_rgb))

            # Rope ID
            parts.append(id_bytes)

            # Pad to 4-byte alignment
            padding = (4 - (len(id_bytes) % 4)) % 4
            if padding:
                parts.append(b'\x00' * padding)

            # Vertices
            if len(vertices):
                parts.append(np.ascontiguousarray(vertices, dtype='<f4').tobytes())

        return b''.join(parts)

    def get_stats(self) -> dict:
        """Get statistics about the packed paths."""
        return {
            'rope_count': len(self._ropes),
            'vertex_count': sum(len(vertices) for _, _, vertices in self._ropes),
            'smoothed': self.smooth,
        }

    def to_dict(self) -> dict:
        """Support dict output for compatibility/debugging."""
        ropes = []
        for id_bytes, color_rgb, vertices in self._ropes:
            r, g, b = color_rgb
            ropes.append({
                'id': id_bytes.decode('utf-8'),
                'color': f'#{round(r*255):02x}{round(g*255):02x}{round(b*255):02x}',
                'points': vertices.tolist(),
            })
        return {'ropes': ropes}
