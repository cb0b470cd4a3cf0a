"""
Dictionary Render Context for Tangle.

This render context collects puzzle geometry into a Python dictionary,
suitable for direct consumption by Python code (tests, tooling, debug views).
"""

from .base_render_context import BaseRenderContext


class DictRenderContext(BaseRenderContext):
    """
    Render context that collects geometry into a dictionary.

    Output format:
        {
            'ropes': [
                {
                    'id': rope id,
                    'color': str,
                    'priority': int,
                    'points': [[x, y, z], ...],
                }
            ],
            'slots': [{'id': slot id, 'position': [x, y, z], 'occupant': pin id | None}],
            'pins': [{'id': pin id, 'position': [x, y, z], 'scale': float, 'rope': rope id}],
            'crossings': [{'ropes': [a, b], 'point': [x, y], 'top': rope id}],
            'stats': {
                'rope_count': int,
                'vertex_count': int,
                'crossing_count': int,
            }
        }
    """

    def __init__(self, smooth=False, **kwargs):
        super().__init__(smooth=smooth, **kwargs)
        self._ropes = {}  # id -> rope data
        self._current_priority = 0
        self._slots = []
        self._pins = []
        self._crossings = []
        self._vertex_count = 0

    def pre_render(self, rope):
        """Called before a rope's path is emitted."""
        self._current_priority = rope.render_priority

    def create_path(self, id, points, color=None):
        """Record a rope path."""
        point_list = [[float(p[0]), float(p[1]), float(p[2])] for p in points]

        self._ropes[id] = {
            'id': id,
            'color': color,
            'priority': self._current_priority,
            'points': point_list,
        }
        self._vertex_count += len(point_list)

    def create_slot(self, id, position, occupant_id=None):
        self._slots.append({'id': id, 'position': list(position), 'occupant': occupant_id})

    def create_pin(self, id, position, scale, rope_id):
        self._pins.append({'id': id, 'position': list(position), 'scale': scale, 'rope': rope_id})

    def create_crossing(self, intersection):
        self._crossings.append({
            'ropes': [intersection.rope_a_id, intersection.rope_b_id],
            'point': list(intersection.point),
            'top': intersection.top_rope_id,
        })

    def get_output(self) -> dict:
        """Get the collected geometry as a dictionary."""
        return {
            'ropes': list(self._ropes.values()),
            'slots': self._slots,
            'pins': self._pins,
            'crossings': self._crossings,
            'stats': {
                'rope_count': len(self._ropes),
                'vertex_count': self._vertex_count,
                'crossing_count': len(self._crossings),
            }
        }
