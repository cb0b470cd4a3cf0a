"""
JSON Render Context for Tangle.

This render context collects rope geometry as a JSON-serializable dictionary,
suitable for web viewers and other JSON-based consumers.
"""

import json

from .base_render_context import BaseRenderContext


class JSONRenderContext(BaseRenderContext):
    """
    Render context that collects geometry data as a JSON-serializable dict.

    Output format (via get_output()):
        {
            'ropes': [
                {
                    'id': str,
                    'points': [[x, y, z], ...],
                    'color': '#hex',
                    'startPoint': [x, y, z] | None,
                    'endPoint': [x, y, z] | None,
                    'bounds': {'min': [x, y, z], 'max': [x, y, z]},
                },
                ...
            ],
            'slots': [{'id': str, 'position': [x, y, z], 'occupied': bool}, ...],
            'pins': [{'id': str, 'position': [x, y, z], 'scale': float, 'ropeId': str}, ...],
            'crossingCount': int,
        }

    Ids are stringified so the output stays valid JSON for any hashable id.
    """

    DEFAULT_COLOR_PALETTE = [
        '#cc3333', '#3380cc', '#33cc4d', '#e6b31a',
    ]

    def __init__(self, color_palette=None, smooth=False, **kwargs):
        super().__init__(smooth=smooth, **kwargs)
        self.ropes = []
        self.slots = []
        self.pins = []
        self.crossing_count = 0
        self._color_palette = color_palette or self.DEFAULT_COLOR_PALETTE
        self._color_index = 0

    def _get_next_color(self):
        """Get the next color from the palette."""
        color = self._color_palette[self._color_index % len(self._color_palette)]
        self._color_index += 1
        return color

    def create_path(self, id, points, color=None):
        """Create a rope entry from its path."""
        point_list = []
        min_x = min_y = min_z = float('inf')
        max_x = max_y = max_z = float('-inf')

        for p in points:
            x, y, z = float(p[0]), float(p[1]), float(p[2])
            point_list.append([x, y, z])

            # Track bounding box
            if x < min_x: min_x = x
            if x > max_x: max_x = x
            if y < min_y: min_y = y
            if y > max_y: max_y = y
            if z < min_z: min_z = z
            if z > max_z: max_z = z

        if point_list:
            bounds = {'min': [min_x, min_y, min_z], 'max': [max_x, max_y, max_z]}
        else:
            bounds = {'min': [0, 0, 0], 'max': [0, 0, 0]}

        self.ropes.append({
            'id': str(id),
            'points': point_list,
            'color': color or self._get_next_color(),
            'startPoint': point_list[0] if point_list else None,
            'endPoint': point_list[-1] if point_list else None,
            'bounds': bounds,
        })

    def create_slot(self, id, position, occupant_id=None):
        self.slots.append({
            'id': str(id),
            'position': [float(c) for c in position],
            'occupied': occupant_id is not None,
        })

    def create_pin(self, id, position, scale, rope_id):
        self.pins.append({
            'id': str(id),
            'position': [float(c) for c in position],
            'scale': float(scale),
            'ropeId': str(rope_id),
        })

    def create_crossing(self, intersection):
        self.crossing_count += 1

    def get_output(self) -> dict:
        """Get collected geometry as a dictionary."""
        return {
            'ropes': self.ropes,
            'slots': self.slots,
            'pins': self.pins,
            'crossingCount': self.crossing_count,
        }

    def to_json(self, indent=None) -> str:
        """Serialize get_output() to a JSON string."""
        return json.dumps(self.get_output(), indent=indent)
