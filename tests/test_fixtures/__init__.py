"""Test fixtures and utilities for Tangle testing.

Organized into logical modules:
- levels: Level factories and an event recorder (make_slot_level, make_controller, EventRecorder)
- assertions: Custom assertion functions (assert_points_close, assert_paths_equal)
"""

from .levels import (
    EventRecorder,
    make_controller,
    make_crossing_controller,
    make_slot_level,
    snapshot_geometry,
)
from .assertions import assert_points_close, assert_paths_equal

__all__ = [
    'EventRecorder',
    'make_controller',
    'make_crossing_controller',
    'make_slot_level',
    'snapshot_geometry',
    'assert_points_close',
    'assert_paths_equal',
]
