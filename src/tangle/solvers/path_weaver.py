"""
Path weaver - builds each rope's render path from the crossing list.

A rope starts as the straight path through its pins' render positions. At
every crossing where the rope is on top, a weave detour is spliced in so the
rope visibly passes over the other one. Ropes that are below at a crossing
keep an uninterrupted straight segment through it.

Splice discipline:
    A rope's top crossings are sorted by distance from the path start, then
    spliced back-to-front. Inserting points only shifts the indices of points
    after the insertion, so working from the far end keeps the indices used by
    nearer crossings valid, and the final detours appear in along-path order
    no matter in which order the crossings were discovered.

Main API:
    PathWeaver.weave_all(store, intersections, generator, tube_radius)
    PathWeaver.weave_rope(rope, store, intersections, generator, tube_radius)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Sequence

from mathutils.tangle_math import (
    closest_segment_index,
    distance_from_path_start,
    path_direction,
)
from mathutils.vec3 import to_point3
from tangle_types import Intersection, Point3, Rope
from profiling import perf_marker
from .weave_generator import WeaveGenerator, generate_helix_path

if TYPE_CHECKING:
    from tangle_store import EntityStore

# Tube radius used by the default tube mesh
DEFAULT_TUBE_RADIUS = 0.08


class PathWeaver:
    """
    Rewrites rope render paths from an intersection list.

    All methods are static; the only state they touch is rope.render_path.
    """

    @staticmethod
    def initial_path(rope: Rope, store: EntityStore) -> List[Point3]:
        """Straight path through the render positions of the rope's resolvable pins."""
        path = []
        for pin_id in rope.pin_ids:
            pin = store.get_pin(pin_id)
            if pin is not None:
                path.append(to_point3(pin.render_position))
        return path

    @staticmethod
    def splice_weave(path: List[Point3], point, weave_points: Sequence[Point3]) -> bool:
        """
        Insert weave points right after the first point of the segment nearest to `point`.

        Returns False (path untouched) when there is nothing to splice into.
        """
        if len(path) < 2 or not weave_points:
            return False

        index = closest_segment_index(path, point)
        if index < 0:
            return False

        path[index + 1:index + 1] = list(weave_points)
        return True

    @staticmethod
    def build_path(rope: Rope, store: EntityStore, intersections: Iterable[Intersection],
                   generator: WeaveGenerator = generate_helix_path,
                   tube_radius: float = DEFAULT_TUBE_RADIUS) -> List[Point3]:
        """
        Compute a rope's woven render path without assigning it.

        Args:
            rope: Rope to build the path for
            store: Store used to resolve pin positions
            intersections: Current crossing list (any order)
            generator: Weave generator callable
            tube_radius: Radius passed to the generator

        Returns:
            Ordered list of (x, y, z) points
        """
        path = PathWeaver.initial_path(rope, store)
        if len(path) < 2:
            return path

        # Python's sort is stable: equal distances keep discovery order
        weaves = sorted(
            (i for i in intersections if i.top_rope_id == rope.id),
            key=lambda i: distance_from_path_start(path, i.point)
        )

        for intersection in reversed(weaves):
            tangent = path_direction(path)
            weave_points = generator(to_point3(intersection.point), tangent, tube_radius)
            PathWeaver.splice_weave(path, intersection.point, weave_points)

        return path

    @staticmethod
    def weave_rope(rope: Rope, store: EntityStore, intersections: Iterable[Intersection],
                   generator: WeaveGenerator = generate_helix_path,
                   tube_radius: float = DEFAULT_TUBE_RADIUS) -> List[Point3]:
        """Rebuild and assign a single rope's render path."""
        rope.render_path = PathWeaver.build_path(rope, store, intersections, generator, tube_radius)
        return rope.render_path

    @staticmethod
    def weave_all(store: EntityStore, intersections: Sequence[Intersection],
                  generator: WeaveGenerator = generate_helix_path,
                  tube_radius: float = DEFAULT_TUBE_RADIUS) -> None:
        """Rebuild every rope's render path from the full crossing list."""
        with perf_marker("path_weaver"):
            for rope in store.ropes:
                PathWeaver.weave_rope(rope, store, intersections, generator, tube_radius)
