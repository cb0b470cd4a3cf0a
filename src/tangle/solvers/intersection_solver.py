"""
Rope intersection solver - decides which pairs of ropes currently cross.

Crossings are decided with exact 2D segment geometry on the pins' logic
positions, never by physics. Every rope is a straight segment between its two
pins, so a pair of ropes crosses at most once.

Core Concepts:
    Strict crossing:
        Two segments cross only when both parametric positions lie strictly
        inside (epsilon, 1 - epsilon). Ropes that merely meet at an endpoint do
        not cross, and parallel or collinear ropes never cross.

    Top rope:
        At each crossing the rope with the higher render priority is on top.
        On equal priority the first rope of the tested pair wins. The full
        sweep always tests pairs in store order (earlier rope first), so for a
        fixed set of priorities the top rope of a pair never depends on the
        order in which pairs happen to be visited.

Main API:
    # All pairs, O(n^2) - n is small (tens of ropes)
    solution = IntersectionSolver.solve(store)

    # One rope against every other rope, O(n)
    solution = IntersectionSolver.solve_for_rope(store, rope)

    # Hypothetical pin position: apply, measure, restore
    count = IntersectionSolver.preview_count(store, pin, position)

    solution.intersections -> List[Intersection]
    solution.count -> int
    solution.get_intersections_for_rope(rope_id) -> List[Intersection]
    solution.get_top_intersections(rope_id) -> List[Intersection]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from mathutils.tangle_math import EPSILON, find_intersection_between_segments
from tangle_types import Intersection, Rope
from profiling import perf_marker

if TYPE_CHECKING:
    from tangle_store import EntityStore
    from tangle_types import Pin


@dataclass
class IntersectionSolution:
    """
    Result of one recompute pass.

    Replaced wholesale on every recompute; nothing in it is updated in place.
    """
    intersections: List[Intersection] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.intersections)

    @property
    def is_solved(self) -> bool:
        return not self.intersections

    def get_intersections_for_rope(self, rope_id) -> List[Intersection]:
        """All crossings the rope takes part in"""
        return [i for i in self.intersections if i.involves(rope_id)]

    def get_top_intersections(self, rope_id) -> List[Intersection]:
        """Crossings where the rope renders on top"""
        return [i for i in self.intersections if i.top_rope_id == rope_id]

    def without_rope(self, rope_id) -> List[Intersection]:
        """All crossings the rope does not take part in"""
        return [i for i in self.intersections if not i.involves(rope_id)]


class IntersectionSolver:
    """
    Finds rope crossings for the current contents of an EntityStore.

    All methods are static and side-effect free, except preview_count which
    temporarily moves a pin and always puts it back.
    """

    @staticmethod
    def choose_top(rope_a: Rope, rope_b: Rope):
        """Higher render priority is on top; ties go to rope_a."""
        return rope_a.id if rope_a.render_priority >= rope_b.render_priority else rope_b.id

    @staticmethod
    def find_rope_intersections(rope_a: Rope, rope_b: Rope, store: EntityStore,
                                epsilon: float = EPSILON) -> List[Intersection]:
        """
        Test two ropes for a crossing.

        Returns an empty list for a self-pair or when any endpoint pin does not
        resolve; otherwise at most one Intersection (two-pin ropes are straight).
        """
        if rope_a.id == rope_b.id:
            return []

        endpoints_a = store.get_rope_endpoints(rope_a)
        endpoints_b = store.get_rope_endpoints(rope_b)
        if endpoints_a is None or endpoints_b is None:
            return []

        a0, a1 = endpoints_a
        b0, b1 = endpoints_b

        point = find_intersection_between_segments(
            a0.logic_position, a1.logic_position,
            b0.logic_position, b1.logic_position,
            epsilon
        )
        if point is None:
            return []

        return [Intersection(
            rope_a_id=rope_a.id,
            rope_b_id=rope_b.id,
            point=point,
            top_rope_id=IntersectionSolver.choose_top(rope_a, rope_b),
        )]

    @staticmethod
    def solve(store: EntityStore, epsilon: float = EPSILON) -> IntersectionSolution:
        """
        Test every unordered rope pair exactly once, in store order.

        Args:
            store: Entity store holding the ropes and pins
            epsilon: Segment test tolerance

        Returns:
            IntersectionSolution with every current crossing
        """
        with perf_marker("intersection_solver"):
            ropes = store.ropes
            intersections: List[Intersection] = []

            for i in range(len(ropes)):
                for j in range(i + 1, len(ropes)):
                    intersections.extend(
                        IntersectionSolver.find_rope_intersections(ropes[i], ropes[j], store, epsilon)
                    )

            return IntersectionSolution(intersections=intersections)

    @staticmethod
    def solve_for_rope(store: EntityStore, rope: Optional[Rope],
                       epsilon: float = EPSILON) -> IntersectionSolution:
        """
        Test one rope against every other rope (live drag feedback).

        The rope is passed first to each pairwise test, so while it holds the
        drag priority it is on top at all of its crossings.
        """
        if rope is None:
            return IntersectionSolution()

        intersections: List[Intersection] = []
        for other in store.ropes:
            if other.id == rope.id:
                continue
            intersections.extend(
                IntersectionSolver.find_rope_intersections(rope, other, store, epsilon)
            )

        return IntersectionSolution(intersections=intersections)

    @staticmethod
    def preview_count(store: EntityStore, pin: Optional[Pin], position,
                      epsilon: float = EPSILON) -> int:
        """
        Number of crossings the pin's rope would have with the pin at `position`.

        The pin's logic position is applied, measured and restored; nothing else
        is touched, so this is safe to call on every pointer move.
        """
        if pin is None:
            return 0

        rope = store.get_rope(pin.rope_id)
        if rope is None:
            return 0

        original = pin.logic_position
        pin.logic_position = (float(position[0]), float(position[1]))
        try:
            with perf_marker("preview_solver"):
                return IntersectionSolver.solve_for_rope(store, rope, epsilon).count
        finally:
            pin.logic_position = original
