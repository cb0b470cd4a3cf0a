"""
Tangle Engine - the puzzle controller and its configuration.

The PuzzleController owns the entity store and the current crossing list,
runs the full recompute (crossings -> weaves -> notifications -> win check)
and is the single handle passed to the move state machine and to rendering
collaborators. There is no global instance; construct one per puzzle.

Usage:
    from tangle_engine import PuzzleController, TangleConfig
    from tangle_level import LevelBuilder

    controller = PuzzleController(TangleConfig(snap_radius=0.8))
    controller.events.subscribe(PuzzleEvent.PUZZLE_SOLVED, on_solved)
    controller.set_level(*LevelBuilder.crossing_level())

    controller.crossing_count       # 1
    controller.snap(pin_id, slot_id) # True / False
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Sequence, Tuple

from tangle_types import Intersection, Pin, Rope, Slot
from tangle_store import EntityStore
from tangle_events import EventChannel, PuzzleEvent
from solvers import (
    IntersectionSolver,
    IntersectionSolution,
    PathWeaver,
    WeaveGenerator,
    get_weave_generator,
)
import contextlib

from profiling import perf_marker, profile, profiling_scope

logger = logging.getLogger("tangle.engine")


# =============================================================================
# Configuration
# =============================================================================

WeaveStyle = Literal['helix', 'arch']


@dataclass
class TangleConfig:
    """
    Configuration options for a puzzle controller.

    Attributes:
        epsilon: Segment test tolerance (parallel check and endpoint exclusion).

        snap_radius: Maximum distance between the pointer and an empty slot for
            the slot to be highlighted during a drag and snapped to on release.

        weave_style: Built-in weave generator.
            - 'helix': one full wrap around the lower rope (default)
            - 'arch': a plain arch over the lower rope

        tube_radius: Rendered tube radius passed to the weave generator.

        drag_scale: Visual scale factor applied to a pin while it is dragged.

        snap_duration / rollback_duration / scale_duration: Timing hints
            carried by MoveTransition descriptors. The core never waits on them.

        suppress_solved_while_dragging: When True, a recompute that happens
            while a drag is in progress does not fire PUZZLE_SOLVED, so dragging
            through a solved layout does not flicker solved/unsolved. The
            settling recompute after release always runs the win check.

        profile: Record profiling markers (see profiling.get_profile_results)
            while this controller is working. Recording is switched on only for
            the duration of its own calls, so other controllers and code
            outside them are unaffected.

        options: Free-form extra options for collaborators.
    """
    epsilon: float = 1e-6
    snap_radius: float = 1.0
    weave_style: WeaveStyle = 'helix'
    tube_radius: float = 0.08
    drag_scale: float = 1.2
    snap_duration: float = 0.25
    rollback_duration: float = 0.3
    scale_duration: float = 0.15
    suppress_solved_while_dragging: bool = True
    profile: bool = False

    options: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise ValueError for settings the engine cannot work with."""
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.snap_radius < 0:
            raise ValueError(f"snap_radius must not be negative, got {self.snap_radius}")
        if self.tube_radius < 0:
            raise ValueError(f"tube_radius must not be negative, got {self.tube_radius}")
        if self.drag_scale <= 0:
            raise ValueError(f"drag_scale must be positive, got {self.drag_scale}")
        for name in ('snap_duration', 'rollback_duration', 'scale_duration'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")
        get_weave_generator(self.weave_style)


# =============================================================================
# Controller
# =============================================================================

class PuzzleController(object):
    """
    Coordinator for one puzzle: owns the store, the crossing list and the
    notification channel.

    Query accessors return tuples so callers cannot reorder or resize the
    store's collections. Every command validates before mutating and degrades
    to a no-op (None / False) on invalid ids.
    """

    def __init__(self, config: Optional[TangleConfig] = None,
                 weave_generator: Optional[WeaveGenerator] = None):
        self.config = config or TangleConfig()
        self.config.validate()

        self.weave_generator = weave_generator or get_weave_generator(self.config.weave_style)
        self.events = EventChannel()

        self._store = EntityStore()
        self._solution = IntersectionSolution()
        self._drag_in_progress = False
        self._level_generation = 0

    # ------------------------------------------------------------------
    # Level
    # ------------------------------------------------------------------

    def set_level(self, slots: Sequence[Slot], pins: Sequence[Pin], ropes: Sequence[Rope]) -> IntersectionSolution:
        """
        Replace the puzzle wholesale, build straight render paths and run the
        first recompute.
        """
        self._store.load(slots, pins, ropes)
        self._drag_in_progress = False
        self._level_generation += 1

        for rope in self._store.ropes:
            rope.render_path = PathWeaver.initial_path(rope, self._store)

        logger.info("Level set: %d slots, %d pins, %d ropes",
                    len(self._store.slots), len(self._store.pins), len(self._store.ropes))

        return self.recompute()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def slots(self) -> Tuple[Slot, ...]:
        return self._store.slots

    @property
    def pins(self) -> Tuple[Pin, ...]:
        return self._store.pins

    @property
    def ropes(self) -> Tuple[Rope, ...]:
        return self._store.ropes

    @property
    def intersections(self) -> Tuple[Intersection, ...]:
        return tuple(self._solution.intersections)

    @property
    def solution(self) -> IntersectionSolution:
        return self._solution

    @property
    def crossing_count(self) -> int:
        return self._solution.count

    @property
    def is_solved(self) -> bool:
        return self._solution.is_solved

    @property
    def drag_in_progress(self) -> bool:
        return self._drag_in_progress

    @property
    def level_generation(self) -> int:
        """Bumped by every set_level; holders of entity references compare it to detect a replaced level."""
        return self._level_generation

    def profiling_scope(self):
        """Context that records profiling markers when config.profile is set."""
        if self.config.profile:
            return profiling_scope(True)
        return contextlib.nullcontext()

    def get_slot(self, slot_id) -> Optional[Slot]:
        return self._store.get_slot(slot_id)

    def get_pin(self, pin_id) -> Optional[Pin]:
        return self._store.get_pin(pin_id)

    def get_rope(self, rope_id) -> Optional[Rope]:
        return self._store.get_rope(rope_id)

    def get_rope_for_pin(self, pin_id) -> Optional[Rope]:
        pin = self._store.get_pin(pin_id)
        return self._store.get_rope(pin.rope_id) if pin is not None else None

    def find_nearest_empty_slot(self, position, max_radius: Optional[float] = None) -> Optional[Slot]:
        """Nearest empty slot within `max_radius` (defaults to config.snap_radius)."""
        radius = self.config.snap_radius if max_radius is None else max_radius
        return self._store.find_nearest_empty_slot(position, radius)

    def preview_crossings(self, pin_id, position) -> int:
        """Crossings the pin's rope would have with the pin at `position` (no side effects)."""
        with self.profiling_scope():
            return IntersectionSolver.preview_count(
                self._store, self._store.get_pin(pin_id), position, self.config.epsilon)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def snap(self, pin_id, slot_id) -> bool:
        """
        Commit a pin into an empty slot and recompute.

        Fails (returns False, nothing mutated, no recompute) when either id is
        invalid or the slot is occupied.
        """
        if not self._store.move_pin(pin_id, slot_id):
            logger.warning("Snap rejected: pin %s -> slot %s", pin_id, slot_id)
            return False

        logger.debug("Pin %s snapped to slot %s", pin_id, slot_id)
        self.recompute()
        self.events.emit(PuzzleEvent.PIN_SNAPPED, pin_id, slot_id)
        return True

    def recompute(self) -> IntersectionSolution:
        """
        Full recompute: replace the crossing list, re-weave every rope, then notify.

        CROSSING_COUNT_CHANGED is edge-triggered (only when the total differs
        from the previous one). PUZZLE_SOLVED fires on every recompute that
        ends with zero crossings, unless a drag is in progress and
        config.suppress_solved_while_dragging is set.
        """
        with self.profiling_scope():
            return self._recompute()

    @profile("recompute")
    def _recompute(self) -> IntersectionSolution:
        previous_count = self._solution.count

        self._solution = IntersectionSolver.solve(self._store, self.config.epsilon)
        PathWeaver.weave_all(self._store, self._solution.intersections,
                             self.weave_generator, self.config.tube_radius)

        self.events.emit(PuzzleEvent.RENDER_PATHS_UPDATED)

        count = self._solution.count
        if count != previous_count:
            logger.debug("Crossing count changed: %d -> %d", previous_count, count)
            self.events.emit(PuzzleEvent.CROSSING_COUNT_CHANGED, count)

        if count == 0:
            if self._drag_in_progress and self.config.suppress_solved_while_dragging:
                logger.debug("Solved layout during drag; win check deferred")
            else:
                logger.info("Puzzle solved")
                self.events.emit(PuzzleEvent.PUZZLE_SOLVED)

        return self._solution

    def refresh_rope_path(self, rope_id, intersections: Optional[Sequence[Intersection]] = None) -> bool:
        """
        Re-weave one rope against `intersections` (defaults to the current
        crossing list) and notify renderers. Used for live drag previews.
        """
        rope = self._store.get_rope(rope_id)
        if rope is None:
            return False

        if intersections is None:
            intersections = self._solution.intersections

        with self.profiling_scope(), perf_marker("refresh_rope_path"):
            PathWeaver.weave_rope(rope, self._store, intersections,
                                  self.weave_generator, self.config.tube_radius)

        self.events.emit(PuzzleEvent.RENDER_PATHS_UPDATED)
        return True

    def _set_drag_in_progress(self, dragging: bool) -> None:
        self._drag_in_progress = dragging
