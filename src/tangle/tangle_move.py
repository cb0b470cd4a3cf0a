"""
    Move state machine for relocating a single pin.

    States:
        IDLE      -> DRAGGING   begin_move(pin_id, position)
        DRAGGING  -> DRAGGING   update_move(position)
        DRAGGING  -> RESOLVING  end_move(position) / cancel_move()
        RESOLVING -> IDLE       as soon as the commit or rollback has been applied

    Every call runs to completion synchronously. Eased movement back to a slot
    is described by a MoveTransition (start, target, duration) handed to
    rendering collaborators through TRANSITION_REQUESTED; the store is already
    consistent before that notification fires and nothing here waits for it.

    Calls that make no sense in the current state (updating or ending a drag
    that never started, ending a drag twice) are silent no-ops.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from tangle_types import MAX_RENDER_PRIORITY, EntityId, Intersection, Point2, Point3, Pin
from tangle_events import PuzzleEvent
from tangle_engine import PuzzleController
from solvers import IntersectionSolver

logger = logging.getLogger("tangle.move")


class MoveState(Enum):
    IDLE = auto()
    DRAGGING = auto()
    RESOLVING = auto()


@dataclass(frozen=True)
class MoveTransition:
    """
    Before/after description of the visual settling that follows a move.

    Attributes:
        pin_id: Pin being settled
        kind: 'snap' for a committed move, 'rollback' for a reverted one
        start: Render position the pin was released at
        target: Render position of the slot it settles into
        duration: Suggested duration of the movement in seconds
        easing: Suggested easing curve name ('out_back' or 'out_elastic')
        scale_from: Pin scale at release
        scale_to: Pin scale after settling
        scale_duration: Suggested duration of the scale restoration
    """
    pin_id: EntityId
    kind: str
    start: Point3
    target: Point3
    duration: float
    easing: str
    scale_from: float
    scale_to: float
    scale_duration: float


class MoveStateMachine(object):
    """
        Drives one interactive pin relocation against a PuzzleController.

        The controller is passed in explicitly; the machine subscribes to
        nothing and keeps no reference beyond the controller it was given.
    """

    def __init__(self, controller: PuzzleController):
        self.controller = controller
        self._state = MoveState.IDLE
        self._input_locked = False
        self._reset()

    def _reset(self):
        self._pin: Optional[Pin] = None
        self._origin_slot_id: Optional[EntityId] = None
        self._origin_logic: Optional[Point2] = None
        self._origin_render: Optional[Point3] = None
        self._original_scale = 1.0
        self._original_priority = 0
        self._target_slot_id: Optional[EntityId] = None
        self._last_position: Optional[Point2] = None
        self._preview_intersections: List[Intersection] = []
        self._level_generation: Optional[int] = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> MoveState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state == MoveState.DRAGGING

    @property
    def selected_pin(self) -> Optional[Pin]:
        return self._pin

    @property
    def target_slot_id(self) -> Optional[EntityId]:
        """Slot currently highlighted as the snap target, if any."""
        return self._target_slot_id

    @property
    def input_locked(self) -> bool:
        return self._input_locked

    @property
    def preview_intersections(self) -> List[Intersection]:
        """
        Crossing list as it would be with the dragged pin where it is now:
        the committed crossings not involving the dragged rope plus the
        dragged rope's live crossings.
        """
        if not self.is_dragging or self._is_stale():
            return []
        rope_id = self._pin.rope_id
        return self.controller.solution.without_rope(rope_id) + list(self._preview_intersections)

    @property
    def preview_crossing_count(self) -> int:
        return len(self.preview_intersections)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def begin_move(self, pin_id, position) -> bool:
        """
            IDLE -> DRAGGING.

            Captures what a rollback needs (origin slot, positions, scale, rope
            priority) and lifts the pin's rope to the maximum render priority so
            it draws over everything while dragged.
        """
        if self.is_dragging:
            self._abandon_if_stale()
        if self._state != MoveState.IDLE or self._input_locked:
            return False

        pin = self.controller.get_pin(pin_id)
        if pin is None:
            return False

        self._pin = pin
        self._origin_slot_id = pin.slot_id
        self._origin_logic = pin.logic_position
        self._origin_render = pin.render_position
        self._original_scale = pin.scale
        self._last_position = (float(position[0]), float(position[1]))
        self._target_slot_id = None
        self._preview_intersections = []
        self._level_generation = self.controller.level_generation

        rope = self.controller.get_rope(pin.rope_id)
        if rope is not None:
            self._original_priority = rope.render_priority
            rope.render_priority = MAX_RENDER_PRIORITY

        pin.scale = self._original_scale * self.controller.config.drag_scale

        self._state = MoveState.DRAGGING
        self.controller._set_drag_in_progress(True)
        self.controller.events.emit(PuzzleEvent.MOVE_STARTED, pin.id)
        logger.debug("Drag started: pin %s from slot %s", pin.id, self._origin_slot_id)
        return True

    def update_move(self, position) -> None:
        """
            DRAGGING: move the pin's preview position, track the snap target and
            refresh the dragged rope's woven path.

            Highlight notifications fire only when the nearest empty slot changes.
        """
        if not self.is_dragging or self._abandon_if_stale():
            return

        pin = self._pin
        self._last_position = (float(position[0]), float(position[1]))
        pin.set_preview_position(self._last_position)

        nearest = self.controller.find_nearest_empty_slot(self._last_position)
        nearest_id = nearest.id if nearest is not None else None
        if nearest_id != self._target_slot_id:
            if self._target_slot_id is not None:
                self.controller.events.emit(PuzzleEvent.HIGHLIGHT_CLEARED)
            self._target_slot_id = nearest_id
            if nearest_id is not None:
                self.controller.events.emit(PuzzleEvent.HIGHLIGHT_REQUESTED, nearest_id)

        rope = self.controller.get_rope(pin.rope_id)
        if rope is None:
            return

        with self.controller.profiling_scope():
            self._preview_intersections = IntersectionSolver.solve_for_rope(
                self.controller.store, rope, self.controller.config.epsilon).intersections
        self.controller.refresh_rope_path(rope.id, self.preview_intersections)

    def end_move(self, position) -> bool:
        """
            DRAGGING -> RESOLVING -> IDLE.

            Snaps into the nearest empty slot within the snap radius, or rolls
            back when there is none or the snap is rejected. Returns True only
            for a committed snap.
        """
        if not self.is_dragging or self._abandon_if_stale():
            return False

        position = (float(position[0]), float(position[1]))
        self._last_position = position
        self._state = MoveState.RESOLVING
        self._clear_highlight()

        pin = self._pin
        released_at = (position[0], position[1], pin.render_position[2])
        released_scale = pin.scale

        target = self.controller.find_nearest_empty_slot(position)
        success = False

        if target is not None:
            # Priority goes back first so the settling recompute sees the committed state
            self._restore_pin_visuals()
            self.controller._set_drag_in_progress(False)
            success = self.controller.snap(pin.id, target.id)

        if success:
            self._finish(released_at, released_scale, kind='snap')
        else:
            self._rollback(released_at, released_scale)

        return success

    def cancel_move(self) -> None:
        """DRAGGING -> RESOLVING -> IDLE: unconditional rollback to the origin slot."""
        if not self.is_dragging or self._abandon_if_stale():
            return

        self._state = MoveState.RESOLVING
        self._clear_highlight()

        pin = self._pin
        last = self._last_position or pin.logic_position
        released_at = (last[0], last[1], pin.render_position[2])
        self._rollback(released_at, pin.scale)

    def set_input_lock(self, locked: bool) -> None:
        """
            Lock or unlock input. While locked, begin_move is ignored; locking in
            the middle of a drag cancels it immediately.
        """
        self._input_locked = bool(locked)
        if self._input_locked and self.is_dragging:
            logger.debug("Input locked during drag; cancelling")
            self.cancel_move()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_stale(self) -> bool:
        return self._level_generation != self.controller.level_generation

    def _abandon_if_stale(self) -> bool:
        """
            Drop a drag whose level was replaced by set_level. The captured pin,
            slot and priority belong to the old level, so nothing is written
            back and no snap is attempted.
        """
        if not self._is_stale():
            return False
        logger.debug("Level replaced during drag of pin %s; drag dropped", self._pin.id)
        self._state = MoveState.IDLE
        self._reset()
        return True

    def _clear_highlight(self):
        if self._target_slot_id is not None:
            self._target_slot_id = None
            self.controller.events.emit(PuzzleEvent.HIGHLIGHT_CLEARED)

    def _restore_pin_visuals(self):
        pin = self._pin
        pin.scale = self._original_scale
        rope = self.controller.get_rope(pin.rope_id)
        if rope is not None:
            rope.render_priority = self._original_priority

    def _rollback(self, released_at: Point3, released_scale: float):
        """Put the pin back where it came from and recompute with restored priority."""
        pin = self._pin
        self._restore_pin_visuals()

        origin = self.controller.get_slot(pin.slot_id)
        if origin is not None and origin.occupant_id == pin.id:
            pin.sync_position_from_slot(origin)
        else:
            pin.logic_position = self._origin_logic
            pin.render_position = self._origin_render

        self.controller._set_drag_in_progress(False)
        self.controller.recompute()
        logger.debug("Rollback: pin %s back to slot %s", pin.id, pin.slot_id)
        self._finish(released_at, released_scale, kind='rollback')

    def _finish(self, released_at: Point3, released_scale: float, kind: str):
        pin = self._pin
        config = self.controller.config
        snapped = kind == 'snap'

        transition = MoveTransition(
            pin_id=pin.id,
            kind=kind,
            start=released_at,
            target=pin.render_position,
            duration=config.snap_duration if snapped else config.rollback_duration,
            easing='out_back' if snapped else 'out_elastic',
            scale_from=released_scale,
            scale_to=pin.scale,
            scale_duration=config.scale_duration,
        )

        self._state = MoveState.IDLE
        self._reset()

        events = self.controller.events
        events.emit(PuzzleEvent.MOVE_ENDED, pin.id, snapped)
        events.emit(PuzzleEvent.TRANSITION_REQUESTED, transition)
        logger.debug("Drag ended: pin %s, success=%s", pin.id, snapped)
