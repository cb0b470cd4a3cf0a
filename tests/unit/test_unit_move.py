"""
Unit tests for the move state machine (drag, snap, rollback, input lock).
"""

import unittest

from tangle_events import PuzzleEvent
from tangle_level import LevelBuilder
from tangle_move import MoveState, MoveStateMachine, MoveTransition
from tangle_types import MAX_RENDER_PRIORITY
from solvers.weave_generator import DEFAULT_SAMPLES
from tests.test_fixtures import (
    EventRecorder,
    assert_paths_equal,
    assert_points_close,
    make_crossing_controller,
    snapshot_geometry,
)


class MoveStateMachineUnitTests(unittest.TestCase):
    """Unit tests for MoveStateMachine on the 3x3 crossing level

    Layout (slot ids, spacing 2, centered):
        6 7 8        pin 2 in slot 6, pin 1 in slot 8
        3 4 5
        0 1 2        pin 0 in slot 0, pin 3 in slot 2

    Rope 0 joins pins 0 and 1, rope 1 joins pins 2 and 3 (rope 1 on top).
    """

    def setUp(self):
        self.controller = make_crossing_controller()
        self.machine = MoveStateMachine(self.controller)
        self.recorder = EventRecorder(self.controller.events)

    def tearDown(self):
        self.recorder.close()

    # ========================================================================
    # BEGIN
    # ========================================================================

    def testBeginMove(self):
        self.assertTrue(self.machine.begin_move(0, (-2, -2)))

        self.assertEqual(self.machine.state, MoveState.DRAGGING)
        self.assertEqual(self.machine.selected_pin.id, 0)
        self.assertEqual(self.controller.get_rope(0).render_priority, MAX_RENDER_PRIORITY)
        self.assertAlmostEqual(self.controller.get_pin(0).scale, 1.2)
        self.assertTrue(self.controller.drag_in_progress)
        self.assertEqual(self.recorder.calls[PuzzleEvent.MOVE_STARTED], [(0,)])

    def testBeginMoveInvalidPin(self):
        self.assertFalse(self.machine.begin_move(99, (0, 0)))
        self.assertEqual(self.machine.state, MoveState.IDLE)
        self.assertEqual(self.recorder.order, [])

    def testBeginMoveTwice(self):
        self.machine.begin_move(0, (-2, -2))
        self.assertFalse(self.machine.begin_move(2, (-2, 2)))
        self.assertEqual(self.machine.selected_pin.id, 0)

    # ========================================================================
    # NO-OPS
    # ========================================================================

    def testCallsWhileIdleAreNoOps(self):
        before = snapshot_geometry(self.controller)

        self.machine.update_move((0, 0))
        self.assertFalse(self.machine.end_move((0, 0)))
        self.machine.cancel_move()

        self.assertEqual(self.machine.state, MoveState.IDLE)
        self.assertEqual(self.recorder.order, [])
        self.assertEqual(snapshot_geometry(self.controller), before)

    def testEndMoveTwice(self):
        self.machine.begin_move(0, (-2, -2))
        self.assertTrue(self.machine.end_move((0, -2)))
        self.recorder.reset()

        self.assertFalse(self.machine.end_move((0, 0)))
        self.assertEqual(self.recorder.order, [])
        self.assertEqual(self.controller.get_pin(0).slot_id, 1)

    # ========================================================================
    # UPDATE
    # ========================================================================

    def testUpdateMovesPreviewPositionOnly(self):
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((-0.5, -1.5))

        pin = self.controller.get_pin(0)
        assert_points_close(self, pin.logic_position, (-0.5, -1.5))
        assert_points_close(self, pin.render_position, (-0.5, -1.5, 0))
        self.assertEqual(pin.slot_id, 0, "Slot is only reassigned on commit")
        self.assertEqual(self.controller.get_slot(0).occupant_id, 0)

    def testHighlightOnlyOnChange(self):
        self.machine.begin_move(0, (-2, -2))

        self.machine.update_move((0, -1.8))      # near slot 1
        self.machine.update_move((0.1, -1.9))    # still slot 1
        self.machine.update_move((0.05, -2.0))   # still slot 1
        self.assertEqual(self.recorder.calls[PuzzleEvent.HIGHLIGHT_REQUESTED], [(1,)])
        self.assertEqual(self.machine.target_slot_id, 1)

        self.machine.update_move((-1, -1))       # nothing within the snap radius
        self.assertEqual(self.recorder.count(PuzzleEvent.HIGHLIGHT_CLEARED), 1)
        self.assertIsNone(self.machine.target_slot_id)

        self.machine.update_move((-1.1, -1.1))
        self.assertEqual(self.recorder.count(PuzzleEvent.HIGHLIGHT_CLEARED), 1)

    def testHighlightMovesBetweenSlots(self):
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((0, -1.8))      # slot 1
        self.machine.update_move((0, -0.2))      # slot 4

        self.assertEqual(self.recorder.calls[PuzzleEvent.HIGHLIGHT_REQUESTED], [(1,), (4,)])
        self.assertEqual(self.recorder.count(PuzzleEvent.HIGHLIGHT_CLEARED), 1)

    def testUpdateReweavesDraggedRope(self):
        """While dragged, the rope is on top of everything it crosses"""
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((0, -1.8))

        self.assertEqual(self.machine.preview_crossing_count, 1)
        self.assertEqual(self.machine.preview_intersections[0].top_rope_id, 0)
        self.assertEqual(len(self.controller.get_rope(0).render_path), 2 + DEFAULT_SAMPLES + 1)
        self.assertEqual(self.controller.crossing_count, 1, "Committed crossings are unchanged")
        self.assertGreater(self.recorder.count(PuzzleEvent.RENDER_PATHS_UPDATED), 0)

    def testUpdateToUncrossedPosition(self):
        self.machine.begin_move(1, (2, 2))
        self.machine.update_move((-2, 0))

        self.assertEqual(self.machine.preview_crossing_count, 0)
        self.assertEqual(len(self.controller.get_rope(0).render_path), 2)

    # ========================================================================
    # COMMIT
    # ========================================================================

    def testEndMoveSnapsToNearestEmptySlot(self):
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((0, -1.8))
        transitions = []
        with self.controller.events.subscribe(PuzzleEvent.TRANSITION_REQUESTED, transitions.append):
            self.assertTrue(self.machine.end_move((0.1, -1.7)))

        pin = self.controller.get_pin(0)
        self.assertEqual(pin.slot_id, 1)
        assert_points_close(self, pin.logic_position, (0, -2))
        self.assertEqual(pin.scale, 1.0)
        self.assertEqual(self.controller.get_rope(0).render_priority, 0)
        self.assertIsNone(self.controller.get_slot(0).occupant_id)
        self.assertEqual(self.controller.get_slot(1).occupant_id, 0)
        self.assertTrue(self.controller.store.check_consistency())

        self.assertEqual(self.machine.state, MoveState.IDLE)
        self.assertFalse(self.controller.drag_in_progress)
        self.assertEqual(self.recorder.calls[PuzzleEvent.PIN_SNAPPED], [(0, 1)])
        self.assertEqual(self.recorder.calls[PuzzleEvent.MOVE_ENDED], [(0, True)])

        self.assertEqual(len(transitions), 1)
        transition = transitions[0]
        self.assertIsInstance(transition, MoveTransition)
        self.assertEqual(transition.kind, 'snap')
        self.assertEqual(transition.easing, 'out_back')
        self.assertAlmostEqual(transition.duration, 0.25)
        assert_points_close(self, transition.start, (0.1, -1.7, 0))
        assert_points_close(self, transition.target, (0, -2, 0))
        self.assertAlmostEqual(transition.scale_from, 1.2)
        self.assertAlmostEqual(transition.scale_to, 1.0)

    def testCommitRestoresPriorityBeforeWeaving(self):
        """After the settling recompute the higher-priority rope is on top again"""
        self.machine.begin_move(0, (-2, -2))
        self.machine.end_move((0, -2))

        self.assertEqual(self.controller.intersections[0].top_rope_id, 1)
        self.assertEqual(len(self.controller.get_rope(0).render_path), 2)

    def testHighlightClearedOnRelease(self):
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((0, -1.8))
        self.machine.end_move((0, -1.8))
        self.assertEqual(self.recorder.count(PuzzleEvent.HIGHLIGHT_CLEARED), 1)

    # ========================================================================
    # ROLLBACK
    # ========================================================================

    def testEndMoveWithoutTargetRollsBack(self):
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((-1, -1))

        self.assertFalse(self.machine.end_move((-1, -1)))

        pin = self.controller.get_pin(0)
        self.assertEqual(pin.slot_id, 0)
        assert_points_close(self, pin.logic_position, (-2, -2))
        self.assertEqual(self.recorder.calls[PuzzleEvent.MOVE_ENDED], [(0, False)])
        self.assertEqual(self.recorder.count(PuzzleEvent.PIN_SNAPPED), 0)

        transition = self.recorder.calls[PuzzleEvent.TRANSITION_REQUESTED][0][0]
        self.assertEqual(transition.kind, 'rollback')
        self.assertEqual(transition.easing, 'out_elastic')
        self.assertAlmostEqual(transition.duration, 0.3)
        assert_points_close(self, transition.target, (-2, -2, 0))

    def testReleaseOnOwnSlotRollsBack(self):
        """The origin slot is still occupied by the dragged pin, so it is never a target"""
        self.machine.begin_move(0, (-2, -2))
        self.assertFalse(self.machine.end_move((-2, -2)))
        self.assertEqual(self.controller.get_pin(0).slot_id, 0)

    def testCancelRestoresGeometryExactly(self):
        before = snapshot_geometry(self.controller)

        self.machine.begin_move(0, (-2, -2))
        for position in [(-1.5, -1.5), (0, -1.8), (1.5, 0.3), (-0.2, 1.7), (0.4, 0.1)]:
            self.machine.update_move(position)
        self.machine.cancel_move()

        after = snapshot_geometry(self.controller)
        self.assertEqual(after['priorities'], before['priorities'])
        for pin_id, (slot_id, logic, render) in before['pins'].items():
            self.assertEqual(after['pins'][pin_id][0], slot_id)
            assert_points_close(self, after['pins'][pin_id][1], logic)
            assert_points_close(self, after['pins'][pin_id][2], render)
        for rope_id, path in before['paths'].items():
            assert_paths_equal(self, after['paths'][rope_id], path, msg=f"rope {rope_id}")

        self.assertEqual(self.machine.state, MoveState.IDLE)
        self.assertEqual(self.controller.get_pin(0).scale, 1.0)
        self.assertTrue(self.controller.store.check_consistency())

    def testCancelAfterNoUpdates(self):
        self.machine.begin_move(3, (2, -2))
        self.machine.cancel_move()
        self.assertEqual(self.recorder.calls[PuzzleEvent.MOVE_ENDED], [(3, False)])
        self.assertEqual(self.controller.get_pin(3).slot_id, 2)

    # ========================================================================
    # INPUT LOCK
    # ========================================================================

    def testInputLockCancelsDrag(self):
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((0, -1.8))

        self.machine.set_input_lock(True)

        self.assertEqual(self.machine.state, MoveState.IDLE)
        self.assertEqual(self.controller.get_pin(0).slot_id, 0)
        self.assertEqual(self.recorder.calls[PuzzleEvent.MOVE_ENDED], [(0, False)])
        self.assertEqual(self.recorder.count(PuzzleEvent.PIN_SNAPPED), 0)

    def testInputLockBlocksBegin(self):
        self.machine.set_input_lock(True)
        self.assertFalse(self.machine.begin_move(0, (-2, -2)))
        self.assertTrue(self.machine.input_locked)

        self.machine.set_input_lock(False)
        self.assertTrue(self.machine.begin_move(0, (-2, -2)))

    # ========================================================================
    # LEVEL REPLACED DURING A DRAG
    # ========================================================================

    def _replaceLevelMidDrag(self):
        self.machine.begin_move(0, (-2, -2))
        self.machine.update_move((0, -1.8))
        self.controller.set_level(*LevelBuilder.crossing_level())
        self.recorder.reset()

    def testEndMoveAfterSetLevelTouchesNothing(self):
        self._replaceLevelMidDrag()
        before = [(pin.id, pin.slot_id) for pin in self.controller.pins]

        self.assertFalse(self.machine.end_move((0, -2)))

        self.assertEqual(self.machine.state, MoveState.IDLE)
        self.assertEqual([(pin.id, pin.slot_id) for pin in self.controller.pins], before)
        self.assertEqual(self.controller.get_pin(0).slot_id, 0)
        self.assertEqual(self.controller.get_slot(1).occupant_id, None)
        self.assertEqual([rope.render_priority for rope in self.controller.ropes], [0, 1])
        self.assertEqual(self.recorder.order, [])

    def testCancelAfterSetLevelTouchesNothing(self):
        self._replaceLevelMidDrag()
        geometry = snapshot_geometry(self.controller)

        self.machine.cancel_move()

        self.assertEqual(self.machine.state, MoveState.IDLE)
        self.assertEqual(snapshot_geometry(self.controller), geometry)
        self.assertFalse(self.controller.drag_in_progress)
        self.assertEqual(self.recorder.order, [])

    def testUpdateAfterSetLevelDoesNotMoveNewPin(self):
        self._replaceLevelMidDrag()

        self.machine.update_move((0, -2))

        self.assertEqual(self.machine.state, MoveState.IDLE)
        assert_points_close(self, self.controller.get_pin(0).logic_position, (-2, -2))
        self.assertEqual(self.machine.preview_intersections, [])
        self.assertEqual(self.recorder.order, [])

    def testBeginMoveAfterSetLevelStartsFresh(self):
        self._replaceLevelMidDrag()

        self.assertTrue(self.machine.begin_move(2, (-2, 2)))
        self.assertEqual(self.machine.selected_pin, self.controller.get_pin(2))
        self.assertEqual(self.controller.get_rope(1).render_priority, MAX_RENDER_PRIORITY)


if __name__ == '__main__':
    unittest.main()
