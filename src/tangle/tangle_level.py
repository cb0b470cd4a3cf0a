"""
    Builds level records (slots, pins, ropes) for the puzzle controller.

    Levels are plain lists of records; nothing here touches a controller or a
    store. Pass the result straight to PuzzleController.set_level:

        controller.set_level(*LevelBuilder.crossing_level())
"""

from typing import List, Optional, Sequence, Tuple

from tangle_types import Pin, Rope, Slot

DEFAULT_ROWS = 3
DEFAULT_COLS = 3
DEFAULT_SPACING = 2.0

DEFAULT_ROPE_COLORS = ['#cc3333', '#3380cc', '#33cc4d', '#e6b31a']

# Two diagonals of a 3x3 grid crossing at the center slot
CROSSING_LAYOUT = [(0, 8), (6, 2)]

Level = Tuple[List[Slot], List[Pin], List[Rope]]


class LevelBuilder(object):
    """
        Factory methods for grid levels.

        Ids are sequential integers: slots row-major from the bottom-left,
        pins two per rope in rope order, ropes in pair order. A rope's render
        priority defaults to its id, so later ropes draw over earlier ones.
    """

    @staticmethod
    def grid_slots(rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS,
                   spacing: float = DEFAULT_SPACING) -> List[Slot]:
        """ Slots on a rows x cols grid centered on the origin """
        if rows < 1 or cols < 1:
            return []

        offset_x = (cols - 1) * spacing * 0.5
        offset_y = (rows - 1) * spacing * 0.5

        slots = []
        for row in range(rows):
            for col in range(cols):
                slots.append(Slot(id=len(slots), position=(col * spacing - offset_x, row * spacing - offset_y)))
        return slots

    @staticmethod
    def build(slots: Sequence[Slot], pairs: Sequence[Tuple[int, int]],
              colors: Optional[Sequence[str]] = None) -> Level:
        """
            Create one rope per slot pair, with a pin in each slot of the pair.

            Pairs that reference a slot index outside `slots` are skipped. Pins
            are placed in their slots (positions synced, occupancy set).
        """
        colors = colors or DEFAULT_ROPE_COLORS
        slots = list(slots)
        pins: List[Pin] = []
        ropes: List[Rope] = []

        for first, second in pairs:
            if not (0 <= first < len(slots) and 0 <= second < len(slots)):
                continue

            rope_id = len(ropes)
            pin_ids = []
            for slot in (slots[first], slots[second]):
                pin = Pin(id=len(pins), slot_id=slot.id, rope_id=rope_id)
                pin.sync_position_from_slot(slot)
                slot.occupy(pin.id)
                pins.append(pin)
                pin_ids.append(pin.id)

            ropes.append(Rope(
                id=rope_id,
                color=colors[rope_id % len(colors)],
                pin_ids=pin_ids,
                render_priority=rope_id,
            ))

        return slots, pins, ropes

    @staticmethod
    def sequential_pairs(slot_count: int, rope_count: int) -> List[Tuple[int, int]]:
        """ Consecutive unused slot indices, two per rope """
        pairs = []
        for r in range(rope_count):
            first, second = 2 * r, 2 * r + 1
            if second >= slot_count:
                break
            pairs.append((first, second))
        return pairs

    @staticmethod
    def grid_level(rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS,
                   spacing: float = DEFAULT_SPACING, rope_count: int = 2,
                   colors: Optional[Sequence[str]] = None) -> Level:
        """
            A grid level with `rope_count` ropes.

            Grids of at least 3x3 with two or more ropes get exactly the two
            crossing corner diagonals: the rope count is capped at 2 and any
            extra ropes are not built. Anything else falls back to
            consecutive slot pairs.
        """
        slots = LevelBuilder.grid_slots(rows, cols, spacing)

        if rows >= 3 and cols >= 3 and rope_count >= 2:
            pairs = [LevelBuilder._grid_corner_pair(rows, cols, pair) for pair in CROSSING_LAYOUT]
        else:
            pairs = LevelBuilder.sequential_pairs(len(slots), rope_count)

        return LevelBuilder.build(slots, pairs, colors)

    @staticmethod
    def crossing_level(spacing: float = DEFAULT_SPACING) -> Level:
        """ The 3x3 two-diagonal level: one crossing at the center """
        return LevelBuilder.grid_level(3, 3, spacing, rope_count=2)

    @staticmethod
    def _grid_corner_pair(rows, cols, pair):
        # Map 3x3 corner indices onto the corners of a larger grid
        def corner(index):
            row = 0 if index < 3 else rows - 1
            col = 0 if index % 3 == 0 else cols - 1
            return row * cols + col
        return corner(pair[0]), corner(pair[1])
