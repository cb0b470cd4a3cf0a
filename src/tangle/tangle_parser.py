"""
    Parses a JSON level document into slot, pin and rope records.

    Document format:

        {
            "grid":  {"rows": 3, "cols": 3, "spacing": 2.0},        # optional
            "slots": [{"id": 0, "position": [-2, -2]}, ...],        # or this
            "ropes": [
                {"id": 0, "color": "#cc3333", "priority": 0, "slots": [0, 8]},
                ...
            ]
        }

    Exactly one of "grid" or "slots" provides the slots. Each rope names the
    two slots its pins start in; pins get sequential ids in rope order. Rope
    "id", "color" and "priority" are optional and default to the rope's index,
    a palette color and the index respectively.
"""

import json
import logging
from typing import Any, Dict, List, Union

from tangle_types import Slot
from tangle_level import DEFAULT_ROPE_COLORS, DEFAULT_SPACING, Level, LevelBuilder

logger = logging.getLogger("tangle.parser")


class LevelParseError(ValueError):
    """ Raised for documents that do not describe a valid level """


class LevelParsingContext:
    """
        State shared while parsing one document: the slots parsed so far keyed
        by id, and which slots have already been claimed by a rope.
    """
    def __init__(self):
        self.slotMap: Dict[Any, Slot] = {}
        self.slotIndex: Dict[Any, int] = {}
        self.claimed = set()
        self.ropeIds = set()


class LevelParser(object):
    """
        Turns a level document (JSON text or an already-decoded dict) into the
        (slots, pins, ropes) triple accepted by PuzzleController.set_level.
    """

    def parse(document: Union[str, bytes, Dict[str, Any]]) -> Level:
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except json.JSONDecodeError as e:
                raise LevelParseError(f"Could not parse level JSON: {e}") from e

        if not isinstance(document, dict):
            raise LevelParseError("Level document must be a JSON object")

        ctx = LevelParsingContext()
        slots = LevelParser.parse_slots(document, ctx)

        ropeDescs = document.get("ropes", [])
        if not isinstance(ropeDescs, list):
            raise LevelParseError("'ropes' must be a list")

        pairs = []
        colors = []
        priorities = []
        ropeIds = []
        for index, ropeDesc in enumerate(ropeDescs):
            ropeId, color, priority, pair = LevelParser.parse_rope(ropeDesc, index, ctx)
            ropeIds.append(ropeId)
            colors.append(color)
            priorities.append(priority)
            pairs.append(pair)

        slots, pins, ropes = LevelBuilder.build(slots, pairs, colors)

        # LevelBuilder numbers ropes by position; apply the document's ids and priorities
        pinToRope = {}
        for rope, ropeId, color, priority in zip(ropes, ropeIds, colors, priorities):
            for pinId in rope.pin_ids:
                pinToRope[pinId] = ropeId
            rope.id = ropeId
            rope.color = color
            rope.render_priority = priority
        for pin in pins:
            pin.rope_id = pinToRope[pin.id]

        logger.debug("Parsed level: %d slots, %d ropes", len(slots), len(ropes))
        return slots, pins, ropes

    def parse_slots(document, ctx) -> List[Slot]:
        hasGrid = "grid" in document
        hasSlots = "slots" in document

        if hasGrid == hasSlots:
            raise LevelParseError("Level must define exactly one of 'grid' or 'slots'")

        if hasGrid:
            grid = document["grid"]
            if not isinstance(grid, dict):
                raise LevelParseError("'grid' must be an object")
            try:
                rows = int(grid["rows"])
                cols = int(grid["cols"])
                spacing = float(grid.get("spacing", DEFAULT_SPACING))
            except (KeyError, TypeError, ValueError) as e:
                raise LevelParseError(f"Invalid grid description: {grid}") from e
            if rows < 1 or cols < 1 or spacing <= 0:
                raise LevelParseError(f"Grid needs positive rows, cols and spacing: {grid}")
            slots = LevelBuilder.grid_slots(rows, cols, spacing)
        else:
            slotDescs = document["slots"]
            if not isinstance(slotDescs, list):
                raise LevelParseError("'slots' must be a list")
            slots = [LevelParser.parse_slot(desc, ctx) for desc in slotDescs]

        for index, slot in enumerate(slots):
            ctx.slotMap[slot.id] = slot
            ctx.slotIndex[slot.id] = index

        return slots

    def parse_id(value, kind):
        # JSON ids are strings or integers; anything else cannot key a record
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise LevelParseError(f"Invalid {kind} id {value!r}: expected a string or integer")
        return value

    def parse_slot(desc, ctx) -> Slot:
        if not isinstance(desc, dict) or "id" not in desc or "position" not in desc:
            raise LevelParseError(f"Slot needs 'id' and 'position': {desc}")

        slotId = LevelParser.parse_id(desc["id"], "slot")
        if slotId in ctx.slotMap:
            raise LevelParseError(f"Duplicate slot id found {slotId}")

        position = desc["position"]
        try:
            x, y = float(position[0]), float(position[1])
        except (TypeError, IndexError, ValueError) as e:
            raise LevelParseError(f"Invalid position for slot {slotId}: {position}") from e

        slot = Slot(id=slotId, position=(x, y))
        ctx.slotMap[slotId] = slot
        return slot

    def parse_rope(desc, index, ctx):
        if not isinstance(desc, dict):
            raise LevelParseError(f"Rope must be an object: {desc}")

        ropeId = LevelParser.parse_id(desc.get("id", index), "rope")
        if ropeId in ctx.ropeIds:
            raise LevelParseError(f"Duplicate rope id found {ropeId}")
        ctx.ropeIds.add(ropeId)

        color = desc.get("color") or DEFAULT_ROPE_COLORS[index % len(DEFAULT_ROPE_COLORS)]

        try:
            priority = int(desc.get("priority", index))
        except (TypeError, ValueError) as e:
            raise LevelParseError(f"Invalid priority for rope {ropeId}: {desc.get('priority')}") from e

        slotIds = desc.get("slots")
        if not isinstance(slotIds, list) or len(slotIds) != 2:
            raise LevelParseError(f"Rope {ropeId} must name exactly two slots")

        pair = []
        for slotId in slotIds:
            slotId = LevelParser.parse_id(slotId, "slot")
            if slotId not in ctx.slotMap:
                raise LevelParseError(f"Rope {ropeId} references unknown slot {slotId}")
            if slotId in ctx.claimed:
                raise LevelParseError(f"Slot {slotId} is used by more than one pin")
            ctx.claimed.add(slotId)
            pair.append(ctx.slotIndex[slotId])

        return ropeId, color, priority, tuple(pair)
