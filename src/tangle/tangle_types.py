"""
    Provides the entity records of a tangle puzzle: slots, pins, ropes and the
    derived intersections between ropes.

    Slots are fixed sockets in the puzzle plane. Pins sit in slots and terminate
    ropes. Ropes join two pins and own the 3D render path that weaves are
    spliced into. Intersections are transient records rebuilt on every recompute.
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Optional, Tuple


Point2 = Tuple[float, float]
Point3 = Tuple[float, float, float]
EntityId = Hashable

# Render priority given to a rope while one of its pins is being dragged
MAX_RENDER_PRIORITY = 2 ** 31 - 1


@dataclass
class Slot:
    """
    A fixed position a pin may occupy.

    Attributes:
        id: Unique slot identifier
        position: 2D position in the puzzle plane
        occupant_id: Id of the pin currently held, or None when empty
    """
    id: EntityId
    position: Point2
    occupant_id: Optional[EntityId] = None

    def __post_init__(self):
        self.position = (float(self.position[0]), float(self.position[1]))

    @property
    def is_empty(self) -> bool:
        return self.occupant_id is None

    def occupy(self, pin_id: EntityId) -> None:
        self.occupant_id = pin_id

    def release(self) -> None:
        self.occupant_id = None


@dataclass
class Pin:
    """
    A movable rope endpoint.

    Attributes:
        id: Unique pin identifier
        slot_id: Slot the pin currently occupies (None while unplaced)
        rope_id: Rope this pin terminates
        logic_position: 2D position used by the intersection engine
        render_position: 3D position used by rendering; diverges from the slot
            only during a drag preview
        scale: Visual scale, raised while the pin is dragged
    """
    id: EntityId
    slot_id: Optional[EntityId]
    rope_id: EntityId
    logic_position: Point2 = (0.0, 0.0)
    render_position: Point3 = (0.0, 0.0, 0.0)
    scale: float = 1.0

    def sync_position_from_slot(self, slot: Slot) -> None:
        """Reconcile logic and render positions to the slot (commit or rollback)."""
        self.logic_position = slot.position
        self.render_position = (slot.position[0], slot.position[1], 0.0)

    def set_preview_position(self, position) -> None:
        """Move the pin to a hypothetical drag position, keeping its render depth."""
        self.logic_position = (float(position[0]), float(position[1]))
        self.render_position = (self.logic_position[0], self.logic_position[1], self.render_position[2])


@dataclass
class Rope:
    """
    A link between pins.

    Attributes:
        id: Unique rope identifier
        color: Color/identity tag (e.g. '#cc3333')
        pin_ids: Ordered pin ids; exactly two in this puzzle
        render_priority: Higher priority renders on top at a crossing
        render_path: Ordered 3D points from the first pin to the last, with
            weave detours spliced in at crossings where this rope is on top
    """
    id: EntityId
    color: str
    pin_ids: List[EntityId]
    render_priority: int = 0
    render_path: List[Point3] = field(default_factory=list)

    @property
    def start_pin_id(self) -> Optional[EntityId]:
        return self.pin_ids[0] if self.pin_ids else None

    @property
    def end_pin_id(self) -> Optional[EntityId]:
        return self.pin_ids[-1] if len(self.pin_ids) > 1 else None


@dataclass(frozen=True)
class Intersection:
    """
    A crossing between two distinct ropes.

    Attributes:
        rope_a_id: First rope of the tested pair
        rope_b_id: Second rope of the tested pair
        point: 2D crossing point
        top_rope_id: Rope rendered over the other at this crossing
    """
    rope_a_id: EntityId
    rope_b_id: EntityId
    point: Point2
    top_rope_id: EntityId

    @property
    def bottom_rope_id(self) -> EntityId:
        return self.rope_b_id if self.top_rope_id == self.rope_a_id else self.rope_a_id

    def involves(self, rope_id: EntityId) -> bool:
        return rope_id == self.rope_a_id or rope_id == self.rope_b_id

    def other_rope_id(self, rope_id: EntityId) -> Optional[EntityId]:
        """The rope crossing `rope_id` here, or None if `rope_id` is not part of it."""
        if rope_id == self.rope_a_id:
            return self.rope_b_id
        if rope_id == self.rope_b_id:
            return self.rope_a_id
        return None
