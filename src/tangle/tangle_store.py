"""
    In-memory entity store for a loaded level.

    The store is the single owner of slot, pin and rope records and the only
    place that mutates slot occupancy. Occupying and releasing always update
    the slot and the pin together so the occupancy duality holds at every point
    observable by the intersection engine:

        slot.occupant_id == pin.id  <=>  pin.slot_id == slot.id
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from tangle_types import EntityId, Pin, Rope, Slot

logger = logging.getLogger("tangle.store")


class EntityStore(object):
    """
        Ordered id -> record maps for slots, pins and ropes.

        Lookups are dictionary based; iteration follows insertion order, which is
        the order every external listing (and the pairwise crossing sweep) uses.
    """

    def __init__(self):
        self._slots: Dict[EntityId, Slot] = {}
        self._pins: Dict[EntityId, Pin] = {}
        self._ropes: Dict[EntityId, Rope] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, slots: Iterable[Slot], pins: Iterable[Pin], ropes: Iterable[Rope]) -> None:
        """
            Replace the store contents wholesale.

            Records with a duplicate id are dropped (first one wins). Slot
            occupancy is rebuilt from pin placement: a pin whose slot is missing
            or already claimed by an earlier pin is left unplaced. Placed pins have
            their positions synced from their slot.
        """
        self._slots = self._index(slots or [], "slot")
        self._pins = self._index(pins or [], "pin")
        self._ropes = self._index(ropes or [], "rope")

        for slot in self._slots.values():
            slot.release()

        for pin in self._pins.values():
            slot = self._slots.get(pin.slot_id) if pin.slot_id is not None else None

            if slot is None:
                if pin.slot_id is not None:
                    logger.warning("Pin %s references missing slot %s; left unplaced", pin.id, pin.slot_id)
                pin.slot_id = None
                continue

            if not slot.is_empty:
                logger.warning("Pin %s references slot %s already held by pin %s; left unplaced",
                               pin.id, slot.id, slot.occupant_id)
                pin.slot_id = None
                continue

            slot.occupy(pin.id)
            pin.sync_position_from_slot(slot)

        for rope in self._ropes.values():
            missing = [pin_id for pin_id in rope.pin_ids if pin_id not in self._pins]
            if missing:
                logger.warning("Rope %s references missing pins %s", rope.id, missing)

        logger.debug("Store loaded: %d slots, %d pins, %d ropes",
                     len(self._slots), len(self._pins), len(self._ropes))

    @staticmethod
    def _index(records, kind):
        indexed = {}
        for record in records:
            if record.id in indexed:
                logger.warning("Duplicate %s id %s ignored", kind, record.id)
                continue
            indexed[record.id] = record
        return indexed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def slots(self) -> Tuple[Slot, ...]:
        return tuple(self._slots.values())

    @property
    def pins(self) -> Tuple[Pin, ...]:
        return tuple(self._pins.values())

    @property
    def ropes(self) -> Tuple[Rope, ...]:
        return tuple(self._ropes.values())

    def get_slot(self, slot_id) -> Optional[Slot]:
        return self._slots.get(slot_id) if slot_id is not None else None

    def get_pin(self, pin_id) -> Optional[Pin]:
        return self._pins.get(pin_id) if pin_id is not None else None

    def get_rope(self, rope_id) -> Optional[Rope]:
        return self._ropes.get(rope_id) if rope_id is not None else None

    def get_rope_endpoints(self, rope: Rope) -> Optional[Tuple[Pin, Pin]]:
        """Start and end pins of a rope, or None if either does not resolve."""
        start = self.get_pin(rope.start_pin_id)
        end = self.get_pin(rope.end_pin_id)
        if start is None or end is None:
            return None
        return start, end

    def find_nearest_empty_slot(self, position, max_radius: float) -> Optional[Slot]:
        """
            Nearest unoccupied slot within `max_radius` of `position`.

            Ties keep the slot that comes first in store order.
        """
        nearest = None
        min_dist_sq = float('inf')
        max_radius_sq = max_radius * max_radius

        for slot in self._slots.values():
            if not slot.is_empty:
                continue

            dx = position[0] - slot.position[0]
            dy = position[1] - slot.position[1]
            dist_sq = dx * dx + dy * dy
            if dist_sq <= max_radius_sq and dist_sq < min_dist_sq:
                min_dist_sq = dist_sq
                nearest = slot

        return nearest

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def move_pin(self, pin_id, slot_id) -> bool:
        """
            Move a pin into an empty slot, releasing the slot it came from.

            Everything is validated before anything is mutated: unknown ids or an
            occupied target leave the store untouched and return False.
        """
        pin = self.get_pin(pin_id)
        target = self.get_slot(slot_id)

        if pin is None or target is None:
            logger.warning("move_pin: unknown pin %s or slot %s", pin_id, slot_id)
            return False

        if not target.is_empty:
            logger.warning("move_pin: slot %s is occupied by pin %s", target.id, target.occupant_id)
            return False

        previous = self.get_slot(pin.slot_id)
        if previous is not None and previous.occupant_id == pin.id:
            previous.release()

        target.occupy(pin.id)
        pin.slot_id = target.id
        pin.sync_position_from_slot(target)
        return True

    def check_consistency(self) -> bool:
        """True when slot occupancy and pin placement agree in both directions."""
        for slot in self._slots.values():
            if slot.occupant_id is None:
                continue
            pin = self._pins.get(slot.occupant_id)
            if pin is None or pin.slot_id != slot.id:
                return False

        for pin in self._pins.values():
            if pin.slot_id is None:
                continue
            slot = self._slots.get(pin.slot_id)
            if slot is None or slot.occupant_id != pin.id:
                return False

        return True
