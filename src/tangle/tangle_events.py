"""
    Observer channel for puzzle notifications.

    The PuzzleController owns one EventChannel. Collaborators (HUD, renderers,
    input glue) subscribe at setup time and keep the returned Subscription for as
    long as they live; dropping out is an explicit `unsubscribe()` or the end of
    a `with` block.

    Usage:
        channel = EventChannel()
        sub = channel.subscribe(PuzzleEvent.PUZZLE_SOLVED, on_solved)
        ...
        sub.unsubscribe()

        with channel.subscribe(PuzzleEvent.CROSSING_COUNT_CHANGED, counts.append):
            controller.recompute()
"""

from enum import Enum, auto
from typing import Callable, Dict, List


class PuzzleEvent(Enum):
    """ Notifications fired by the controller and the move state machine """
    CROSSING_COUNT_CHANGED = auto()   # (count)
    PUZZLE_SOLVED = auto()            # ()
    PIN_SNAPPED = auto()              # (pin_id, slot_id)
    RENDER_PATHS_UPDATED = auto()     # ()
    HIGHLIGHT_REQUESTED = auto()      # (slot_id)
    HIGHLIGHT_CLEARED = auto()        # ()
    MOVE_STARTED = auto()             # (pin_id)
    MOVE_ENDED = auto()               # (pin_id, success)
    TRANSITION_REQUESTED = auto()     # (MoveTransition)


class Subscription(object):
    """ Handle tying a callback's registration to its owner's lifetime """

    def __init__(self, channel: 'EventChannel', event: PuzzleEvent, callback: Callable):
        self._channel = channel
        self.event = event
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._channel is not None

    def unsubscribe(self) -> None:
        if self._channel is not None:
            self._channel._remove(self)
            self._channel = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.unsubscribe()
        return False


class EventChannel(object):
    """
        Synchronous observer list keyed by PuzzleEvent.

        Callbacks run in subscription order. Emission iterates over a snapshot, so
        a callback may subscribe or unsubscribe without affecting the current
        dispatch. Exceptions raised by a callback propagate to the emitter.
    """

    def __init__(self):
        self._subscriptions: Dict[PuzzleEvent, List[Subscription]] = {}

    def subscribe(self, event: PuzzleEvent, callback: Callable) -> Subscription:
        subscription = Subscription(self, event, callback)
        self._subscriptions.setdefault(event, []).append(subscription)
        return subscription

    def emit(self, event: PuzzleEvent, *args) -> None:
        for subscription in list(self._subscriptions.get(event, ())):
            if subscription.active:
                subscription.callback(*args)

    def subscriber_count(self, event: PuzzleEvent) -> int:
        return len(self._subscriptions.get(event, ()))

    def clear(self) -> None:
        for subscriptions in self._subscriptions.values():
            for subscription in subscriptions:
                subscription._channel = None
        self._subscriptions.clear()

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.event)
        if subscriptions and subscription in subscriptions:
            subscriptions.remove(subscription)
