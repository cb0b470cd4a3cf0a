"""Tangle - rope-untangling puzzle logic core."""
import sys
from pathlib import Path

__version__ = "0.1.0"

# Add src/tangle to path for flat imports used by the codebase
# This allows imports like `from tangle_engine import PuzzleController` to work
_src_path = Path(__file__).parent
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

# Main API - use flat import (after path setup)
from tangle_types import Slot, Pin, Rope, Intersection, MAX_RENDER_PRIORITY
from tangle_store import EntityStore
from tangle_events import PuzzleEvent, EventChannel, Subscription
from tangle_engine import PuzzleController, TangleConfig
from tangle_move import MoveStateMachine, MoveState, MoveTransition
from tangle_level import LevelBuilder
from tangle_parser import LevelParser, LevelParseError
from tangle_render import TangleRender
from logging_config import setup_logging


__all__ = [
    'Slot', 'Pin', 'Rope', 'Intersection', 'MAX_RENDER_PRIORITY',
    'EntityStore',
    'PuzzleEvent', 'EventChannel', 'Subscription',
    'PuzzleController', 'TangleConfig',
    'MoveStateMachine', 'MoveState', 'MoveTransition',
    'LevelBuilder',
    'LevelParser', 'LevelParseError',
    'TangleRender',
    'setup_logging',
]
