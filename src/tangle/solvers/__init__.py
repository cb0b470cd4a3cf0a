"""
Solvers for rope crossings and render paths.

Pipeline:
1. IntersectionSolver - finds which rope pairs cross and which rope is on top
2. PathWeaver - rebuilds render paths, splicing a weave in at each top crossing
"""

from .intersection_solver import (
    IntersectionSolver,
    IntersectionSolution,
)

from .path_weaver import (
    PathWeaver,
    DEFAULT_TUBE_RADIUS,
)

from .weave_generator import (
    WeaveGenerator,
    generate_helix_path,
    generate_arch_path,
    get_weave_generator,
)

__all__ = [
    # Stage 1: Intersection Solving
    'IntersectionSolver',
    'IntersectionSolution',
    # Stage 2: Path Weaving
    'PathWeaver',
    'DEFAULT_TUBE_RADIUS',
    'WeaveGenerator',
    'generate_helix_path',
    'generate_arch_path',
    'get_weave_generator',
]
