"""
Tangle Profiling Package

Lightweight profiling markers (@profile decorator, perf_marker context manager)
used around the recompute, weave and preview passes.

Quick usage:
    from profiling import profile, perf_marker, enable_profiling

    @profile
    def my_function():
        with perf_marker("my_section"):
            ...
"""

from .profile import (
    enable_profiling,
    is_profiling_enabled,
    profiling_scope,
    reset_profile,
    get_profile_results,
    perf_marker,
    profile,
    _PROFILING_COMPILED_OUT,
)

__all__ = [
    'enable_profiling',
    'is_profiling_enabled',
    'profiling_scope',
    'reset_profile',
    'get_profile_results',
    'perf_marker',
    'profile',
    '_PROFILING_COMPILED_OUT',
]
