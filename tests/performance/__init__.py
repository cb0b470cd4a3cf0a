"""
Performance tests for the tangle puzzle pipeline.

This package contains performance regression tests that ensure
recompute, drag preview and rendering don't slow down over time.

Tests:
- test_perf_puzzle.py - Recompute and render benchmarks on random levels (10, 50, 100 ropes)

Levels are generated from a fixed seed, so no data files are needed.
"""
