"""Storage layer.

This package persists raw config bytes in files or process memory.
It reports missing data separately from read failures.
"""
