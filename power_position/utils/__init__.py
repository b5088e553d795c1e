"""
Utility functions module.

Time Semantics:
- The trade extraction date is the current UTC calendar date
- Report file names use local wall-clock time at minute resolution
"""
