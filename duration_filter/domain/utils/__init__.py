"""
Shared utilities for timestamp resolution and duration output.

Modules
-------
timestamps
    Timestamp parsing and conversion utilities for the built-in formats
    (ISO8601, Unix seconds, Unix milliseconds, TAI64N)
units
    Time unit conversion, half-away-from-zero rounding and HH:MM:SS
    formatting of durations
"""

__all__ = []
