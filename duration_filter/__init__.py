"""
Event duration filter package.

Computes the interval between two timestamp fields of an event, resolving
each field against an ordered list of candidate formats, and writes the
(optionally unit-converted or prettified) result back into the event.
"""

from .__version__ import __version__
from .domain.event import Event
from .domain.filter import DurationFilter

__all__ = ["__version__", "DurationFilter", "Event"]
