"""Timestamp resolution, interval computation and the duration filter."""
