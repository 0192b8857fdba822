"""Configuration models for the duration filter."""
