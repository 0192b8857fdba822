"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import duration_filter`` resolve correctly regardless of the working
directory pytest chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture
def unix_filter_config():
    """Filter declarations with both fields in Unix seconds."""
    return {
        "first_date": ["start", "UNIX"],
        "second_date": ["end", "UNIX"],
        "time_unit": "second",
    }


@pytest.fixture
def fixed_year(monkeypatch):
    """Pin the year substituted into year-less patterns."""
    from duration_filter.domain.formats import patterns

    monkeypatch.setattr(patterns, "current_year", lambda zone=None: 2024)
    return 2024
