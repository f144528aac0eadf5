"""
Pytest configuration for the ufcgrf test suite.

Provides synthetic GRF chart libraries. All synthetic curves are power laws
(straight lines on log-log axes) in x and in every chart parameter, so
log-log interpolation through them is exact and pipeline results can be
checked against closed-form values.
"""

from __future__ import annotations

import os

import pytest

# Keep test logs quiet unless a developer asks for more
os.environ.setdefault("UFCGRF_LOG_LEVEL", "WARNING")

from ufcgrf.models import Curve, CurveSet  # noqa: E402

GRID = (1.0, 10.0, 100.0)


@pytest.fixture
def linear_family() -> CurveSet:
    """Curves "1", "2", "3" with y = k * x on the grid [1, 10, 100]."""
    return CurveSet(
        title="Family (N = 2)",
        x_label="L/Ra",
        y_label="Pr",
        curves=[Curve(str(k), GRID, [k * x for x in GRID]) for k in (1, 2, 3)],
    )


@pytest.fixture
def make_chart():
    """Factory for a chart whose curves are named by Za and follow y = scale * x / Za."""

    def _make(title: str, scale: float, za_values=(0.5, 1.0, 2.0)) -> CurveSet:
        return CurveSet(
            title=title,
            x_label="L/Ra",
            y_label="Pr",
            curves=[
                Curve(f"{za:g}", GRID, [scale * x / za for x in GRID]) for za in za_values
            ],
        )

    return _make


@pytest.fixture
def two_axis_library(make_chart) -> dict[str, CurveSet]:
    """Charts for N in (2, 3) and L/H in (1, 2, 4); y = (L/H) * x / Za."""
    library = {}
    index = 73
    for n in (2, 3):
        for lh in (1, 2, 4):
            name = f"02_{index:03d}A.GRF"
            title = (
                f"Figure 2-{index}.  Scaled peak reflected pressure\n"
                f"(N = {n}, L/H = {lh})"
            )
            library[name] = make_chart(title, scale=float(lh))
            index += 1
    return library


@pytest.fixture
def library_fetch(two_axis_library):
    """Synchronous fetch function backed by ``two_axis_library``."""

    def _fetch(name: str) -> CurveSet:
        return two_axis_library[name]

    return _fetch
