"""
UFC 3-340-02 shock load lookup for a charge inside a cubicle.

Scaled reflected pressure and impulse on a cubicle wall depend on four
chart parameters besides the evaluation abscissa L/Ra:

    N    number of adjacent reflecting surfaces (charts are drawn per N)
    Za   scaled standoff  Ra / W^(1/3)
    L/H, l/L, h/H   wall aspect ratio and relative charge position

``resolve_shock_parameter`` collapses one axis per interpolate/combine pair
in the order Za -> L/H -> l/L -> h/H and evaluates the remaining curve at
L/Ra (UFC Example 2A-4).
"""

from __future__ import annotations

from dataclasses import dataclass

from ufcgrf.config import PipelineConfig
from ufcgrf.constants import (
    CHARGE_WEIGHT_FACTOR,
    FIGURE_PANELS,
    IMPULSE_FIGURES,
    PRESSURE_FIGURES,
    SHOCK_FILTER_KEYS,
)
from ufcgrf.logging import get_logger
from ufcgrf.models import format_param
from ufcgrf.pipeline import FetchFn, GRFPipeline

log = get_logger(__name__)


def scaled_distance(charge_weight: float, standoff: float) -> float:
    """Hopkinson-Cranz scaled distance R / W^(1/3)."""
    if charge_weight <= 0:
        raise ValueError(f"charge_weight must be positive, got {charge_weight}")
    return standoff / charge_weight ** (1.0 / 3.0)


def _figure_names(figures: range) -> list[str]:
    return [f"02_{number:03d}{panel}.GRF" for number in figures for panel in FIGURE_PANELS]


def pressure_curve_names() -> list[str]:
    """GRF files of the scaled peak reflected pressure charts (Figures 2-73 to 2-100)."""
    return _figure_names(PRESSURE_FIGURES)


def impulse_curve_names() -> list[str]:
    """GRF files of the scaled reflected impulse charts (Figures 2-101 to 2-148)."""
    return _figure_names(IMPULSE_FIGURES)


@dataclass
class CubicleGeometry:
    """Wall and charge geometry of a cubicle (consistent length/weight units)."""

    H: float  # wall height
    L: float  # wall length
    h: float  # charge height above the floor
    l: float  # noqa: E741  charge distance from the nearest side wall
    ra: float  # normal standoff from the wall
    charge_weight: float  # nominal explosive weight
    n_surfaces: int = 2  # adjacent reflecting surfaces

    @property
    def W(self) -> float:
        """Design charge weight including the 20 % safety factor."""
        return CHARGE_WEIGHT_FACTOR * self.charge_weight

    @property
    def h_over_H(self) -> float:
        return self.h / self.H

    @property
    def l_over_L(self) -> float:
        return self.l / self.L

    @property
    def L_over_H(self) -> float:
        return self.L / self.H

    @property
    def L_over_Ra(self) -> float:
        return self.L / self.ra

    @property
    def Za(self) -> float:
        return scaled_distance(self.W, self.ra)


@dataclass
class ShockLoads:
    """Scaled shock loads on a cubicle wall."""

    pressure: float  # scaled peak reflected pressure Pr
    impulse: float  # scaled reflected impulse ir / W^(1/3)


def resolve_shock_parameter(pipeline: GRFPipeline, geometry: CubicleGeometry) -> float:
    """
    Run the four-axis collapse on a fresh pipeline and return the scalar.

    Args:
        pipeline: Pipeline at step 0 whose curve names are one chart series.
        geometry: Cubicle geometry providing the chart parameters.
    """
    za = geometry.Za
    l_h = geometry.L_over_H
    h_h = geometry.h_over_H
    za_txt, l_h_txt = format_param(za), format_param(l_h)

    pipeline.get_data(SHOCK_FILTER_KEYS)
    pipeline.filter_data("N", float(geometry.n_surfaces))

    pipeline.interpolate(za, "Za")
    pipeline.combine_by("L/H", f"Collapsed at Za = {za_txt}")

    pipeline.interpolate(l_h, "L/H")
    pipeline.combine_by("l/L", f"Collapsed at Za = {za_txt}, L/H = {l_h_txt}")

    pipeline.interpolate(geometry.l_over_L, "l/L")
    pipeline.combine_by(
        "h/H", f"Collapsed at Za = {za_txt}, L/H = {l_h_txt}, h/H = {format_param(h_h)}",
    )

    pipeline.interpolate(h_h, "h/H")
    return pipeline.evaluate(geometry.L_over_Ra)


def resolve_shock_loads(
    geometry: CubicleGeometry,
    fetch_fn: FetchFn,
    config: PipelineConfig | None = None,
) -> ShockLoads:
    """Resolve scaled reflected pressure and impulse for ``geometry``."""
    log.info(
        f"Resolving shock loads: Za={geometry.Za:.4g}, L/H={geometry.L_over_H:.4g}, "
        f"l/L={geometry.l_over_L:.4g}, h/H={geometry.h_over_H:.4g}, N={geometry.n_surfaces}",
    )
    pressure = resolve_shock_parameter(
        GRFPipeline(pressure_curve_names(), fetch_fn, config), geometry,
    )
    impulse = resolve_shock_parameter(
        GRFPipeline(impulse_curve_names(), fetch_fn, config), geometry,
    )
    return ShockLoads(pressure=pressure, impulse=impulse)
