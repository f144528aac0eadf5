"""
Data model for GRF design curves.

A GRF file holds one ``CurveSet``: a family of ``Curve`` objects sharing
axis labels. Within a family each curve is identified by a ``CurveName``,
which is either the numeric value of the family's varying design parameter
(``NumericParam``) or a free-form label (``Label``) such as ``"Front"``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ufcgrf.errors import InsufficientDataError, ShapeMismatchError

FilterValue = Union[float, str]

# Leading float literal, mirroring how chart titles write numbers ("0.5", "2", "1e-2 ft")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_leading_float(text: str) -> float | None:
    """Parse the float literal at the start of ``text``; None when there is none."""
    match = _LEADING_FLOAT.match(text)
    if match is None:
        return None
    return float(match.group(0))


def format_param(value: float) -> str:
    """Render a parameter value the way curve names are written ("2", "0.5")."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class NumericParam:
    """Curve identity given by the value of the family's design parameter."""

    value: float

    def __str__(self) -> str:
        return format_param(self.value)


@dataclass(frozen=True)
class Label:
    """Curve identity given by a free-form label."""

    text: str

    def __str__(self) -> str:
        return self.text


CurveName = Union[NumericParam, Label]


def parse_curve_name(raw: Any) -> CurveName:
    """Classify a raw curve name from a GRF file or a caller."""
    if isinstance(raw, (NumericParam, Label)):
        return raw
    if isinstance(raw, (int, float, np.number)) and not isinstance(raw, bool):
        return NumericParam(float(raw))
    text = str(raw)
    value = parse_leading_float(text)
    if value is None:
        return Label(text)
    return NumericParam(value)


@dataclass(frozen=True, eq=False)
class Curve:
    """A named, sampled 1-D function."""

    name: CurveName
    x: NDArray[np.float64]
    y: NDArray[np.float64]

    def __init__(self, name: CurveName | str | float, x: ArrayLike, y: ArrayLike):
        x_arr = np.array(x, dtype=np.float64).ravel()
        y_arr = np.array(y, dtype=np.float64).ravel()
        if x_arr.shape != y_arr.shape:
            raise ShapeMismatchError(
                f"Curve {name!s}: x has {x_arr.size} points, y has {y_arr.size}",
            )
        if x_arr.size == 0:
            raise InsufficientDataError(f"Curve {name!s} has no data points")
        x_arr.setflags(write=False)
        y_arr.setflags(write=False)
        object.__setattr__(self, "name", parse_curve_name(name))
        object.__setattr__(self, "x", x_arr)
        object.__setattr__(self, "y", y_arr)

    @property
    def point_count(self) -> int:
        return int(self.x.size)

    @property
    def param(self) -> float | None:
        """Numeric parameter value, or None for labelled curves."""
        if isinstance(self.name, NumericParam):
            return self.name.value
        return None

    def renamed(self, name: CurveName | str | float) -> Curve:
        """Return a copy of this curve under a new name."""
        return Curve(name, self.x, self.y)

    def __repr__(self) -> str:
        return f"Curve(name={self.name!s}, points={self.point_count})"


@dataclass
class CurveSet:
    """A family of curves sharing axis labels and a provenance title."""

    title: str
    x_label: str
    y_label: str
    curves: list[Curve]

    def __post_init__(self) -> None:
        self.curves = list(self.curves)
        if not self.curves:
            raise InsufficientDataError(f"Curve set {self.title!r} has no curves")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CurveSet:
        """Build a curve set from the curve service's JSON shape.

        Expected keys: ``filename``, ``xlabel``, ``ylabel`` and ``curves``
        (each with ``curve_name``, ``xdata``, ``ydata``, ``num_points``).
        """
        curves = [
            Curve(c["curve_name"], c["xdata"], c["ydata"])
            for c in payload.get("curves", [])
        ]
        return cls(
            title=str(payload.get("filename", "")),
            x_label=str(payload.get("xlabel", "")),
            y_label=str(payload.get("ylabel", "")),
            curves=curves,
        )

    def numeric_curves(self) -> list[tuple[float, Curve]]:
        """(parameter, curve) pairs for the numerically named curves, in file order."""
        return [(c.name.value, c) for c in self.curves if isinstance(c.name, NumericParam)]


@dataclass
class FilteredCurveSet(CurveSet):
    """A curve set annotated with the design parameters it was drawn for."""

    filters: dict[str, FilterValue] = field(default_factory=dict)

    @classmethod
    def from_curve_set(
        cls,
        curve_set: CurveSet,
        filters: Mapping[str, FilterValue],
        title: str | None = None,
    ) -> FilteredCurveSet:
        return cls(
            title=curve_set.title if title is None else title,
            x_label=curve_set.x_label,
            y_label=curve_set.y_label,
            curves=list(curve_set.curves),
            filters=dict(filters),
        )


def as_curve_sets(data: CurveSet | Sequence[CurveSet]) -> list[CurveSet]:
    """Normalise a single curve set or a sequence of them to a list."""
    if isinstance(data, CurveSet):
        return [data]
    return list(data)
