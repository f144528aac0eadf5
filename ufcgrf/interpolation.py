"""
Log-log interpolation primitives.

``logspace`` and ``linear_interp`` are the scalar building blocks;
``resample_loglog`` evaluates a whole curve on a new grid in log10 space
with the same linear interpolation / boundary-segment extrapolation rule.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.interpolate import interp1d

from ufcgrf.errors import InsufficientDataError, NoPositiveDataError, ShapeMismatchError


def logspace(start_exp: float, stop_exp: float, count: int) -> NDArray[np.float64]:
    """``count`` values evenly spaced in log10 between 10**start_exp and 10**stop_exp.

    Both endpoints are included. ``count <= 0`` yields an empty array and
    ``count == 1`` yields ``[10**start_exp]``.
    """
    if count <= 0:
        return np.empty(0, dtype=np.float64)
    if count == 1:
        return np.array([10.0**start_exp])
    # linspace pins the last exponent to stop_exp exactly
    exponents = np.linspace(start_exp, stop_exp, count)
    return 10.0**exponents


def linear_interp(xs: Sequence[float] | ArrayLike, ys: Sequence[float] | ArrayLike, x_target: float) -> float:
    """
    Linear interpolation with linear extrapolation outside the data range.

    Args:
        xs: Abscissae, ascending.
        ys: Ordinates, same length as ``xs``.
        x_target: Point to evaluate.

    Returns:
        Interpolated value. Below ``xs[0]`` the line through the first two
        points is used, above ``xs[-1]`` the line through the last two.

    Raises:
        ShapeMismatchError: ``xs`` and ``ys`` differ in length.
        InsufficientDataError: No data points.
    """
    x_vals = np.asarray(xs, dtype=np.float64)
    y_vals = np.asarray(ys, dtype=np.float64)
    if x_vals.shape != y_vals.shape:
        raise ShapeMismatchError(
            f"xs and ys must have the same length ({x_vals.size} != {y_vals.size})",
        )
    n = x_vals.size
    if n == 0:
        raise InsufficientDataError("Empty data arrays")
    if n == 1:
        return float(y_vals[0])

    if x_target <= x_vals[0]:
        x0, x1, y0, y1 = x_vals[0], x_vals[1], y_vals[0], y_vals[1]
        return float(y0 + (y1 - y0) / (x1 - x0) * (x_target - x0))

    if x_target >= x_vals[-1]:
        x0, x1, y0, y1 = x_vals[-2], x_vals[-1], y_vals[-2], y_vals[-1]
        return float(y1 + (y1 - y0) / (x1 - x0) * (x_target - x1))

    for i in range(n - 1):
        if x_vals[i] <= x_target <= x_vals[i + 1]:
            if x_target == x_vals[i + 1]:
                return float(y_vals[i + 1])
            t =(x_target - x_vals[i]) / (x_vals[i + 1] - x_vals[i])
            return float(y_vals[i] + t * (y_vals[i + 1] - y_vals[i]))

    # Only reachable for unsorted xs
    raise InsufficientDataError(f"Could not bracket x_target={x_target}; xs must be ascending")


def positive_loglog(x: ArrayLike, y: ArrayLike) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Keep (x > 0, y > 0) pairs, sort by x and return (log10 x, log10 y)."""
    x_arr = np.asarray(x, dtype=np.float64)
    y_arr = np.asarray(y, dtype=np.float64)
    if x_arr.shape != y_arr.shape:
        raise ShapeMismatchError(
            f"x and y must have the same length ({x_arr.size} != {y_arr.size})",
        )

    mask = (x_arr > 0) & (y_arr > 0)
    if not np.any(mask):
        raise NoPositiveDataError("Curve has no valid positive x/y values for log-log interpolation.")

    order = np.argsort(x_arr[mask], kind="stable")
    return np.log10(x_arr[mask][order]), np.log10(y_arr[mask][order])


def resample_loglog(x: ArrayLike, y: ArrayLike, grid: ArrayLike) -> NDArray[np.float64]:
    """
    Evaluate the curve (x, y) on ``grid`` by linear interpolation in log-log space.

    Non-positive pairs are dropped first. Points outside the data range are
    extrapolated along the first / last log-log segment; a single remaining
    point yields a constant curve.
    """
    log_x, log_y = positive_loglog(x, y)
    log_grid = np.log10(np.asarray(grid, dtype=np.float64))

    if log_x.size == 1:
        return np.full(log_grid.shape, 10.0 ** log_y[0])

    f = interp1d(log_x, log_y, kind="linear", fill_value="extrapolate", assume_sorted=True)
    return 10.0 ** f(log_grid)
