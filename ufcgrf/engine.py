"""
GRF curve interpolation engine.

Synthesises design curves at arbitrary parameter values and evaluates a
single resolved curve at one abscissa.

Usage:
    from ufcgrf.engine import interpolate_grf, eval_grf_single

    curve = interpolate_grf(family, 2.5)          # new curve named "2.5"
    result = eval_grf_single(resolved_set, 6.0)   # Evaluation(value, extended)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ufcgrf.constants import EXTENDED_SUFFIX, GRID_POINTS
from ufcgrf.errors import (
    AmbiguousCurveSetError,
    ExtrapolationLimitError,
    InsufficientDataError,
    NoNumericParameterError,
    NoPositiveDataError,
)
from ufcgrf.interpolation import linear_interp, logspace, positive_loglog, resample_loglog
from ufcgrf.logging import get_logger
from ufcgrf.models import Curve, CurveSet, Label, NumericParam, as_curve_sets, parse_curve_name

log = get_logger(__name__)


@dataclass
class Evaluation:
    """Value of a resolved curve at one point, plus its optional extended re-sampling."""

    value: float
    extended: Curve | None = None


def _target_value(target_param: float | str) -> float:
    name = parse_curve_name(target_param)
    if not isinstance(name, NumericParam):
        raise NoNumericParameterError(f"Target parameter {target_param!r} is not numeric")
    return name.value


def _select_bracket(
    existing: list[tuple[float, Curve]], target: float,
) -> tuple[tuple[float, Curve], tuple[float, Curve]]:
    """Pick the two curves bounding ``target``; edge pairs when it lies outside."""
    if target <= existing[0][0]:
        return existing[0], existing[1]
    if target >= existing[-1][0]:
        return existing[-2], existing[-1]
    for lower, upper in zip(existing[:-1], existing[1:]):
        if lower[0] <= target <= upper[0]:
            return lower, upper
    # Unreachable for a sorted, non-empty family
    return existing[0], existing[1]


def blend_weight(p1: float, p2: float, target: float) -> float:
    """Position of ``target`` between p1 (w=0) and p2 (w=1).

    Logarithmic in the parameter when all three values are positive, linear
    otherwise. The weight is not clipped: values outside [0, 1] extrapolate.
    """
    if p1 == p2:
        raise InsufficientDataError(f"Bracketing curves share parameter value {p1}")
    if p1 > 0 and p2 > 0 and target > 0:
        return (math.log10(target) - math.log10(p1)) / (math.log10(p2) - math.log10(p1))
    return (target - p1) / (p2 - p1)


def interpolate_grf(
    curve_set: CurveSet,
    target_param: float | str,
    extend_factor: float = 1.0,
    *,
    extrapolation_limit: float | None = None,
) -> Curve:
    """
    Construct a curve at ``target_param`` from a parametric family.

    The two curves bracketing the target (or the two outermost curves when
    the target lies outside the family) are resampled on a common 400-point
    log grid and blended in log-y space.

    Args:
        curve_set: Family whose curve names are numeric parameter values.
            Labelled curves are ignored, and of several curves sharing a
            parameter value only the first is used.
        target_param: Parameter value of the curve to synthesise.
        extend_factor: Widens the common grid to
            [min x / extend_factor, max x * extend_factor].
        extrapolation_limit: Optional bound on how far the blend weight may
            leave [0, 1]. None keeps extrapolation unbounded.

    Returns:
        New curve named ``target_param``.

    Raises:
        NoNumericParameterError: No curve has a numeric name.
        NoPositiveDataError: A bracketing curve has no positive data.
        ExtrapolationLimitError: The blend weight exceeds ``extrapolation_limit``.
    """
    target = _target_value(target_param)
    existing = curve_set.numeric_curves()

    if not existing:
        raise NoNumericParameterError(
            f"No numeric curve names found for interpolation in {curve_set.title!r}",
        )

    # First curve wins for a repeated parameter value
    unique: dict[float, Curve] = {}
    for param, curve in existing:
        unique.setdefault(param, curve)
    existing = sorted(unique.items(), key=lambda pair: pair[0])

    if len(existing) == 1:
        # Nothing to interpolate between
        return existing[0][1].renamed(NumericParam(target))

    (p1, c1), (p2, c2) = _select_bracket(existing, target)

    log_x1, _ = positive_loglog(c1.x, c1.y)
    log_x2, _ = positive_loglog(c2.x, c2.y)
    x_min = 10.0 ** min(log_x1[0], log_x2[0]) / extend_factor
    x_max = 10.0 ** max(log_x1[-1], log_x2[-1]) * extend_factor
    x_common = logspace(math.log10(x_min), math.log10(x_max), GRID_POINTS)

    y1 = resample_loglog(c1.x, c1.y, x_common)
    y2 = resample_loglog(c2.x, c2.y, x_common)

    w = blend_weight(p1, p2, target)
    if not 0.0 <= w <= 1.0:
        log.warning(
            f"Extrapolating {curve_set.title!r} to {target:g} from curves {p1:g}/{p2:g} (w={w:.3f})",
        )
        if extrapolation_limit is not None and (w < -extrapolation_limit or w > 1.0 + extrapolation_limit):
            raise ExtrapolationLimitError(w, extrapolation_limit)

    log_y_new = np.log10(y1) * (1.0 - w) + np.log10(y2) * w
    log.debug(f"Interpolated curve {target:g} between {p1:g} and {p2:g} (w={w:.4f})")
    return Curve(NumericParam(target), x_common, 10.0**log_y_new)


def eval_grf_single(
    data: CurveSet | Sequence[CurveSet],
    x_point: float,
    extend_factor: float = 1.0,
) -> Evaluation:
    """
    Evaluate a single-curve set at ``x_point`` by log-log interpolation.

    When ``extend_factor != 1.0`` the curve is also resampled on a 400-point
    log grid spanning [min x / extend_factor, max x * extend_factor]; the
    result is returned in ``Evaluation.extended`` and the input is left
    untouched. Callers decide whether to keep it.

    Args:
        data: A curve set, or a sequence whose first element is used.
        x_point: Abscissa to evaluate (must be positive).
        extend_factor: Grid extension factor for the cached curve.

    Raises:
        InsufficientDataError: ``data`` is an empty sequence.
        AmbiguousCurveSetError: The curve set does not hold exactly one curve.
        NoPositiveDataError: No positive data, or non-positive ``x_point``.
    """
    sets = as_curve_sets(data)
    if not sets:
        raise InsufficientDataError("Empty data list")

    curve_set = sets[0]
    if len(curve_set.curves) != 1:
        raise AmbiguousCurveSetError(
            f"Expected a single curve in {curve_set.title!r}, got {len(curve_set.curves)}",
        )
    if x_point <= 0:
        raise NoPositiveDataError(f"x_point must be positive for log-log evaluation, got {x_point}")

    base = curve_set.curves[0]
    log_x, log_y = positive_loglog(base.x, base.y)
    value = 10.0 ** linear_interp(log_x, log_y, math.log10(x_point))

    extended = None
    if extend_factor != 1.0:
        x_min = 10.0 ** log_x[0] / extend_factor
        x_max = 10.0 ** log_x[-1] * extend_factor
        x_common = logspace(math.log10(x_min), math.log10(x_max), GRID_POINTS)
        extended = Curve(
            Label(f"{base.name}{EXTENDED_SUFFIX}"),
            x_common,
            resample_loglog(base.x, base.y, x_common),
        )

    return Evaluation(value=float(value), extended=extended)


def eval_grf_single_and_cache(
    data: CurveSet | Sequence[CurveSet],
    x_point: float,
    extend_factor: float = 1.0,
) -> float:
    """
    Evaluate like ``eval_grf_single`` and write the extended curve back.

    Side effect: when ``extend_factor != 1.0`` the first curve of the first
    curve set is replaced by its extended re-sampling. Use
    ``eval_grf_single`` to keep the input unchanged.
    """
    sets = as_curve_sets(data)
    result = eval_grf_single(sets, x_point, extend_factor)
    if result.extended is not None:
        sets[0].curves[0] = result.extended
    return result.value
