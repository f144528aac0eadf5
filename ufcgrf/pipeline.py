"""
GRF resolution pipeline.

A ``GRFPipeline`` narrows a library of multi-parameter design curves down
to a single scalar. Each operation derives a new numbered ``Snapshot`` from
the immediately preceding one; snapshots are never edited afterwards.

Usage:
    from ufcgrf import GRFPipeline, GRFApiClient

    p = GRFPipeline(curve_names, GRFApiClient())
    p.get_data(["N", "l/L", "h/H", "L/H"])
    p.filter_data("N", 2.0)
    p.interpolate(za, "Za")
    p.combine_by("L/H", f"Collapsed at Za = {za}")
    ...
    p.interpolate(h_over_h, "h/H")
    pr = p.evaluate(l_over_ra)

The pipeline is single-threaded and has no internal locking: operations on
one instance must be issued sequentially.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Mapping, Sequence, Union

from ufcgrf.config import PipelineConfig
from ufcgrf.engine import eval_grf_single, interpolate_grf
from ufcgrf.errors import (
    AmbiguousCurveSetError,
    EmptyPipelineStepError,
    FetchFailureError,
    PipelineStateError,
    StepIndexError,
)
from ufcgrf.filters import extract_filters, filters_key, without_key
from ufcgrf.logging import get_logger
from ufcgrf.models import (
    Curve,
    CurveSet,
    FilteredCurveSet,
    FilterValue,
    format_param,
)

log = get_logger(__name__)

FetchResult = Union[CurveSet, Mapping[str, Any]]
FetchFn = Callable[[str], Union[FetchResult, Awaitable[FetchResult]]]

_EMPTY: Mapping[str, FilteredCurveSet] = MappingProxyType({})


@dataclass(frozen=True)
class Snapshot:
    """Read-only state of the pipeline after one operation."""

    step: int
    operation: str
    entries: Mapping[str, FilteredCurveSet]

    def __len__(self) -> int:
        return len(self.entries)


def _as_curve_set(name: str, result: FetchResult) -> CurveSet:
    if isinstance(result, CurveSet):
        return result
    if isinstance(result, Mapping):
        try:
            return CurveSet.from_payload(result)
        except (KeyError, TypeError, ValueError) as exc:
            raise FetchFailureError(
                f"Malformed curve payload for {name!r}: {exc!r}", curve_name=name,
            ) from exc
    raise FetchFailureError(
        f"Fetch for {name!r} returned {type(result).__name__}, expected a CurveSet",
        curve_name=name,
    )


def _fetch_failure(name: str, exc: Exception) -> FetchFailureError:
    if isinstance(exc, FetchFailureError):
        if exc.curve_name is None:
            exc.curve_name = name
        return exc
    return FetchFailureError(f"Failed to fetch curve {name!r}: {exc}", curve_name=name)


async def _resolve(awaitable: Awaitable[FetchResult]) -> FetchResult:
    return await awaitable


class GRFPipeline:
    """
    Stateful, numbered sequence of curve-set transformations.

    Step 0 is the implicit empty state. ``get_data`` creates step 1;
    ``filter_data``, ``interpolate`` and ``combine_by`` each append one step
    derived only from the step before it; ``evaluate`` reads the last step.

    Any failed fetch aborts ``get_data``. A fetch function that should
    tolerate missing files can return a placeholder instead, e.g. a set
    holding one labelled curve with an untitled (filter-less) header::

        CurveSet("", "", "", [Curve(Label("missing"), [1.0], [1.0])])

    It carries no filters, so the first ``filter_data`` drops it.
    """

    def __init__(
        self,
        curve_names: Sequence[str],
        fetch_fn: FetchFn,
        config: PipelineConfig | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            curve_names: GRF files to fetch, in order.
            fetch_fn: Callable returning a ``CurveSet`` (or its wire mapping)
                for one name; may be synchronous or asynchronous.
            config: Interpolation settings.
        """
        self.curve_names = list(curve_names)
        self.fetch_fn = fetch_fn
        self.config = config or PipelineConfig()

        self._history: list[Snapshot] = []
        # Extended re-samplings produced by evaluate(), keyed by step
        self._extended_cache: dict[int, Curve] = {}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _previous_entries(self, operation: str) -> Mapping[str, FilteredCurveSet]:
        if not self._history:
            raise EmptyPipelineStepError(f"{operation} requires fetched data; call get_data first")
        return self._history[-1].entries

    def _push(self, operation: str, entries: dict[str, FilteredCurveSet]) -> Snapshot:
        snapshot = Snapshot(
            step=len(self._history) + 1,
            operation=operation,
            entries=MappingProxyType(entries),
        )
        self._history.append(snapshot)
        log.info(
            f"Step {snapshot.step}: {operation} -> {len(entries)} curve set(s)",
            extra={"step": snapshot.step, "operation": operation, "entries": len(entries)},
        )
        return snapshot

    def _check_can_fetch(self) -> None:
        if self._history:
            raise PipelineStateError(
                f"get_data must be the first operation (pipeline is at step {self.current_step})",
            )

    def _ingest(
        self, fetched: list[tuple[str, FetchResult]], filter_keys: Sequence[str],
    ) -> Snapshot:
        entries: dict[str, FilteredCurveSet] = {}
        for name, result in fetched:
            curve_set = _as_curve_set(name, result)
            filters = extract_filters(curve_set.title, filter_keys)
            entries[name] = FilteredCurveSet.from_curve_set(
                curve_set, filters, title=filters_key(filters),
            )
            log.debug(f"Fetched {name}: filters {filters}", extra={"curve_name": name})
        return self._push("get_data", entries)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get_data(self, filter_keys: Iterable[str]) -> Snapshot:
        """
        Fetch every configured curve name and extract its filters.

        Asynchronous fetch functions are awaited in name order on a private
        event loop; inside a running loop use ``aget_data`` instead. The step
        is only recorded once every fetch has succeeded.

        Raises:
            PipelineStateError: Data was already fetched.
            FetchFailureError: Any single fetch failed.
        """
        self._check_can_fetch()
        keys = list(filter_keys)

        if inspect.iscoroutinefunction(self.fetch_fn):
            return asyncio.run(self.aget_data(keys))

        fetched: list[tuple[str, FetchResult]] = []
        for name in self.curve_names:
            try:
                result = self.fetch_fn(name)
                if inspect.isawaitable(result):
                    result = asyncio.run(_resolve(result))
            except Exception as exc:
                raise _fetch_failure(name, exc) from exc
            fetched.append((name, result))

        return self._ingest(fetched, keys)

    async def aget_data(self, filter_keys: Iterable[str]) -> Snapshot:
        """Awaitable form of ``get_data``; fetches run strictly one after another."""
        self._check_can_fetch()
        keys = list(filter_keys)

        fetched: list[tuple[str, FetchResult]] = []
        for name in self.curve_names:
            try:
                result = self.fetch_fn(name)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                raise _fetch_failure(name, exc) from exc
            fetched.append((name, result))

        return self._ingest(fetched, keys)

    def filter_data(self, key: str, value: FilterValue) -> Snapshot:
        """Keep only the curve sets whose ``filters[key]`` equals ``value``."""
        previous = self._previous_entries("filter_data")
        kept = {
            name: curve_set
            for name, curve_set in previous.items()
            if key in curve_set.filters and curve_set.filters[key] == value
        }
        return self._push(f"filter_data({key}={value})", kept)

    def interpolate(self, value: float, param_name: str) -> Snapshot:
        """
        Resolve every curve set at ``value`` of its varying parameter.

        Each entry becomes a single-curve set named ``value``; filters are
        carried forward unchanged.
        """
        previous = self._previous_entries("interpolate")
        label = format_param(value)
        new_entries: dict[str, FilteredCurveSet] = {}

        for name, curve_set in previous.items():
            curve = interpolate_grf(
                curve_set,
                value,
                self.config.extend_factor,
                extrapolation_limit=self.config.extrapolation_limit,
            )
            new_entries[name] = FilteredCurveSet(
                title=f"{curve_set.title}\nInterpolated at {param_name}={label}",
                x_label=curve_set.x_label,
                y_label=curve_set.y_label,
                curves=[curve],
                filters=dict(curve_set.filters),
            )

        return self._push(f"interpolate({param_name}={label})", new_entries)

    def combine_by(self, key: str, label: str) -> Snapshot:
        """
        Regroup single-curve sets into families varying in ``key``.

        Entries sharing all filters except ``key`` are merged into one set;
        each contributes its curve renamed to its own ``key`` value. Entries
        without ``key`` are dropped.

        Raises:
            AmbiguousCurveSetError: An entry holds more than one curve.
        """
        previous = self._previous_entries("combine_by")
        new_entries: dict[str, FilteredCurveSet] = {}

        for name, curve_set in previous.items():
            if len(curve_set.curves) != 1:
                raise AmbiguousCurveSetError(
                    f"combine_by expects single-curve sets; {name!r} has {len(curve_set.curves)}",
                )
            if key not in curve_set.filters:
                log.debug(f"{name!r} has no filter {key!r}; omitted from combine_by")
                continue

            remaining = without_key(curve_set.filters, key)
            group = filters_key(remaining)
            curve = curve_set.curves[0].renamed(curve_set.filters[key])

            if group in new_entries:
                new_entries[group].curves.append(curve)
            else:
                new_entries[group] = FilteredCurveSet(
                    title=f"{group}\n{label}\nLegend for {key}",
                    x_label=curve_set.x_label,
                    y_label=curve_set.y_label,
                    curves=[curve],
                    filters=remaining,
                )

        return self._push(f"combine_by({key})", new_entries)

    def evaluate(self, x_point: float, extend_factor: float = 1.0) -> float:
        """
        Evaluate the resolved curve of the current step at ``x_point``.

        With ``extend_factor != 1.0`` the extended re-sampling of the curve is
        kept in the pipeline's cache (see ``extended_curve``); the snapshot
        itself is not modified.

        Raises:
            EmptyPipelineStepError: The current step holds no curve set.
        """
        entries = self._history[-1].entries if self._history else _EMPTY
        if not entries:
            raise EmptyPipelineStepError(
                f"No curves available for evaluation at step {self.current_step}",
            )

        result = eval_grf_single(list(entries.values()), x_point, extend_factor)
        if result.extended is not None:
            self._extended_cache[self.current_step] = result.extended

        log.info(
            f"Evaluated step {self.current_step} at x={x_point:g}: {result.value:.6g}",
            extra={"step": self.current_step, "operation": "evaluate", "entries": len(entries)},
        )
        return result.value

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def current_step(self) -> int:
        return len(self._history)

    def get_current_step(self) -> int:
        return self.current_step

    @property
    def history(self) -> tuple[Snapshot, ...]:
        return tuple(self._history)

    @property
    def extended_curve(self) -> Curve | None:
        """Extended curve cached by the last ``evaluate`` of the current step."""
        return self._extended_cache.get(self.current_step)

    def get_snapshot(self, step: int | None = None) -> Snapshot:
        """Snapshot at ``step`` (default: current). Step 0 has no snapshot."""
        target = self.current_step if step is None else step
        if target < 1 or target > self.current_step:
            raise StepIndexError(
                f"Step {target} not recorded (history holds steps 1..{self.current_step})",
            )
        return self._history[target - 1]

    def get_data_at_step(self, step: int | None = None) -> Mapping[str, FilteredCurveSet]:
        """Entries at ``step`` (default: current); step 0 is empty."""
        target = self.current_step if step is None else step
        if target == 0:
            return _EMPTY
        return self.get_snapshot(target).entries

    def get_current_curves(self) -> list[FilteredCurveSet]:
        return list(self.get_data_at_step().values())

    def reset(self) -> None:
        """Drop all history and return to step 0."""
        self._history.clear()
        self._extended_cache.clear()
        log.debug("Pipeline reset")
