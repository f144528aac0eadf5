"""ufcgrf: UFC 3-340-02 GRF design-curve resolution engine."""

from __future__ import annotations

from ufcgrf.api import GRFApiClient, configure_grf_api, get_grf_api
from ufcgrf.config import GRFApiConfig, PipelineConfig
from ufcgrf.engine import (
    Evaluation,
    eval_grf_single,
    eval_grf_single_and_cache,
    interpolate_grf,
)
from ufcgrf.errors import (
    AmbiguousCurveSetError,
    EmptyPipelineStepError,
    ExtrapolationLimitError,
    FetchFailureError,
    GRFError,
    InsufficientDataError,
    NoNumericParameterError,
    NoPositiveDataError,
    PipelineStateError,
    ShapeMismatchError,
    StepIndexError,
)
from ufcgrf.filters import extract_filters, filters_key
from ufcgrf.interpolation import linear_interp, logspace, resample_loglog
from ufcgrf.models import (
    Curve,
    CurveSet,
    FilteredCurveSet,
    Label,
    NumericParam,
    parse_curve_name,
)
from ufcgrf.pipeline import GRFPipeline, Snapshot

__version__ = "0.1.0"

__all__ = [
    # Models
    "Curve",
    "CurveSet",
    "FilteredCurveSet",
    "Label",
    "NumericParam",
    "parse_curve_name",
    # Primitives
    "extract_filters",
    "filters_key",
    "linear_interp",
    "logspace",
    "resample_loglog",
    # Engine
    "Evaluation",
    "eval_grf_single",
    "eval_grf_single_and_cache",
    "interpolate_grf",
    # Pipeline
    "GRFPipeline",
    "PipelineConfig",
    "Snapshot",
    # Data service
    "GRFApiClient",
    "GRFApiConfig",
    "configure_grf_api",
    "get_grf_api",
    # Errors
    "AmbiguousCurveSetError",
    "EmptyPipelineStepError",
    "ExtrapolationLimitError",
    "FetchFailureError",
    "GRFError",
    "InsufficientDataError",
    "NoNumericParameterError",
    "NoPositiveDataError",
    "PipelineStateError",
    "ShapeMismatchError",
    "StepIndexError",
    "__version__",
]
