"""
Configuration objects for the curve data service and the pipeline.

Usage:
    from ufcgrf.config import GRFApiConfig, PipelineConfig

    api_cfg = GRFApiConfig.from_env()
    pipe_cfg = PipelineConfig(extrapolation_limit=2.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ufcgrf.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT,
    ENV_BASE_URL,
    ENV_ENDPOINT,
    ENV_TIMEOUT,
)
from ufcgrf.logging import get_logger

log = get_logger(__name__)


@dataclass
class GRFApiConfig:
    """Location of the GRF curve data service."""

    base_url: str = DEFAULT_BASE_URL
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.endpoint.lstrip('/')}"

    @classmethod
    def from_env(cls) -> GRFApiConfig:
        """Build a config from ``UFCGRF_API_*`` variables, falling back to defaults."""
        timeout_raw = os.getenv(ENV_TIMEOUT)
        timeout = DEFAULT_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                log.warning(f"Ignoring non-numeric {ENV_TIMEOUT}={timeout_raw!r}")

        return cls(
            base_url=os.getenv(ENV_BASE_URL, DEFAULT_BASE_URL),
            endpoint=os.getenv(ENV_ENDPOINT, DEFAULT_ENDPOINT),
            timeout=timeout,
        )


@dataclass
class PipelineConfig:
    """Knobs applied by every ``GRFPipeline.interpolate`` call."""

    # Grid extension factor used when synthesising interpolated curves
    extend_factor: float = 1.0

    # Maximum distance of the blend weight outside [0, 1]; None is unbounded
    extrapolation_limit: float | None = None

    def __post_init__(self) -> None:
        if self.extend_factor <= 0:
            raise ValueError(f"extend_factor must be positive, got {self.extend_factor}")
        if self.extrapolation_limit is not None and self.extrapolation_limit < 0:
            raise ValueError(
                f"extrapolation_limit must be non-negative, got {self.extrapolation_limit}",
            )
