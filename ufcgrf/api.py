"""
HTTP adapter for the GRF curve data service.

The service answers ``POST {"filename": "02_154.GRF"}`` with::

    {"filename": ..., "xlabel": ..., "ylabel": ...,
     "curves": [{"curve_name": ..., "xdata": [...], "ydata": [...], "num_points": n}]}

``GRFApiClient`` instances are callables, so they can be passed straight
to ``GRFPipeline`` as its fetch function.
"""

from __future__ import annotations

from typing import Any

import requests

from ufcgrf.config import GRFApiConfig
from ufcgrf.constants import DEFAULT_GRF_FILENAME
from ufcgrf.errors import FetchFailureError
from ufcgrf.logging import get_logger
from ufcgrf.models import CurveSet

log = get_logger(__name__)

# Module default, adjustable through configure_grf_api()
_DEFAULT_CONFIG = GRFApiConfig.from_env()


def configure_grf_api(base_url: str | None = None, endpoint: str | None = None) -> GRFApiConfig:
    """Change the module default service location; returns the updated config."""
    if base_url is not None:
        _DEFAULT_CONFIG.base_url = base_url
    if endpoint is not None:
        _DEFAULT_CONFIG.endpoint = endpoint
    return _DEFAULT_CONFIG


def default_config() -> GRFApiConfig:
    return _DEFAULT_CONFIG


class GRFApiClient:
    """
    Fetches GRF curve sets over HTTP.

    Usage:
        with GRFApiClient() as client:
            curve_set = client.fetch("02_154.GRF")
    """

    def __init__(
        self,
        config: GRFApiConfig | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or _DEFAULT_CONFIG
        self.session = session or requests.Session()

    def fetch_payload(self, filename: str) -> dict[str, Any]:
        """POST the filename and return the decoded JSON body."""
        url = self.config.url
        log.debug(f"POST {url} filename={filename}")
        try:
            response = self.session.post(
                url,
                json={"filename": filename},
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise FetchFailureError(
                f"Failed to fetch GRF data: {exc}", curve_name=filename,
            ) from exc

        if not response.ok:
            raise FetchFailureError(
                f"Failed to fetch GRF data: API request failed: "
                f"{response.status_code} {response.reason}",
                curve_name=filename,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise FetchFailureError(
                f"Failed to fetch GRF data: invalid JSON in response for {filename}",
                curve_name=filename,
            ) from exc

    def fetch(self, filename: str = DEFAULT_GRF_FILENAME) -> CurveSet:
        """Fetch and decode one GRF file."""
        payload = self.fetch_payload(filename)
        try:
            return CurveSet.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise FetchFailureError(
                f"Failed to fetch GRF data: malformed payload for {filename}: {exc}",
                curve_name=filename,
            ) from exc

    def __call__(self, filename: str) -> CurveSet:
        return self.fetch(filename)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> GRFApiClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def get_grf_api(filename: str = DEFAULT_GRF_FILENAME, config: GRFApiConfig | None = None) -> CurveSet:
    """One-shot fetch of a GRF file using a throwaway client."""
    with GRFApiClient(config) as client:
        return client.fetch(filename)
