"""Unit tests for the HTTP curve source adapter."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from ufcgrf import api
from ufcgrf.api import GRFApiClient, configure_grf_api, get_grf_api
from ufcgrf.config import GRFApiConfig
from ufcgrf.errors import FetchFailureError
from ufcgrf.models import CurveSet, Label, NumericParam
from ufcgrf.pipeline import GRFPipeline

PAYLOAD = {
    "filename": "Figure 2-154.  Scaled reflected pressure (N = 2)",
    "xlabel": "Scaled distance",
    "ylabel": "Pr",
    "curves": [
        {"curve_name": "0.5", "xdata": [1.0, 10.0], "ydata": [100.0, 10.0], "num_points": 2},
        {"curve_name": "Max", "xdata": [1.0, 10.0], "ydata": [200.0, 20.0], "num_points": 2},
    ],
}


def _response(ok: bool = True, payload=PAYLOAD, status: int = 200, reason: str = "OK"):
    response = MagicMock()
    response.ok = ok
    response.status_code = status
    response.reason = reason
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    mock_session = MagicMock(spec=requests.Session)
    mock_session.post.return_value = _response()
    return mock_session


@pytest.fixture
def config() -> GRFApiConfig:
    return GRFApiConfig(base_url="http://grf.test/", endpoint="/api/grf/data/", timeout=5.0)


@pytest.fixture
def restore_default_config():
    saved = GRFApiConfig(**vars(api.default_config()))
    yield
    configure_grf_api(saved.base_url, saved.endpoint)


class TestGRFApiClient:
    def test_fetch_decodes_payload(self, session, config):
        client = GRFApiClient(config, session=session)
        curve_set = client.fetch("02_154.GRF")

        session.post.assert_called_once_with(
            "http://grf.test/api/grf/data/",
            json={"filename": "02_154.GRF"},
            timeout=5.0,
        )
        assert isinstance(curve_set, CurveSet)
        assert curve_set.title == PAYLOAD["filename"]
        assert curve_set.x_label == "Scaled distance"
        assert [c.name for c in curve_set.curves] == [NumericParam(0.5), Label("Max")]

    def test_default_filename(self, session, config):
        GRFApiClient(config, session=session).fetch()
        assert session.post.call_args.kwargs["json"] == {"filename": "02_154.GRF"}

    def test_non_ok_response(self, session, config):
        session.post.return_value = _response(ok=False, status=404, reason="Not Found")
        with pytest.raises(FetchFailureError, match="Failed to fetch GRF data") as exc_info:
            GRFApiClient(config, session=session).fetch("missing.GRF")
        assert "404" in str(exc_info.value)
        assert exc_info.value.curve_name == "missing.GRF"

    def test_transport_error(self, session, config):
        session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(FetchFailureError, match="Failed to fetch GRF data") as exc_info:
            GRFApiClient(config, session=session).fetch("02_154.GRF")
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_invalid_json(self, session, config):
        session.post.return_value.json.side_effect = ValueError("no JSON")
        with pytest.raises(FetchFailureError, match="invalid JSON"):
            GRFApiClient(config, session=session).fetch("02_154.GRF")

    def test_malformed_payload(self, session, config):
        session.post.return_value = _response(payload={"filename": "x"})
        with pytest.raises(FetchFailureError, match="malformed payload"):
            GRFApiClient(config, session=session).fetch("02_154.GRF")

    def test_context_manager_closes_session(self, session, config):
        with GRFApiClient(config, session=session) as client:
            client.fetch("02_154.GRF")
        session.close.assert_called_once()

    def test_client_as_pipeline_fetch(self, session, config):
        client = GRFApiClient(config, session=session)
        pipeline = GRFPipeline(["02_154.GRF", "02_155.GRF"], client)
        snapshot = pipeline.get_data(["N"])

        assert session.post.call_count == 2
        assert snapshot.entries["02_155.GRF"].filters == {"N": 2.0}

    def test_pipeline_reports_failing_name(self, session, config):
        session.post.side_effect = [
            _response(),
            _response(ok=False, status=500, reason="Server Error"),
        ]
        pipeline = GRFPipeline(["02_154.GRF", "02_155.GRF"], GRFApiClient(config, session=session))
        with pytest.raises(FetchFailureError) as exc_info:
            pipeline.get_data(["N"])
        assert exc_info.value.curve_name == "02_155.GRF"
        assert pipeline.get_current_step() == 0


class TestModuleDefaults:
    def test_configure_grf_api(self, restore_default_config):
        updated = configure_grf_api(base_url="http://other:9000")
        assert updated is api.default_config()
        assert updated.url == "http://other:9000/api/grf/data/"

        configure_grf_api(endpoint="v2/grf")
        assert api.default_config().url == "http://other:9000/v2/grf"

    def test_client_uses_module_default(self, restore_default_config, session):
        configure_grf_api(base_url="http://configured")
        GRFApiClient(session=session).fetch("02_154.GRF")
        assert session.post.call_args.args[0] == "http://configured/api/grf/data/"

    def test_get_grf_api(self, monkeypatch, session, config):
        monkeypatch.setattr(api.requests, "Session", lambda: session)
        curve_set = get_grf_api("02_154.GRF", config)
        assert len(curve_set.curves) == 2
        session.close.assert_called_once()
