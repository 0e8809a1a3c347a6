"""
Tests for skillsync.services.analysis_provider — HTTP transport and the
offline fallback.
"""

import pytest
import requests

from skillsync.core.exceptions import AnalysisUnavailable
from skillsync.services import (
    HttpAnalysisProvider,
    OfflineAnalysisProvider,
    get_analysis_provider,
)
from skillsync.utils.config import AnalysisSettings


class FakeResponse:
    def __init__(self, body=None, status_code=200, content=b"{}"):
        self.body = body
        self.status_code = status_code
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


class TestHttpAnalysisProvider:
    def test_posts_request(self, analysis_payload):
        session = FakeSession(FakeResponse(analysis_payload))
        provider = HttpAnalysisProvider("https://ai.example.com/analyze", timeout=5, session=session)

        body = provider.analyze(["python"], "Data Engineer")

        assert body == analysis_payload
        url, kwargs = session.requests[0]
        assert url == "https://ai.example.com/analyze"
        assert kwargs["json"] == {"profileSkills": ["python"], "targetRole": "Data Engineer"}
        assert kwargs["timeout"] == 5
        assert "Authorization" not in kwargs["headers"]

    def test_api_key_header(self):
        session = FakeSession(FakeResponse({}))
        HttpAnalysisProvider("https://ai.example.com", api_key="k-123", session=session).analyze([], "QA")
        assert session.requests[0][1]["headers"]["Authorization"] == "Bearer k-123"

    def test_connection_error(self):
        session = FakeSession(error=requests.ConnectionError("refused"))
        provider = HttpAnalysisProvider("https://ai.example.com", session=session)
        with pytest.raises(AnalysisUnavailable) as exc_info:
            provider.analyze(["python"], "QA")
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_http_error_status(self):
        session = FakeSession(FakeResponse(status_code=503))
        with pytest.raises(AnalysisUnavailable, match="503"):
            HttpAnalysisProvider("https://ai.example.com", session=session).analyze([], "QA")

    def test_non_json_body(self):
        session = FakeSession(FakeResponse(ValueError("Expecting value"), content=b"<html>"))
        assert HttpAnalysisProvider("https://ai.example.com", session=session).analyze([], "QA") is None

    def test_from_settings(self):
        settings = AnalysisSettings(base_url="https://ai.example.com/", api_key="k", timeout_seconds=3)
        provider = HttpAnalysisProvider.from_settings(settings)
        assert provider.url == "https://ai.example.com/api/job-seeker/skill-gap-analysis"
        assert provider.timeout == 3
        assert provider.api_key == "k"

    def test_from_settings_requires_url(self):
        with pytest.raises(ValueError):
            HttpAnalysisProvider.from_settings(AnalysisSettings(base_url=None))


class TestOfflineAnalysisProvider:
    def test_generic_suggestions(self):
        body = OfflineAnalysisProvider().analyze(["python", "leadership"], "Team Lead")
        assert body["matchingSkills"] == ["python", "leadership"]
        assert body["gapSkills"] == ["Communication"]
        assert body["recommendations"][0] == "Continue developing your python skills"
        assert "Team Lead" in body["recommendations"][1]

    def test_no_skills(self):
        body = OfflineAnalysisProvider().analyze([], "Designer")
        assert body["gapSkills"] == ["Leadership", "Communication"]
        assert body["recommendations"][0] == "Continue developing your core skills"


class TestGetAnalysisProvider:
    def test_offline_without_url(self):
        assert isinstance(get_analysis_provider(AnalysisSettings(base_url=None)), OfflineAnalysisProvider)

    def test_http_with_url(self):
        provider = get_analysis_provider(AnalysisSettings(base_url="https://ai.example.com"))
        assert isinstance(provider, HttpAnalysisProvider)
