"""Shared fixtures: fake models and an API client."""

import pytest
from fastapi.testclient import TestClient

from fakes import FakeChatModel, analysis_objects, customization_objects, fake_parse_pdf


@pytest.fixture
def analysis_model() -> FakeChatModel:
    return FakeChatModel(analysis_objects(), text="Solid CV with room to grow.")


@pytest.fixture
def customization_model() -> FakeChatModel:
    return FakeChatModel(customization_objects())


@pytest.fixture
def api(monkeypatch):
    """
    TestClient with provider keys set, rate limits off and PDF parsing
    replaced by a decode. Set ``api.model`` to choose the fake model.
    """
    from cvhjelper.api import dependencies
    from cvhjelper.api.app import app
    from cvhjelper.api.limiter import limiter
    from cvhjelper.config import settings

    monkeypatch.setattr(settings, "openai_api_key", "test-openai")
    monkeypatch.setattr(settings, "anthropic_api_key", "test-anthropic")
    monkeypatch.setattr(settings, "deepseek_api_key", "")
    monkeypatch.setattr(dependencies, "parse_pdf", fake_parse_pdf)
    monkeypatch.setattr(limiter, "enabled", False)

    class Api:
        model = FakeChatModel(analysis_objects(), text="Fake model response")
        factory_calls: list[tuple] = []
        client = TestClient(app)

    def factory(provider=None, model_name=None, **kwargs):
        Api.factory_calls.append((provider, model_name, kwargs))
        return Api.model

    app.dependency_overrides[dependencies.get_model_factory] = lambda: factory
    yield Api
    app.dependency_overrides.clear()
