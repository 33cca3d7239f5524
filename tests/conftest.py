"""
Pytest fixtures for codeforge unit tests.

This module provides:
1. Test environment (secret key, isolated credential file, fresh settings)
2. Request and options fixtures
3. httpx MockTransport helpers for faking provider HTTP
"""

import os
from collections.abc import Callable, Iterable

import httpx
import pytest

from codeforge.config import Settings, get_settings
from codeforge.models.contracts.generation import (
    CodeGenerationRequest,
    GenerationOptions,
    ProjectComplexity,
)
from codeforge.models.enums import ComplexityTier
from codeforge.services.credential_store import CredentialStore, InMemorySecretSink

TEST_SECRET_KEY = "test-secret-key-for-unit-testing-must-be-32-chars"

# Set before any Settings() is constructed
os.environ.setdefault("CODEFORGE_SECRET_KEY", TEST_SECRET_KEY)
os.environ.setdefault("CODEFORGE_ENVIRONMENT", "testing")


# ==================== ENVIRONMENT FIXTURES ====================


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point credential storage at a temp file and reset the settings cache per test."""
    monkeypatch.setenv("CODEFORGE_SECRET_KEY", TEST_SECRET_KEY)
    monkeypatch.setenv("CODEFORGE_CREDENTIAL_STORE_PATH", str(tmp_path / "credentials.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Explicit settings with no simulated-stage delay."""
    return Settings(
        secret_key=TEST_SECRET_KEY,
        environment="testing",
        credential_store_path=tmp_path / "credentials.json",
        simulated_stage_delay_seconds=0.0,
    )


@pytest.fixture
def credential_store() -> CredentialStore:
    """Credential store backed by an in-memory sink."""
    return CredentialStore(sink=InMemorySecretSink())


# ==================== TEST DATA FIXTURES ====================


def make_options(
    framework: str = "react",
    project_type: str = "dashboard",
    level: ComplexityTier = ComplexityTier.MEDIUM,
    **kwargs,
) -> GenerationOptions:
    """Build GenerationOptions with a complexity level."""
    return GenerationOptions(
        framework=framework,
        project_type=project_type,
        complexity=ProjectComplexity(level=level, estimated_lines=500),
        **kwargs,
    )


def make_request(prompt: str = "Build a sales dashboard", **option_kwargs) -> CodeGenerationRequest:
    return CodeGenerationRequest(prompt=prompt, options=make_options(**option_kwargs))


@pytest.fixture
def options() -> GenerationOptions:
    return make_options()


# ==================== HTTP FIXTURES ====================


def sse_body(lines: Iterable[str]) -> bytes:
    """Join stream lines into a response body."""
    return ("\n".join(lines) + "\n").encode()


def mock_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by `handler`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def respond_with(recorded_requests) -> Callable[..., httpx.AsyncClient]:
    """
    Factory for a mocked client that records requests and returns a fixed response.

    Usage:
        client = respond_with(200, json={...})
        client = respond_with(200, content=sse_body([...]))
    """

    def _factory(status_code: int = 200, **response_kwargs) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return httpx.Response(status_code, **response_kwargs)

        return mock_http_client(handler)

    return _factory


@pytest.fixture
def build_options() -> Callable[..., GenerationOptions]:
    return make_options


@pytest.fixture
def build_request() -> Callable[..., CodeGenerationRequest]:
    return make_request
