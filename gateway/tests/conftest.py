"""Shared fixtures for blog-gateway tests."""

import os

import pytest

# Required settings must exist before gateway.main builds the app at import
os.environ["ADMIN_SECRET_KEY"] = "test-admin-secret"
os.environ["AUTH_TOKEN_SECRET"] = "test-signing-secret"
os.environ["CONTENT_STORE_URI"] = "memory://"
os.environ.pop("TOKEN_EXPIRY", None)
os.environ.pop("ALLOWED_ORIGINS", None)


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from gateway.config import get_settings

    get_settings.cache_clear()

    # 2. Repository singleton
    import gateway.dependencies as deps_mod

    deps_mod._repository = None


@pytest.fixture
def mock_settings(monkeypatch):
    """Provide Settings with safe test defaults, loaded the normal way."""
    from gateway.config import get_settings

    monkeypatch.setenv("ADMIN_SECRET_KEY", "test-admin-secret")
    monkeypatch.setenv("AUTH_TOKEN_SECRET", "test-signing-secret")
    monkeypatch.setenv("CONTENT_STORE_URI", "memory://")
    monkeypatch.setenv("TOKEN_EXPIRY", "30m")
    monkeypatch.setenv("DEFAULT_AUTHOR", "Editorial Team")

    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def repository(monkeypatch):
    """Fresh in-memory repository installed as the shared singleton."""
    from gateway.services.repository import InMemoryContentRepository

    repo = InMemoryContentRepository()
    monkeypatch.setattr("gateway.dependencies._repository", repo)
    return repo


@pytest.fixture
def auth_headers(mock_settings):
    """Authorization header carrying a freshly issued token."""
    from gateway.services.tokens import TokenCodec

    codec = TokenCodec(mock_settings.signing_secret, mock_settings.token_expiry)
    return {"Authorization": f"Bearer {codec.issue().token}"}


@pytest.fixture
def restore_root_logging():
    """Undo handler/level changes made by configure_logging()."""
    import logging

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
