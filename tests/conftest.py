from collections.abc import Callable
from typing import Any

import pytest

from notebook_relay.config.settings import RelaySettings

RELAY_ENV_VARS = [
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "DOCUMENT_PROCESSING_WEBHOOK_URL",
    "NOTEBOOK_GENERATION_AUTH",
    "NOTEBOOK_CHAT_URL",
    "RELAY_HOST",
    "RELAY_PORT",
    "RELAY_LOG_LEVEL",
    "RELAY_LOG_JSON",
    "RELAY_STATUS_TABLE",
    "RELAY_STORAGE_BUCKET",
    "RELAY_CALLBACK_FUNCTION",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate every test from the developer's environment and .env file."""
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_settings() -> Callable[..., RelaySettings]:
    """Settings with every relay value configured, overridable per test."""

    def _make(**overrides: Any) -> RelaySettings:
        values = {
            "supabase_url": "https://project.supabase.co",
            "supabase_service_role_key": "service-role-key",
            "document_processing_webhook_url": "https://hooks.example.com/process",
            "notebook_generation_auth": "Bearer token-1234567890",
            "notebook_chat_url": "https://hooks.example.com/chat",
        }
        values.update(overrides)
        return RelaySettings(_env_file=None, **values)

    return _make
