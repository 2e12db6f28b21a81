"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock

import pytest

from autotitle.config import Settings
from autotitle.events.handler import EventHandler
from autotitle.host.client import HostClient
from autotitle.host.models import Message
from autotitle.titles.controller import TitleController


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's OPENCODE_AUTOTITLE_* variables out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("OPENCODE_AUTOTITLE_"):
            monkeypatch.delenv(key)


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def make_message(role: str, text: str) -> Message:
    return Message.model_validate(
        {"info": {"role": role}, "parts": [{"type": "text", "text": text}]}
    )


@pytest.fixture
def settings():
    """Settings with a fixed model so no provider discovery happens."""
    return make_settings(model="anthropic/claude-3-haiku", max_length=60)


@pytest.fixture
def host_client():
    """A host client whose calls succeed with neutral values."""
    client = AsyncMock(spec=HostClient)
    client.base_url = "http://host.test"
    client.get_session_title.return_value = "New Session"
    client.update_session_title.return_value = True
    client.list_messages.return_value = []
    client.create_session.return_value = "scratch-1"
    client.list_connected_providers.return_value = []
    client.list_providers_with_models.return_value = []
    return client


@pytest.fixture
def controller(host_client, settings):
    return TitleController(host_client, settings)


@pytest.fixture
def event_handler(controller):
    return EventHandler(controller)
