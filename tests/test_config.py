"""Tests for settings and logging setup."""

import logging

import pytest

from autotitle.config import DebugMode, load_settings
from autotitle.host.models import ModelRef
from autotitle.log import LOGGER_NAME, attach_host_sink, configure_logging, detach_host_sink


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_defaults():
    settings = load_settings(_env_file=None)

    assert settings.model is None
    assert settings.provider is None
    assert settings.max_length == 60
    assert settings.disabled is False
    assert settings.debug_mode == DebugMode.OFF
    assert settings.model_override is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("OPENCODE_AUTOTITLE_MODEL", "anthropic/claude-3-haiku")
    monkeypatch.setenv("OPENCODE_AUTOTITLE_PROVIDER", "openai")
    monkeypatch.setenv("OPENCODE_AUTOTITLE_MAX_LENGTH", "80")
    monkeypatch.setenv("OPENCODE_AUTOTITLE_DISABLED", "1")

    settings = load_settings(_env_file=None)

    assert settings.model_override == ModelRef(provider_id="anthropic", model_id="claude-3-haiku")
    assert settings.provider == "openai"
    assert settings.max_length == 80
    assert settings.disabled is True


@pytest.mark.parametrize("value", ["abc", "0", "-5", ""])
def test_bad_max_length_defaults(monkeypatch, value):
    monkeypatch.setenv("OPENCODE_AUTOTITLE_MAX_LENGTH", value)
    assert load_settings(_env_file=None).max_length == 60


@pytest.mark.parametrize(
    "value,mode",
    [
        ("1", DebugMode.STDERR),
        ("true", DebugMode.STDERR),
        ("0", DebugMode.OFF),
        ("false", DebugMode.OFF),
        ("/tmp/autotitle/debug.log", DebugMode.FILE),
    ],
)
def test_debug_modes(monkeypatch, value, mode):
    monkeypatch.setenv("OPENCODE_AUTOTITLE_DEBUG", value)
    assert load_settings(_env_file=None).debug_mode == mode


def test_settings_are_frozen():
    settings = load_settings(_env_file=None)
    with pytest.raises(Exception):
        settings.max_length = 10


def test_debug_file_logging(tmp_path):
    log_file = tmp_path / "logs" / "autotitle.log"
    settings = load_settings(_env_file=None, debug=str(log_file))

    logger = configure_logging(settings)
    logging.getLogger("autotitle.titles.controller").debug("Set keyword title: 🔍 Fix Bug")
    for handler in logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert content.startswith("[autotitle] Log started at")
    assert "DEBUG: Set keyword title: 🔍 Fix Bug" in content


def test_quiet_by_default():
    logger = configure_logging(load_settings(_env_file=None))
    assert logger.level == logging.WARNING
    assert not logger.isEnabledFor(logging.DEBUG)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "level,host_level",
    [
        (logging.DEBUG, "debug"),
        (logging.INFO, "info"),
        (logging.WARNING, "warn"),
        (logging.ERROR, "error"),
        (logging.CRITICAL, "error"),
    ],
)
async def test_host_sink_forwards_records(host_client, level, host_level):
    configure_logging(load_settings(_env_file=None, debug="1"))
    sink = attach_host_sink(host_client)

    logging.getLogger("autotitle.titles.controller").log(level, "Set AI title: ✨ Fix Bug")
    await detach_host_sink(sink)

    host_client.log.assert_awaited_once_with("autotitle", host_level, "Set AI title: ✨ Fix Bug")
    assert sink not in logging.getLogger(LOGGER_NAME).handlers


@pytest.mark.asyncio
async def test_detached_sink_forwards_nothing(host_client):
    configure_logging(load_settings(_env_file=None, debug="1"))
    sink = attach_host_sink(host_client)
    await detach_host_sink(sink)

    logging.getLogger("autotitle").info("after shutdown")

    host_client.log.assert_not_called()
