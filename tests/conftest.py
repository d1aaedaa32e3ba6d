"""Pytest configuration and fixtures for all tests."""

from datetime import timedelta
from typing import Optional

import pytest

from rhachet_brains_anthropic.core.brain import BrainHook, BrainHookEvent, BrainHookFilter
from rhachet_brains_anthropic.core.hooks import ClaudeCodeHooksAdapter
from rhachet_brains_anthropic.utils import log as log_module
from rhachet_brains_anthropic.utils.log import get_logger


def _make_hook(
    author: str = "repo=myapp/role=mechanic",
    event: BrainHookEvent = BrainHookEvent.ON_BOOT,
    command: str = "echo boot",
    seconds: float = 30,
    what: Optional[str] = None,
) -> BrainHook:
    return BrainHook(
        author=author,
        event=event,
        command=command,
        timeout=timedelta(seconds=seconds),
        filter=BrainHookFilter(what=what) if what is not None else None,
    )


@pytest.fixture
def make_hook():
    """Factory for brain hooks with sensible defaults."""
    return _make_hook


@pytest.fixture
def adapter(tmp_path):
    """A hooks adapter bound to an empty temporary repo."""
    return ClaudeCodeHooksAdapter(tmp_path)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / ".claude" / "settings.json"


@pytest.fixture
def file_logging(monkeypatch):
    """Start without a log file and detach any log file a test attaches."""
    monkeypatch.setattr(log_module, "_file_handler", None)
    yield
    handler = log_module._file_handler
    if handler is not None:
        get_logger().removeHandler(handler)
        handler.close()
