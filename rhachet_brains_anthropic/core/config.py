"""Configuration for the anthropic brains.

Credentials and transport settings are resolved from the environment only
when an atom or repl is invoked without an injected client or runner. The
hooks adapter never reads this configuration.
"""

import os
import shutil
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, field_validator

from rhachet_brains_anthropic.utils.log import get_logger


logger = get_logger()

DEFAULT_MAX_TOKENS = 16384
DEFAULT_CLAUDE_CLI = "claude"

API_KEY_ENV_CANDIDATES = ["ANTHROPIC_API_KEY"]
AUTH_TOKEN_ENV_CANDIDATES = ["ANTHROPIC_AUTH_TOKEN"]
API_BASE_ENV_CANDIDATES = ["ANTHROPIC_BASE_URL", "ANTHROPIC_API_URL"]
CLI_PATH_ENV = "RHACHET_BRAINS_CLAUDE_CLI"
REQUEST_TIMEOUT_ENV = "RHACHET_BRAINS_REQUEST_TIMEOUT"


class AnthropicConfig(BaseModel):
    """Settings used to reach the Anthropic API and the claude CLI."""

    api_key: Optional[str] = None
    # Either api_key or auth_token; api_key takes precedence when both are set.
    auth_token: Optional[str] = None
    api_base: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    # Seconds; None leaves the SDK default in place.
    request_timeout: Optional[float] = None
    cli_path: Optional[str] = None

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            return None
        return value

    def client_kwargs(self) -> Dict[str, object]:
        """Keyword arguments for constructing an ``anthropic.AsyncAnthropic`` client."""
        kwargs: Dict[str, object] = {"max_retries": 0}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        elif self.auth_token:
            kwargs["auth_token"] = self.auth_token
        if self.api_base:
            kwargs["base_url"] = self.api_base
        if self.request_timeout:
            # httpx.Timeout: (connect, read, write, pool)
            kwargs["timeout"] = httpx.Timeout(
                self.request_timeout,
                connect=min(self.request_timeout, 60.0),
            )
        return kwargs

    def resolve_cli_path(self) -> Optional[str]:
        """Locate the claude executable, preferring an explicit path."""
        if self.cli_path:
            return self.cli_path
        return shutil.which(DEFAULT_CLAUDE_CLI)


def _first_env(candidates: List[str]) -> Optional[str]:
    for name in candidates:
        value = os.getenv(name)
        if value:
            return value
    return None


def load_anthropic_config() -> AnthropicConfig:
    """Build the configuration from environment variables."""
    raw_timeout = os.getenv(REQUEST_TIMEOUT_ENV)
    request_timeout: Optional[float] = None
    if raw_timeout:
        try:
            request_timeout = float(raw_timeout)
        except ValueError:
            logger.warning(
                "[config] Ignoring invalid request timeout",
                extra={"env": REQUEST_TIMEOUT_ENV, "value": raw_timeout},
            )

    config = AnthropicConfig(
        api_key=_first_env(API_KEY_ENV_CANDIDATES),
        auth_token=_first_env(AUTH_TOKEN_ENV_CANDIDATES),
        api_base=_first_env(API_BASE_ENV_CANDIDATES),
        request_timeout=request_timeout,
        cli_path=os.getenv(CLI_PATH_ENV) or None,
    )
    logger.debug(
        "[config] Loaded anthropic config",
        extra={
            "has_api_key": bool(config.api_key),
            "has_auth_token": bool(config.auth_token),
            "api_base": config.api_base,
            "request_timeout": config.request_timeout,
        },
    )
    return config
