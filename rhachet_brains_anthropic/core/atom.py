"""Brain atoms: stateless structured-output inference on the Messages API."""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any, Dict, Optional, Type

import anthropic
from anthropic import AsyncAnthropic
from pydantic import ValidationError

from rhachet_brains_anthropic.core.brain import (
    BrainCharCounts,
    BrainOutput,
    BrainOutputMetrics,
    BrainRole,
    BrainTokenCounts,
    TOutput,
    cast_briefs_to_prompt,
)
from rhachet_brains_anthropic.core.config import AnthropicConfig, load_anthropic_config
from rhachet_brains_anthropic.core.errors import BrainOutputParseError, BrainProviderError
from rhachet_brains_anthropic.core.model_catalog import BrainAtomConfig, get_atom_config
from rhachet_brains_anthropic.utils.json_schema import as_json_schema
from rhachet_brains_anthropic.utils.log import get_logger

logger = get_logger()

STRUCTURED_OUTPUTS_BETA = "structured-outputs-2025-11-13"


def _classify_anthropic_error(exc: Exception) -> tuple[str, str]:
    """Classify an Anthropic exception into error code and user-friendly message."""
    exc_type = type(exc).__name__
    exc_msg = str(exc)

    if isinstance(exc, anthropic.AuthenticationError):
        return "authentication_error", f"Authentication failed: {exc_msg}"
    if isinstance(exc, anthropic.PermissionDeniedError):
        return "permission_denied", f"Permission denied: {exc_msg}"
    if isinstance(exc, anthropic.NotFoundError):
        return "model_not_found", f"Model not found: {exc_msg}"
    if isinstance(exc, anthropic.BadRequestError):
        if "context" in exc_msg.lower() or "token" in exc_msg.lower():
            return "context_length_exceeded", f"Context length exceeded: {exc_msg}"
        return "bad_request", f"Invalid request: {exc_msg}"
    if isinstance(exc, anthropic.RateLimitError):
        return "rate_limit", f"Rate limit exceeded: {exc_msg}"
    if isinstance(exc, anthropic.APITimeoutError):
        return "timeout", f"Request timed out: {exc_msg}"
    if isinstance(exc, anthropic.APIConnectionError):
        return "connection_error", f"Connection error: {exc_msg}"
    if isinstance(exc, anthropic.APIStatusError):
        status = getattr(exc, "status_code", "unknown")
        return "api_error", f"API error ({status}): {exc_msg}"
    if isinstance(exc, asyncio.TimeoutError):
        return "timeout", f"Request timed out: {exc_msg}"

    return "unknown_error", f"Unexpected error ({exc_type}): {exc_msg}"


def _first_text(response: Any) -> Optional[str]:
    for block in getattr(response, "content", []) or []:
        if getattr(block, "type", None) == "text":
            return getattr(block, "text", "")
    return None


def _token_counts(response: Any) -> BrainTokenCounts:
    usage = getattr(response, "usage", None)
    return BrainTokenCounts(
        input=getattr(usage, "input_tokens", 0) or 0,
        output=getattr(usage, "output_tokens", 0) or 0,
        cache_get=getattr(usage, "cache_read_input_tokens", 0) or 0,
        cache_set=getattr(usage, "cache_creation_input_tokens", 0) or 0,
    )


class BrainAtom:
    """A single anthropic model, addressed by slug, with a stateless ``ask``."""

    repo = "anthropic"

    def __init__(self, slug: str, config: Optional[AnthropicConfig] = None):
        atom_config: BrainAtomConfig = get_atom_config(slug)
        self.slug = slug
        self.model = atom_config.model
        self.description = atom_config.description
        self.spec = atom_config.spec
        self._config = config

    def __repr__(self) -> str:
        return f"BrainAtom(repo={self.repo!r}, slug={self.slug!r}, model={self.model!r})"

    async def ask(
        self,
        *,
        prompt: str,
        schema: Type[TOutput],
        role: Optional[BrainRole] = None,
        client: Optional[AsyncAnthropic] = None,
    ) -> BrainOutput[TOutput]:
        """Run one inference and validate the reply against ``schema``."""
        config = self._config or load_anthropic_config()
        if client is not None:
            return await self._ask(client, config, prompt, schema, role)
        async with AsyncAnthropic(**config.client_kwargs()) as owned_client:  # type: ignore[arg-type]
            return await self._ask(owned_client, config, prompt, schema, role)

    async def _ask(
        self,
        client: AsyncAnthropic,
        config: AnthropicConfig,
        prompt: str,
        schema: Type[TOutput],
        role: Optional[BrainRole],
    ) -> BrainOutput[TOutput]:
        start_time = time.monotonic()
        system_prompt = cast_briefs_to_prompt(role.briefs) if role and role.briefs else None

        request_kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": config.max_tokens,
            "betas": [STRUCTURED_OUTPUTS_BETA],
            "messages": [{"role": "user", "content": prompt}],
            "extra_body": {
                "output_format": {"type": "json_schema", "schema": as_json_schema(schema)}
            },
        }
        if system_prompt:
            request_kwargs["system"] = system_prompt

        logger.debug(
            "[anthropic_atom] Sending request",
            extra={
                "slug": self.slug,
                "model": self.model,
                "prompt_length": len(prompt),
                "system_length": len(system_prompt or ""),
            },
        )
        try:
            response = await client.beta.messages.create(**request_kwargs)
        except (anthropic.APIError, asyncio.TimeoutError) as exc:
            error_code, error_message = _classify_anthropic_error(exc)
            logger.warning(
                "[anthropic_atom] Request failed",
                extra={"slug": self.slug, "error_code": error_code},
            )
            raise BrainProviderError(error_code, error_message) from exc

        output_text = _first_text(response)
        if output_text is None:
            raise BrainOutputParseError(
                f"No text block in response from {self.model}", raw=response
            )
        try:
            output = schema.model_validate_json(output_text)
        except (ValidationError, json.JSONDecodeError) as exc:
            raise BrainOutputParseError(
                f"Response from {self.model} does not match {schema.__name__}: {exc}",
                raw=output_text,
            ) from exc

        metrics = BrainOutputMetrics(
            tokens=_token_counts(response),
            chars=BrainCharCounts(
                input=len(prompt) + len(system_prompt or ""),
                output=len(output_text),
            ),
            elapsed_ms=(time.monotonic() - start_time) * 1000,
        )
        logger.debug(
            "[anthropic_atom] Received response",
            extra={
                "slug": self.slug,
                "input_tokens": metrics.tokens.input,
                "output_tokens": metrics.tokens.output,
                "elapsed_ms": round(metrics.elapsed_ms, 1),
            },
        )
        return BrainOutput[schema](output=output, metrics=metrics)  # type: ignore[valid-type]


def gen_brain_atom(slug: str, config: Optional[AnthropicConfig] = None) -> BrainAtom:
    """Create a brain atom for a catalog slug, e.g. ``claude/haiku``."""
    return BrainAtom(slug, config=config)
