"""Error types raised by the anthropic brains."""

from __future__ import annotations

from typing import Any, Optional


class BrainError(Exception):
    """Base exception for all brain errors."""

    def __str__(self) -> str:
        return self.args[0] if self.args else "An error occurred in an anthropic brain"


class BrainSlugNotFoundError(BrainError, KeyError):
    """Raised when a brain slug is not present in the model catalog."""

    def __init__(self, slug: str, known: Optional[list[str]] = None) -> None:
        suffix = f" Known slugs: {', '.join(known)}" if known else ""
        super().__init__(f"Unknown brain slug '{slug}'.{suffix}")
        self.slug = slug


class BrainOutputParseError(BrainError):
    """Raised when a brain response does not carry valid structured output."""

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.raw = raw


class BrainProviderError(BrainError):
    """Normalized Anthropic API exception with a stable error code."""

    def __init__(self, error_code: str, message: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class ClaudeCodeCLINotFoundError(BrainError):
    """Raised when the claude CLI cannot be located."""


class ClaudeCodeProcessError(BrainError):
    """Raised when the claude CLI process exits with a failure."""

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class ClaudeCodeQueryError(BrainError):
    """Raised when the claude CLI reports a non-success result."""

    def __init__(self, subtype: str, errors: Optional[list[str]] = None) -> None:
        detail = ", ".join(errors) if errors else "unknown"
        super().__init__(f"claude code query failed: {subtype}, errors: {detail}")
        self.subtype = subtype
        self.errors = list(errors or [])


__all__ = [
    "BrainError",
    "BrainSlugNotFoundError",
    "BrainOutputParseError",
    "BrainProviderError",
    "ClaudeCodeCLINotFoundError",
    "ClaudeCodeProcessError",
    "ClaudeCodeQueryError",
]
