"""Headless claude CLI invocation for brain repls.

The agentic loop runs inside the claude CLI. This module only builds the
command line, runs one subprocess with anyio and extracts the final result
message from its JSON output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import anyio

from rhachet_brains_anthropic.core.errors import (
    BrainOutputParseError,
    ClaudeCodeCLINotFoundError,
    ClaudeCodeProcessError,
    ClaudeCodeQueryError,
)
from rhachet_brains_anthropic.utils.log import get_logger

logger = get_logger()

# Runs a command line and returns its stdout.
ClaudeCodeRunner = Callable[[Sequence[str], Optional[Path]], Awaitable[str]]


def build_claude_cli_args(
    cli_path: str,
    prompt: str,
    *,
    json_schema: Dict[str, Any],
    model: Optional[str] = None,
    system_prompt: Optional[str] = None,
    allowed_tools: Sequence[str] = (),
    disallowed_tools: Sequence[str] = (),
) -> List[str]:
    """Build the argv for a single headless claude run."""
    args = [cli_path, "--print", "--output-format", "json"]
    if model:
        args.extend(["--model", model])
    if system_prompt:
        args.extend(["--system-prompt", system_prompt])
    if allowed_tools:
        args.extend(["--allowedTools", ",".join(allowed_tools)])
    if disallowed_tools:
        args.extend(["--disallowedTools", ",".join(disallowed_tools)])
    args.extend(["--json-schema", json.dumps(json_schema, ensure_ascii=False)])
    # Tool flags are variadic; "--" keeps the prompt from being read as a tool name.
    args.extend(["--", prompt])
    return args


async def run_claude_cli(args: Sequence[str], cwd: Optional[Path] = None) -> str:
    """Run the claude CLI to completion and return stdout.

    A non-zero exit with JSON on stdout is left to the result parser, since
    the CLI reports failed queries as result messages.
    """
    try:
        completed = await anyio.run_process(list(args), cwd=cwd, check=False)
    except FileNotFoundError as exc:
        raise ClaudeCodeCLINotFoundError(f"claude CLI not found: {args[0]}") from exc

    stdout = completed.stdout.decode("utf-8", errors="replace")
    stderr = completed.stderr.decode("utf-8", errors="replace") if completed.stderr else ""
    if completed.returncode != 0:
        logger.warning(
            "[claude_cli] Process exited with failure",
            extra={"exit_code": completed.returncode, "stderr": stderr[:500]},
        )
        if not stdout.strip():
            raise ClaudeCodeProcessError(
                f"claude CLI exited with code {completed.returncode}",
                exit_code=completed.returncode,
                stderr=stderr,
            )
    return stdout


def _result_messages(payload: Any) -> List[Dict[str, Any]]:
    messages = payload if isinstance(payload, list) else [payload]
    return [msg for msg in messages if isinstance(msg, dict) and msg.get("type") == "result"]


def extract_result_from_output(stdout: str) -> Any:
    """Return the structured result of a claude run.

    ``structured_output`` is preferred; otherwise the textual result is
    parsed as JSON.
    """
    try:
        payload = json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise BrainOutputParseError(f"claude CLI output is not JSON: {exc}", raw=stdout) from exc

    results = _result_messages(payload)
    if not results:
        raise BrainOutputParseError("no result message received from claude CLI", raw=payload)

    message = results[-1]
    subtype = str(message.get("subtype") or "unknown")
    if subtype != "success" or message.get("is_error"):
        errors = message.get("errors")
        if not isinstance(errors, list):
            errors = [str(message.get("result"))] if message.get("result") else []
        raise ClaudeCodeQueryError(subtype, [str(err) for err in errors])

    structured_output = message.get("structured_output")
    if structured_output is not None:
        return structured_output

    result = message.get("result")
    if isinstance(result, str):
        try:
            return json.loads(result)
        except json.JSONDecodeError as exc:
            raise BrainOutputParseError(
                f"claude CLI result is not JSON: {exc}", raw=result
            ) from exc

    raise BrainOutputParseError("claude CLI result message carries no output", raw=message)
