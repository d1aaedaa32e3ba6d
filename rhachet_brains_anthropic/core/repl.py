"""Brain repls: agentic ask/act delegated to the claude CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Type

from pydantic import ValidationError

from rhachet_brains_anthropic.core.brain import BrainRole, TOutput, cast_briefs_to_prompt
from rhachet_brains_anthropic.core.config import AnthropicConfig, load_anthropic_config
from rhachet_brains_anthropic.core.errors import BrainOutputParseError, ClaudeCodeCLINotFoundError
from rhachet_brains_anthropic.core.model_catalog import MODEL_BY_REPL_SLUG, get_repl_config
from rhachet_brains_anthropic.core.transport import (
    ClaudeCodeRunner,
    build_claude_cli_args,
    extract_result_from_output,
    run_claude_cli,
)
from rhachet_brains_anthropic.utils.json_schema import as_json_schema
from rhachet_brains_anthropic.utils.log import get_logger

logger = get_logger()

# Mutating tools are unavailable to read-only asks.
TOOLS_DISALLOWED_FOR_ASK = ("Edit", "Write", "Bash", "NotebookEdit")

TOOLS_ALLOWED_FOR_ACT = ("Read", "Edit", "Write", "Bash", "Glob", "Grep", "Task")

ReplMode = Literal["ask", "act"]


class BrainRepl:
    """Claude Code as an agentic brain, addressed by slug."""

    repo = "anthropic"

    def __init__(
        self,
        slug: str,
        config: Optional[AnthropicConfig] = None,
        runner: Optional[ClaudeCodeRunner] = None,
    ):
        repl_config = get_repl_config(slug)
        self.slug = slug
        self.model = MODEL_BY_REPL_SLUG[slug]
        self.description = f"claude code ({slug}) - agentic coding assistant with tool use"
        self.spec = repl_config.spec
        self._config = config
        self._runner: ClaudeCodeRunner = runner or run_claude_cli

    def __repr__(self) -> str:
        return f"BrainRepl(repo={self.repo!r}, slug={self.slug!r})"

    async def ask(
        self,
        *,
        prompt: str,
        schema: Type[TOutput],
        role: Optional[BrainRole] = None,
        cwd: Optional[Path] = None,
    ) -> TOutput:
        """Read-only analysis: research, queries, review."""
        return await self._invoke("ask", prompt, schema, role, cwd)

    async def act(
        self,
        *,
        prompt: str,
        schema: Type[TOutput],
        role: Optional[BrainRole] = None,
        cwd: Optional[Path] = None,
    ) -> TOutput:
        """Read+write actions: code changes and file edits."""
        return await self._invoke("act", prompt, schema, role, cwd)

    async def _invoke(
        self,
        mode: ReplMode,
        prompt: str,
        schema: Type[TOutput],
        role: Optional[BrainRole],
        cwd: Optional[Path],
    ) -> TOutput:
        config = self._config or load_anthropic_config()
        cli_path = config.resolve_cli_path()
        if not cli_path:
            raise ClaudeCodeCLINotFoundError(
                "claude CLI not found on PATH; set RHACHET_BRAINS_CLAUDE_CLI"
            )

        system_prompt = cast_briefs_to_prompt(role.briefs) if role and role.briefs else None
        args = build_claude_cli_args(
            cli_path,
            prompt,
            json_schema=as_json_schema(schema),
            model=self.model,
            system_prompt=system_prompt,
            allowed_tools=TOOLS_ALLOWED_FOR_ACT if mode == "act" else (),
            disallowed_tools=TOOLS_DISALLOWED_FOR_ASK if mode == "ask" else (),
        )

        logger.debug(
            "[claude_repl] Invoking claude CLI",
            extra={"slug": self.slug, "mode": mode, "model": self.model, "cwd": str(cwd or "")},
        )
        stdout = await self._runner(args, cwd)
        result = extract_result_from_output(stdout)

        try:
            return schema.model_validate(result)
        except ValidationError as exc:
            raise BrainOutputParseError(
                f"claude code result does not match {schema.__name__}: {exc}", raw=result
            ) from exc


def gen_brain_repl(
    slug: str,
    config: Optional[AnthropicConfig] = None,
    runner: Optional[ClaudeCodeRunner] = None,
) -> BrainRepl:
    """Create a brain repl for a catalog slug, e.g. ``claude/code/haiku``."""
    return BrainRepl(slug, config=config, runner=runner)
