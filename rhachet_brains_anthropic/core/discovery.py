"""Supplier contract: what this package offers to the host framework."""

from pathlib import Path
from typing import List, Optional

from rhachet_brains_anthropic.core.atom import BrainAtom, gen_brain_atom
from rhachet_brains_anthropic.core.brain import BrainHooksAdapter
from rhachet_brains_anthropic.core.hooks.adapter import gen_brain_hooks_adapter_for_claude_code
from rhachet_brains_anthropic.core.repl import BrainRepl, gen_brain_repl
from rhachet_brains_anthropic.utils.log import get_logger

logger = get_logger()

# Brain specifiers handled by the Claude Code hooks adapter
SUPPORTED_HOOKS_SPECIFIERS = ("claude", "claude-code", "anthropic/claude/code")


def get_brain_atoms_by_anthropic() -> List[BrainAtom]:
    """The atoms registered by default: one per model family alias."""
    return [
        gen_brain_atom("claude/haiku"),
        gen_brain_atom("claude/sonnet"),
        gen_brain_atom("claude/opus"),
    ]


def get_brain_repls_by_anthropic() -> List[BrainRepl]:
    """The repls registered by default."""
    return [
        gen_brain_repl("claude/code"),
        gen_brain_repl("claude/code/haiku"),
        gen_brain_repl("claude/code/sonnet"),
        gen_brain_repl("claude/code/opus"),
    ]


def get_brain_hooks(brain: str, repo_path: Path) -> Optional[BrainHooksAdapter]:
    """Return the hooks adapter for a brain specifier, or None if not handled here.

    None lets the host framework ask the next supplier.
    """
    if brain in SUPPORTED_HOOKS_SPECIFIERS:
        return gen_brain_hooks_adapter_for_claude_code(Path(repo_path))
    logger.debug("[discovery] Brain specifier not handled", extra={"brain": brain})
    return None
