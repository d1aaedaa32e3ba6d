"""
rhachet-brains-anthropic - anthropic brains for rhachet

Supplies:
- brain atoms: stateless structured inference (claude/haiku, claude/sonnet, claude/opus)
- brain repls: agentic ask/act through the claude CLI (claude/code/...)
- brain hooks: role hooks synced into .claude/settings.json

Quick Start:
    from rhachet_brains_anthropic import get_brain_hooks

    hooks = get_brain_hooks("claude-code", repo_path)
"""

__version__ = "0.1.0"

from rhachet_brains_anthropic.core.atom import BrainAtom, gen_brain_atom
from rhachet_brains_anthropic.core.brain import (
    BrainHook,
    BrainHookEvent,
    BrainHookFilter,
    BrainHooksAdapter,
    BrainOutput,
    BrainRole,
)
from rhachet_brains_anthropic.core.discovery import (
    get_brain_atoms_by_anthropic,
    get_brain_hooks,
    get_brain_repls_by_anthropic,
)
from rhachet_brains_anthropic.core.hooks import (
    ClaudeCodeHooksAdapter,
    gen_brain_hooks_adapter_for_claude_code,
)
from rhachet_brains_anthropic.core.repl import BrainRepl, gen_brain_repl

__all__ = [
    "__version__",
    "BrainAtom",
    "BrainHook",
    "BrainHookEvent",
    "BrainHookFilter",
    "BrainHooksAdapter",
    "BrainOutput",
    "BrainRepl",
    "BrainRole",
    "ClaudeCodeHooksAdapter",
    "gen_brain_atom",
    "gen_brain_hooks_adapter_for_claude_code",
    "gen_brain_repl",
    "get_brain_atoms_by_anthropic",
    "get_brain_hooks",
    "get_brain_repls_by_anthropic",
]
