"""Translation between brain hooks and Claude Code hook entries.

Pure functions: no I/O and no shared state.
"""

import math
from datetime import timedelta
from typing import Any, List, Literal, NamedTuple, Optional

from pydantic import BaseModel

from rhachet_brains_anthropic.core.brain import BrainHook, BrainHookFilter
from rhachet_brains_anthropic.core.hooks.events import (
    ClaudeCodeHookEvent,
    from_claude_code_event,
    to_claude_code_event,
)
from rhachet_brains_anthropic.core.hooks.settings import (
    ClaudeCodeHook,
    ClaudeCodeHookEntry,
    get_entry_hooks,
)

# Matcher used when a hook has no filter
WILDCARD_MATCHER = "*"

# Timeout assumed when an entry carries none (Claude Code's own default is longer)
DEFAULT_HOOK_TIMEOUT = timedelta(seconds=30)

UNKNOWN_AUTHOR = "unknown"


class ClaudeCodeHookRecord(BaseModel):
    """A single command hook as written under a grouping entry.

    ``author`` is a rhachet tag; Claude Code ignores unknown keys.
    """

    type: Literal["command"] = "command"
    command: str
    timeout: Optional[int] = None
    author: Optional[str] = None


class ClaudeCodeHookTarget(NamedTuple):
    """Where and how a brain hook is stored in the settings file."""

    event: ClaudeCodeHookEvent
    matcher: str
    hook: ClaudeCodeHook


def matcher_for(hook: BrainHook) -> str:
    """Grouping key of a hook: its filter, or the wildcard."""
    return hook.filter.what if hook.filter else WILDCARD_MATCHER


def timeout_to_seconds(timeout: timedelta) -> int:
    """Whole seconds, rounding halves up."""
    return int(math.floor(timeout.total_seconds() + 0.5))


def translate_hook_to_claude_code(hook: BrainHook) -> ClaudeCodeHookTarget:
    """Translate a brain hook into its Claude Code event, matcher and record."""
    timeout_seconds = timeout_to_seconds(hook.timeout)
    record = ClaudeCodeHookRecord(
        command=hook.command,
        timeout=timeout_seconds if timeout_seconds > 0 else None,
        author=hook.author,
    )
    return ClaudeCodeHookTarget(
        event=to_claude_code_event(hook.event),
        matcher=matcher_for(hook),
        hook=record.model_dump(exclude_none=True),
    )


def _timeout_from_record(value: Any) -> timedelta:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_HOOK_TIMEOUT
    return timedelta(seconds=value)


def effective_author(record: ClaudeCodeHook, entry: ClaudeCodeHookEntry) -> str:
    """Author of a record, falling back to the grouping entry, then to ``unknown``."""
    # Earlier releases tagged the grouping entry instead of each record.
    for candidate in (record.get("author"), entry.get("author")):
        if isinstance(candidate, str) and candidate:
            return candidate
    return UNKNOWN_AUTHOR


def translate_hook_from_claude_code(event: str, entry: ClaudeCodeHookEntry) -> List[BrainHook]:
    """Translate one grouping entry back into brain hooks.

    Each command record in the entry becomes its own hook. Events that are
    not managed here (e.g. PostToolUse) yield an empty list.
    """
    brain_event = from_claude_code_event(event)
    if brain_event is None:
        return []

    matcher = entry.get("matcher")
    hook_filter = (
        BrainHookFilter(what=matcher)
        if isinstance(matcher, str) and matcher != WILDCARD_MATCHER
        else None
    )

    hooks: List[BrainHook] = []
    for record in get_entry_hooks(entry):
        command = record.get("command")
        if not isinstance(command, str):
            continue
        hooks.append(
            BrainHook(
                author=effective_author(record, entry),
                event=brain_event,
                command=command,
                timeout=_timeout_from_record(record.get("timeout")),
                filter=hook_filter,
            )
        )
    return hooks
