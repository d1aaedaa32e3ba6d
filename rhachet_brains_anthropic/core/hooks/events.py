"""Claude Code hook event names and their mapping to brain hook events."""

from enum import Enum
from typing import Dict, Optional

from rhachet_brains_anthropic.core.brain import BrainHookEvent


class ClaudeCodeHookEvent(str, Enum):
    """Hook events understood by Claude Code.

    PostToolUse is recognized so it can be preserved in the settings file,
    but it is never produced or consulted by the hooks adapter.
    """

    SESSION_START = "SessionStart"
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    STOP = "Stop"


EVENT_MAP: Dict[BrainHookEvent, ClaudeCodeHookEvent] = {
    BrainHookEvent.ON_BOOT: ClaudeCodeHookEvent.SESSION_START,
    BrainHookEvent.ON_TOOL: ClaudeCodeHookEvent.PRE_TOOL_USE,
    BrainHookEvent.ON_STOP: ClaudeCodeHookEvent.STOP,
}

REVERSE_EVENT_MAP: Dict[str, BrainHookEvent] = {
    claude_event.value: brain_event for brain_event, claude_event in EVENT_MAP.items()
}


def to_claude_code_event(event: BrainHookEvent) -> ClaudeCodeHookEvent:
    """Map a brain hook event to the Claude Code event name."""
    return EVENT_MAP[BrainHookEvent(event)]


def from_claude_code_event(event_name: str) -> Optional[BrainHookEvent]:
    """Map a Claude Code event name back, or None for events not managed here."""
    return REVERSE_EVENT_MAP.get(event_name)
