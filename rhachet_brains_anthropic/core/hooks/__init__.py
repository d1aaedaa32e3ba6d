"""Claude Code hooks adapter.

Brain hooks declared by roles are synced into the project settings file
of Claude Code:
- .claude/settings.json (per repo)

Brain events map onto Claude Code events:
- onBoot: SessionStart
- onTool: PreToolUse (filter.what becomes the tool matcher)
- onStop: Stop
"""

from rhachet_brains_anthropic.core.hooks.adapter import (
    CLAUDE_CODE_ADAPTER_SLUG,
    ClaudeCodeHooksAdapter,
    gen_brain_hooks_adapter_for_claude_code,
)
from rhachet_brains_anthropic.core.hooks.events import (
    EVENT_MAP,
    ClaudeCodeHookEvent,
    from_claude_code_event,
    to_claude_code_event,
)
from rhachet_brains_anthropic.core.hooks.settings import (
    ClaudeCodeSettingsError,
    get_claude_code_settings_path,
    read_claude_code_settings,
    write_claude_code_settings,
)
from rhachet_brains_anthropic.core.hooks.translate import (
    DEFAULT_HOOK_TIMEOUT,
    WILDCARD_MATCHER,
    ClaudeCodeHookTarget,
    translate_hook_from_claude_code,
    translate_hook_to_claude_code,
)

__all__ = [
    # Adapter
    "CLAUDE_CODE_ADAPTER_SLUG",
    "ClaudeCodeHooksAdapter",
    "gen_brain_hooks_adapter_for_claude_code",
    # Events
    "EVENT_MAP",
    "ClaudeCodeHookEvent",
    "from_claude_code_event",
    "to_claude_code_event",
    # Settings
    "ClaudeCodeSettingsError",
    "get_claude_code_settings_path",
    "read_claude_code_settings",
    "write_claude_code_settings",
    # Translation
    "DEFAULT_HOOK_TIMEOUT",
    "WILDCARD_MATCHER",
    "ClaudeCodeHookTarget",
    "translate_hook_from_claude_code",
    "translate_hook_to_claude_code",
]
