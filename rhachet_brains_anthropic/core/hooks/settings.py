"""Read and write Claude Code's project settings file.

The file lives at ``<repo>/.claude/settings.json``. Only the ``hooks``
section is interpreted by this package; every other top-level field is
kept as-is and written back untouched.

Layout of the hooks section:
{
  "hooks": {
    "PreToolUse": [
      {
        "matcher": "Bash",
        "hooks": [
          {"type": "command", "command": "npx rhachet validate", "timeout": 60, "author": "repo=x/role=y"}
        ]
      }
    ]
  }
}
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from rhachet_brains_anthropic.utils.log import get_logger

logger = get_logger()

ClaudeCodeSettings = Dict[str, Any]
ClaudeCodeHookEntry = Dict[str, Any]
ClaudeCodeHook = Dict[str, Any]


class ClaudeCodeSettingsError(ValueError):
    """Raised when the settings file parses but is not a JSON object."""


def get_claude_code_settings_path(repo_path: Path) -> Path:
    """Get the path to the project settings file of a repo."""
    return Path(repo_path) / ".claude" / "settings.json"


def read_claude_code_settings(repo_path: Path) -> ClaudeCodeSettings:
    """Load the settings of a repo; a missing file reads as empty settings.

    Malformed JSON is not recovered from: the decode error propagates so the
    caller can surface the corrupt file instead of overwriting it.
    """
    settings_path = get_claude_code_settings_path(repo_path)
    if not settings_path.exists():
        return {}

    data = json.loads(settings_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ClaudeCodeSettingsError(
            f"root must be a JSON object, got {type(data).__name__}"
        )
    logger.debug(
        f"[claude_settings] Loaded settings from {settings_path}",
        extra={"event_count": len(get_hooks_section(data))},
    )
    return data


def write_claude_code_settings(settings: ClaudeCodeSettings, repo_path: Path) -> Path:
    """Overwrite the settings file of a repo, creating ``.claude/`` if needed."""
    settings_path = get_claude_code_settings_path(repo_path)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(
        json.dumps(settings, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    logger.debug(
        f"[claude_settings] Wrote settings to {settings_path}",
        extra={"event_count": len(get_hooks_section(settings))},
    )
    return settings_path


def get_hooks_section(settings: ClaudeCodeSettings) -> Dict[str, Any]:
    """Return the hooks mapping, or an empty dict if absent or malformed."""
    hooks = settings.get("hooks")
    return hooks if isinstance(hooks, dict) else {}


def get_event_entries(settings: ClaudeCodeSettings, event_name: str) -> List[ClaudeCodeHookEntry]:
    """Return the grouping entries of one event, skipping malformed ones."""
    entries = get_hooks_section(settings).get(event_name)
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def get_entry_hooks(entry: ClaudeCodeHookEntry) -> List[ClaudeCodeHook]:
    """Return the hook records of a grouping entry, skipping malformed ones."""
    hooks = entry.get("hooks")
    if not isinstance(hooks, list):
        return []
    return [hook for hook in hooks if isinstance(hook, dict)]
