"""Brain hooks adapter backed by Claude Code's ``.claude/settings.json``.

A brain hook is identified by (author, event, command). Claude Code groups
hooks by ``matcher`` instead, and the matcher is derived from the hook's
filter, which may change over the hook's lifetime. A hook whose filter
changed therefore leaves a stale record (an orphan) under its old matcher.

Every mutation scans all grouping entries of the event, never only the
entry the hook is expected to live in:
- upsert removes the hook from every other matcher, then updates it in
  place under its current matcher (or appends it)
- delete removes the hook from every matcher

Grouping entries left empty are dropped. The file is re-read before and
rewritten whole after each mutation; nothing is cached between calls.
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rhachet_brains_anthropic.core.brain import (
    BrainHook,
    BrainHookEvent,
    BrainHooksAdapter,
)
from rhachet_brains_anthropic.core.hooks.events import (
    from_claude_code_event,
    to_claude_code_event,
)
from rhachet_brains_anthropic.core.hooks.settings import (
    ClaudeCodeHook,
    ClaudeCodeSettings,
    get_event_entries,
    get_hooks_section,
    read_claude_code_settings,
    write_claude_code_settings,
)
from rhachet_brains_anthropic.core.hooks.translate import (
    effective_author,
    translate_hook_from_claude_code,
    translate_hook_to_claude_code,
)
from rhachet_brains_anthropic.utils.log import get_logger

logger = get_logger()

CLAUDE_CODE_ADAPTER_SLUG = "claude-code"


def _is_same_hook(record: Any, entry: Dict[str, Any], author: str, command: str) -> bool:
    # Identity uses the author reads report, including a legacy entry-level one.
    return (
        isinstance(record, dict)
        and record.get("command") == command
        and effective_author(record, entry) == author
    )


def _copy_event_entries(settings: ClaudeCodeSettings, event_name: str) -> List[Any]:
    entries = get_hooks_section(settings).get(event_name)
    return copy.deepcopy(entries) if isinstance(entries, list) else []


def _remove_hook(entry: Any, author: str, command: str) -> int:
    """Remove every record of the hook from a grouping entry; return how many."""
    if not isinstance(entry, dict) or not isinstance(entry.get("hooks"), list):
        return 0
    records = entry["hooks"]
    kept = [record for record in records if not _is_same_hook(record, entry, author, command)]
    entry["hooks"] = kept
    return len(records) - len(kept)


def _is_empty_entry(entry: Any) -> bool:
    return isinstance(entry, dict) and entry.get("hooks") == []


def _with_event_entries(
    settings: ClaudeCodeSettings, event_name: str, entries: List[Any]
) -> ClaudeCodeSettings:
    hooks_section = get_hooks_section(settings)
    return {
        **settings,
        "hooks": {
            **hooks_section,
            event_name: [entry for entry in entries if not _is_empty_entry(entry)],
        },
    }


def _place_in_target(
    entries: List[Any], matcher: str, record: ClaudeCodeHook, author: str, command: str
) -> Tuple[str, int]:
    """Update, append or create the hook under its matcher; return (action, duplicates)."""
    target = next(
        (
            entry
            for entry in entries
            if isinstance(entry, dict)
            and entry.get("matcher") == matcher
            and isinstance(entry.get("hooks"), list)
        ),
        None,
    )
    if target is None:
        entries.append({"matcher": matcher, "hooks": [record]})
        return "created", 0

    records = target["hooks"]
    index = next(
        (
            i
            for i, existing in enumerate(records)
            if _is_same_hook(existing, target, author, command)
        ),
        None,
    )
    if index is None:
        records.append(record)
        return "appended", 0

    # Keep the first occurrence's position; later copies are duplicates.
    updated = [
        existing
        for i, existing in enumerate(records)
        if i <= index or not _is_same_hook(existing, target, author, command)
    ]
    updated[index] = record
    target["hooks"] = updated
    return "updated", len(records) - len(updated)


class ClaudeCodeHooksAdapter(BrainHooksAdapter):
    """Syncs role hooks into the ``.claude/settings.json`` of one repo."""

    slug = CLAUDE_CODE_ADAPTER_SLUG

    def __init__(self, repo_path: Path):
        self.repo_path = Path(repo_path)

    def __repr__(self) -> str:
        return f"ClaudeCodeHooksAdapter(repo_path={str(self.repo_path)!r})"

    def get_all(
        self,
        author: Optional[str] = None,
        event: Optional[BrainHookEvent] = None,
        command: Optional[str] = None,
    ) -> List[BrainHook]:
        settings = read_claude_code_settings(self.repo_path)

        hooks: List[BrainHook] = []
        for event_name in get_hooks_section(settings):
            if from_claude_code_event(event_name) is None:
                continue
            for entry in get_event_entries(settings, event_name):
                hooks.extend(translate_hook_from_claude_code(event_name, entry))

        if author is not None:
            hooks = [hook for hook in hooks if hook.author == author]
        if event is not None:
            wanted_event = BrainHookEvent(event)
            hooks = [hook for hook in hooks if hook.event == wanted_event]
        if command is not None:
            hooks = [hook for hook in hooks if hook.command == command]
        return hooks

    def get_one(
        self, author: str, event: BrainHookEvent, command: str
    ) -> Optional[BrainHook]:
        found = self.get_all(author=author, event=event, command=command)
        return found[0] if found else None

    def upsert(self, hook: BrainHook) -> BrainHook:
        settings = read_claude_code_settings(self.repo_path)
        target = translate_hook_to_claude_code(hook)
        event_name = target.event.value
        entries = _copy_event_entries(settings, event_name)

        # Orphan cleanup: the hook may still sit under a matcher from an older filter.
        orphans = 0
        for entry in entries:
            if isinstance(entry, dict) and entry.get("matcher") == target.matcher:
                continue
            orphans += _remove_hook(entry, hook.author, hook.command)

        action, duplicates = _place_in_target(
            entries, target.matcher, target.hook, hook.author, hook.command
        )

        write_claude_code_settings(
            _with_event_entries(settings, event_name, entries), self.repo_path
        )
        logger.debug(
            "[claude_hooks] Upserted hook",
            extra={
                "author": hook.author,
                "event": event_name,
                "matcher": target.matcher,
                "action": action,
                "orphans_removed": orphans,
                "duplicates_removed": duplicates,
            },
        )
        return hook

    def findsert(self, hook: BrainHook) -> BrainHook:
        found = self.get_one(hook.author, hook.event, hook.command)
        if found is not None:
            return found
        return self.upsert(hook)

    def delete(self, author: str, event: BrainHookEvent, command: str) -> None:
        settings = read_claude_code_settings(self.repo_path)
        event_name = to_claude_code_event(event).value
        entries = _copy_event_entries(settings, event_name)

        removed = sum(_remove_hook(entry, author, command) for entry in entries)
        if not removed:
            logger.debug(
                "[claude_hooks] No hook to delete",
                extra={"author": author, "event": event_name},
            )
            return

        write_claude_code_settings(
            _with_event_entries(settings, event_name, entries), self.repo_path
        )
        logger.debug(
            "[claude_hooks] Deleted hook",
            extra={"author": author, "event": event_name, "records_removed": removed},
        )


def gen_brain_hooks_adapter_for_claude_code(repo_path: Path) -> ClaudeCodeHooksAdapter:
    """Create a Claude Code hooks adapter for a repo."""
    return ClaudeCodeHooksAdapter(repo_path)
