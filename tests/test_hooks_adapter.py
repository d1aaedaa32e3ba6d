"""Tests for the Claude Code hooks adapter.

Tests cover:
- Upsert placement, in-place update and idempotence
- Orphan cleanup when a hook's filter changes
- Cross-matcher delete
- Preservation of unrelated settings and unmanaged events
- Query filters and get_one
- The full set/del lifecycle of a repo
"""

import json

from rhachet_brains_anthropic.core.brain import BrainHookEvent, BrainHookFilter


def _write_settings(settings_path, data):
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def _read_settings(settings_path):
    return json.loads(settings_path.read_text(encoding="utf-8"))


# ─────────────────────────────────────────────────────────────────────────────
# Upsert
# ─────────────────────────────────────────────────────────────────────────────


class TestUpsert:
    def test_creates_settings_file_on_first_upsert(self, adapter, settings_path, make_hook):
        assert not settings_path.exists()

        adapter.upsert(make_hook(command="echo boot", seconds=30))

        assert _read_settings(settings_path) == {
            "hooks": {
                "SessionStart": [
                    {
                        "matcher": "*",
                        "hooks": [
                            {
                                "type": "command",
                                "command": "echo boot",
                                "timeout": 30,
                                "author": "repo=myapp/role=mechanic",
                            }
                        ],
                    }
                ]
            }
        }

    def test_upsert_returns_the_hook(self, adapter, make_hook):
        hook = make_hook()
        assert adapter.upsert(hook) == hook

    def test_upsert_twice_is_byte_identical(self, adapter, settings_path, make_hook):
        hook = make_hook(event=BrainHookEvent.ON_TOOL, what="Bash")

        adapter.upsert(hook)
        first = settings_path.read_bytes()
        adapter.upsert(hook)

        assert settings_path.read_bytes() == first

    def test_updates_in_place_preserving_position(self, adapter, settings_path, make_hook):
        adapter.upsert(make_hook(command="echo first", seconds=10))
        adapter.upsert(make_hook(command="echo second", seconds=10))
        adapter.upsert(make_hook(command="echo third", seconds=10))

        adapter.upsert(make_hook(command="echo second", seconds=99))

        records = _read_settings(settings_path)["hooks"]["SessionStart"][0]["hooks"]
        assert [r["command"] for r in records] == ["echo first", "echo second", "echo third"]
        assert records[1]["timeout"] == 99

    def test_appends_to_existing_matcher_entry(self, adapter, settings_path, make_hook):
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="a", what="Bash"))
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="b", what="Bash"))

        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert len(entries) == 1
        assert [r["command"] for r in entries[0]["hooks"]] == ["a", "b"]

    def test_creates_new_entry_for_new_matcher(self, adapter, settings_path, make_hook):
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="a", what="Bash"))
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="b", what="Write"))

        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert [entry["matcher"] for entry in entries] == ["Bash", "Write"]

    def test_filter_change_leaves_exactly_one_hook(self, adapter, settings_path, make_hook):
        write_only = make_hook(event=BrainHookEvent.ON_TOOL, command="lint", what="Write")
        write_or_edit = make_hook(event=BrainHookEvent.ON_TOOL, command="lint", what="Write|Edit")

        adapter.upsert(write_only)
        adapter.upsert(write_or_edit)

        hooks = adapter.get_all()
        assert len(hooks) == 1
        assert hooks[0].filter == BrainHookFilter(what="Write|Edit")
        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert [entry["matcher"] for entry in entries] == ["Write|Edit"]

    def test_orphan_cleanup_keeps_other_hooks_in_old_entry(
        self, adapter, settings_path, make_hook
    ):
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="lint", what="Write"))
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="fmt", what="Write"))

        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="lint", what="Edit"))

        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert entries[0]["matcher"] == "Write"
        assert [r["command"] for r in entries[0]["hooks"]] == ["fmt"]
        assert entries[1]["matcher"] == "Edit"
        assert [r["command"] for r in entries[1]["hooks"]] == ["lint"]

    def test_removing_filter_moves_hook_to_wildcard(self, adapter, settings_path, make_hook):
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="lint", what="Bash"))
        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="lint"))

        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert [entry["matcher"] for entry in entries] == ["*"]

    def test_upsert_collapses_drifted_copies(self, adapter, settings_path, make_hook):
        record = {"type": "command", "command": "lint", "author": "me"}
        _write_settings(
            settings_path,
            {
                "hooks": {
                    "PreToolUse": [
                        {"matcher": "Write", "hooks": [dict(record)]},
                        {"matcher": "Edit", "hooks": [dict(record), dict(record)]},
                    ]
                }
            },
        )

        adapter.upsert(
            make_hook(author="me", event=BrainHookEvent.ON_TOOL, command="lint", what="Edit")
        )

        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert [entry["matcher"] for entry in entries] == ["Edit"]
        assert len(entries[0]["hooks"]) == 1
        assert len(adapter.get_all(author="me")) == 1

    def test_same_command_different_authors_are_distinct(self, adapter, make_hook):
        adapter.upsert(make_hook(author="repo=a/role=x", command="npm test"))
        adapter.upsert(make_hook(author="repo=b/role=y", command="npm test"))

        assert len(adapter.get_all(command="npm test")) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Findsert
# ─────────────────────────────────────────────────────────────────────────────


class TestFindsert:
    def test_inserts_when_absent(self, adapter, make_hook):
        hook = make_hook()
        assert adapter.findsert(hook) == hook
        assert adapter.get_all() == [hook]

    def test_returns_found_without_overwriting(self, adapter, settings_path, make_hook):
        adapter.upsert(make_hook(seconds=10))
        before = settings_path.read_bytes()

        found = adapter.findsert(make_hook(seconds=99))

        assert found == make_hook(seconds=10)
        assert settings_path.read_bytes() == before


# ─────────────────────────────────────────────────────────────────────────────
# Delete
# ─────────────────────────────────────────────────────────────────────────────


class TestDelete:
    def test_delete_removes_from_every_matcher(self, adapter, settings_path):
        record = {"type": "command", "command": "lint", "timeout": 30, "author": "me"}
        other = {"type": "command", "command": "fmt", "author": "me"}
        _write_settings(
            settings_path,
            {
                "hooks": {
                    "PreToolUse": [
                        {"matcher": "Write", "hooks": [dict(record)]},
                        {"matcher": "Edit", "hooks": [dict(record), other]},
                        {"matcher": "Write|Edit", "hooks": [dict(record)]},
                    ]
                }
            },
        )

        adapter.delete("me", BrainHookEvent.ON_TOOL, "lint")

        assert adapter.get_one("me", BrainHookEvent.ON_TOOL, "lint") is None
        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert entries == [{"matcher": "Edit", "hooks": [other]}]

    def test_delete_missing_hook_is_a_noop(self, adapter, settings_path):
        adapter.delete("nobody", BrainHookEvent.ON_STOP, "echo nothing")
        assert not settings_path.exists()

    def test_delete_missing_hook_does_not_rewrite(self, adapter, settings_path, make_hook):
        adapter.upsert(make_hook())
        # Hand-formatted content would be normalized by a rewrite.
        compact = json.dumps(_read_settings(settings_path))
        settings_path.write_text(compact, encoding="utf-8")

        adapter.delete("nobody", BrainHookEvent.ON_BOOT, "echo boot")

        assert settings_path.read_text(encoding="utf-8") == compact

    def test_delete_only_touches_its_event(self, adapter, make_hook):
        adapter.upsert(make_hook(event=BrainHookEvent.ON_BOOT, command="same"))
        adapter.upsert(make_hook(event=BrainHookEvent.ON_STOP, command="same"))

        adapter.delete("repo=myapp/role=mechanic", BrainHookEvent.ON_BOOT, "same")

        remaining = adapter.get_all()
        assert [hook.event for hook in remaining] == [BrainHookEvent.ON_STOP]


# ─────────────────────────────────────────────────────────────────────────────
# Preservation of unrelated settings
# ─────────────────────────────────────────────────────────────────────────────


class TestPreservation:
    def test_unrelated_top_level_fields_survive(self, adapter, settings_path, make_hook):
        permissions = {"allow": ["Bash(npm run test:*)"], "deny": ["Read(./.env)"]}
        _write_settings(settings_path, {"permissions": permissions, "model": "opus"})

        adapter.upsert(make_hook())
        adapter.delete("repo=myapp/role=mechanic", BrainHookEvent.ON_BOOT, "echo boot")

        data = _read_settings(settings_path)
        assert list(data)[:2] == ["permissions", "model"]
        assert data["permissions"] == permissions
        assert data["model"] == "opus"

    def test_post_tool_use_is_preserved_and_ignored(self, adapter, settings_path, make_hook):
        post = [{"matcher": "*", "hooks": [{"type": "command", "command": "echo after"}]}]
        _write_settings(settings_path, {"hooks": {"PostToolUse": post}})

        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="echo after"))
        adapter.delete("repo=myapp/role=mechanic", BrainHookEvent.ON_TOOL, "echo after")

        assert _read_settings(settings_path)["hooks"]["PostToolUse"] == post
        assert adapter.get_all() == []

    def test_foreign_hooks_in_managed_event_survive(self, adapter, settings_path, make_hook):
        foreign = {"matcher": "Bash", "hooks": [{"type": "command", "command": "./guard.sh"}]}
        _write_settings(settings_path, {"hooks": {"PreToolUse": [foreign]}})

        adapter.upsert(make_hook(event=BrainHookEvent.ON_TOOL, command="lint", what="Write"))

        entries = _read_settings(settings_path)["hooks"]["PreToolUse"]
        assert entries[0] == foreign
        assert entries[1]["matcher"] == "Write"


# ─────────────────────────────────────────────────────────────────────────────
# Entry-level author (written by earlier releases)
# ─────────────────────────────────────────────────────────────────────────────


class TestEntryLevelAuthor:
    def _seed_legacy(self, settings_path, *records):
        _write_settings(
            settings_path,
            {
                "hooks": {
                    "SessionStart": [
                        {"matcher": "*", "author": "me", "hooks": [dict(r) for r in records]}
                    ]
                }
            },
        )

    def test_upsert_updates_legacy_record_in_place(self, adapter, settings_path, make_hook):
        self._seed_legacy(
            settings_path,
            {"type": "command", "command": "lint", "timeout": 30},
            {"type": "command", "command": "fmt"},
        )

        adapter.upsert(make_hook(author="me", command="lint", seconds=45))

        hooks = adapter.get_all(author="me")
        assert sorted(hook.command for hook in hooks) == ["fmt", "lint"]
        assert adapter.get_one("me", BrainHookEvent.ON_BOOT, "lint") == make_hook(
            author="me", command="lint", seconds=45
        )
        (entry,) = _read_settings(settings_path)["hooks"]["SessionStart"]
        assert entry["hooks"][0] == {
            "type": "command",
            "command": "lint",
            "timeout": 45,
            "author": "me",
        }
        assert entry["hooks"][1] == {"type": "command", "command": "fmt"}

    def test_upsert_of_legacy_hook_is_idempotent(self, adapter, settings_path, make_hook):
        self._seed_legacy(settings_path, {"type": "command", "command": "lint", "timeout": 30})
        hook = make_hook(author="me", command="lint")

        adapter.upsert(hook)
        first = settings_path.read_bytes()
        adapter.upsert(hook)

        assert settings_path.read_bytes() == first
        assert adapter.get_all(author="me") == [hook]

    def test_delete_removes_legacy_record(self, adapter, settings_path):
        self._seed_legacy(settings_path, {"type": "command", "command": "lint", "timeout": 30})

        adapter.delete("me", BrainHookEvent.ON_BOOT, "lint")

        assert adapter.get_one("me", BrainHookEvent.ON_BOOT, "lint") is None
        assert _read_settings(settings_path)["hooks"]["SessionStart"] == []

    def test_record_author_overrides_entry_author(self, adapter, settings_path):
        self._seed_legacy(
            settings_path, {"type": "command", "command": "lint", "author": "someone-else"}
        )

        adapter.delete("me", BrainHookEvent.ON_BOOT, "lint")

        assert adapter.get_one("someone-else", BrainHookEvent.ON_BOOT, "lint") is not None


# ─────────────────────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────────────────────


class TestQueries:
    def _seed(self, adapter, make_hook):
        adapter.upsert(make_hook(author="A", event=BrainHookEvent.ON_BOOT, command="a-boot"))
        adapter.upsert(make_hook(author="A", event=BrainHookEvent.ON_STOP, command="a-stop"))
        adapter.upsert(make_hook(author="B", event=BrainHookEvent.ON_BOOT, command="b-boot"))
        adapter.upsert(
            make_hook(author="B", event=BrainHookEvent.ON_TOOL, command="b-tool", what="Bash")
        )

    def test_get_all_on_empty_repo(self, adapter):
        assert adapter.get_all() == []

    def test_filter_by_author(self, adapter, make_hook):
        self._seed(adapter, make_hook)
        assert sorted(hook.command for hook in adapter.get_all(author="A")) == [
            "a-boot",
            "a-stop",
        ]

    def test_filter_by_author_and_event(self, adapter, make_hook):
        self._seed(adapter, make_hook)
        hooks = adapter.get_all(author="B", event=BrainHookEvent.ON_BOOT)
        assert [hook.command for hook in hooks] == ["b-boot"]

    def test_filter_accepts_event_value(self, adapter, make_hook):
        self._seed(adapter, make_hook)
        assert len(adapter.get_all(event="onBoot")) == 2

    def test_filter_with_no_match_is_empty(self, adapter, make_hook):
        self._seed(adapter, make_hook)
        assert adapter.get_all(author="A", event=BrainHookEvent.ON_TOOL) == []

    def test_get_one_by_unique_key(self, adapter, make_hook):
        self._seed(adapter, make_hook)
        hook = adapter.get_one("B", BrainHookEvent.ON_TOOL, "b-tool")
        assert hook is not None
        assert hook.filter == BrainHookFilter(what="Bash")
        assert adapter.get_one("A", BrainHookEvent.ON_TOOL, "b-tool") is None


# ─────────────────────────────────────────────────────────────────────────────
# Lifecycle
# ─────────────────────────────────────────────────────────────────────────────


def test_set_and_del_lifecycle(adapter, settings_path, make_hook):
    mechanic = "repo=myapp/role=mechanic"
    reviewer = "repo=myapp/role=reviewer"
    hooks = [
        make_hook(author=mechanic, event=BrainHookEvent.ON_BOOT, command="echo boot"),
        make_hook(
            author=mechanic,
            event=BrainHookEvent.ON_TOOL,
            command="echo tool",
            seconds=60,
            what="Bash",
        ),
        make_hook(author=reviewer, event=BrainHookEvent.ON_BOOT, command="echo ready", seconds=15),
        make_hook(author=reviewer, event=BrainHookEvent.ON_STOP, command="echo done", seconds=120),
    ]
    assert not settings_path.exists()

    for hook in hooks:
        adapter.upsert(hook)
    assert len(adapter.get_all()) == 4
    assert sorted(_read_settings(settings_path)["hooks"]) == ["PreToolUse", "SessionStart", "Stop"]

    adapter.delete(mechanic, BrainHookEvent.ON_BOOT, "echo boot")
    assert len(adapter.get_all()) == 3
    assert adapter.get_one(mechanic, BrainHookEvent.ON_BOOT, "echo boot") is None

    adapter.delete(reviewer, BrainHookEvent.ON_BOOT, "echo ready")
    adapter.delete(reviewer, BrainHookEvent.ON_STOP, "echo done")
    assert adapter.get_all() == [hooks[1]]

    data = _read_settings(settings_path)
    assert data["hooks"]["SessionStart"] == []
    assert data["hooks"]["Stop"] == []
