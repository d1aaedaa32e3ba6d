"""Tests for the `rhachet-brains-anthropic hooks` subcommands."""

from __future__ import annotations

import json

from click.testing import CliRunner

from rhachet_brains_anthropic.cli import cli as cli_module

AUTHOR = "repo=myapp/role=mechanic"


def _run_cli(args: list[str]):
    runner = CliRunner()
    return runner.invoke(cli_module.cli, args)


def test_hooks_group_help_renders():
    result = _run_cli(["hooks"])
    assert result.exit_code == 0
    assert "Manage role hooks in Claude Code settings." in result.output
    assert "upsert" in result.output


def test_list_on_empty_repo(tmp_path):
    result = _run_cli(["hooks", "list", "--repo", str(tmp_path)])
    assert result.exit_code == 0
    assert "No hooks configured." in result.output


def test_upsert_list_get_delete_roundtrip(tmp_path):
    repo = str(tmp_path)

    upsert_result = _run_cli(
        [
            "hooks",
            "upsert",
            "--repo",
            repo,
            "--author",
            AUTHOR,
            "--event",
            "onTool",
            "--command",
            "npx lint",
            "--timeout",
            "45",
            "--filter",
            "Write|Edit",
        ]
    )
    assert upsert_result.exit_code == 0
    assert "Saved hook [onTool] npx lint" in upsert_result.output

    settings = json.loads((tmp_path / ".claude" / "settings.json").read_text(encoding="utf-8"))
    (entry,) = settings["hooks"]["PreToolUse"]
    assert entry["matcher"] == "Write|Edit"
    assert entry["hooks"][0]["timeout"] == 45

    list_result = _run_cli(["hooks", "list", "--repo", repo, "--json"])
    assert list_result.exit_code == 0
    rows = json.loads(list_result.output)
    assert rows == [
        {
            "author": AUTHOR,
            "event": "onTool",
            "command": "npx lint",
            "timeout": 45,
            "filter": "Write|Edit",
        }
    ]

    text_result = _run_cli(["hooks", "list", "--repo", repo])
    assert "Configured hooks:" in text_result.output
    assert "- [onTool] npx lint" in text_result.output
    assert f"  Author: {AUTHOR}" in text_result.output
    assert "  Filter: Write|Edit" in text_result.output

    get_result = _run_cli(
        [
            "hooks",
            "get",
            "--repo",
            repo,
            "--author",
            AUTHOR,
            "--event",
            "onTool",
            "--command",
            "npx lint",
            "--json",
        ]
    )
    assert get_result.exit_code == 0
    assert json.loads(get_result.output)["timeout"] == 45

    delete_result = _run_cli(
        [
            "hooks",
            "delete",
            "--repo",
            repo,
            "--author",
            AUTHOR,
            "--event",
            "onTool",
            "--command",
            "npx lint",
        ]
    )
    assert delete_result.exit_code == 0
    assert "Removed hook [onTool] npx lint" in delete_result.output

    final_list = _run_cli(["hooks", "list", "--repo", repo, "--json"])
    assert json.loads(final_list.output) == []


def test_list_filters_by_event(tmp_path):
    repo = str(tmp_path)
    for event, command in [("onBoot", "echo boot"), ("onStop", "echo stop")]:
        result = _run_cli(
            ["hooks", "upsert", "--repo", repo, "--author", AUTHOR]
            + ["--event", event, "--command", command]
        )
        assert result.exit_code == 0

    result = _run_cli(["hooks", "list", "--repo", repo, "--event", "onStop", "--json"])
    assert [row["command"] for row in json.loads(result.output)] == ["echo stop"]


def test_get_missing_hook_fails(tmp_path):
    result = _run_cli(
        [
            "hooks",
            "get",
            "--repo",
            str(tmp_path),
            "--author",
            AUTHOR,
            "--event",
            "onBoot",
            "--command",
            "echo nope",
        ]
    )
    assert result.exit_code == 1
    assert "Hook not found" in result.output


def test_invalid_event_is_rejected(tmp_path):
    result = _run_cli(
        [
            "hooks",
            "upsert",
            "--repo",
            str(tmp_path),
            "--author",
            AUTHOR,
            "--event",
            "PreToolUse",
            "--command",
            "x",
        ]
    )
    assert result.exit_code == 2


def test_malformed_settings_reported(tmp_path):
    settings_path = tmp_path / ".claude" / "settings.json"
    settings_path.parent.mkdir()
    settings_path.write_text("{ broken", encoding="utf-8")

    result = _run_cli(["hooks", "list", "--repo", str(tmp_path)])

    assert result.exit_code == 1
    assert "Invalid Claude Code settings" in result.output
    assert settings_path.read_text(encoding="utf-8") == "{ broken"


def test_repeated_log_file_option_writes_each_record_once(tmp_path, file_logging):
    log_file = tmp_path / "brains.log"
    args = [
        "--log-file",
        str(log_file),
        "hooks",
        "upsert",
        "--repo",
        str(tmp_path),
        "--author",
        AUTHOR,
        "--event",
        "onBoot",
        "--command",
        "echo ready",
    ]

    assert _run_cli(args).exit_code == 0
    assert _run_cli(args).exit_code == 0

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len([line for line in lines if "Upserted hook" in line]) == 2
