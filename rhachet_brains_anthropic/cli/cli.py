"""Command-line entry point: inspect and edit synced role hooks."""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import click

from rhachet_brains_anthropic import __version__
from rhachet_brains_anthropic.core.brain import BrainHook, BrainHookEvent, BrainHookFilter
from rhachet_brains_anthropic.core.hooks import (
    ClaudeCodeHooksAdapter,
    ClaudeCodeSettingsError,
    get_claude_code_settings_path,
)
from rhachet_brains_anthropic.core.hooks.translate import timeout_to_seconds
from rhachet_brains_anthropic.utils.log import log_to_file, set_console_level

_EVENT_CHOICES = [event.value for event in BrainHookEvent]

T = TypeVar("T")


def _adapter(repo: str) -> ClaudeCodeHooksAdapter:
    return ClaudeCodeHooksAdapter(Path(repo).expanduser())


def _guard(repo: str, action: Callable[[], T]) -> T:
    try:
        return action()
    except (json.JSONDecodeError, ClaudeCodeSettingsError) as exc:
        path = get_claude_code_settings_path(Path(repo).expanduser())
        raise click.ClickException(f"Invalid Claude Code settings at {path}: {exc}") from exc


def _hook_record(hook: BrainHook) -> dict[str, Any]:
    return {
        "author": hook.author,
        "event": hook.event.value,
        "command": hook.command,
        "timeout": timeout_to_seconds(hook.timeout),
        "filter": hook.filter.what if hook.filter else None,
    }


def _echo_hook(hook: BrainHook) -> None:
    click.echo(f"- [{hook.event.value}] {hook.command}")
    click.echo(f"  Author: {hook.author}")
    click.echo(f"  Timeout: {timeout_to_seconds(hook.timeout)}s")
    if hook.filter:
        click.echo(f"  Filter: {hook.filter.what}")


_repo_option = click.option(
    "--repo",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False),
    help="Repository whose .claude/settings.json is used.",
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Log debug output to stderr.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write structured logs to this file.",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_file: Optional[Path]) -> None:
    """Anthropic brains for rhachet."""
    if log_file:
        log_to_file(log_file)
    if debug:
        set_console_level(logging.DEBUG)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.group(
    name="hooks", invoke_without_command=True, help="Manage role hooks in Claude Code settings."
)
@click.pass_context
def hooks_group(ctx: click.Context) -> None:
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@hooks_group.command(name="list")
@_repo_option
@click.option("--author", default=None, help="Only hooks declared by this author.")
@click.option("--event", type=click.Choice(_EVENT_CHOICES), default=None, help="Only this event.")
@click.option("--command", "command_", default=None, help="Only hooks running this command.")
@click.option("--json", "json_output", is_flag=True, help="Output machine-readable JSON.")
def list_hooks(
    repo: str,
    author: Optional[str],
    event: Optional[str],
    command_: Optional[str],
    json_output: bool,
) -> None:
    adapter = _adapter(repo)
    hooks = _guard(
        repo,
        lambda: adapter.get_all(
            author=author,
            event=BrainHookEvent(event) if event else None,
            command=command_,
        ),
    )

    if json_output:
        click.echo(json.dumps([_hook_record(hook) for hook in hooks], indent=2, ensure_ascii=False))
        return
    if not hooks:
        click.echo("No hooks configured.")
        return
    click.echo("Configured hooks:")
    for hook in hooks:
        _echo_hook(hook)


@hooks_group.command(name="get")
@_repo_option
@click.option("--author", required=True)
@click.option("--event", type=click.Choice(_EVENT_CHOICES), required=True)
@click.option("--command", "command_", required=True)
@click.option("--json", "json_output", is_flag=True, help="Output machine-readable JSON.")
def get_hook(repo: str, author: str, event: str, command_: str, json_output: bool) -> None:
    adapter = _adapter(repo)
    hook = _guard(repo, lambda: adapter.get_one(author, BrainHookEvent(event), command_))
    if hook is None:
        raise click.ClickException(f"Hook not found: [{event}] {command_} by {author}")
    if json_output:
        click.echo(json.dumps(_hook_record(hook), indent=2, ensure_ascii=False))
        return
    _echo_hook(hook)


@hooks_group.command(name="upsert")
@_repo_option
@click.option("--author", required=True)
@click.option("--event", type=click.Choice(_EVENT_CHOICES), required=True)
@click.option("--command", "command_", required=True)
@click.option(
    "--timeout", type=click.IntRange(min=0), default=30, show_default=True, help="Seconds."
)
@click.option("--filter", "filter_", default=None, help="Tool matcher, e.g. 'Write|Edit'.")
def upsert_hook(
    repo: str,
    author: str,
    event: str,
    command_: str,
    timeout: int,
    filter_: Optional[str],
) -> None:
    hook = BrainHook(
        author=author,
        event=BrainHookEvent(event),
        command=command_,
        timeout=timedelta(seconds=timeout),
        filter=BrainHookFilter(what=filter_) if filter_ else None,
    )
    adapter = _adapter(repo)
    _guard(repo, lambda: adapter.upsert(hook))
    settings_path = get_claude_code_settings_path(adapter.repo_path)
    click.echo(f"Saved hook [{event}] {command_} to {settings_path}")


@hooks_group.command(name="delete")
@_repo_option
@click.option("--author", required=True)
@click.option("--event", type=click.Choice(_EVENT_CHOICES), required=True)
@click.option("--command", "command_", required=True)
def delete_hook(repo: str, author: str, event: str, command_: str) -> None:
    adapter = _adapter(repo)
    _guard(repo, lambda: adapter.delete(author, BrainHookEvent(event), command_))
    click.echo(f"Removed hook [{event}] {command_}")
