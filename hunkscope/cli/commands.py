"""CLI commands for hunkscope."""

import json
import logging
from functools import partial
from typing import Optional

import typer

from hunkscope.config import AnalysisConfig, ConfigError, get_config_file, load_config, save_config
from hunkscope.git import (
    GitError,
    NoStagedChangesError,
    get_head_content,
    get_repo_root,
    get_staged_changes,
    get_staged_content,
    load_contents,
)
from hunkscope.models import StagedChanges
from hunkscope.pipeline import AnalysisResult, analyze_changes
from hunkscope.prompt import build_commit_prompt
from hunkscope.safety import check_for_conflicts, scan_for_secrets

logger = logging.getLogger(__name__)


def _warn_safety(changes: StagedChanges) -> None:
    """Print secret and conflict-marker warnings to stderr."""
    for match in scan_for_secrets(changes):
        location = f"{match.file}:{match.line}" if match.line else match.file
        typer.echo(f"Warning: possible {match.pattern_name} in {location}", err=True)
    if check_for_conflicts(changes):
        typer.echo("Warning: staged changes contain merge conflict markers", err=True)


def _run_analysis(max_context_chars: Optional[int] = None) -> AnalysisResult:
    """Load config and staged changes, then run the analysis pipeline."""
    try:
        repo_root = get_repo_root()
        config = load_config(repo_root)
        changes = get_staged_changes(repo_root)
    except NoStagedChangesError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    except (GitError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if max_context_chars is not None:
        config = config.model_copy(update={"max_context_chars": max_context_chars})

    paths = [f.path for f in changes.files if not f.is_binary]
    staged = load_contents(paths, partial(get_staged_content, repo_root=repo_root))
    head = load_contents(paths, partial(get_head_content, repo_root=repo_root))

    _warn_safety(changes)
    return analyze_changes(changes, staged, head, config)


def context_command(
    max_context_chars: Optional[int] = typer.Option(
        None,
        "--max-context-chars",
        min=1,
        help="Character budget for the prompt context (overrides config)",
    ),
    show_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the prompt context as JSON instead of prompt text",
    ),
) -> None:
    """Print the budgeted commit-message prompt for the staged changes."""
    result = _run_analysis(max_context_chars)

    if show_json:
        typer.echo(result.context.model_dump_json(indent=2))
    else:
        typer.echo(build_commit_prompt(result.context))


def split_command(
    show_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the suggested groups as JSON",
    ),
) -> None:
    """Suggest how the staged changes could be split into separate commits."""
    result = _run_analysis()
    split = result.split

    if show_json:
        payload = [
            {"type": g.commit_type.value, "scope": g.scope, "files": g.files}
            for g in split.groups
        ]
        typer.echo(json.dumps(payload, indent=2))
        return

    if not split.should_split:
        context = result.context
        header = context.suggested_type.value
        if context.suggested_scope:
            header = f"{header}({context.suggested_scope})"
        typer.echo(f"Single commit suggested: {header}")
        return

    typer.echo(f"Suggested split into {len(split.groups)} commits:")
    for i, group in enumerate(split.groups, 1):
        typer.echo(f"  {i}. {group.header}")
        for path in group.files:
            typer.echo(f"       {path}")


def symbols_command() -> None:
    """List declarations touched by the staged changes."""
    result = _run_analysis()

    if not result.symbols:
        typer.echo("(no changed symbols)")
        return

    for symbol in result.symbols:
        typer.echo(str(symbol))


def init_command(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing analysis section",
    ),
) -> None:
    """Write .hunkscope/config.yaml with default analysis settings."""
    try:
        repo_root = get_repo_root()
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    config_file = get_config_file(repo_root)
    if config_file.exists() and not force:
        typer.echo(f"Config already exists at {config_file}. Use --force to overwrite.")
        raise typer.Exit(0)

    try:
        path = save_config(repo_root, AnalysisConfig())
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Wrote default configuration to {path}")
