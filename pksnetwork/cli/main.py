"""
CLI entry point for PKSNetwork.

Provides the ``todos`` example commands, exercising GET, POST, PATCH and
DELETE requests against a JSONPlaceholder-compatible API.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from pksnetwork._version import __version__
from pksnetwork.cli.context import CLIContext, pass_context
from pksnetwork.cli.todos import TodoState, TodoViewModel
from pksnetwork.config.settings import get_default_config_path, load_config
from pksnetwork.core.auth import StaticTokenProvider
from pksnetwork.core.request import CachePolicy
from pksnetwork.exceptions import InvalidConfigurationError
from pksnetwork.logging_config import get_logger, setup_logging
from pksnetwork.sdk.client import NetworkClient


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--base-url',
    '-u',
    default=None,
    help='Override the API base URL from configuration',
)
@click.option(
    '--token',
    envvar='PKSNETWORK_TOKEN',
    default=None,
    help='Bearer token; when set, every request is authenticated',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (default: from configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='pksnetwork')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], base_url: Optional[str], token: Optional[str],
        log_level: Optional[str], verbose: bool):
    """
    PKSNetwork - typed HTTP request layer.

    Example client for a JSONPlaceholder-style todo API.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None
    ctx.token = token

    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    if base_url:
        ctx.config.network.base_url = base_url

    effective_log_level = (log_level or ctx.config.logging.level).upper()
    log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None
    setup_logging(
        level=effective_log_level,
        log_file=log_file,
        json_format=ctx.config.logging.format == "json",
    )

    if verbose:
        logger = get_logger("cli")
        logger.info(f"Loaded configuration from: {ctx.config_path or 'defaults'}")
        logger.info(f"Base URL: {ctx.config.network.base_url}")


@cli.group()
def todos():
    """Create, read, update and delete todos."""
    pass


def _build_view_model(ctx: CLIContext, client: NetworkClient) -> TodoViewModel:
    view_model = TodoViewModel(
        client,
        retry_policy=ctx.config.retry.to_policy(),
        timeout_interval=ctx.config.network.timeout_interval,
        requires_authentication=ctx.token is not None,
        cache_policy=CachePolicy(ctx.config.network.cache_policy),
    )
    if ctx.verbose:
        view_model.on_state_change(
            lambda state: click.echo("Loading..." if state.is_loading else "Done.", err=True)
        )
    return view_model


def _make_client(ctx: CLIContext) -> NetworkClient:
    token_provider = StaticTokenProvider(ctx.token) if ctx.token is not None else None
    return NetworkClient.from_config(ctx.config, token_provider=token_provider)


def _report(ok: bool, state: TodoState) -> None:
    if not ok:
        click.echo(f"Error: {state.error_message}", err=True)
        sys.exit(1)

    click.echo(state.operation_result)
    if state.todo is not None:
        click.echo(json.dumps(state.todo.model_dump(by_alias=True), indent=2))


@todos.command('get')
@click.argument('todo_id', type=int)
@pass_context
def get_todo(ctx: CLIContext, todo_id: int):
    """
    Fetch a todo by ID.

    Example:

        pksnetwork todos get 1
    """
    with _make_client(ctx) as client:
        view_model = _build_view_model(ctx, client)
        ok = view_model.fetch_todo(todo_id)
        _report(ok, view_model.state)


@todos.command('create')
@click.option('--title', '-t', required=True, help='Todo title')
@click.option('--completed/--not-completed', default=False, help='Completion flag')
@click.option('--user-id', type=int, default=1, help='Owner user ID (default: 1)')
@pass_context
def create_todo(ctx: CLIContext, title: str, completed: bool, user_id: int):
    """Create a new todo."""
    with _make_client(ctx) as client:
        view_model = _build_view_model(ctx, client)
        ok = view_model.create_todo(title=title, completed=completed, user_id=user_id)
        _report(ok, view_model.state)


@todos.command('update')
@click.argument('todo_id', type=int)
@click.option('--title', '-t', required=True, help='New todo title')
@click.option('--completed/--not-completed', default=True, help='Completion flag')
@click.option('--user-id', type=int, default=1, help='Owner user ID (default: 1)')
@pass_context
def update_todo(ctx: CLIContext, todo_id: int, title: str, completed: bool, user_id: int):
    """Update an existing todo."""
    with _make_client(ctx) as client:
        view_model = _build_view_model(ctx, client)
        ok = view_model.update_todo(title=title, completed=completed, todo_id=todo_id, user_id=user_id)
        _report(ok, view_model.state)


@todos.command('delete')
@click.argument('todo_id', type=int)
@pass_context
def delete_todo(ctx: CLIContext, todo_id: int):
    """Delete a todo by ID."""
    with _make_client(ctx) as client:
        view_model = _build_view_model(ctx, client)
        ok = view_model.delete_todo(todo_id)
        _report(ok, view_model.state)


if __name__ == '__main__':
    cli()
