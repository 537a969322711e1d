"""
Unit tests for CLI main entry point.

Tests the command group, global options and the todo commands against a
mock transport.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pksnetwork._version import __version__
from pksnetwork.cli.main import cli
from pksnetwork.core.auth import StaticTokenProvider
from pksnetwork.core.transport import TransportResponse
from pksnetwork.sdk.adapters.mock import MockAdapter
from pksnetwork.sdk.client import NetworkClient


TODO_1 = {"userId": 1, "id": 1, "title": "delectus aut autem", "completed": False}


@pytest.fixture
def config_path(temp_dir: Path) -> str:
    """Config file disabling retries so failing calls return immediately."""
    path = temp_dir / "config.yaml"
    path.write_text(
        "network:\n"
        "  base_url: https://api.example.com\n"
        "retry:\n"
        "  max_retry_count: 0\n"
        "logging:\n"
        "  level: ERROR\n"
    )
    return str(path)


@pytest.fixture
def adapter(json_response):
    return MockAdapter({
        ("GET", "/todos/1"): json_response(TODO_1),
        ("POST", "/todos"): lambda req: json_response({**json.loads(req.body), "id": 201}, status_code=201),
        ("PATCH", "/todos/1"): lambda req: json_response({**TODO_1, **json.loads(req.body)}),
        ("DELETE", "/todos/1"): TransportResponse(status_code=200, body=b"{}"),
    })


@pytest.fixture
def sent():
    """Requests seen by the mock transport; the adapter itself is cleared on close."""
    return []


@pytest.fixture
def mock_client(adapter, sent):
    """Patch client construction so commands talk to the mock adapter."""
    created = []

    def _make_client(ctx):
        token_provider = StaticTokenProvider(ctx.token) if ctx.token is not None else None
        client = NetworkClient(ctx.config.network.base_url, token_provider=token_provider, adapter=adapter)
        client.hooks.on_before_request(lambda request: sent.append(request) or request)
        created.append((ctx, client))
        return client

    with patch("pksnetwork.cli.main._make_client", side_effect=_make_client):
        yield created


class TestCLIMain:
    """Test CLI main entry point."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert 'PKSNetwork' in result.output
        assert '--config' in result.output
        assert '--base-url' in result.output
        assert '--log-level' in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_todos_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ['todos', '--help'])

        assert result.exit_code == 0
        for command in ('get', 'create', 'update', 'delete'):
            assert command in result.output

    def test_invalid_config_exits(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("network:\n  timeout_interval: -5\n")

        runner = CliRunner()
        result = runner.invoke(cli, ['--config', str(path), 'todos', 'get', '1'])

        assert result.exit_code == 1
        assert 'Invalid configuration' in result.output


class TestTodoCommands:

    def test_get(self, config_path, mock_client):
        runner = CliRunner()
        result = runner.invoke(cli, ['--config', config_path, 'todos', 'get', '1'])

        assert result.exit_code == 0, result.output
        assert 'GET operation successful' in result.output
        assert '"title": "delectus aut autem"' in result.output
        assert '"userId": 1' in result.output

    def test_get_not_found(self, config_path, mock_client):
        runner = CliRunner()
        result = runner.invoke(cli, ['--config', config_path, 'todos', 'get', '42'])

        assert result.exit_code == 1
        assert 'Error: Request failed with status 404' in result.output

    def test_create(self, config_path, mock_client, sent):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ['--config', config_path, 'todos', 'create', '--title', 'Buy milk', '--completed', '--user-id', '3'],
        )

        assert result.exit_code == 0, result.output
        assert 'Created Todo with ID: 201' in result.output
        assert json.loads(sent[0].body) == {
            "title": "Buy milk",
            "completed": True,
            "userId": 3,
        }

    def test_update(self, config_path, mock_client, sent):
        runner = CliRunner()
        result = runner.invoke(
            cli, ['--config', config_path, 'todos', 'update', '1', '--title', 'Renamed']
        )

        assert result.exit_code == 0, result.output
        assert 'Updated Todo with ID: 1' in result.output
        assert sent[0].method == "PATCH"

    def test_delete(self, config_path, mock_client):
        runner = CliRunner()
        result = runner.invoke(cli, ['--config', config_path, 'todos', 'delete', '1'])

        assert result.exit_code == 0, result.output
        assert 'Deleted Todo with ID: 1' in result.output

    def test_base_url_override(self, config_path, mock_client):
        runner = CliRunner()
        result = runner.invoke(
            cli, ['--config', config_path, '--base-url', 'https://other.example.com', 'todos', 'get', '1']
        )

        assert result.exit_code == 0, result.output
        ctx, client = mock_client[0]
        assert ctx.config.network.base_url == 'https://other.example.com'
        assert client.base_url == 'https://other.example.com'

    def test_token_option_sets_context(self, config_path, mock_client, sent):
        runner = CliRunner()
        result = runner.invoke(
            cli, ['--config', config_path, '--token', 'abc', 'todos', 'get', '1']
        )

        assert result.exit_code == 0, result.output
        ctx, _ = mock_client[0]
        assert ctx.token == 'abc'
        assert sent[0].get_header("Authorization") == "Bearer abc"

    def test_token_from_environment(self, config_path, mock_client):
        runner = CliRunner()
        result = runner.invoke(
            cli, ['--config', config_path, 'todos', 'get', '1'], env={'PKSNETWORK_TOKEN': 'env-token'}
        )

        assert result.exit_code == 0, result.output
        ctx, _ = mock_client[0]
        assert ctx.token == 'env-token'

    def test_configured_cache_policy_sent(self, temp_dir: Path, mock_client, sent):
        path = temp_dir / "cached.yaml"
        path.write_text(
            "network:\n"
            "  base_url: https://api.example.com\n"
            "  cache_policy: reload_ignoring_local_cache_data\n"
            "retry:\n"
            "  max_retry_count: 0\n"
        )

        runner = CliRunner()
        result = runner.invoke(cli, ['--config', str(path), 'todos', 'get', '1'])

        assert result.exit_code == 0, result.output
        assert sent[0].get_header("Cache-Control") == "no-cache"

    def test_default_cache_policy_sent(self, config_path, mock_client, sent):
        runner = CliRunner()
        result = runner.invoke(cli, ['--config', config_path, 'todos', 'get', '1'])

        assert result.exit_code == 0, result.output
        assert sent[0].get_header("Cache-Control") == "no-cache, no-store"
