"""Unit tests for the command line entry point."""

import argparse
import logging

import pytest

from servicebus_tui import cli
from servicebus_tui.core.config import CONNECTION_STRING_ENV, ExplorerConfig
from servicebus_tui.logging_config import LOGGER_NAME
from servicebus_tui.providers import FixtureProvider


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep logs and config lookups inside the test's temp dir."""
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv(CONNECTION_STRING_ENV, raising=False)


@pytest.fixture
def browse_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(
        "servicebus_tui.tui.app.run_app",
        lambda provider, config: calls.append((provider, config)),
    )
    return calls


class TestParser:

    def test_global_flags(self, tmp_path):
        args = cli.build_parser().parse_args([
            "--fixture", "snap.json", "--config", "c.json", "-v", "--log-file", "x.log", "tree",
        ])
        assert args.command == "tree"
        assert args.func is cli.cmd_tree
        assert str(args.fixture) == "snap.json"
        assert args.verbose and not args.debug


class TestBuildProvider:

    def args(self, **overrides):
        data = {"fixture": None, "connection_string": None}
        data.update(overrides)
        return argparse.Namespace(**data)

    def test_fixture_wins(self, snapshot_path):
        provider = cli.build_provider(self.args(fixture=snapshot_path, connection_string="Endpoint=sb://x/"))
        assert isinstance(provider, FixtureProvider)

    def test_missing_connection_string(self):
        with pytest.raises(cli.UsageError, match=CONNECTION_STRING_ENV):
            cli.build_provider(self.args())

    def test_missing_sdk(self, monkeypatch):
        from servicebus_tui.providers import servicebus

        def missing(connection_string):
            raise ImportError("No module named 'azure'")

        monkeypatch.setattr(servicebus.ServiceBusProvider, "from_connection_string", missing)
        with pytest.raises(cli.UsageError, match="azure-servicebus is not installed"):
            cli.build_provider(self.args(connection_string="Endpoint=sb://x/"))

    def test_connection_string_from_env(self, monkeypatch):
        from servicebus_tui.providers import servicebus

        seen = []
        monkeypatch.setenv(CONNECTION_STRING_ENV, "Endpoint=sb://contoso.servicebus.windows.net/")
        monkeypatch.setattr(
            servicebus.ServiceBusProvider,
            "from_connection_string",
            lambda connection_string: seen.append(connection_string) or "provider",
        )
        assert cli.build_provider(self.args()) == "provider"
        assert seen == ["Endpoint=sb://contoso.servicebus.windows.net/"]


class TestMain:

    def test_tree_command(self, snapshot_path, capsys):
        assert cli.main(["--fixture", str(snapshot_path), "tree"]) == 0
        out = capsys.readouterr().out
        assert "contoso-dev" in out
        assert "› orders" in out
        assert "billing" in out and "audit" in out
        assert "› payments" in out
        assert "□ invoices" in out

    def test_tree_command_empty_namespace(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text('{"namespace": "empty"}')
        assert cli.main(["--fixture", str(path), "tree"]) == 0
        assert "No topics or queues found" in capsys.readouterr().out

    def test_browse_is_default(self, snapshot_path, browse_calls):
        assert cli.main(["--fixture", str(snapshot_path)]) == 0
        provider, config = browse_calls[0]
        assert provider.namespace == "contoso-dev"
        assert config == ExplorerConfig()

    def test_config_file_is_used(self, snapshot_path, tmp_path, browse_calls):
        path = tmp_path / "custom.json"
        path.write_text('{"peek_limit": 10}')
        assert cli.main(["--fixture", str(snapshot_path), "--config", str(path), "browse"]) == 0
        assert browse_calls[0][1].peek_limit == 10

    def test_usage_error(self, capsys):
        assert cli.main(["tree"]) == 1
        assert "ERROR: no connection string" in capsys.readouterr().err

    def test_bad_fixture(self, tmp_path, capsys):
        assert cli.main(["--fixture", str(tmp_path / "missing.json"), "tree"]) == 1
        assert "ERROR: failed to load snapshot" in capsys.readouterr().err

    def test_bad_config(self, snapshot_path, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text("[")
        assert cli.main(["--fixture", str(snapshot_path), "--config", str(path)]) == 1
        assert "ERROR: Failed to read config" in capsys.readouterr().err

    def test_interrupt(self, snapshot_path, monkeypatch, capsys):
        def interrupted(provider, config):
            raise KeyboardInterrupt

        monkeypatch.setattr("servicebus_tui.tui.app.run_app", interrupted)
        assert cli.main(["--fixture", str(snapshot_path)]) == 130
        assert "Interrupted by user" in capsys.readouterr().err

    def test_browse_logs_to_state_dir(self, snapshot_path, tmp_path, browse_calls):
        assert cli.main(["--fixture", str(snapshot_path), "--verbose"]) == 0
        assert (tmp_path / "state" / "servicebus-tui" / "debug.log").exists()

    def test_tree_logs_to_stderr(self, snapshot_path, tmp_path):
        assert cli.main(["--fixture", str(snapshot_path), "tree"]) == 0
        assert not (tmp_path / "state" / "servicebus-tui" / "debug.log").exists()
        handlers = logging.getLogger(LOGGER_NAME).handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0], logging.FileHandler)
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_tree_error_printed_once(self, tmp_path, capsys):
        assert cli.main(["--fixture", str(tmp_path / "missing.json"), "tree"]) == 1
        assert capsys.readouterr().err.count("failed to load snapshot") == 1

    def test_explicit_log_file_for_tree(self, snapshot_path, tmp_path):
        log_file = tmp_path / "tree.log"
        assert cli.main(["--fixture", str(snapshot_path), "--log-file", str(log_file), "tree"]) == 0
        assert log_file.exists()
