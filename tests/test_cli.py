"""
Tests for the click command line.
"""
import time

import pytest
import yaml
from click.testing import CliRunner

from dnsautoroutes import cli as cli_module
from dnsautoroutes.cli import cli
from dnsautoroutes.store import QueryLogStore


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_generate_config(runner, tmp_path):
    out = tmp_path / "sample.yaml"
    result = runner.invoke(cli, ["generate-config", "-o", str(out)])

    assert result.exit_code == 0
    data = yaml.safe_load(out.read_text())
    assert set(data) >= {'route', 'capture', 'query_log'}


def test_history_lists_recent_hosts(runner, db_path):
    now = int(time.time())
    with QueryLogStore(db_path) as store:
        store.upsert("vpn.corp.example.com", now - 60)
        store.upsert("old.corp.example.com", now - 30 * 86400)

    result = runner.invoke(cli, ["history", "--db", db_path])

    assert result.exit_code == 0
    assert "vpn.corp.example.com" in result.output
    assert "old.corp.example.com" not in result.output


def test_history_requires_db(runner):
    result = runner.invoke(cli, ["history"])
    assert result.exit_code == 2


def test_prune(runner, db_path):
    now = int(time.time())
    with QueryLogStore(db_path) as store:
        store.upsert("vpn.corp.example.com", now - 60)
        store.upsert("old.corp.example.com", now - 30 * 86400)

    result = runner.invoke(cli, ["prune", "--db", db_path, "--days", "7"])

    assert result.exit_code == 0
    assert "Removed 1" in result.output
    with QueryLogStore(db_path) as store:
        assert store.count() == 1


def test_run_requires_target_and_zones(runner):
    result = runner.invoke(cli, ["run"])
    assert result.exit_code == 2


def test_run_merges_config_and_flags(runner, tmp_path, monkeypatch):
    config_file = tmp_path / "conf.yaml"
    config_file.write_text(yaml.safe_dump({
        'route': {'target': '10.0.0.1', 'zones': ['corp.example.com']},
    }))
    started = []

    class FakeMonitor:
        def __init__(self, config):
            self.config = config

        def start(self):
            started.append(self.config)

    monkeypatch.setattr(cli_module, "AutoRouteMonitor", FakeMonitor)
    result = runner.invoke(cli, ["-c", str(config_file), "run", "-i", "en0", "--alias-capacity", "100", "--dry-run"])

    assert result.exit_code == 0, result.output
    [config] = started
    assert config.route.target == '10.0.0.1'
    assert config.route.zones == ['corp.example.com']
    assert config.capture.interface == 'en0'
    assert config.alias_capacity == 100
    assert config.route.dry_run


def test_run_positional_arguments_override_file(runner, monkeypatch):
    started = []

    class FakeMonitor:
        def __init__(self, config):
            started.append(config)

        def start(self):
            pass

    monkeypatch.setattr(cli_module, "AutoRouteMonitor", FakeMonitor)
    result = runner.invoke(cli, ["run", "10.8.0.1", "corp.example.com", "example.internal"])

    assert result.exit_code == 0, result.output
    assert started[0].route.target == '10.8.0.1'
    assert started[0].route.zones == ['corp.example.com', 'example.internal']


def test_run_rejects_malformed_zone(runner):
    result = runner.invoke(cli, ["run", "10.0.0.1", "a..b", "--dry-run"])

    assert result.exit_code == 2
    assert "invalid domain name" in result.output


def test_run_rejects_route_command_without_address(runner, tmp_path):
    config_file = tmp_path / "conf.yaml"
    config_file.write_text(yaml.safe_dump({
        'route': {'target': '10.0.0.1', 'zones': ['corp.example.com'],
                  'route_command': ['ip', 'route', 'add']},
    }))

    result = runner.invoke(cli, ["-c", str(config_file), "run"])

    assert result.exit_code == 2
    assert "{address}" in result.output
