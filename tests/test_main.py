import json
import pytest
from typer.testing import CliRunner
from pymongo.errors import OperationFailure
from mongoprobe import main
from mongoprobe.connectors.mongo import MongoConnector
from fakes import ClientFactory

runner = CliRunner()

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("PROBE_LOG_LEVEL", raising=False)

@pytest.fixture
def fake_server(monkeypatch):
    """Route the CLI's connector to an in-memory client."""
    factory = ClientFactory()
    monkeypatch.setattr(main, "MongoConnector", lambda url: MongoConnector(url, client_factory=factory))
    return factory

def test_live_server_prints_success_and_stats(fake_server):
    result = runner.invoke(main.app, [], env={"DATABASE_URL": "mongodb://localhost:27017/testdb"})

    assert result.exit_code == 0
    assert result.stdout.startswith("Connected successfully to MongoDB\nDatabase Stats:\n")
    stats = json.loads(result.stdout.split("Database Stats:\n", 1)[1])
    assert stats["db"] == "testdb"
    assert stats["collections"] == 2
    assert stats["dataSize"] == 240.0
    assert result.stderr == ""
    assert fake_server.last.close_calls == 1

def test_missing_database_prints_zeroed_stats(fake_server):
    result = runner.invoke(main.app, [], env={"DATABASE_URL": "mongodb://localhost:27017/nosuchdb"})

    assert result.exit_code == 0
    stats = json.loads(result.stdout.split("Database Stats:\n", 1)[1])
    assert stats["db"] == "nosuchdb"
    assert stats["collections"] == 0

def test_stats_failure_exits_non_zero(monkeypatch):
    factory = ClientFactory(stats_error=OperationFailure("not authorized on testdb", code=13))
    monkeypatch.setattr(main, "MongoConnector", lambda url: MongoConnector(url, client_factory=factory))

    result = runner.invoke(main.app, [])

    assert result.exit_code == 1
    assert "Connected successfully to MongoDB" in result.stdout
    assert "Database Stats" not in result.stdout
    assert "Failed to fetch stats for database 'testdb'" in result.stderr
    assert "not authorized" in result.stderr
    assert factory.last.close_calls == 1

def test_no_server_reports_failed_to_connect():
    # real driver against a closed port; the URI option bounds server selection
    env = {"DATABASE_URL": "mongodb://localhost:1/testdb?serverSelectionTimeoutMS=200"}
    result = runner.invoke(main.app, [], env=env)

    assert result.exit_code == 1
    assert "Failed to connect to MongoDB" in result.stderr
    assert "Connected successfully" not in result.stdout

def test_invalid_log_level_exits_non_zero(fake_server):
    result = runner.invoke(main.app, [], env={"PROBE_LOG_LEVEL": "chatty"})

    assert result.exit_code == 1
    assert "Error loading config" in result.stderr
    assert fake_server.clients == []

def test_command_takes_no_arguments(fake_server):
    result = runner.invoke(main.app, ["--to-db", "x"])

    assert result.exit_code != 0
    assert fake_server.clients == []

def test_format_stats_handles_bson_values():
    from bson.timestamp import Timestamp

    text = main.format_stats({"ok": 1.0, "operationTime": Timestamp(1700000000, 1)})

    assert json.loads(text)["ok"] == 1.0
    assert "Timestamp" in text
