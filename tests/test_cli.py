"""
Smoke tests for the command-line interface.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from gapfinder.cli.app import app
from gapfinder.domain.exceptions import ClipboardError

runner = CliRunner()


@pytest.fixture
def mock_config(tmp_path):
    events = tmp_path / "events.json"
    events.write_text(json.dumps([
        {"subject": "A", "start": "2024-03-18T09:30:00", "end": "2024-03-18T11:00:00"},
        {"subject": "B", "start": "2024-03-18T14:00:00", "end": "2024-03-18T14:00:00"},
    ]), encoding="utf-8")
    config = tmp_path / "config.yaml"
    config.write_text("mock_data_file: events.json\n", encoding="utf-8")
    return config


def test_find_with_mock_data(mock_config):
    result = runner.invoke(app, [
        "find", "--mock", "--config", str(mock_config),
        "--start", "2024-03-18", "--end", "2024-03-18",
    ])

    assert result.exit_code == 0, result.output
    assert "USER AVAILABILITY" in result.output
    assert "Monday 2024-03-18" in result.output
    assert "From 8:00 AM to 9:30 AM" in result.output
    assert "From 11:00 AM to 5:00 PM" in result.output
    assert "Total free slots: 2" in result.output


def test_find_skips_weekend(mock_config):
    result = runner.invoke(app, [
        "find", "--mock", "--config", str(mock_config),
        "--start", "2024-03-16", "--end", "2024-03-18",
    ])

    assert result.exit_code == 0, result.output
    assert "Saturday" not in result.output
    assert "Sunday" not in result.output
    assert "Monday 2024-03-18" in result.output


def test_find_rejects_reversed_dates(mock_config):
    result = runner.invoke(app, [
        "find", "--mock", "--config", str(mock_config),
        "--start", "2024-03-18", "--end", "2024-03-17",
    ])

    assert result.exit_code == 1
    assert "end_date" in result.output
    assert "USER AVAILABILITY" not in result.output


def test_find_rejects_invalid_time(mock_config):
    result = runner.invoke(app, [
        "find", "--mock", "--config", str(mock_config),
        "--start", "2024-03-18", "--start-time", "8am",
    ])

    assert result.exit_code == 1
    assert "start_time" in result.output


def test_find_rejects_conflicting_shortcuts(mock_config):
    result = runner.invoke(app, [
        "find", "--mock", "--config", str(mock_config), "--this-week", "--next-week",
    ])

    assert result.exit_code == 1
    assert "--next-week" in result.output


def test_find_copies_to_clipboard(mock_config):
    with patch("gapfinder.cli.app.copy_to_clipboard") as mock_copy:
        result = runner.invoke(app, [
            "find", "--mock", "--config", str(mock_config),
            "--start", "2024-03-18", "--end", "2024-03-18", "--copy",
        ])

    assert result.exit_code == 0, result.output
    copied = mock_copy.call_args.args[0]
    assert copied.startswith("USER AVAILABILITY")
    assert "From 11:00 AM to 5:00 PM" in copied


def test_clipboard_failure_is_a_warning(mock_config):
    with patch("gapfinder.cli.app.copy_to_clipboard", side_effect=ClipboardError("no clipboard")):
        result = runner.invoke(app, [
            "find", "--mock", "--config", str(mock_config),
            "--start", "2024-03-18", "--end", "2024-03-18", "--copy",
        ])

    assert result.exit_code == 0
    assert "no clipboard" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "gapfinder" in result.output


def test_clear_cache_without_client_id(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("tenant_id: common\n", encoding="utf-8")
    cache_file = tmp_path / "token_cache.json"
    cache_file.write_text("{}", encoding="utf-8")

    with patch("gapfinder.adapters.graph_authenticator.DEFAULT_CACHE_FILE", cache_file), \
            patch("gapfinder.adapters.graph_authenticator.keyring") as mock_keyring:
        result = runner.invoke(app, ["clear-cache", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert not cache_file.exists()
    mock_keyring.delete_password.assert_called_once_with("gapfinder", ":common")
