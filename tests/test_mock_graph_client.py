"""
Tests for the JSON-backed mock calendar client.
"""

import json

import pytest

from gapfinder.adapters.mock_graph_client import MockGraphClient
from gapfinder.domain.exceptions import CalendarAPIError

from conftest import TZ, at


def _write_events(tmp_path, events):
    data_file = tmp_path / "events.json"
    data_file.write_text(json.dumps(events), encoding="utf-8")
    return data_file


def test_returns_events_overlapping_window(tmp_path):
    data_file = _write_events(tmp_path, [
        {"subject": "Before", "start": "2024-03-17T09:00:00", "end": "2024-03-17T10:00:00"},
        {"subject": "Inside", "start": "2024-03-18T09:00:00", "end": "2024-03-18T10:00:00"},
        {"subject": "Reminder", "start": "2024-03-18T14:00:00", "end": "2024-03-18T14:00:00"},
        {"start": "2024-03-18T15:00:00", "end": "2024-03-18T16:00:00"},
        {"subject": "After", "start": "2024-03-19T09:00:00", "end": "2024-03-19T10:00:00"},
    ])
    client = MockGraphClient(data_file=data_file)

    periods = client.fetch_busy_periods(at("2024-03-18 00:00"), at("2024-03-19 00:00"), TZ)

    assert [p.subject for p in periods] == ["Inside", "Reminder", "No Subject"]
    assert periods[0].start == at("2024-03-18 09:00")


def test_invalid_event_fails_the_fetch(tmp_path):
    data_file = _write_events(tmp_path, [
        {"subject": "No end", "start": "2024-03-18T09:00:00"},
    ])
    client = MockGraphClient(data_file=data_file)

    with pytest.raises(CalendarAPIError, match="No end"):
        client.fetch_busy_periods(at("2024-03-18 00:00"), at("2024-03-19 00:00"), TZ)


def test_backwards_event_fails_the_fetch(tmp_path):
    data_file = _write_events(tmp_path, [
        {"subject": "Backwards", "start": "2024-03-18T11:00:00", "end": "2024-03-18T10:00:00"},
    ])
    client = MockGraphClient(data_file=data_file)

    with pytest.raises(CalendarAPIError, match="Backwards"):
        client.fetch_busy_periods(at("2024-03-18 00:00"), at("2024-03-19 00:00"), TZ)


def test_missing_file_raises(tmp_path):
    with pytest.raises(CalendarAPIError, match="not found"):
        MockGraphClient(data_file=tmp_path / "nope.json")


def test_non_list_file_raises(tmp_path):
    data_file = tmp_path / "events.json"
    data_file.write_text('{"value": []}', encoding="utf-8")

    with pytest.raises(CalendarAPIError, match="list of events"):
        MockGraphClient(data_file=data_file)


def test_bundled_sample_data_loads():
    client = MockGraphClient()

    periods = client.fetch_busy_periods(at("2024-03-18 00:00"), at("2024-03-19 00:00"), TZ)

    assert {p.subject for p in periods} == {"Team standup", "Reminder"}
