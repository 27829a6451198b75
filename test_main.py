"""Tests for the entry-point helpers that run without a display."""

from datetime import date

from main import (
    SAMPLE_APPOINTMENTS,
    count_for_today,
    parse_args,
    read_appointments,
    resolve_appointments_path,
)


def test_appointments_path_precedence():
    assert resolve_appointments_path("cli.json", {"appointments_path": "saved.json"}) == "cli.json"
    assert resolve_appointments_path(None, {"appointments_path": "saved.json"}) == "saved.json"
    assert resolve_appointments_path(None, {"appointments_path": None}) == SAMPLE_APPOINTMENTS


def test_unreadable_file_starts_empty(tmp_path, caplog):
    assert read_appointments(str(tmp_path / "missing.json")) == []
    assert "cannot read appointments" in caplog.text


def test_count_for_today(june_weekend_on_call, june_training):
    appts = [june_weekend_on_call, june_training]
    assert count_for_today(appts, date(2025, 6, 29)) == 1
    assert count_for_today(appts, date(2025, 6, 15)) == 1
    assert count_for_today(appts, date(2025, 6, 1)) == 0


def test_parse_args_defaults():
    args = parse_args([])
    assert args.appointments is None
    assert args.log_level == "WARNING"
    assert parse_args(["--appointments", "x.json"]).appointments == "x.json"


def test_non_utf8_file_starts_empty(tmp_path, caplog):
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    assert read_appointments(str(path)) == []
    assert "cannot read appointments" in caplog.text
