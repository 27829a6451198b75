"""Appointment model, JSON loading and display formatting. No UI dependencies."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "bg-blue-400"

# Appointment type -> colour tag
TYPE_COLORS = {
    "X-Ray Tech": "bg-green-400",
    "MA": "bg-orange-400",
    "Doctor": "bg-blue-400",
    "Emergency": "bg-red-500",
    "Consultation": "bg-purple-400",
    "Surgery": "bg-indigo-400",
}

# Colour tag -> hex for drawing
_TAG_HEX = {
    "bg-green-400": "#4ADE80",
    "bg-orange-400": "#FB923C",
    "bg-blue-400": "#60A5FA",
    "bg-red-500": "#EF4444",
    "bg-purple-400": "#C084FC",
    "bg-indigo-400": "#818CF8",
    "bg-yellow-400": "#FACC15",
    "bg-pink-400": "#F472B6",
    "bg-teal-400": "#2DD4BF",
    "bg-gray-400": "#9CA3AF",
}
_FALLBACK_HEX = "#9CA3AF"


class AppointmentFormatError(ValueError):
    """A single appointment record is structurally invalid."""


class AppointmentFileError(ValueError):
    """The appointments file cannot be read or decoded."""


@dataclass(frozen=True)
class Appointment:
    id: str
    title: str
    start: datetime
    end: datetime
    facility: str = ""
    color: str = DEFAULT_COLOR
    provider: str = ""
    appointment_type: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _local_naive(self.start))
        object.__setattr__(self, "end", _local_naive(self.end))


def _local_naive(dt: datetime) -> datetime:
    """Local wall-clock time decides which calendar day an instant falls on."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


# --- parsing ----------------------------------------------------------------

def _parse_instant(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise AppointmentFormatError(f"invalid {field} timestamp: {value!r}") from exc
    else:
        raise AppointmentFormatError(f"missing {field} timestamp")
    return _local_naive(dt)


def parse_appointment(raw: dict[str, Any]) -> Appointment:
    """Build an Appointment from a JSON-shaped record.

    Inverted ranges are accepted as-is; the layout engine treats them as
    degenerate input.
    """
    if not isinstance(raw, dict):
        raise AppointmentFormatError(f"expected an object, got {type(raw).__name__}")
    appt_id = raw.get("id")
    if appt_id is None or str(appt_id).strip() == "":
        raise AppointmentFormatError("missing id")
    appt_type = str(raw.get("type") or "")
    color = raw.get("color") or TYPE_COLORS.get(appt_type, DEFAULT_COLOR)
    return Appointment(
        id=str(appt_id),
        title=str(raw.get("title") or ""),
        start=_parse_instant(raw.get("start"), "start"),
        end=_parse_instant(raw.get("end"), "end"),
        facility=str(raw.get("facility") or ""),
        color=str(color),
        provider=str(raw.get("provider") or ""),
        appointment_type=appt_type,
    )


def load_appointments(path: str | Path) -> list[Appointment]:
    """Read appointments from a JSON file.

    Accepts a top-level list or an object with an ``appointments`` list.
    Malformed records are skipped and logged.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise AppointmentFileError(f"cannot read appointments from {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("appointments")
    if not isinstance(data, list):
        raise AppointmentFileError(f"{path}: expected a list of appointments")

    result: list[Appointment] = []
    seen: set[str] = set()
    for pos, raw in enumerate(data):
        try:
            appt = parse_appointment(raw)
        except AppointmentFormatError as exc:
            logger.warning("Skipping appointment #%d in %s: %s", pos, path, exc)
            continue
        if appt.id in seen:
            logger.warning("Duplicate appointment id %r in %s", appt.id, path)
        seen.add(appt.id)
        result.append(appt)
    logger.info("Loaded %d appointments from %s", len(result), path)
    return result


# --- display ----------------------------------------------------------------

def color_hex(tag: str) -> str:
    """Return a drawable hex colour for a colour tag or ``#rrggbb`` value."""
    if tag.startswith("#") and len(tag) in (4, 7):
        return tag
    return _TAG_HEX.get(tag, _FALLBACK_HEX)


def format_time(dt: datetime) -> str:
    """12-hour clock with a zero-padded hour, e.g. ``09:00 AM``."""
    return dt.strftime("%I:%M %p")


def format_time_range(appointment: Appointment) -> str:
    return f"{format_time(appointment.start)} - {format_time(appointment.end)}"


def format_long_date(d: date) -> str:
    """E.g. ``Saturday, June 28, 2025``."""
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}, {d.year}"


@dataclass(frozen=True)
class DisclosureRow:
    id: str
    title: str
    time_range: str
    facility: str
    provider: str
    color: str


def disclosure_rows(appointments: Iterable[Appointment]) -> list[DisclosureRow]:
    """Rows for the detail view listing every appointment of a date."""
    return [
        DisclosureRow(
            id=a.id,
            title=a.title,
            time_range=format_time_range(a),
            facility=a.facility,
            provider=a.provider,
            color=color_hex(a.color),
        )
        for a in appointments
    ]
