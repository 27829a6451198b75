"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime

import pytest

from appointments import Appointment


@pytest.fixture
def make_appt():
    """Factory for appointments from ``YYYY-MM-DD HH:MM`` strings."""
    counter = iter(range(1, 10_000))

    def _make(start: str, end: str, title: str = "", appt_id: str | None = None,
              facility: str = "Main Campus") -> Appointment:
        n = next(counter)
        return Appointment(
            id=appt_id or f"a{n}",
            title=title or f"Appointment {n}",
            start=datetime.strptime(start, "%Y-%m-%d %H:%M"),
            end=datetime.strptime(end, "%Y-%m-%d %H:%M"),
            facility=facility,
        )

    return _make


@pytest.fixture
def june_weekend_on_call(make_appt):
    """Saturday June 28 10:00 through Monday June 30 14:00, 2025."""
    return make_appt("2025-06-28 10:00", "2025-06-30 14:00", "Weekend On-Call", "oncall")


@pytest.fixture
def june_training(make_appt):
    return make_appt("2025-06-15 08:00", "2025-06-15 09:00", "Staff Training", "training")
