"""Entry point: glues pystray (daemon thread) with tkinter (main thread)."""

import argparse
import ctypes
import logging
import os
import threading
from datetime import date

from appointments import Appointment, AppointmentFileError, load_appointments
from month_layout import events_for_day
from settings import load_settings

logger = logging.getLogger(__name__)

SAMPLE_APPOINTMENTS = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                   "sample_appointments.json")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="appointment-calendar",
        description="Tray-resident day/week/month appointment calendar.",
    )
    parser.add_argument("--appointments", metavar="PATH",
                        help="JSON file with the appointments to show")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def resolve_appointments_path(cli_path: str | None, settings: dict) -> str:
    """Command line first, then the saved setting, then the bundled sample."""
    return cli_path or settings.get("appointments_path") or SAMPLE_APPOINTMENTS


def read_appointments(path: str) -> list[Appointment]:
    """Load appointments, starting empty if the file is unusable."""
    try:
        return load_appointments(path)
    except AppointmentFileError as exc:
        logger.error("%s", exc)
        return []


def count_for_today(appointments: list[Appointment], today: date | None = None) -> int:
    return len(events_for_day(appointments, today or date.today()))


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # GUI imports stay here so the helpers above work without a display
    from calendar_window import CalendarWindow
    from icon_gen import create_icon_image
    from tray_icon import create_tray, tray_title

    # DPI awareness so positions / fonts are crisp on Hi-DPI monitors
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except (AttributeError, OSError):
        logger.debug("DPI awareness unavailable, skipping")

    path = resolve_appointments_path(args.appointments, load_settings())
    appointments = read_appointments(path)
    cal_win = CalendarWindow(appointments)

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        cal_win.root.after(0, cal_win.toggle)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            cal_win.root.destroy()
        cal_win.root.after(0, _quit)

    def on_settings() -> None:
        cal_win.root.after(0, cal_win.open_settings)

    def on_reload() -> None:
        def _reload() -> None:
            fresh = read_appointments(path)
            cal_win.set_appointments(fresh)
            n = count_for_today(fresh)
            tray.icon = create_icon_image(badge=n)
            tray.title = tray_title(n)
        cal_win.root.after(0, _reload)

    today_count = count_for_today(appointments)
    tray = create_tray(create_icon_image(badge=today_count), on_show, on_exit,
                       on_reload=on_reload, on_settings=on_settings,
                       today_count=today_count)

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    # tkinter main loop on the main thread
    cal_win.root.mainloop()


if __name__ == "__main__":
    main()
