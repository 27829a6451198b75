"""System-tray icon setup via pystray."""

from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu


def tray_title(today_count: int) -> str:
    noun = "appointment" if today_count == 1 else "appointments"
    return f"Appointment Calendar - {today_count} {noun} today"


def create_tray(
    icon_image: Image.Image,
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    on_reload: Callable[[], None] | None = None,
    on_settings: Callable[[], None] | None = None,
    today_count: int = 0,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    items: list[MenuItem | Menu] = [
        MenuItem("Show Calendar", lambda _icon, _item: on_show(), default=True),
    ]
    if on_reload is not None:
        items.append(MenuItem("Reload Appointments", lambda _icon, _item: on_reload()))
    if on_settings is not None:
        items.append(MenuItem("Settings", lambda _icon, _item: on_settings()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    return pystray.Icon("appointment-calendar", icon_image, tray_title(today_count), Menu(*items))
