"""Day / week / month appointment calendar window (tkinter)."""

import logging
from datetime import date
from tkinter import font as tkfont
import tkinter as tk
from typing import Sequence

from appointments import (
    Appointment,
    color_hex,
    disclosure_rows,
    format_long_date,
    format_time_range,
)
from month_layout import (
    GRID_COLUMNS,
    GRID_ROWS,
    DayCell,
    assign_lanes,
    disclose,
    events_for_day,
    layout_month,
)
from navigation import DAY_ABBR, VIEWS, navigate, view_dates, view_title
from settings import VISIBLE_LIMIT_RANGE, load_settings, save_settings

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#2563EB"
TODAY_BG = "#EFF6FF"
HEADER_BG = "#F9FAFB"
GRID_BG = "white"
OTHER_MONTH_BG = "#F9FAFB"
OTHER_MONTH_FG = "#9CA3AF"
LINE = "#E5E7EB"
WN_FG = "#888888"

# Month grid geometry (pixels)
CELL_W = 118
WN_W = 30
HEAD_H = 26
DAY_NUM_H = 20
BAR_H = 18
ITEM_H = 18
MORE_H = 16
PAD = 2


def _truncate(text: str, fnt: tkfont.Font, width: int) -> str:
    if fnt.measure(text) <= width:
        return text
    ell = "…"
    while text and fnt.measure(text + ell) > width:
        text = text[:-1]
    return text + ell


class _ToolTip:
    """Lightweight shared tooltip for appointment entries."""

    __slots__ = ("_root", "_tw")

    def __init__(self, root: tk.Tk) -> None:
        self._root = root
        self._tw: tk.Toplevel | None = None

    def show(self, x: int, y: int, text: str) -> None:
        self.hide()
        tw = tk.Toplevel(self._root)
        tw.wm_overrideredirect(True)
        tw.wm_attributes("-topmost", True)
        tk.Label(
            tw, text=text, bg="#FFFFE0", fg="black",
            relief="solid", borderwidth=1, padx=6, pady=3, justify="left",
        ).pack()
        tw.wm_geometry(f"+{x + 12}+{y + 12}")
        self._tw = tw

    def hide(self) -> None:
        if self._tw:
            self._tw.destroy()
            self._tw = None


class _DisclosureDialog:
    """Modal list of every appointment on one date."""

    def __init__(self, root: tk.Tk, fonts: dict, day: date,
                 appointments: Sequence[Appointment]) -> None:
        self.top = tk.Toplevel(root)
        self.top.title("Appointments")
        self.top.resizable(False, True)
        self.top.attributes("-topmost", True)
        self.top.bind("<Escape>", lambda _e: self.close())

        frame = tk.Frame(self.top, padx=12, pady=8)
        frame.pack(fill="both", expand=True)

        tk.Label(
            frame, text=f"Events for {format_long_date(day)}",
            font=fonts["header"], anchor="w",
        ).pack(fill="x", pady=(0, 6))

        for row in disclosure_rows(appointments):
            card = tk.Frame(frame, bg=row.color, padx=8, pady=4)
            card.pack(fill="x", pady=2)
            tk.Label(card, text=row.title, font=fonts["bold"], bg=row.color,
                     fg="white", anchor="w").pack(fill="x")
            for line in (row.time_range, row.facility, row.provider):
                if line:
                    tk.Label(card, text=line, font=fonts["normal"], bg=row.color,
                             fg="white", anchor="w").pack(fill="x")

        tk.Button(frame, text="Close", width=8, command=self.close).pack(pady=(8, 0))
        self.top.grab_set()

    def close(self) -> None:
        self.top.grab_release()
        self.top.destroy()


class CalendarWindow:
    """Appointment calendar with day, week and month views."""

    def __init__(self, appointments: Sequence[Appointment] = ()) -> None:
        self.root = tk.Tk()
        self.root.title("Appointment Calendar")
        self.root.resizable(True, True)
        self.root.configure(bg=GRID_BG)
        self.root.attributes("-topmost", True)

        self._setup_fonts()

        settings = load_settings()
        self.visible_limit: int = settings["visible_limit"]
        self.default_view: str = settings["default_view"]
        self._saved_width: int | None = settings["window_width"]
        self._saved_height: int | None = settings["window_height"]

        self.reference = date.today()
        self.view = self.default_view
        self.appointments: tuple[Appointment, ...] = tuple(appointments)
        self._disclosure: _DisclosureDialog | None = None

        self._content: tk.Frame | None = None
        self._title_label: tk.Label | None = None
        self._view_buttons: dict[str, tk.Label] = {}
        self._build_shell()
        self._tooltip = _ToolTip(self.root)
        self._rebuild()

        self.root.bind("<Escape>", self._on_escape)
        self.root.bind("<Configure>", self._on_configure)
        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_small = tkfont.Font(family=base, size=8)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=11, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self._fonts = {
            "normal": self.font_normal, "bold": self.font_bold,
            "header": self.font_header, "small": self.font_small,
        }

    # ------------------------------------------------------------------
    # Build shell (once): nav bar, view switch, content placeholder
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        outer = tk.Frame(self.root, bg=GRID_BG)
        outer.pack(fill="both", expand=True, padx=6, pady=4)

        # Navigation row: ◀  Today  ▶   title   Day | Week | Month
        nav = tk.Frame(outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 4))

        btn_prev = tk.Label(nav, text="◀", font=self.font_nav, bg=GRID_BG, cursor="hand2")
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._navigate(-1))

        btn_today = tk.Label(
            nav, text="Today", font=self.font_bold, bg=ACCENT, fg="white",
            padx=8, pady=2, cursor="hand2",
        )
        btn_today.pack(side="left", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self._go_today())

        btn_next = tk.Label(nav, text="▶", font=self.font_nav, bg=GRID_BG, cursor="hand2")
        btn_next.pack(side="left", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._navigate(1))

        self._title_label = tk.Label(nav, font=self.font_header, bg=GRID_BG, fg="#333333")
        self._title_label.pack(side="left", padx=12)

        switch = tk.Frame(nav, bg=ACCENT, padx=2, pady=2)
        switch.pack(side="right", padx=6)
        for name in VIEWS:
            btn = tk.Label(switch, text=name.capitalize(), font=self.font_bold,
                           padx=8, pady=1, cursor="hand2")
            btn.pack(side="left", padx=1)
            btn.bind("<Button-1>", lambda _e, v=name: self.set_view(v))
            self._view_buttons[name] = btn

        self._content = tk.Frame(outer, bg=GRID_BG)
        self._content.pack(fill="both", expand=True)

    def _style_view_buttons(self) -> None:
        for name, btn in self._view_buttons.items():
            if name == self.view:
                btn.configure(bg="white", fg=ACCENT)
            else:
                btn.configure(bg=ACCENT, fg="white")

    # ------------------------------------------------------------------
    # Rebuild: full recompute of the current view
    # ------------------------------------------------------------------
    def _rebuild(self) -> None:
        self._tooltip.hide()
        for child in self._content.winfo_children():
            child.destroy()
        self._title_label.configure(text=view_title(self.reference, self.view))
        self._style_view_buttons()
        if self.view == "month":
            self._render_month()
        else:
            self._render_list(view_dates(self.reference, self.view))

    def set_appointments(self, appointments: Sequence[Appointment]) -> None:
        self.appointments = tuple(appointments)
        logger.debug("Showing %d appointments", len(self.appointments))
        self._rebuild()

    def set_view(self, view: str) -> None:
        if view not in VIEWS or view == self.view:
            return
        self.view = view
        self._rebuild()

    # ------------------------------------------------------------------
    # Month view
    # ------------------------------------------------------------------
    def _render_month(self) -> None:
        layout = layout_month(
            self.reference, self.appointments, visible_limit=self.visible_limit,
        )
        lanes = assign_lanes(layout.segments)
        row_lanes = [0] * GRID_ROWS
        for seg in layout.segments:
            row_lanes[seg.row] = max(row_lanes[seg.row], lanes[seg.key] + 1)

        item_rows = self.visible_limit
        base_h = DAY_NUM_H + item_rows * ITEM_H + MORE_H + PAD * 2
        row_heights = [base_h + n * BAR_H for n in row_lanes]
        row_tops = [HEAD_H]
        for h in row_heights[:-1]:
            row_tops.append(row_tops[-1] + h)

        width = WN_W + GRID_COLUMNS * CELL_W
        height = HEAD_H + sum(row_heights)
        canvas = tk.Canvas(
            self._content, width=width, height=height, bg=GRID_BG,
            highlightthickness=0, borderwidth=0,
        )
        canvas.pack()

        # Weekday header
        canvas.create_rectangle(0, 0, width, HEAD_H, fill=HEADER_BG, outline=LINE)
        canvas.create_text(WN_W // 2, HEAD_H // 2, text="Wk", fill=WN_FG, font=self.font_small)
        for c, abbr in enumerate(DAY_ABBR):
            x = WN_W + c * CELL_W + CELL_W // 2
            canvas.create_text(x, HEAD_H // 2, text=abbr, fill="#333333", font=self.font_bold)

        # Day cells
        for r in range(GRID_ROWS):
            top, h = row_tops[r], row_heights[r]
            canvas.create_text(
                WN_W // 2, top + DAY_NUM_H // 2,
                text=str(layout.week_numbers[r]), fill=WN_FG, font=self.font_small,
            )
            for c in range(GRID_COLUMNS):
                cell = layout.cell_at(r, c)
                self._draw_cell(canvas, cell, WN_W + c * CELL_W, top, h,
                                top + DAY_NUM_H + row_lanes[r] * BAR_H)

        # Multi-day bars on top of the cells
        for seg in layout.segments:
            x1 = WN_W + seg.start_column * CELL_W + PAD
            x2 = WN_W + (seg.end_column + 1) * CELL_W - PAD
            y1 = row_tops[seg.row] + DAY_NUM_H + lanes[seg.key] * BAR_H
            self._draw_entry(canvas, seg.appointment, x1, y1, x2, y1 + BAR_H - PAD)

    def _draw_cell(self, canvas: tk.Canvas, cell: DayCell, x: int, top: int,
                   h: int, items_top: int) -> None:
        if cell.is_today:
            bg = TODAY_BG
        elif cell.is_current_month:
            bg = GRID_BG
        else:
            bg = OTHER_MONTH_BG
        canvas.create_rectangle(x, top, x + CELL_W, top + h, fill=bg, outline=LINE)
        canvas.create_text(
            x + 6, top + DAY_NUM_H // 2, anchor="w", text=str(cell.date.day),
            fill=ACCENT if cell.is_today else
            ("#333333" if cell.is_current_month else OTHER_MONTH_FG),
            font=self.font_bold if cell.is_today else self.font_normal,
        )

        y = items_top
        for appt in cell.visible_events:
            self._draw_entry(canvas, appt, x + PAD, y, x + CELL_W - PAD, y + ITEM_H - PAD)
            y += ITEM_H

        if cell.overflow_count > 0:
            tag = f"more-{cell.date.isoformat()}"
            canvas.create_text(
                x + 6, y + MORE_H // 2, anchor="w", tags=(tag,),
                text=f"+{cell.overflow_count} more", fill=ACCENT, font=self.font_small,
            )
            canvas.tag_bind(tag, "<Button-1>",
                            lambda _e, c=cell: disclose(c, self._open_disclosure))
            canvas.tag_bind(tag, "<Enter>", lambda _e: canvas.configure(cursor="hand2"))
            canvas.tag_bind(tag, "<Leave>", lambda _e: canvas.configure(cursor=""))

    def _draw_entry(self, canvas: tk.Canvas, appt: Appointment,
                    x1: int, y1: int, x2: int, y2: int) -> None:
        tag = f"appt-{id(appt)}-{x1}-{y1}"
        canvas.create_rectangle(x1, y1, x2, y2, fill=color_hex(appt.color),
                                outline="", tags=(tag,))
        canvas.create_text(
            x1 + 4, (y1 + y2) // 2, anchor="w", tags=(tag,),
            text=_truncate(appt.title, self.font_small, x2 - x1 - 8),
            fill="white", font=self.font_small,
        )
        tip = f"{appt.title} - {appt.facility}" if appt.facility else appt.title
        canvas.tag_bind(tag, "<Enter>",
                        lambda e, t=tip: self._tooltip.show(e.x_root, e.y_root, t))
        canvas.tag_bind(tag, "<Leave>", lambda _e: self._tooltip.hide())

    # ------------------------------------------------------------------
    # Day / week views: plain per-date lists
    # ------------------------------------------------------------------
    def _render_list(self, dates: Sequence[date]) -> None:
        today = date.today()
        for d in dates:
            box = tk.Frame(self._content, bg=GRID_BG, highlightthickness=1,
                           highlightbackground=LINE)
            box.pack(fill="x", pady=2)
            head_bg = TODAY_BG if d == today else HEADER_BG
            tk.Label(
                box, text=f"{DAY_ABBR[d.weekday()]}  {d.strftime('%d.%m.%Y')}",
                font=self.font_bold, bg=head_bg, fg=ACCENT if d == today else "#333333",
                anchor="w", padx=6,
            ).pack(fill="x")
            day_events = events_for_day(self.appointments, d)
            if not day_events:
                tk.Label(box, text="No appointments", font=self.font_small,
                         bg=GRID_BG, fg=WN_FG, anchor="w", padx=6).pack(fill="x")
            for appt in day_events:
                row = tk.Frame(box, bg=GRID_BG)
                row.pack(fill="x", padx=6, pady=1)
                tk.Label(row, text=" ", bg=color_hex(appt.color), width=1).pack(side="left")
                parts = [format_time_range(appt), appt.title]
                if appt.facility:
                    parts.append(appt.facility)
                tk.Label(row, text="   ".join(parts), font=self.font_normal,
                         bg=GRID_BG, anchor="w").pack(side="left", padx=(6, 0))

    # ------------------------------------------------------------------
    # Disclosure dialog
    # ------------------------------------------------------------------
    def _open_disclosure(self, day: date, appointments: Sequence[Appointment]) -> None:
        self._tooltip.hide()
        self._close_disclosure()
        self._disclosure = _DisclosureDialog(self.root, self._fonts, day, appointments)

    def _close_disclosure(self) -> bool:
        if self._disclosure is None:
            return False
        if self._disclosure.top.winfo_exists():
            self._disclosure.close()
        self._disclosure = None
        return True

    # ------------------------------------------------------------------
    # ESC closes the disclosure first, then hides
    # ------------------------------------------------------------------
    def _on_escape(self, _event: tk.Event) -> None:
        if not self._close_disclosure():
            self.hide()

    # ------------------------------------------------------------------
    # Settings dialog
    # ------------------------------------------------------------------
    def open_settings(self) -> None:
        dlg = tk.Toplevel(self.root)
        dlg.title("Settings")
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.grab_set()

        frame = tk.Frame(dlg, padx=12, pady=8)
        frame.pack()

        lo, hi = VISIBLE_LIMIT_RANGE
        tk.Label(frame, text="Events per day:", font=self.font_normal).grid(
            row=0, column=0, sticky="w", pady=4,
        )
        spin_limit = tk.Spinbox(frame, from_=lo, to=hi, width=4, font=self.font_normal)
        spin_limit.delete(0, "end")
        spin_limit.insert(0, str(self.visible_limit))
        spin_limit.grid(row=0, column=1, padx=(8, 0), pady=4)

        tk.Label(frame, text="Default view:", font=self.font_normal).grid(
            row=1, column=0, sticky="w", pady=4,
        )
        view_var = tk.StringVar(value=self.default_view)
        views_frame = tk.Frame(frame)
        views_frame.grid(row=1, column=1, padx=(8, 0), pady=4, sticky="w")
        for name in VIEWS:
            tk.Radiobutton(
                views_frame, text=name.capitalize(), value=name, variable=view_var,
                font=self.font_normal,
            ).pack(side="left")

        btn_frame = tk.Frame(frame)
        btn_frame.grid(row=2, column=0, columnspan=2, pady=(8, 0))

        def on_ok() -> None:
            try:
                self.visible_limit = max(lo, min(hi, int(spin_limit.get())))
            except ValueError:
                return
            self.default_view = view_var.get()

            settings = load_settings()
            settings["visible_limit"] = self.visible_limit
            settings["default_view"] = self.default_view
            save_settings(settings)
            dlg.destroy()
            self._rebuild()

        tk.Button(btn_frame, text="OK", width=8, command=on_ok).pack(side="left", padx=4)
        tk.Button(btn_frame, text="Cancel", width=8, command=dlg.destroy).pack(
            side="left", padx=4,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _navigate(self, direction: int) -> None:
        self.reference = navigate(self.reference, self.view, direction)
        self._rebuild()

    def _go_today(self) -> None:
        self.reference = date.today()
        self._rebuild()

    # ------------------------------------------------------------------
    # Size tracking (persisted on hide)
    # ------------------------------------------------------------------
    def _on_configure(self, event: tk.Event) -> None:
        if event.widget is not self.root:
            return
        self._saved_width = self.root.winfo_width()
        self._saved_height = self.root.winfo_height()

    def _persist_size(self) -> None:
        settings = load_settings()
        settings["window_width"] = self._saved_width
        settings["window_height"] = self._saved_height
        save_settings(settings)

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        self.reference = date.today()
        self.view = self.default_view
        self._rebuild()
        self.root.deiconify()
        self.root.update_idletasks()
        self._position_window()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        self._close_disclosure()
        self._tooltip.hide()
        if self._saved_width is not None and self._saved_height is not None:
            self._persist_size()
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Position bottom-right of the screen
    # ------------------------------------------------------------------
    def _position_window(self) -> None:
        self.root.update_idletasks()
        win_w = max(self.root.winfo_reqwidth(), self._saved_width or 0)
        win_h = max(self.root.winfo_reqheight(), self._saved_height or 0)
        x = max(0, self.root.winfo_screenwidth() - win_w - 12)
        y = max(0, self.root.winfo_screenheight() - win_h - 60)
        self.root.geometry(f"{win_w}x{win_h}+{x}+{y}")
