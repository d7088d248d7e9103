#!/usr/bin/env python3
"""HabitPulse TUI — interactive terminal habit tracker powered by Textual."""

from __future__ import annotations

import logging

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from habitpulse import (
    AppState,
    build_dashboard,
    configure_logging,
    create_habit,
    init_workspace,
    load_settings,
    load_state,
    now_local,
    save_state,
    shift_key,
    today_str,
    toggle_premium,
    upsert_gratitude,
    upsert_log,
    workspace_root,
)

logger = logging.getLogger(__name__)


CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    margin: 1 0 0 0;
}

.summary-card {
    height: auto;
    padding: 0 1;
    margin: 0 0 1 0;
    border: tall $primary-background-darken-2;
}

.habit-row {
    height: auto;
}

.habit-label {
    width: 1fr;
    height: 3;
    content-align: left middle;
}

.minutes-input {
    width: 14;
    height: 3;
}

#prompt-text {
    color: $text-muted;
    height: auto;
}

#gratitude-area {
    height: 6;
    min-height: 4;
}

#insights {
    height: auto;
    padding: 0 1;
    color: $text-muted;
}

#history-screen {
    padding: 1 2;
}

#history-table {
    height: 1fr;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class MinutesInput(Input):
    """Minutes field bound to one habit."""

    def __init__(self, habit_id: str, minutes: int, **kwargs) -> None:
        super().__init__(
            value=str(minutes) if minutes else "",
            placeholder="min",
            classes="minutes-input",
            **kwargs,
        )
        self.habit_id = habit_id


class HabitRow(Horizontal):
    """One habit for the selected day: label + minutes input."""

    def __init__(self, habit: dict, **kwargs) -> None:
        super().__init__(classes="habit-row", **kwargs)
        self.habit = habit

    def compose(self) -> ComposeResult:
        target = self.habit.get("targetMinutes")
        suffix = f"  · target {target}m" if target else ""
        yield Label(f"{self.habit['name']}  [{self.habit['importance']}]{suffix}", classes="habit-label", markup=False)
        yield MinutesInput(self.habit["id"], self.habit["minutes"])


# ── Screens ────────────────────────────────────────────────────


class HistoryScreen(Vertical):
    """History view: one row per logged habit, newest day first."""

    def __init__(self, dashboard: dict, **kwargs) -> None:
        super().__init__(**kwargs)
        self.dashboard = dashboard

    def compose(self) -> ComposeResult:
        yield Label("History", classes="section-title")
        yield DataTable(id="history-table")

    def on_mount(self) -> None:
        table: DataTable = self.query_one("#history-table", DataTable)
        table.add_columns("Date", "Habit", "Minutes", "Importance", "Gratitude")

        habits = {h["id"]: h for h in self.dashboard["habits"]}
        for day in self.dashboard["history"]:
            gratitude = (day["gratitude"] or {}).get("response", "")
            if not day["logs"]:
                table.add_row(day["date"], "", "", "", gratitude)
            for i, log in enumerate(day["logs"]):
                habit = habits.get(log["habitId"])
                table.add_row(
                    day["date"] if i == 0 else "",
                    habit["name"] if habit else "Habit",
                    str(log["minutes"]),
                    str(habit["importance"]) if habit else "-",
                    gratitude if i == 0 else "",
                )


# ── Main app ───────────────────────────────────────────────────


class HabitPulseApp(App):
    """HabitPulse — interactive terminal habit tracker."""

    TITLE = "HabitPulse"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("d", "show_dashboard", "Dashboard"),
        Binding("h", "show_history", "History"),
        Binding("p", "previous_day", "Prev day"),
        Binding("n", "next_day", "Next day"),
        Binding("t", "goto_today", "Today"),
        Binding("g", "focus_gratitude", "Gratitude"),
        Binding("ctrl+s", "save_gratitude", "Save gratitude"),
        Binding("i", "toggle_insights", "Insights"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    current_view: reactive[str] = reactive("dashboard")

    def __init__(self) -> None:
        super().__init__()
        self._state = AppState()
        self._selected = today_str()
        self._dashboard: dict = {}

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            VerticalScroll(
                Label("", id="day-title", classes="section-title"),
                Vertical(id="habit-list"),
                Input(placeholder="New habit name (Enter to add)", id="new-habit"),
                Label("Gratitude", classes="section-title"),
                Static(id="prompt-text", markup=False),
                TextArea(id="gratitude-area"),
                id="left-pane",
                can_focus=False,
            ),
            VerticalScroll(
                Label("Insights", classes="section-title"),
                Vertical(id="summary-list"),
                Static(id="insights", markup=False),
                id="right-pane",
                can_focus=False,
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._load_data()

    def _load_data(self) -> None:
        """Reload the snapshot and repopulate widgets for the selected day."""
        root = workspace_root()
        self._state = load_state(root)
        self._dashboard = build_dashboard(self._state, now_local(root), self._selected)

        self.query_one("#day-title", Label).update(self._dashboard["selectedDateLabel"])
        self.query_one("#prompt-text", Static).update(self._dashboard["prompt"]["text"])
        self.query_one("#gratitude-area", TextArea).load_text(self._dashboard["gratitude"])

        habit_list = self.query_one("#habit-list", Vertical)
        habit_list.remove_children()
        if self._dashboard["habits"]:
            habit_list.mount_all(HabitRow(h) for h in self._dashboard["habits"])
        else:
            habit_list.mount(Static("No habits yet. Add one below."))

        summary_list = self.query_one("#summary-list", Vertical)
        summary_list.remove_children()
        summary_list.mount_all(Static(self._summary_text(s), classes="summary-card", markup=False) for s in self._dashboard["summaries"])

        insights = self._dashboard["insights"]
        self.query_one("#insights", Static).update(
            insights if insights is not None else "Press i to enable premium insights."
        )
        self._update_subtitle()

    @staticmethod
    def _summary_text(s: dict) -> str:
        lines = [
            f"{s['label']}  ({s['dateLabel']})",
            f"Total {s['totalMinutes']} min · avg/habit {s['averageMinutesPerHabit']} · active days {s['activeDays']}",
        ]
        if s["topHabit"]:
            lines.append(f"Top: {s['topHabit']['name']} ({s['topHabit']['minutes']} min)")
        lines.append(s["suggestedFocus"])
        return "\n".join(lines)

    def _update_subtitle(self) -> None:
        parts = [self._selected]
        if self._selected != self._dashboard.get("today"):
            parts.append("(not today)")
        if self._state.premium:
            parts.append("★ premium")
        self.sub_title = "  ".join(parts)

    # ── Edits ──────────────────────────────────────────────────

    @on(Input.Submitted, ".minutes-input")
    def _on_minutes_submit(self, event: Input.Submitted) -> None:
        field = event.input
        if not isinstance(field, MinutesInput):
            return
        _, errors = upsert_log(self._state, field.habit_id, self._selected, event.value)
        self._persist(errors)

    @on(Input.Submitted, "#new-habit")
    def _on_new_habit(self, event: Input.Submitted) -> None:
        _, errors = create_habit(self._state, event.value)
        event.input.value = ""
        self._persist(errors)

    def action_save_gratitude(self) -> None:
        text = self.query_one("#gratitude-area", TextArea).text
        _, errors = upsert_gratitude(self._state, self._selected, text)
        self._persist(errors)

    def action_toggle_insights(self) -> None:
        toggle_premium(self._state)
        self._persist([])

    def _persist(self, errors: list[str]) -> None:
        if errors:
            self.notify("; ".join(errors), title="Not saved", severity="warning")
            return
        self._save()

    @work(thread=True)
    def _save(self) -> None:
        try:
            save_state(self._state, workspace_root())
        except OSError as e:
            logger.error("Failed to save snapshot: %s", e)
            self.call_from_thread(self.notify, f"Error: {e}", title="Error", severity="error")
            return
        self.call_from_thread(self._load_data)

    # ── Navigation ─────────────────────────────────────────────

    def _select_day(self, day: str) -> None:
        self._selected = day
        if self.current_view != "dashboard":
            self._switch_to("dashboard")
        self._load_data()

    def action_previous_day(self) -> None:
        self._select_day(shift_key(self._selected, -1))

    def action_next_day(self) -> None:
        self._select_day(shift_key(self._selected, 1))

    def action_goto_today(self) -> None:
        self._select_day(today_str())

    def action_show_dashboard(self) -> None:
        self._switch_to("dashboard")

    def action_show_history(self) -> None:
        if self.current_view == "history":
            self._switch_to("dashboard")
            return
        self._switch_to("history")

    def action_focus_gratitude(self) -> None:
        if self.current_view != "dashboard":
            self._switch_to("dashboard")
        self.query_one("#gratitude-area", TextArea).focus()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_quit_app(self) -> None:
        self.exit()

    def _switch_to(self, view: str) -> None:
        main = self.query_one("#main-layout", Horizontal)

        for old in self.query(".overlay-screen"):
            old.remove()

        dashboard = view == "dashboard"
        self.query_one("#left-pane").display = dashboard
        self.query_one("#right-pane").display = dashboard
        if view == "history":
            main.mount(HistoryScreen(self._dashboard, classes="overlay-screen"))
        self.current_view = view


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = init_workspace(workspace_root())
    configure_logging(load_settings(root).log_level, filename=root / "habitpulse.log")
    HabitPulseApp().run()


if __name__ == "__main__":
    main()
