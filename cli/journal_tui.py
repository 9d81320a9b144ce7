#!/usr/bin/env python3
"""Flect TUI — browse journal entries and track habits, powered by Textual."""

from __future__ import annotations

import sys

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.widgets import DataTable, Footer, Header, Input, Label, Markdown, Static

from flect import (
    JournalEntry,
    Mood,
    complete_habit,
    configure_logging,
    count_completed,
    count_pending,
    filter_entries,
    get_habits_with_stats,
    group_tasks,
    label_for,
    glyph_for,
    load_habits,
    load_journal,
    log_path,
    save_habits,
    sort_by_priority,
    today_local,
    workspace_root,
)

# None first so cycling returns to "all moods"
MOOD_CYCLE: list[Mood | None] = [None, *Mood]


CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    min-width: 40;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

#mood-filter {
    color: $warning;
    height: 1;
}

#entries-table {
    height: 1fr;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}
"""


def entry_markdown(entry: JournalEntry) -> str:
    """Render an entry's detail view: reflection, progress, grouped tasks, brain dump."""
    groups = group_tasks(sort_by_priority(entry.extracted_tasks))
    lines = [
        f"# {entry.date.strftime('%A, %B %d %Y')}",
        f"**Mood:** {glyph_for(entry.mood)} {label_for(entry.mood)}",
        "",
        "## Reflection",
        entry.reflection or "_(none)_",
        "",
        "## Progress",
        entry.progress_notes or "_(none)_",
        "",
        f"## Tasks ({len(groups.pending)} pending, {len(groups.completed)} done)",
    ]
    for t in groups.pending:
        lines.append(f"- [ ] {t.title} _({t.priority.value})_")
    for t in groups.completed:
        lines.append(f"- [x] ~~{t.title}~~")
    if not entry.extracted_tasks:
        lines.append("_(no tasks extracted)_")
    lines += ["", "## Brain dump", entry.original_brain_dump or "_(empty)_"]
    return "\n".join(lines)


# ── Screens ────────────────────────────────────────────────────


class HabitsScreen(Vertical):
    """Active habits with streaks; `c` completes the highlighted habit for today."""

    def compose(self) -> ComposeResult:
        yield Label("Habits", classes="section-title")
        yield Static(id="habits-info")
        yield DataTable(id="habits-table", cursor_type="row")

    def on_mount(self) -> None:
        self.reload()

    def reload(self) -> None:
        root = workspace_root()
        today = today_local(root)
        rows = get_habits_with_stats(load_habits(root), today)

        table: DataTable = self.query_one("#habits-table", DataTable)
        table.clear(columns=True)
        table.add_columns("Habit", "Frequency", "Today", "Streak", "Longest", "Rate")
        for h in rows:
            table.add_row(
                f"{h['categoryEmoji']} {h['title']}",
                h["frequency"],
                "✓" if h["isCompletedToday"] else ("!" if h["isOverdue"] else ""),
                str(h["currentStreak"]),
                str(h["longestStreak"]),
                f"{int(h['completionRate'] * 100)}%",
                key=h["id"],
            )
        done = sum(1 for h in rows if h["isCompletedToday"])
        self.query_one("#habits-info", Static).update(f"{done}/{len(rows)} done today ({today.isoformat()})")


# ── Main app ───────────────────────────────────────────────────


class FlectApp(App):
    """Flect — journal browser and habit tracker."""

    TITLE = "Flect"
    CSS = CSS

    BINDINGS = [
        Binding("j", "show_journal", "Journal"),
        Binding("h", "show_habits", "Habits"),
        Binding("slash", "focus_search", "Search"),
        Binding("m", "cycle_mood", "Mood"),
        Binding("c", "complete_habit", "Complete"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    current_view: reactive[str] = reactive("journal")

    def __init__(self) -> None:
        super().__init__()
        self._entries: list[JournalEntry] = []
        self._visible: list[JournalEntry] = []
        self._search = ""
        self._mood_index = 0

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Only offer completion while the habits view is open."""
        if action == "complete_habit":
            return True if self.current_view == "habits" else None
        return True

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Input(placeholder="Search entries…", id="search"),
                Static(id="mood-filter"),
                DataTable(id="entries-table", cursor_type="row"),
                id="left-pane",
            ),
            VerticalScroll(
                Markdown(id="entry-detail"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#entries-table", DataTable)
        table.add_columns("Date", "Mood", "Reflection", "Tasks")
        self._load_data()

    def _load_data(self) -> None:
        self._entries = load_journal(workspace_root()).entries
        self._refresh_entries()

    @property
    def mood_filter(self) -> Mood | None:
        return MOOD_CYCLE[self._mood_index]

    def _refresh_entries(self) -> None:
        """Re-run the filter and repopulate the list; called on every filter change."""
        self._visible = filter_entries(self._entries, self._search, self.mood_filter)
        table = self.query_one("#entries-table", DataTable)
        table.clear()
        for entry in self._visible:
            groups = group_tasks(entry.extracted_tasks)
            preview = (entry.reflection or entry.original_brain_dump).replace("\n", " ")
            table.add_row(
                entry.date.strftime("%Y-%m-%d"),
                glyph_for(entry.mood),
                preview[:60],
                f"{len(groups.pending)}/{len(entry.extracted_tasks)}",
                key=entry.id,
            )

        mood = self.mood_filter
        label = f"Mood: {glyph_for(mood)} {label_for(mood)}" if mood else "Mood: all"
        self.query_one("#mood-filter", Static).update(f"{label}  ·  {len(self._visible)} entries")
        self.sub_title = f"{count_pending(self._entries)} pending · {count_completed(self._entries)} done"

        detail = self.query_one("#entry-detail", Markdown)
        if self._visible:
            detail.update(entry_markdown(self._visible[0]))
        else:
            detail.update("*No entries found. Try adjusting your search or filters.*")

    @on(Input.Changed, "#search")
    def _on_search_change(self, event: Input.Changed) -> None:
        self._search = event.value
        self._refresh_entries()

    @on(DataTable.RowHighlighted, "#entries-table")
    def _on_entry_highlighted(self, event: DataTable.RowHighlighted) -> None:
        key = event.row_key.value if event.row_key else None
        for entry in self._visible:
            if entry.id == key:
                self.query_one("#entry-detail", Markdown).update(entry_markdown(entry))
                break

    # ── Actions ────────────────────────────────────────────────

    def action_focus_search(self) -> None:
        if self.current_view != "journal":
            self._switch_to("journal")
        self.query_one("#search", Input).focus()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_cycle_mood(self) -> None:
        self._mood_index = (self._mood_index + 1) % len(MOOD_CYCLE)
        self._refresh_entries()

    def action_show_journal(self) -> None:
        self._switch_to("journal")

    def action_show_habits(self) -> None:
        if self.current_view == "habits":
            self._switch_to("journal")
            return
        self._switch_to("habits")

    def action_complete_habit(self) -> None:
        try:
            table = self.query_one("#habits-table", DataTable)
        except NoMatches:
            return
        if table.row_count == 0:
            return
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        self._do_complete(str(row_key.value))

    @work(thread=True)
    def _do_complete(self, habit_id: str) -> None:
        """Complete in a worker thread; duplicate same-day completions are reported, not applied."""
        root = workspace_root()
        habits_file = load_habits(root)
        habit, errors = complete_habit(habits_file, habit_id, today_local(root))
        if errors:
            self.call_from_thread(self.notify, "; ".join(errors), title="Not completed", severity="warning")
            return
        save_habits(habits_file, root)
        self.call_from_thread(self.notify, f"{habit.title} done for today", title="Habit completed")
        for screen in self.query(HabitsScreen):
            self.call_from_thread(screen.reload)

    def action_quit_app(self) -> None:
        self.exit()

    def _switch_to(self, view: str) -> None:
        main = self.query_one("#main-layout", Horizontal)

        for old in self.query(".overlay-screen"):
            old.remove()

        show_journal = view == "journal"
        self.query_one("#left-pane").display = show_journal
        self.query_one("#right-pane").display = show_journal
        if view == "habits":
            main.mount(HabitsScreen(classes="overlay-screen"))
        self.current_view = view
        self.refresh_bindings()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set FLECT_ROOT to your Flect data directory.")
        sys.exit(1)

    # Textual owns the terminal, so log records go to a file
    configure_logging(log_file=log_path(root))

    app = FlectApp()
    app.run()


if __name__ == "__main__":
    main()
