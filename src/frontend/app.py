"""Main Textual app for the chatpick message selector."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.timer import Timer
from textual.widgets import Button, DataTable, Footer, Input, Static, Switch
from textual.widgets.data_table import RowDoesNotExist

from adapters.memory_transcript import InMemoryTranscript
from adapters.status_formatting import (
    ANCHOR_REQUIRED,
    clip_text,
    format_batch,
    format_export,
    format_preview,
    format_status,
)
from core.models import MessageRecord
from core.processor import BatchResult, SelectionEngine
from core.session import SessionContext

from .constants import ACCENT_BLUE, FLASH_SECONDS, PREVIEW_RESET_SECONDS, TABLE_TEXT_CHARS
from .indicators import IndicatorGrid
from .state import PanelState
from .validators import check_pattern

PATTERN_INPUTS = ("include1", "exclude", "include2")


class MessageTable(DataTable):
    """Transcript table; space toggles the checkbox of the row under the cursor."""

    BINDINGS = [Binding("space", "toggle_row", "Toggle")]

    class ToggleRequested(Message):
        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    def action_toggle_row(self) -> None:
        if self.row_count == 0:
            return
        row_key, _ = self.coordinate_to_cell_key(self.cursor_coordinate)
        self.post_message(self.ToggleRequested(str(row_key.value)))


class SelectorApp(App):
    """Selector panel over one transcript."""

    BINDINGS = [
        ("ctrl+r", "reload_transcript", "Reload"),
        ("ctrl+e", "export_selected", "Export"),
    ]

    CSS_PATH = "app.tcss"
    AUTO_FOCUS = "#messages"

    def __init__(
        self,
        engine: SelectionEngine,
        session: SessionContext,
        transcript: Optional[InMemoryTranscript] = None,
        resize_debounce_ms: int = 100,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.engine = engine
        self.session = session
        self.transcript = transcript
        self.panel_state = PanelState()
        self._resize_debounce = max(resize_debounce_ms, 0) / 1000.0
        self._resize_timer: Optional[Timer] = None
        self._preview_timer: Optional[Timer] = None
        self._views_ready = False

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            yield Static(self._title_text(), id="title")
        with Horizontal(id="body"):
            with VerticalScroll(id="panel"):
                yield Static(format_preview(None), id="preview")
                yield Static("", id="status")
                yield IndicatorGrid(id="indicators")
                with Vertical(id="inputs"):
                    yield Static("AI name (empty: taken from the page)", classes="form-label")
                    yield Input(self.session.bot_name, placeholder="e.g. Llama-7B", id="bot-name")
                    yield Static("User name (empty: User)", classes="form-label")
                    yield Input(self.session.user_name, placeholder="e.g. Human", id="user-name")
                    yield Static("Include regex 1 (highest priority)", classes="form-label")
                    yield Input(self.session.include1, placeholder="e.g. .*question.*", id="include1")
                    yield Static("", id="include1-hint", classes="input-hint")
                    yield Static("Exclude regex", classes="form-label")
                    yield Input(self.session.exclude, placeholder="e.g. .*error.*", id="exclude")
                    yield Static("", id="exclude-hint", classes="input-hint")
                    yield Static("Include regex 2 (lowest priority)", classes="form-label")
                    yield Input(self.session.include2, placeholder="e.g. .*answer.*", id="include2")
                    yield Static("", id="include2-hint", classes="input-hint")
                with Horizontal(id="ai-only-row"):
                    yield Switch(value=self.session.ai_only, id="ai-only")
                    yield Static("AI messages only", classes="form-label")
                with Container(id="actions"):
                    yield Button("Select all/none", id="select-all")
                    yield Button("Invert", id="invert")
                    yield Button("Toggle following", id="toggle-following")
                    yield Button("Export selected", id="export-selected", variant="primary")
                    yield Button("Export all", id="export-all")
                    yield Button("Jump to selected", id="jump")
            yield MessageTable(id="messages", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#messages", MessageTable)
        table.add_column("", key="anchor", width=1)
        table.add_column("sel", key="checked", width=3)
        table.add_column("role", key="role", width=4)
        table.add_column("group", key="group", width=8)
        table.add_column("text", key="text")
        table.zebra_stripes = True
        self.session.recompile_filters()
        self.refresh_views()
        table.focus()
        self._views_ready = True

    def refresh_views(self) -> None:
        corpus = self.engine.corpus()
        anchor_id = self.session.anchor.message_id if self.session.anchor else None
        self.panel_state.status = format_status(self.engine.status(self.session))
        self.query_one("#status", Static).update(self.panel_state.status)
        self.query_one("#indicators", IndicatorGrid).show(corpus, anchor_id)
        self._populate_table(corpus, anchor_id)

    def _populate_table(self, corpus: list[MessageRecord], anchor_id: Optional[str]) -> None:
        table = self.query_one("#messages", MessageTable)
        cursor_row = table.cursor_row
        table.clear()
        for message in corpus:
            table.add_row(
                "▶" if message.message_id == anchor_id else "",
                "[x]" if message.is_checked() else "[ ]",
                "AI" if message.is_ai else "User",
                message.group_id or "",
                clip_text(" ".join(message.text.split()), TABLE_TEXT_CHARS),
                key=message.message_id,
            )
        if 0 <= cursor_row < table.row_count:
            table.move_cursor(row=cursor_row)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        # A click that lands while toggles settle is not a new selection.
        if self.engine.coordinator.toggling:
            return
        message = self.engine.select_anchor(self.session, str(event.row_key.value))
        if message is None:
            return
        self._set_preview(format_preview(message), flash=True)
        self.refresh_views()

    async def on_message_table_toggle_requested(self, event: MessageTable.ToggleRequested) -> None:
        try:
            await self.engine.toggle_one(event.message_id)
        except KeyError:
            self._set_preview(f"Message {event.message_id} is no longer in the transcript")
        self.refresh_views()

    def on_indicator_grid_picked(self, event: IndicatorGrid.Picked) -> None:
        table = self.query_one("#messages", MessageTable)
        if event.index < table.row_count:
            table.move_cursor(row=event.index)
            table.focus()

    @on(Input.Changed, "#bot-name")
    def _on_bot_name_changed(self, event: Input.Changed) -> None:
        self.session.bot_name = event.value

    @on(Input.Changed, "#user-name")
    def _on_user_name_changed(self, event: Input.Changed) -> None:
        self.session.user_name = event.value

    @on(Input.Changed, "#include1")
    @on(Input.Changed, "#exclude")
    @on(Input.Changed, "#include2")
    def _on_pattern_changed(self, event: Input.Changed) -> None:
        field = event.input.id or ""
        if field not in PATTERN_INPUTS:
            return
        # Raw text only; filters are compiled at the start of the next action.
        setattr(self.session, field, event.value)
        self.query_one(f"#{field}-hint", Static).update(check_pattern(event.value).hint)

    @on(Switch.Changed, "#ai-only")
    def _on_ai_only_changed(self, event: Switch.Changed) -> None:
        self.session.ai_only = bool(event.value)
        self.refresh_views()

    @on(Button.Pressed, "#select-all")
    async def _on_select_all(self) -> None:
        self._after_batch(await self.engine.select_all(self.session))

    @on(Button.Pressed, "#invert")
    async def _on_invert(self) -> None:
        self._after_batch(await self.engine.invert(self.session))

    @on(Button.Pressed, "#toggle-following")
    async def _on_toggle_following(self) -> None:
        self._after_batch(await self.engine.toggle_from_anchor(self.session))

    @on(Button.Pressed, "#export-selected")
    def _on_export_selected(self) -> None:
        self.action_export_selected()

    @on(Button.Pressed, "#export-all")
    def _on_export_all(self) -> None:
        self._export(selected_only=False)

    @on(Button.Pressed, "#jump")
    def _on_jump(self) -> None:
        anchor = self.session.anchor
        if anchor is None:
            self._set_preview(ANCHOR_REQUIRED)
            return
        table = self.query_one("#messages", MessageTable)
        try:
            row_index = table.get_row_index(anchor.message_id)
        except RowDoesNotExist:
            self._set_preview(f"Message {anchor.message_id} is no longer in the transcript")
            return
        table.move_cursor(row=row_index)
        table.focus()
        self._flash("#preview")

    def action_export_selected(self) -> None:
        self._export(selected_only=True)

    def action_reload_transcript(self) -> None:
        if self.transcript is None:
            return
        try:
            count = self.transcript.reload()
        except (OSError, ValueError) as exc:
            self.panel_state.error = str(exc)
            self._set_preview(f"reload failed: {exc}")
            return
        self.panel_state.error = None
        self._set_preview(f"Reloaded {count} messages", reset=True)
        self.refresh_views()

    def on_resize(self) -> None:
        if not self._views_ready:
            return
        if self._resize_timer is not None:
            self._resize_timer.stop()
        self._resize_timer = self.set_timer(self._resize_debounce, self.refresh_views)

    def _after_batch(self, result: BatchResult) -> None:
        feedback = format_batch(result)
        if feedback:
            self._set_preview(feedback)
        self.refresh_views()

    def _export(self, selected_only: bool) -> None:
        try:
            result = self.engine.export(self.session, selected_only=selected_only)
        except OSError as exc:
            self.panel_state.error = str(exc)
            self._set_preview(f"export failed: {exc.strerror or exc}")
            return
        self.panel_state.last_export = result.path
        message = format_export(result)
        if result.path is not None:
            message = f"{message} to {result.path}"
            self._set_preview(message, reset=True)
        else:
            self._set_preview(message)

    def _set_preview(self, message: str, flash: bool = False, reset: bool = False) -> None:
        if self._preview_timer is not None:
            self._preview_timer.stop()
            self._preview_timer = None
        self.query_one("#preview", Static).update(message)
        if flash:
            self._flash("#preview")
        if reset:
            self._preview_timer = self.set_timer(PREVIEW_RESET_SECONDS, self._reset_preview)

    def _reset_preview(self) -> None:
        self._preview_timer = None
        self.query_one("#preview", Static).update(format_preview(self.session.anchor))

    def _flash(self, selector: str) -> None:
        widget = self.query_one(selector)
        widget.add_class("flash")
        self.set_timer(FLASH_SECONDS, lambda: widget.remove_class("flash"))

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("CHAT", ACCENT_BLUE),
            ("PICK > Message Selector", "bold"),
        )
