from __future__ import annotations

import asyncio

from textual.widgets import Button

from adapters.memory_transcript import InMemoryTranscript, TranscriptEntry
from core.config import ToggleConfig
from core.models import Role
from core.processor import SelectionEngine
from core.session import SessionContext
from core.toggle import ToggleCoordinator
from frontend.app import MessageTable, SelectorApp


def _app() -> tuple[SelectorApp, InMemoryTranscript]:
    transcript = InMemoryTranscript(
        [
            TranscriptEntry("U1", Role.USER, "hi", "g1"),
            TranscriptEntry("A1", Role.AI, "hello", "g1"),
            TranscriptEntry("U2", Role.USER, "bye", "g2"),
            TranscriptEntry("A2", Role.AI, "goodbye", "g2"),
        ],
        title="Greetings",
    )
    coordinator = ToggleCoordinator(transcript, ToggleConfig(settle_ms=0))
    engine = SelectionEngine(transcript, coordinator)
    return SelectorApp(engine=engine, session=SessionContext(), transcript=transcript), transcript


def _status_text(app: SelectorApp) -> str:
    return app.panel_state.status


def test_anchor_and_toggle_following_from_the_table() -> None:
    app, transcript = _app()

    async def _run() -> None:
        async with app.run_test(size=(140, 60)) as pilot:
            await pilot.pause()
            assert _status_text(app) == "No messages selected"

            table = app.query_one("#messages", MessageTable)
            table.focus()
            table.move_cursor(row=1)
            await pilot.press("enter")
            await pilot.pause()
            assert app.session.anchor is not None
            assert app.session.anchor.message_id == "A1"

            app.query_one("#toggle-following", Button).press()
            await pilot.pause(0.2)
            assert [key for key in transcript.list_messages() if transcript.is_checked(key)] == [
                "A1",
                "U2",
                "A2",
            ]
            assert _status_text(app) == "[Selected current and following]"

    asyncio.run(_run())


def test_space_toggles_row_under_cursor() -> None:
    app, transcript = _app()

    async def _run() -> None:
        async with app.run_test(size=(140, 60)) as pilot:
            table = app.query_one("#messages", MessageTable)
            table.focus()
            table.move_cursor(row=2)
            await pilot.press("space")
            await pilot.pause(0.2)
            assert transcript.is_checked("U2")
            assert _status_text(app) == "[Partially selected: 1/4]"

    asyncio.run(_run())


def test_row_selection_is_ignored_while_toggles_settle() -> None:
    app, transcript = _app()

    async def _run() -> None:
        async with app.run_test(size=(140, 60)) as pilot:
            coordinator = app.engine.coordinator
            handle = coordinator.request_toggle("U2", True)
            assert coordinator.toggling

            table = app.query_one("#messages", MessageTable)
            table.focus()
            table.move_cursor(row=1)
            await pilot.press("enter")
            await pilot.pause()
            assert app.session.anchor is None

            await coordinator.on_settled(handle)
            assert not coordinator.toggling
            await pilot.press("enter")
            await pilot.pause()
            assert app.session.anchor is not None
            assert app.session.anchor.message_id == "A1"

    asyncio.run(_run())
