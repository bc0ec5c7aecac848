"""Application entry point for the chatpick message selector."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.json_transcript import JsonTranscript
from adapters.memory_transcript import InMemoryTranscript
from adapters.poe_html import PoeHtmlTranscript
from adapters.status_formatting import format_export, format_status
from adapters.text_exporter import TextFileExporter
from core.config import ToggleConfig
from core.processor import SelectionEngine
from core.range_selector import range_from
from core.session import SessionContext
from core.toggle import ToggleCoordinator

NAME = "CHATPICK"
FONT = "tarty-1"

TRANSCRIPT_FORMATS = ("json", "poe_html")


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # Console output draws over the TUI, so it is opt-in.
    if config.get("console", False):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/chatpick.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_transcript(path: Optional[str], fmt: Optional[str]) -> InMemoryTranscript:
    path = path or settings.TRANSCRIPT_PATH
    if not path:
        raise RuntimeError("No transcript given and transcript.path is not configured")
    fmt = fmt or ("poe_html" if path.lower().endswith((".html", ".htm")) else settings.TRANSCRIPT_FORMAT)
    if fmt == "poe_html":
        return PoeHtmlTranscript(path)
    if fmt == "json":
        return JsonTranscript(path)
    raise RuntimeError(f"transcript format must be one of {', '.join(TRANSCRIPT_FORMATS)}")


def _build_session(args: argparse.Namespace) -> SessionContext:
    session = SessionContext(
        include1=getattr(args, "include1", None) or settings.FILTER_INCLUDE1,
        exclude=getattr(args, "exclude", None) or settings.FILTER_EXCLUDE,
        include2=getattr(args, "include2", None) or settings.FILTER_INCLUDE2,
        ai_only=bool(getattr(args, "ai_only", False)) or settings.AI_ONLY,
        bot_name=getattr(args, "bot_name", None) or settings.BOT_NAME,
        user_name=getattr(args, "user_name", None) or settings.USER_NAME,
    )
    session.recompile_filters()
    return session


def _build_engine(transcript: InMemoryTranscript, export_dir: Optional[str] = None) -> SelectionEngine:
    coordinator = ToggleCoordinator(transcript, ToggleConfig(
        settle_ms=settings.TOGGLE_SETTLE_MS,
        settle_windows=settings.TOGGLE_SETTLE_WINDOWS,
    ))
    exporter = TextFileExporter(export_dir or settings.EXPORT_DIR)
    return SelectionEngine(transcript, coordinator, exporter)


def _run_tui(args: argparse.Namespace) -> None:
    _print_banner()
    from frontend.app import SelectorApp

    transcript = _open_transcript(args.transcript, args.format)
    engine = _build_engine(transcript)
    session = _build_session(args)
    SelectorApp(
        engine=engine,
        session=session,
        transcript=transcript,
        resize_debounce_ms=settings.RESIZE_DEBOUNCE_MS,
    ).run()


def _run_status(args: argparse.Namespace) -> None:
    transcript = _open_transcript(args.transcript, args.format)
    engine = _build_engine(transcript)
    session = _build_session(args)
    if args.anchor and engine.select_anchor(session, args.anchor) is None:
        print(f"Anchor {args.anchor} is not in the transcript", file=sys.stderr)
    print(format_status(engine.status(session)))


def _run_range(args: argparse.Namespace) -> None:
    transcript = _open_transcript(args.transcript, args.format)
    engine = _build_engine(transcript)
    session = _build_session(args)
    anchor = engine.select_anchor(session, args.anchor)
    if anchor is None:
        print(f"Anchor {args.anchor} is not in the transcript", file=sys.stderr)
        return
    for message in range_from(anchor, engine.corpus(), session.ai_only, session.filters):
        print(message.message_id)


def _run_export(args: argparse.Namespace) -> None:
    transcript = _open_transcript(args.transcript, args.format)
    engine = _build_engine(transcript, args.output_dir)
    session = _build_session(args)
    result = engine.export(session, selected_only=not args.all)
    print(format_export(result))
    if result.path is not None:
        print(result.path)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("transcript", nargs="?", help="Transcript file (.json or saved Poe .html)")
    parser.add_argument("--format", choices=TRANSCRIPT_FORMATS, help="Transcript format")
    parser.add_argument("--include1", help="Required pattern, highest priority")
    parser.add_argument("--exclude", help="Forbidden pattern")
    parser.add_argument("--include2", help="Required pattern, lowest priority")
    parser.add_argument("--ai-only", action="store_true", help="Only consider AI messages")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="chatpick")
    subparsers = parser.add_subparsers(dest="command")

    tui_parser = subparsers.add_parser("tui", help="Launch the selector TUI")
    _add_common_arguments(tui_parser)

    status_parser = subparsers.add_parser("status", help="Print the selection status")
    _add_common_arguments(status_parser)
    status_parser.add_argument("--anchor", help="Message id used as the anchor")

    range_parser = subparsers.add_parser("range", help="Print ids toggled from an anchor")
    _add_common_arguments(range_parser)
    range_parser.add_argument("--anchor", required=True, help="Message id used as the anchor")

    export_parser = subparsers.add_parser("export", help="Export messages as text")
    _add_common_arguments(export_parser)
    export_parser.add_argument("--all", action="store_true", help="Export every matching message")
    export_parser.add_argument("--output-dir", help="Directory for the exported file")
    export_parser.add_argument("--bot-name", help="Speaker name for AI messages")
    export_parser.add_argument("--user-name", help="Speaker name for user messages")

    args = parser.parse_args(argv)
    _configure_logging()
    logger = logging.getLogger(__name__)

    handlers = {
        "status": _run_status,
        "range": _run_range,
        "export": _run_export,
    }
    if args.command is None:
        args = parser.parse_args(["tui"])
    try:
        handlers.get(args.command, _run_tui)(args)
    except (FileNotFoundError, ValueError, RuntimeError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
