"""Poe saved-page adapter.

Reads a saved Poe chat page and exposes it as a transcript. Poe builds its
class names from a component prefix plus a build hash, so every lookup here
matches on class-name prefixes instead of exact names.

This keeps host markup details out of the core engine.
"""

from __future__ import annotations

from html.parser import HTMLParser
import logging
from pathlib import Path
from typing import Iterator, Optional

from core.models import Role

from adapters.memory_transcript import InMemoryTranscript, TranscriptEntry

LOGGER = logging.getLogger(__name__)

MESSAGE_CLASS_PREFIX = "ChatMessage_chatMessage_"
MESSAGE_PAIR_PREFIX = "ChatMessagesView_messagePair_"
BOT_HEADER_PREFIX = "LeftSideChatMessageHeader_"
CHECKBOX_PREFIX = "ChatMessage_checkbox_"
CHECKED_CLASS_PREFIX = "checkbox_isChecked_"
TEXT_CONTAINER_PREFIX = "Message_messageTextContainer_"
BOT_NAME_PREFIX = "BotHeader_textContainer_"
TITLE_PREFIXES = ("ChatHeader_overflow_", "ChatHeader_textOverflow_")

_VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}


class _Node:
    __slots__ = ("tag", "class_attr", "children", "parent")

    def __init__(self, tag: str, class_attr: str, parent: Optional["_Node"]) -> None:
        self.tag = tag
        self.class_attr = class_attr
        self.children: list["_Node | str"] = []
        self.parent = parent

    @property
    def classes(self) -> list[str]:
        return self.class_attr.split()

    def has_class_fragment(self, fragment: str) -> bool:
        # Same semantics as the CSS selector [class*="fragment"].
        return fragment in self.class_attr

    def iter_descendants(self) -> Iterator["_Node"]:
        for child in self.children:
            if isinstance(child, _Node):
                yield child
                yield from child.iter_descendants()

    def find(self, fragment: str, tag: Optional[str] = None) -> Optional["_Node"]:
        for node in self.iter_descendants():
            if node.has_class_fragment(fragment) and (tag is None or node.tag == tag):
                return node
        return None

    def closest(self, fragment: str) -> Optional["_Node"]:
        node: Optional[_Node] = self
        while node is not None:
            if node.has_class_fragment(fragment):
                return node
            node = node.parent
        return None

    def text_content(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, str):
                parts.append(child)
            else:
                parts.append(child.text_content())
        return "".join(parts)


class _TreeBuilder(HTMLParser):
    """Builds a minimal element tree; tolerant of unclosed tags."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = _Node("#document", "", None)
        self._stack: list[_Node] = [self.root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        class_attr = ""
        for name, value in attrs:
            if name == "class" and value:
                class_attr = value
        node = _Node(tag, class_attr, self._stack[-1])
        self._stack[-1].children.append(node)
        if tag not in _VOID_TAGS:
            self._stack.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        node = _Node(tag, "", self._stack[-1])
        for name, value in attrs:
            if name == "class" and value:
                node.class_attr = value
        self._stack[-1].children.append(node)

    def handle_endtag(self, tag: str) -> None:
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return
        # Stray end tag without a matching start tag.

    def handle_data(self, data: str) -> None:
        self._stack[-1].children.append(data)


def _is_checked(message: _Node) -> tuple[bool, bool]:
    """Return (has_checkbox, checked) for a message node."""

    checkbox = message.find(CHECKBOX_PREFIX, tag="label")
    if checkbox is None:
        return False, False
    return True, any(cls.startswith(CHECKED_CLASS_PREFIX) for cls in checkbox.classes)


def _speaker_text(node: Optional[_Node]) -> Optional[str]:
    if node is None:
        return None
    return node.text_content().strip() or None


def parse_poe_html(markup: str) -> tuple[Optional[str], list[TranscriptEntry]]:
    """Extract the chat title and messages from saved page markup."""

    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    root = builder.root

    title: Optional[str] = None
    for node in root.iter_descendants():
        if all(node.has_class_fragment(prefix) for prefix in TITLE_PREFIXES):
            title = node.text_content().strip() or None
            break

    pair_ids: dict[int, str] = {}
    entries: list[TranscriptEntry] = []
    for node in root.iter_descendants():
        if not node.has_class_fragment(MESSAGE_CLASS_PREFIX):
            continue
        is_ai = node.find(BOT_HEADER_PREFIX) is not None
        text_node = node.find(TEXT_CONTAINER_PREFIX, tag="div")
        speaker_node = node.find(BOT_NAME_PREFIX) if is_ai else None
        pair = node.closest(MESSAGE_PAIR_PREFIX)
        group_id = None
        if pair is not None:
            group_id = pair_ids.setdefault(id(pair), f"pair-{len(pair_ids)}")
        has_checkbox, checked = _is_checked(node)
        entries.append(
            TranscriptEntry(
                message_id=f"msg-{len(entries)}",
                role=Role.AI if is_ai else Role.USER,
                text=text_node.text_content() if text_node is not None else "",
                group_id=group_id,
                speaker=_speaker_text(speaker_node),
                checked=checked,
                checkable=has_checkbox,
            )
        )
    LOGGER.debug("Parsed %s messages in %s pairs", len(entries), len(pair_ids))
    return title, entries


class PoeHtmlTranscript(InMemoryTranscript):
    """Transcript read from a saved Poe page, with checked state in memory."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        super().__init__()
        self.reload()

    def _read_source(self) -> tuple[Optional[str], list[TranscriptEntry]]:
        if not self._path.exists():
            raise FileNotFoundError(f"Saved page not found: {self._path}")
        return parse_poe_html(self._path.read_text(encoding="utf-8"))
