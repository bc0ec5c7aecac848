from __future__ import annotations

from adapters.poe_html import PoeHtmlTranscript, parse_poe_html
from core.models import Role

PAGE = """
<html><body>
<div class="ChatHeader_overflow_x1 ChatHeader_textOverflow_y2">  Trip planning  </div>
<div class="ChatMessagesView_messagePair_abc">
  <div class="ChatMessage_chatMessage_1a">
    <label class="ChatMessage_checkbox_9 checkbox_isChecked_3"></label>
    <div class="Message_messageTextContainer_77"><p>hi there<br>friend</p></div>
  </div>
  <div class="ChatMessage_chatMessage_1a">
    <div class="LeftSideChatMessageHeader_wrap_5">
      <div class="BotHeader_textContainer_4"> Assistant </div>
    </div>
    <label class="ChatMessage_checkbox_9"></label>
    <div class="Message_messageTextContainer_77">hello &amp; welcome</div>
  </div>
</div>
<div class="ChatMessagesView_messagePair_abc">
  <div class="ChatMessage_chatMessage_1a">
    <div class="Message_messageTextContainer_77">no checkbox here</div>
  </div>
</div>
<div class="ChatMessage_chatMessage_1a">
  <label class="ChatMessage_checkbox_9"></label>
  <div class="Message_messageTextContainer_77">outside any pair</div>
</div>
</body></html>
"""


def test_parse_title_and_messages() -> None:
    title, entries = parse_poe_html(PAGE)
    assert title == "Trip planning"
    assert [entry.message_id for entry in entries] == ["msg-0", "msg-1", "msg-2", "msg-3"]
    assert [entry.role for entry in entries] == [Role.USER, Role.AI, Role.USER, Role.USER]
    assert entries[0].text == "hi therefriend"
    assert entries[1].text == "hello & welcome"
    assert entries[1].speaker == "Assistant"
    assert entries[0].speaker is None


def test_parse_pairs_and_checked_state() -> None:
    _, entries = parse_poe_html(PAGE)
    assert [entry.group_id for entry in entries] == ["pair-0", "pair-0", "pair-1", None]
    assert [entry.checked for entry in entries] == [True, False, False, False]
    assert [entry.checkable for entry in entries] == [True, True, False, True]


def test_missing_title_is_none() -> None:
    title, entries = parse_poe_html("<div class='ChatMessage_chatMessage_1'></div>")
    assert title is None
    assert entries[0].text == ""


def test_transcript_from_saved_page(tmp_path) -> None:
    path = tmp_path / "chat.html"
    path.write_text(PAGE, encoding="utf-8")
    transcript = PoeHtmlTranscript(path)
    assert transcript.title() == "Trip planning"
    transcript.toggle("msg-1")
    assert transcript.is_checked("msg-1")
    # Messages without a checkbox cannot be toggled.
    transcript.toggle("msg-2")
    assert not transcript.is_checked("msg-2")
