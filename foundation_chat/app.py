"""Single-window Toga chat view over ``ConversationStore`` + ``ChatController``.

The view is a pure consumer: it renders store changes and forwards user
actions (typing, Send) to the store and controller.
"""

from __future__ import annotations

import textwrap

import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW

from .config import ChatSettings
from .controller import ChatController
from .models import ChatMessage
from .protocols import create_model, create_session
from .store import ChangeKind, ConversationStore, StoreChange

BUBBLE_WRAP_CHARS = 60
FONT_SIZE_BODY = 11
FONT_SIZE_META = 10

COLOR_USER_BUBBLE = "#CCE0FF"
COLOR_ASSISTANT_BUBBLE = "#E6E6E6"
COLOR_TEXT_PRIMARY = "#101418"
COLOR_TEXT_MUTED = "#808080"


def wrap_message_text(text: str, width: int = BUBBLE_WRAP_CHARS) -> str:
    """Hard-wrap each paragraph so labels stay readable inside a bubble."""
    paragraphs = text.split("\n")
    return "\n".join(textwrap.fill(p, width=width) if p else "" for p in paragraphs)


class FoundationChatApp(toga.App):
    """Status line, scrolling transcript and a text-entry row."""

    def __init__(self, *args, settings: ChatSettings | None = None, **kwargs) -> None:
        self.chat_settings = settings or ChatSettings()
        self.store = ConversationStore()
        self.controller = ChatController(
            self.store,
            model_factory=create_model,
            session_factory=create_session,
            instructions=self.chat_settings.instructions,
        )
        self._unsubscribe = None
        super().__init__(*args, **kwargs)

    def startup(self) -> None:
        self._build_ui()
        self._unsubscribe = self.store.subscribe(self._on_store_change)
        self.main_window = toga.MainWindow(title=self.formal_name)
        self.main_window.content = self.root_box
        self.main_window.show()

    async def on_running(self) -> None:
        await self.controller.initialize()

    def _build_ui(self) -> None:
        self.status_label = toga.Label(
            self.store.status,
            style=Pack(color=COLOR_TEXT_MUTED, font_size=FONT_SIZE_META, margin=(8, 12, 0, 12)),
        )
        self.messages_box = toga.Box(style=Pack(direction=COLUMN, margin=12))
        self.messages_scroll = toga.ScrollContainer(
            horizontal=False,
            content=self.messages_box,
            style=Pack(flex=1),
        )
        self.prompt_input = toga.TextInput(
            placeholder="Type a message...",
            on_change=self.on_prompt_change,
            on_confirm=self.on_send,
            style=Pack(flex=1, margin_right=8),
        )
        self.send_button = toga.Button("Send", on_press=self.on_send)

        input_row = toga.Box(style=Pack(direction=ROW, margin=12))
        input_row.add(self.prompt_input)
        input_row.add(self.send_button)

        self.root_box = toga.Box(style=Pack(direction=COLUMN))
        self.root_box.add(self.status_label)
        self.root_box.add(self.messages_scroll)
        self.root_box.add(input_row)

    def _message_row(self, message: ChatMessage) -> toga.Box:
        bubble = toga.Label(
            wrap_message_text(message.content),
            style=Pack(
                margin=10,
                font_size=FONT_SIZE_BODY,
                color=COLOR_TEXT_PRIMARY,
                background_color=COLOR_USER_BUBBLE if message.is_user else COLOR_ASSISTANT_BUBBLE,
            ),
        )
        spacer = toga.Box(style=Pack(flex=1))
        row = toga.Box(style=Pack(direction=ROW, margin_bottom=12))
        if message.is_user:
            row.add(spacer, bubble)
        else:
            row.add(bubble, spacer)
        return row

    def _on_store_change(self, change: StoreChange) -> None:
        if change.kind is ChangeKind.MESSAGES and change.message is not None:
            self.messages_box.add(self._message_row(change.message))
            self._scroll_to_latest()
        elif change.kind is ChangeKind.DRAFT:
            if self.prompt_input.value != change.value:
                self.prompt_input.value = change.value
        elif change.kind is ChangeKind.STATUS:
            self.status_label.text = change.value

    def _scroll_to_latest(self) -> None:
        self.messages_scroll.vertical_position = self.messages_scroll.max_vertical_position

    def on_prompt_change(self, widget: toga.TextInput) -> None:
        self.store.set_draft(widget.value or "")

    async def on_send(self, widget: toga.Widget) -> None:
        await self.controller.send_message()

    def on_exit(self) -> bool:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        return True


def main(settings: ChatSettings | None = None) -> FoundationChatApp:
    """Briefcase entrypoint."""
    return FoundationChatApp(
        formal_name="Foundation Chat",
        app_id="com.foundationchat.app",
        settings=settings,
    )


if __name__ == "__main__":
    main().main_loop()
