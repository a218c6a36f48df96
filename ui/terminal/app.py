"""
Textual Application - Chat TUI
==============================

This module implements a Textual chat window for Rule Chatbot:
a scrolling transcript, an input line, and key bindings for the
reload and list directives.
"""

from typing import Optional, List

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Header, Footer, Input, RichLog, Static

from core.config import Config, load_config
from core.logging import get_logger
from services.responder import ChatResponder, ChatReply

logger = get_logger("tui.app")


class ChatApp(App):
    """
    Rule Chatbot Terminal UI Application.

    Every submitted line goes through ChatResponder.handle(); the
    'exit' directive closes the app.
    """

    CSS = """
    Screen {
        background: $surface;
    }

    .title {
        text-style: bold;
        color: $accent;
        margin: 0 1;
    }

    #chat-log {
        height: 1fr;
        border: solid $primary;
        padding: 0 1;
    }

    #chat-input {
        margin: 1 0 0 0;
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("ctrl+r", "reload_rules", "Reload rules"),
        Binding("ctrl+l", "list_intents", "List intents"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, responder: ChatResponder, config: Optional[Config] = None):
        super().__init__()
        self.responder = responder
        self.config = config or Config()
        self.transcript: List[str] = []

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(self.config.ui.welcome, classes="title")
        yield RichLog(id="chat-log", wrap=True, markup=False)
        yield Input(placeholder="Type a message...", id="chat-input")
        yield Footer()

    def on_mount(self) -> None:
        self.title = self.config.app_name
        self.query_one("#chat-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        line = event.value
        event.input.value = ""

        if not line.strip():
            return

        self._write(f"{self.config.ui.prompt}{line}")
        reply = self.responder.handle(line)
        self._show(reply)

        if reply.is_exit:
            self.exit()

    def action_reload_rules(self) -> None:
        reply = self.responder.reload_rules()
        self._show(reply)
        if reply.kind == "error":
            self.notify(reply.text, severity="error")
        else:
            self.notify(reply.text, title="Rules")

    def action_list_intents(self) -> None:
        self._show(self.responder.list_intents())

    def _show(self, reply: ChatReply) -> None:
        self._write(f"{self.config.ui.bot_label}: {reply.text}")

    def _write(self, text: str) -> None:
        self.transcript.append(text)
        self.query_one("#chat-log", RichLog).write(text)


def run_tui(responder: ChatResponder, config: Optional[Config] = None) -> None:
    app = ChatApp(responder, config=config or load_config())
    app.run()
