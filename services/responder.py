"""
Chat Responder - Turn processing and chat directives
====================================================

This module ties matching, rendering and session updates into a
single turn, and wraps it with the out-of-band directives the
chat front-ends understand (exit, reload rules, list intents).
"""

from datetime import datetime
from typing import Optional, Sequence
from dataclasses import dataclass

from core.exceptions import EmptyTemplate, MalformedRules, SourceUnavailable
from core.logging import get_logger
from rules.engine import Rule, normalize, match_rule
from rules.store import RuleStore
from rules.templates import ResponseRenderer
from .session import Session

logger = get_logger("services.responder")

FALLBACK_RESPONSE = "I'm sorry, I didn't understand that. Could you please rephrase?"

EXIT_COMMAND = "exit"
RELOAD_COMMAND = "reload rules"
LIST_COMMAND = "list intents"

_default_renderer = ResponseRenderer()


def process_turn(
    raw_input: str,
    session: Session,
    rules: Sequence[Rule],
    now: Optional[datetime] = None,
    renderer: Optional[ResponseRenderer] = None
) -> str:
    """
    Produce the reply for one user input.

    Normalizes the input, matches it against the rules, records the
    matched intent on the session and renders the rule's response.
    Returns FALLBACK_RESPONSE when nothing matches or the matched
    rule has no responses.

    Args:
        raw_input: Text as typed by the user
        session: Session to update
        rules: Rule collection snapshot to match against
        now: Time used for {time}; defaults to the current local time
        renderer: Renderer to use; defaults to first-response rendering

    Returns:
        Reply text
    """
    rule = match_rule(normalize(raw_input), rules)
    if rule is None:
        return FALLBACK_RESPONSE

    session.record_intent(rule.intent)

    try:
        return (renderer or _default_renderer).render(rule, session, now)
    except EmptyTemplate as e:
        logger.warning(f"Falling back for intent '{rule.intent}': {e}")
        return FALLBACK_RESPONSE


@dataclass
class ChatReply:
    """
    Reply to one line of chat input.

    Attributes:
        text (str): Text to show the user
        kind (str): 'reply', 'system' (directive output), 'error' or 'exit'
    """
    text: str
    kind: str = "reply"

    @property
    def is_exit(self) -> bool:
        return self.kind == "exit"


class ChatResponder:
    """
    Handles chat input lines for a single session.

    Directives are matched case-insensitively on the trimmed line
    before any rule matching; everything else is a normal turn
    against the store's current rules.

    Example:
        responder = ChatResponder(store, create_session("user123", "Alice"))
        reply = responder.handle("hello")
        print(reply.text)
    """

    def __init__(
        self,
        store: RuleStore,
        session: Session,
        renderer: Optional[ResponseRenderer] = None
    ):
        self.store = store
        self.session = session
        self.renderer = renderer or ResponseRenderer()

    def handle(self, line: str, now: Optional[datetime] = None) -> ChatReply:
        """
        Handle one line of input.

        Args:
            line: Raw input line
            now: Time used for {time}

        Returns:
            ChatReply for the line
        """
        command = line.strip().lower()

        if command == EXIT_COMMAND:
            logger.info("User exited the chat.")
            return ChatReply("Goodbye!", kind="exit")

        if command == RELOAD_COMMAND:
            return self.reload_rules()

        if command == LIST_COMMAND:
            return self.list_intents()

        response = process_turn(line, self.session, self.store.rules, now, self.renderer)
        logger.info(f"User input: '{line.strip()}', Response: '{response}'")
        return ChatReply(response)

    def reload_rules(self) -> ChatReply:
        """Reload the store; previous rules stay active on failure."""
        try:
            self.store.reload()
        except (SourceUnavailable, MalformedRules) as e:
            return ChatReply(f"Failed to reload rules: {e}", kind="error")

        self.renderer.reset()
        return ChatReply("Rules reloaded successfully.", kind="system")

    def list_intents(self) -> ChatReply:
        lines = ["Available intents:"]
        lines.extend(f"- {intent}" for intent in self.store.intents())
        return ChatReply("\n".join(lines), kind="system")
