"""
Session State - Per-user conversational context
===============================================

One session exists per process run. It carries the user's identity,
the intent of the last matched rule, and a history log that only
grows through an explicit append.
"""

from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field

_IDENTITY_FIELDS = ("user_id", "user_name")


@dataclass
class Session:
    """
    Conversation context for a single user.

    Attributes:
        user_id (str): User identifier, fixed at creation
        user_name (str): Display name used for {name}, fixed at creation
        last_intent (str): Intent of the most recent matched rule
        conversation_history (list): Append-only log of entries
    """
    user_id: str
    user_name: str
    last_intent: Optional[str] = None
    conversation_history: List[str] = field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IDENTITY_FIELDS and name in self.__dict__:
            raise AttributeError(f"Session.{name} cannot be changed after creation")
        super().__setattr__(name, value)

    def record_intent(self, intent: str) -> None:
        """Overwrite the last matched intent."""
        self.last_intent = intent

    def append_history(self, entry: str) -> None:
        """Append an entry to the conversation history."""
        self.conversation_history.append(entry)

    def to_dict(self) -> Dict[str, Any]:
        """Convert session to dictionary."""
        return {
            "user_id": self.user_id,
            "user_name": self.user_name,
            "last_intent": self.last_intent,
            "conversation_history": list(self.conversation_history),
        }


def create_session(user_id: str, user_name: str) -> Session:
    """Start a fresh session with no intent and an empty history."""
    return Session(user_id=user_id, user_name=user_name)
