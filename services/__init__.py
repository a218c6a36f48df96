"""
Services Module - Conversation services for Rule Chatbot
========================================================

This module provides the main services:
- Session: per-user conversation context
- Responder: turn processing and chat directives
"""

from .session import Session, create_session
from .responder import ChatResponder, ChatReply, process_turn, FALLBACK_RESPONSE

__all__ = [
    "Session",
    "create_session",
    "ChatResponder",
    "ChatReply",
    "process_turn",
    "FALLBACK_RESPONSE",
]
