"""
Rule Chatbot - Pattern-matching conversational responder
========================================================

A small chatbot that maps free-text input to an intent by substring
pattern containment and replies with a templated response:
1. Rules loaded from a JSON or YAML file, reloadable at runtime
2. Per-session context used to fill {name} and {time} placeholders

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
__license__ = "MIT"
