"""
Template Rendering - Response selection and placeholder substitution
====================================================================

This module turns a matched rule into reply text. A selector picks
one of the rule's response templates (the first one by default), then
placeholders are substituted literally:

- {name} - the session's user name
- {time} - current time as a 12-hour clock, e.g. "03:07 PM"

Unknown placeholders are left as they are.
"""

import random
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from core.exceptions import ConfigError, EmptyTemplate
from .engine import Rule


def format_time(now: datetime) -> str:
    """
    Format a time as HH:MM AM/PM.

    Built from the hour value rather than strftime's %p, whose
    marker text depends on the process locale.
    """
    hour = now.hour % 12 or 12
    marker = "AM" if now.hour < 12 else "PM"
    return f"{hour:02d}:{now.minute:02d} {marker}"


class ResponseSelector(ABC):
    """Strategy for choosing which response template of a rule to render."""

    @abstractmethod
    def select(self, rule: Rule) -> str:
        """Pick one of ``rule.responses`` (never empty here)."""
        pass

    def reset(self) -> None:
        """Forget per-rule state; called when a new rule collection goes live."""
        pass


class FirstResponseSelector(ResponseSelector):
    """Always the first declared response. Keeps replies reproducible."""

    def select(self, rule: Rule) -> str:
        return rule.responses[0]


class RandomResponseSelector(ResponseSelector):
    """Uniformly random response; pass a seeded Random for repeatable runs."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select(self, rule: Rule) -> str:
        return self.rng.choice(rule.responses)


class RoundRobinResponseSelector(ResponseSelector):
    """Cycle through a rule's responses, one step per selection."""

    def __init__(self):
        self._positions: Dict[Rule, int] = {}

    def select(self, rule: Rule) -> str:
        position = self._positions.get(rule, 0)
        self._positions[rule] = position + 1
        return rule.responses[position % len(rule.responses)]

    def reset(self) -> None:
        self._positions.clear()


SELECTORS = {
    "first": FirstResponseSelector,
    "random": RandomResponseSelector,
    "round_robin": RoundRobinResponseSelector,
}


def create_selector(name: str) -> ResponseSelector:
    """
    Create a selector from its configuration name.

    Raises:
        ConfigError: If the name is unknown
    """
    try:
        return SELECTORS[name]()
    except KeyError:
        raise ConfigError(
            f"Unknown response selection strategy: {name}",
            {"allowed": sorted(SELECTORS)}
        ) from None


class ResponseRenderer:
    """
    Renders the reply for a matched rule.

    Example:
        renderer = ResponseRenderer()
        text = renderer.render(rule, session)
    """

    def __init__(self, selector: Optional[ResponseSelector] = None):
        self.selector = selector or FirstResponseSelector()

    def reset(self) -> None:
        """Drop selection state tied to the previous rule collection."""
        self.selector.reset()

    def render(self, rule: Rule, session, now: Optional[datetime] = None) -> str:
        """
        Render a response for a rule.

        Args:
            rule: The matched rule
            session: Session providing ``user_name``
            now: Time used for {time}; defaults to the current local time

        Returns:
            Rendered response text

        Raises:
            EmptyTemplate: If the rule has no responses
        """
        if not rule.responses:
            raise EmptyTemplate(
                "Matched rule has no responses",
                {"intent": rule.intent}
            )

        template = self.selector.select(rule)
        return substitute(template, session.user_name, now or datetime.now())


def substitute(template: str, user_name: str, now: datetime) -> str:
    """Replace {name} then {time} in a template."""
    result = template.replace("{name}", user_name)
    result = result.replace("{time}", format_time(now))
    return result
