"""
Test Template Rendering Module
=============================

Unit tests for response selection and placeholder substitution.
"""

import re
import random
import pytest
from datetime import datetime
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from rules.engine import Rule
from rules.templates import (
    ResponseRenderer, ResponseSelector, FirstResponseSelector, RandomResponseSelector,
    RoundRobinResponseSelector, create_selector, format_time
)
from services.session import create_session
from core.exceptions import EmptyTemplate, ConfigError

AFTERNOON = datetime(2024, 5, 17, 15, 7)


@pytest.fixture
def session():
    return create_session("user123", "Alice")


@pytest.fixture
def renderer():
    return ResponseRenderer()


class TestFormatTime:
    """Tests for the {time} format."""

    @pytest.mark.parametrize("hour,minute,expected", [
        (15, 7, "03:07 PM"),
        (0, 0, "12:00 AM"),
        (12, 30, "12:30 PM"),
        (9, 5, "09:05 AM"),
        (23, 59, "11:59 PM"),
        (11, 59, "11:59 AM"),
    ])
    def test_format(self, hour, minute, expected):
        assert format_time(datetime(2024, 1, 1, hour, minute)) == expected


class TestResponseRenderer:
    """Tests for ResponseRenderer."""

    def test_name_and_time(self, renderer, session):
        rule = Rule(
            intent="greet",
            patterns=["hello"],
            responses=["Hello, {name}! It's {time}."]
        )

        response = renderer.render(rule, session)

        assert "Alice" in response
        assert "It's" in response
        assert re.search(r"It's \d{2}:\d{2} (AM|PM)\.$", response)

    def test_fixed_time(self, renderer, session):
        rule = Rule("greet", ["hello"], ["Hello, {name}! It's {time}."])
        assert renderer.render(rule, session, AFTERNOON) == "Hello, Alice! It's 03:07 PM."

    def test_first_response_selected(self, renderer, session):
        rule = Rule("greet", ["hello"], ["first", "second", "third"])
        for _ in range(5):
            assert renderer.render(rule, session) == "first"

    def test_unknown_placeholders_kept(self, renderer, session):
        rule = Rule("greet", ["hello"], ["{greeting}, {name}! {date}"])
        assert renderer.render(rule, session) == "{greeting}, Alice! {date}"

    def test_repeated_placeholders(self, renderer, session):
        rule = Rule("greet", ["hello"], ["{name} {name} {time} {time}"])
        assert renderer.render(rule, session, AFTERNOON) == "Alice Alice 03:07 PM 03:07 PM"

    def test_name_containing_placeholder_text(self, renderer):
        # {name} runs first, so a name that looks like {time} gets expanded
        odd = create_session("u1", "{time}")
        rule = Rule("greet", ["hello"], ["Hi {name}"])
        assert renderer.render(rule, odd, AFTERNOON) == "Hi 03:07 PM"

    def test_empty_responses(self, renderer, session):
        rule = Rule("silent", ["hello"], [])

        with pytest.raises(EmptyTemplate) as exc_info:
            renderer.render(rule, session)

        assert exc_info.value.details["intent"] == "silent"

    def test_empty_template_string(self, renderer, session):
        assert renderer.render(Rule("blank", ["x"], [""]), session) == ""


class TestSelectors:
    """Tests for response selection strategies."""

    def test_first(self):
        rule = Rule("r", [], ["a", "b"])
        assert FirstResponseSelector().select(rule) == "a"

    def test_random_is_seedable(self):
        rule = Rule("r", [], ["a", "b", "c", "d"])
        one = RandomResponseSelector(random.Random(7))
        two = RandomResponseSelector(random.Random(7))
        first = [one.select(rule) for _ in range(5)]
        second = [two.select(rule) for _ in range(5)]
        assert first == second
        assert all(choice in rule.responses for choice in first)

    def test_round_robin(self):
        selector = RoundRobinResponseSelector()
        rule = Rule("r", [], ["a", "b", "c"])
        other = Rule("o", [], ["x", "y"])

        picks = [selector.select(rule) for _ in range(4)]

        assert picks == ["a", "b", "c", "a"]
        assert selector.select(other) == "x"

    def test_base_selector_is_abstract(self):
        with pytest.raises(TypeError):
            ResponseSelector()

    def test_round_robin_reset(self):
        selector = RoundRobinResponseSelector()
        rule = Rule("r", [], ["a", "b"])
        selector.select(rule)

        selector.reset()

        assert selector._positions == {}
        assert selector.select(rule) == "a"

    def test_renderer_reset_restarts_cycle(self, session):
        renderer = ResponseRenderer(RoundRobinResponseSelector())
        rule = Rule("greet", ["hi"], ["one", "two"])
        renderer.render(rule, session)

        renderer.reset()

        assert renderer.render(rule, session) == "one"

    def test_renderer_uses_selector(self, session):
        renderer = ResponseRenderer(RoundRobinResponseSelector())
        rule = Rule("greet", ["hi"], ["Hi {name}", "Hey {name}"])

        assert renderer.render(rule, session) == "Hi Alice"
        assert renderer.render(rule, session) == "Hey Alice"

    @pytest.mark.parametrize("name,cls", [
        ("first", FirstResponseSelector),
        ("random", RandomResponseSelector),
        ("round_robin", RoundRobinResponseSelector),
    ])
    def test_create_selector(self, name, cls):
        assert isinstance(create_selector(name), cls)

    def test_create_selector_unknown(self):
        with pytest.raises(ConfigError):
            create_selector("weighted")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
