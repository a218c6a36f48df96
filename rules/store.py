"""
Rule Store - Loading and hot-reloading the active rule collection
=================================================================

Rules are read from a JSON or YAML file into an immutable tuple.
The store keeps exactly one active collection and swaps it as a whole:
a reload either commits a complete new collection or leaves the old
one in place.
"""

import json
import yaml
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from core.exceptions import MalformedRules, SourceUnavailable
from core.logging import get_logger
from .engine import Rule, RuleCollection

logger = get_logger("rules.store")

PathLike = Union[str, Path]
YAML_SUFFIXES = (".yaml", ".yml")

DEFAULT_RULES = [
    {
        "intent": "greet",
        "patterns": ["hello", "hi", "hey", "good morning"],
        "responses": [
            "Hello, {name}! How can I assist you today?",
            "Hi {name}! What can I do for you?"
        ]
    },
    {
        "intent": "time",
        "patterns": ["what time", "current time", "the time"],
        "responses": ["It's {time} right now, {name}."]
    },
    {
        "intent": "thanks",
        "patterns": ["thank you", "thanks", "thx"],
        "responses": ["You're welcome, {name}!"]
    },
    {
        "intent": "help",
        "patterns": ["help", "support", "assist"],
        "responses": [
            "I can greet you, tell you the time, or say goodbye. "
            "Type 'list intents' to see everything I understand."
        ]
    },
    {
        "intent": "farewell",
        "patterns": ["bye", "goodbye", "see you"],
        "responses": ["Goodbye, {name}! Have a great day!"]
    }
]


def _decode(path: Path, text: str) -> Any:
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except (yaml.YAMLError, RecursionError) as e:
            raise MalformedRules(f"Invalid YAML in rules file: {e}", {"path": str(path)})

    # ValueError covers JSONDecodeError and the integer digit limit
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as e:
        raise MalformedRules(f"Invalid JSON in rules file: {e}", {"path": str(path)})


def _records(path: Path, data: Any) -> List[Any]:
    # A bare list, or the {"rules": [...]} layout used in YAML configs
    if isinstance(data, dict) and "rules" in data:
        data = data["rules"]

    if not isinstance(data, list):
        raise MalformedRules(
            "Rules file must contain a list of rule records",
            {"path": str(path), "found": type(data).__name__}
        )
    return data


def load_rules(source: PathLike) -> RuleCollection:
    """
    Load a rule collection from a file.

    Files ending in .yaml/.yml are read as YAML, anything else as JSON.
    No semantic validation is done: empty patterns or responses,
    duplicate intents and empty strings are all accepted.

    Args:
        source: Path to the rules file

    Returns:
        Tuple of Rule in file order

    Raises:
        SourceUnavailable: If the file cannot be read
        MalformedRules: If the content cannot be decoded into rules
    """
    path = Path(source)

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedRules(f"Rules file is not valid UTF-8: {e}", {"path": str(path)})
    except OSError as e:
        raise SourceUnavailable(f"Cannot read rules file: {e}", {"path": str(path)})

    records = _records(path, _decode(path, text))

    rules = []
    for index, record in enumerate(records):
        try:
            rules.append(Rule.from_dict(record, index=index))
        except MalformedRules as e:
            e.details.setdefault("path", str(path))
            raise

    logger.debug(f"Loaded {len(rules)} rules from {path}")
    return tuple(rules)


def reload_rules(source: PathLike) -> RuleCollection:
    """
    Load a fresh rule collection for a hot reload.

    Has no side effects on any existing collection; committing the
    result is the caller's job (see RuleStore.reload).
    """
    return load_rules(source)


def write_default_rules(path: PathLike, overwrite: bool = False) -> bool:
    """
    Write the starter rule set to a file.

    The format follows the file suffix (YAML or JSON).

    Args:
        path: Destination file
        overwrite: Replace an existing file

    Returns:
        True if the file was written, False if it already existed
    """
    path = Path(path)
    if path.exists() and not overwrite:
        return False

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            yaml.dump({"rules": DEFAULT_RULES}, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(DEFAULT_RULES, f, indent=2)
            f.write("\n")

    logger.info(f"Wrote default rules to {path}")
    return True


class RuleStore:
    """
    Owner of the active rule collection.

    The collection is an immutable tuple held behind a single
    reference. Readers take a snapshot through ``rules``; a reload
    builds a complete new tuple first and only then rebinds the
    reference, so a snapshot is never partially updated.

    Example:
        store = RuleStore("rules_with_patterns.json")
        store.load()

        try:
            store.reload()
        except ResponderError as e:
            print(f"Failed to reload rules: {e}")  # old rules still active
    """

    def __init__(self, source: PathLike, rules: Optional[Iterable[Rule]] = None):
        """
        Initialize the store.

        Args:
            source: Path the rules are (re)loaded from
            rules: Optional initial collection; empty if omitted
        """
        self.source = Path(source)
        self._rules: RuleCollection = tuple(rules) if rules is not None else ()

    @property
    def rules(self) -> RuleCollection:
        """Current rule collection snapshot."""
        return self._rules

    def load(self) -> RuleCollection:
        """
        Load rules from the configured source and make them active.

        Raises:
            SourceUnavailable, MalformedRules: On failure; nothing is committed
        """
        self._rules = load_rules(self.source)
        logger.info(f"Loaded {len(self._rules)} rules from {self.source}")
        return self._rules

    def reload(self, source: Optional[PathLike] = None) -> RuleCollection:
        """
        Reload rules, committing only on success.

        Args:
            source: Optional new source; becomes the store's source on success

        Returns:
            The newly active collection

        Raises:
            SourceUnavailable, MalformedRules: On failure; the previous
            collection and source stay active
        """
        path = Path(source) if source is not None else self.source

        try:
            new_rules = reload_rules(path)
        except (SourceUnavailable, MalformedRules) as e:
            logger.error(f"Failed to reload rules from {path}: {e}")
            raise

        self._rules = new_rules
        self.source = path
        logger.info(f"Rules reloaded: {len(new_rules)} rules from {path}")
        return new_rules

    def replace(self, rules: Iterable[Rule]) -> RuleCollection:
        """Make an explicit collection active."""
        self._rules = tuple(rules)
        return self._rules

    def intents(self) -> List[str]:
        """List rule intents in collection order."""
        return [rule.intent for rule in self._rules]

    def __len__(self) -> int:
        return len(self._rules)
