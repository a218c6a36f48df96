"""
Configuration Management - YAML-based configuration with environment overrides
=============================================================================

This module handles all configuration aspects including:
- Loading from YAML files
- Environment variable overrides
- Default values
- Configuration validation
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, asdict

from .exceptions import ConfigError

ENV_PREFIX = "RULE_CHATBOT_"
SELECTION_STRATEGIES = ("first", "random", "round_robin")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class RulesConfig:
    """
    Rule source configuration.

    Controls where rules are loaded from and how a response
    variant is picked when a rule declares several.
    """
    path: str = "rules_with_patterns.json"
    selection: str = "first"  # first, random, round_robin

    def validate(self) -> None:
        """Validate rule source settings."""
        if not self.path:
            raise ConfigError("rules.path must not be empty")

        if self.selection not in SELECTION_STRATEGIES:
            raise ConfigError(
                f"Invalid selection strategy: {self.selection}",
                {"allowed": list(SELECTION_STRATEGIES)}
            )


@dataclass
class SessionConfig:
    """Identity of the single conversation session."""
    user_id: str = "user123"
    user_name: str = "User"

    def validate(self) -> None:
        if not self.user_id:
            raise ConfigError("session.user_id must not be empty")


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Console output is off by default because the chat itself
    writes to the terminal.
    """
    level: str = "INFO"
    log_dir: str = ""
    json_format: bool = False
    console_output: bool = False

    def validate(self) -> None:
        if self.level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.level}")


@dataclass
class UIConfig:
    """Terminal presentation settings."""
    prompt: str = "You: "
    bot_label: str = "Chatbot"
    welcome: str = "Welcome to Rule Chatbot! Type 'exit' to quit."

    def validate(self) -> None:
        pass


@dataclass
class Config:
    """
    Main configuration container.

    Aggregates all configuration sections into a single object
    and provides methods for loading, saving, and validating.
    """
    app_name: str = "Rule Chatbot"
    version: str = "1.0.0"
    debug: bool = False

    rules: RulesConfig = field(default_factory=RulesConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Set at runtime
    config_dir: str = ""

    def validate(self) -> None:
        """
        Validate all configuration sections.

        Raises:
            ConfigError: If any configuration section is invalid
        """
        self.rules.validate()
        self.session.validate()
        self.logging.validate()
        self.ui.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "app_name": self.app_name,
            "version": self.version,
            "debug": self.debug,
            "rules": asdict(self.rules),
            "session": asdict(self.session),
            "logging": asdict(self.logging),
            "ui": asdict(self.ui),
        }


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory path.

    Returns:
        Path to the configuration directory
    """
    if f"{ENV_PREFIX}CONFIG_DIR" in os.environ:
        return Path(os.environ[f"{ENV_PREFIX}CONFIG_DIR"])

    if "XDG_CONFIG_HOME" in os.environ:
        return Path(os.environ["XDG_CONFIG_HOME"]) / "rule-chatbot"

    return Path.home() / ".config" / "rule-chatbot"


def load_config(config_path: Optional[str] = None, load_env: bool = True) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    This function loads configuration in the following order:
    1. Default values from dataclass
    2. Values from YAML file
    3. Environment variable overrides

    Args:
        config_path: Path to configuration file (optional)
        load_env: Whether to load environment variable overrides

    Returns:
        Config object with loaded values

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    config = Config()
    config.config_dir = str(get_default_config_dir())

    if config_path:
        yaml_path = Path(config_path)
        if not yaml_path.exists():
            raise ConfigError("Config file not found", {"path": str(yaml_path)})
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    if yaml_path.exists():
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}", {"path": str(yaml_path)})
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {e}", {"path": str(yaml_path)})

        if not isinstance(yaml_config, dict):
            raise ConfigError("Config file must contain a mapping", {"path": str(yaml_path)})

        _apply_yaml_config(config, yaml_config)

    if load_env:
        _apply_env_overrides(config)

    config.validate()

    return config


def _apply_yaml_config(config: Config, yaml_config: Dict[str, Any]) -> None:
    """
    Apply YAML configuration values to Config object.

    Unknown keys are ignored.
    """
    for key in ("app_name", "version", "debug"):
        if key in yaml_config:
            setattr(config, key, yaml_config[key])

    for section in ("rules", "session", "logging", "ui"):
        values = yaml_config.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")

        section_obj = getattr(config, section)
        for key, value in values.items():
            if hasattr(section_obj, key):
                setattr(section_obj, key, value)


def _apply_env_overrides(config: Config) -> None:
    """
    Apply environment variable overrides to Config object.

    Environment variables follow the pattern: RULE_CHATBOT_SECTION_KEY
    For example: RULE_CHATBOT_RULES_PATH, RULE_CHATBOT_LOGGING_LEVEL
    """
    env_mappings = {
        "RULES_PATH": ("rules", "path"),
        "RULES_SELECTION": ("rules", "selection"),
        "SESSION_USER_ID": ("session", "user_id"),
        "SESSION_USER_NAME": ("session", "user_name"),
        "LOGGING_LEVEL": ("logging", "level"),
        "LOGGING_LOG_DIR": ("logging", "log_dir"),
        "LOGGING_JSON_FORMAT": ("logging", "json_format", bool),
        "LOGGING_CONSOLE_OUTPUT": ("logging", "console_output", bool),
    }

    for suffix, mapping in env_mappings.items():
        value = os.environ.get(ENV_PREFIX + suffix)
        if value is None:
            continue

        section, key = mapping[0], mapping[1]
        converter = mapping[2] if len(mapping) > 2 else str

        if converter == bool:
            converted = value.lower() in ("true", "1", "yes", "on")
        else:
            converted = converter(value)

        setattr(getattr(config, section), key, converted)


def save_config(config: Config, config_path: Optional[str] = None) -> None:
    """
    Save configuration to YAML file.

    Raises:
        ConfigError: If configuration cannot be saved
    """
    if config_path:
        yaml_path = Path(config_path)
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    try:
        yaml_path.parent.mkdir(parents=True, exist_ok=True)
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Failed to save config file: {e}", {"path": str(yaml_path)})


def create_default_config(config_dir: Optional[str] = None) -> Config:
    """
    Create a default configuration file.

    Args:
        config_dir: Directory to create configuration in (optional)

    Returns:
        Config object with default values
    """
    config = Config()
    config.config_dir = config_dir or str(get_default_config_dir())

    Path(config.config_dir).mkdir(parents=True, exist_ok=True)
    save_config(config)

    return config
