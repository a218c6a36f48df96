#!/usr/bin/env python3
"""
Rule Chatbot - Main Entry Point
===============================

Command-line interface for the rule-based chatbot.

Usage:
    python main.py                    # Interactive chat
    python main.py --tui              # Terminal UI
    python main.py --test "Hello"     # Reply to one message
    python main.py --list-intents     # Show the loaded intents
    python main.py --init             # Write a starter rules file
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from core.config import load_config, Config
from core.exceptions import ResponderError
from core.logging import setup_logging, get_logger, set_log_context
from rules.store import RuleStore, write_default_rules
from rules.templates import ResponseRenderer, create_selector
from services.responder import ChatResponder
from services.session import create_session

logger = get_logger("main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Rule Chatbot - pattern-matching conversational responder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Chat commands:
  exit            Quit the chat
  reload rules    Reload the rules file without restarting
  list intents    Show every intent in the active rules

Examples:
  python main.py --rules rules.yaml --user-name Alice
  python main.py --test "hi there"
        """
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--tui",
        action="store_true",
        help="Start terminal UI"
    )
    mode_group.add_argument(
        "--test",
        type=str,
        metavar="MESSAGE",
        help="Print the reply to a single message and exit"
    )
    mode_group.add_argument(
        "--list-intents",
        action="store_true",
        help="List intents in the rules file and exit"
    )
    mode_group.add_argument(
        "--init",
        action="store_true",
        help="Write a starter rules file if none exists"
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--rules",
        type=str,
        metavar="PATH",
        help="Path to rules file (JSON or YAML)"
    )
    parser.add_argument(
        "--user-id",
        type=str,
        help="Session user id"
    )
    parser.add_argument(
        "--user-name",
        type=str,
        help="Name used for {name} in responses"
    )
    parser.add_argument(
        "--selection",
        type=str,
        choices=["first", "random", "round_robin"],
        help="How to pick among a rule's responses (default: first)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides on top of the loaded configuration."""
    if args.rules:
        config.rules.path = args.rules
    if args.selection:
        config.rules.selection = args.selection
    if args.user_id:
        config.session.user_id = args.user_id
    if args.user_name:
        config.session.user_name = args.user_name
    if args.debug:
        config.debug = True
        config.logging.level = "DEBUG"
    config.validate()
    return config


def build_responder(config: Config) -> ChatResponder:
    """
    Load the rules and create the session for a chat.

    Raises:
        SourceUnavailable, MalformedRules: If the initial load fails
    """
    store = RuleStore(config.rules.path)
    store.load()

    session = create_session(config.session.user_id, config.session.user_name)
    set_log_context(user_id=session.user_id)

    renderer = ResponseRenderer(create_selector(config.rules.selection))
    return ChatResponder(store, session, renderer)


def run_chat(responder: ChatResponder, config: Config) -> None:
    """Interactive read-reply loop on stdin/stdout."""
    print(config.ui.welcome)

    while True:
        try:
            line = input(config.ui.prompt)
        except EOFError:
            print()
            break

        reply = responder.handle(line)
        print(f"{config.ui.bot_label}: {reply.text}")

        if reply.is_exit:
            break


def run_test_message(responder: ChatResponder, message: str) -> None:
    """Reply to one message."""
    reply = responder.handle(message)
    print(reply.text)
    logger.debug(f"Last intent: {responder.session.last_intent}")


def run_list_intents(responder: ChatResponder) -> None:
    print(responder.list_intents().text)


def run_init(config: Config) -> None:
    """Write the starter rules file."""
    path = Path(config.rules.path)
    if write_default_rules(path):
        print(f"✓ Created rules file: {path}")
    else:
        print(f"Rules file already exists: {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)

        setup_logging(
            log_dir=config.logging.log_dir or None,
            log_level=config.logging.level,
            json_format=config.logging.json_format,
            console_output=config.logging.console_output
        )
        logger.info(f"Starting {config.app_name} {config.version}")

        if args.init:
            run_init(config)
            return 0

        responder = build_responder(config)

        if args.tui:
            from ui.terminal.app import run_tui
            run_tui(responder, config)
        elif args.test is not None:
            run_test_message(responder, args.test)
        elif args.list_intents:
            run_list_intents(responder)
        else:
            run_chat(responder, config)

        return 0

    except ResponderError as e:
        logger.error(f"Startup failed: {e}")
        print(f"\nError: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())
