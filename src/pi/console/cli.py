"""Demo front end for pi-console. Uses Click for argument parsing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import click

from pi.console.config import ConsoleOptions
from pi.console.log import ConsoleLogHandler
from pi.console.session import ConsoleSession

DEMO_VERSION = "0.1.0"

ROOT_COMMANDS = ["version", "exit", "help", "config", "app", "add-node"]
CONFIG_COMMANDS = ["start", "stop", "restart", "status", "set"]
CONFIG_SET_OPTIONS = [
    ("port", "Set port number."),
    ("host", "Set host address."),
    ("timeout", "Set timeout."),
]
# Long entries to exercise hint truncation
LONG_SAMPLE_COMMANDS = [
    "very-long-command-name",
    "another-extremely-long-option",
    "super-duper-extra-long-command",
]

_CONFIG_MESSAGES = {
    "config start": "Starting service...",
    "config stop": "Stopping service...",
    "config restart": "Restarting service...",
    "config status": "Service is running.",
    "config set port": "Setting port configuration...",
    "config set host": "Setting host configuration...",
    "config set timeout": "Setting timeout configuration...",
}


@dataclass
class DemoState:
    node_counter: int = 0


def register_demo_completions(session: ConsoleSession) -> None:
    """Register the demo command vocabulary."""
    session.register_tab_completions("", ROOT_COMMANDS)
    session.register_tab_completions("config", CONFIG_COMMANDS)
    session.register_tab_completions_with_desc(
        "add-node ",
        [("", "int: Type should be an integer here.")],
    )
    session.register_tab_completions_with_desc(
        "app",
        [("set-name ", "Set the name of the application.")],
    )
    session.register_tab_completions_with_desc("config set", CONFIG_SET_OPTIONS)
    session.register_tab_completions("", LONG_SAMPLE_COMMANDS)


def handle_command(session: ConsoleSession, line: str, state: DemoState) -> bool:
    """Run one demo command. Returns ``True`` when the demo should exit."""
    command = line.strip()
    parts = command.split()

    if command == "version":
        session.info(f"Demo - v{DEMO_VERSION}")
        return False

    if command == "exit":
        session.info("Exiting...")
        return True

    if command == "help":
        session.info("Commands: " + ", ".join(ROOT_COMMANDS))
        return False

    if command.startswith("app set-name"):
        if len(parts) != 3:
            session.info("Usage: app set-name <name>")
            return False
        session.options.app_name = parts[2]
        session.info(f"App name set to: {parts[2]}")
        return False

    for prefix, message in _CONFIG_MESSAGES.items():
        if command.startswith(prefix):
            session.info(message)
            return False

    if command.startswith("add-node"):
        if len(parts) != 2:
            session.info("Usage: add-node <number>")
            return False
        try:
            count = int(parts[1])
        except ValueError:
            session.info("add-node argument must be an integer")
            return False

        start = state.node_counter + 1
        end = state.node_counter + count
        session.register_tab_completions("", [f"node{i}" for i in range(start, end + 1)])
        state.node_counter = end
        session.info(f"Added nodes node{start} to node{end}.")
        return False

    session.info(f"You entered: {line}")
    return False


async def run_demo(session: ConsoleSession) -> None:
    state = DemoState()
    session.enable_tab_completion()

    session.start("Welcome to pi-console!")
    try:
        if session.is_tab_completion_enabled:
            session.info("Tab completion enabled!")
        register_demo_completions(session)
        session.debug("System initialized")

        while True:
            line = await session.read_input()
            if line is None or handle_command(session, line, state):
                break
    finally:
        session.stop("Goodbye!")


def build_options(
    prompt: str | None,
    max_hints: int | None,
    max_hint_length: int | None,
    no_debounce: bool,
) -> ConsoleOptions:
    """Merge command-line flags over the ``PI_CONSOLE_*`` environment."""
    overrides: dict[str, object] = {"debounce": not no_debounce}
    if prompt is not None:
        overrides["prompt"] = prompt
    if max_hints is not None:
        overrides["max_hints"] = max_hints
    if max_hint_length is not None:
        overrides["max_hint_length"] = max_hint_length
    return ConsoleOptions.from_env(**overrides)


@click.command()
@click.option("--prompt", default=None, help="Prompt shown before the input")
@click.option("--max-hints", type=int, default=None, help="Completion hints shown at once")
@click.option(
    "--max-hint-length",
    type=int,
    default=None,
    help="Truncate completion hints longer than this",
)
@click.option("--no-debounce", is_flag=True, help="Process duplicated key events")
@click.option("-v", "--verbose", is_flag=True, help="Show library debug logging in the console")
def main(prompt, max_hints, max_hint_length, no_debounce, verbose):
    """Interactive pi-console demo with tab completion."""
    options = build_options(prompt, max_hints, max_hint_length, no_debounce)
    session = ConsoleSession(options=options)

    handler: ConsoleLogHandler | None = None
    if verbose:
        handler = ConsoleLogHandler(session)
        pi_logger = logging.getLogger("pi")
        pi_logger.addHandler(handler)
        pi_logger.setLevel(logging.DEBUG)

    try:
        asyncio.run(run_demo(session))
    finally:
        if handler is not None:
            logging.getLogger("pi").removeHandler(handler)


if __name__ == "__main__":
    main()
