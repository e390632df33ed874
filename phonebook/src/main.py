"""Terminal front end for the phonebook.

Usage:
    python -m phonebook.src.main [--base-url URL] [--notification-seconds N]

Commands at the prompt:
    list                     show the (filtered) list
    filter <text>            filter names, case-insensitive
    add <name> <number>      add a person, or replace an existing number
    delete <name>            delete a person
    quit
"""

import argparse
import asyncio
import sys
from typing import Callable, Optional, Sequence

from pydantic import ValidationError

from shared.logging import configure_logging, get_logger

from phonebook.src.config import (
    NOTIFICATION_MAX_SECONDS, NOTIFICATION_MIN_SECONDS, Config, get_config
)
from phonebook.src.services.persons_client import PersonsClient
from phonebook.src.view import Notification, Notifier, PhonebookView, render

logger = get_logger(__name__)


def notification_window(value: str) -> float:
    """argparse type accepting only durations ``Config`` allows."""
    try:
        return Config(notification_seconds=value).notification_seconds
    except ValidationError:
        raise argparse.ArgumentTypeError(
            f"expected seconds between {NOTIFICATION_MIN_SECONDS} and {NOTIFICATION_MAX_SECONDS}, got {value!r}"
        )


def _build_parser() -> argparse.ArgumentParser:
    config = get_config()

    parser = argparse.ArgumentParser(
        prog="phonebook",
        description="Browse and edit the phonebook served by the bloglist service.",
    )
    parser.add_argument(
        "--base-url",
        default=config.base_url,
        help="Service root URL (default: %(default)s).",
    )
    parser.add_argument(
        "--notification-seconds",
        type=notification_window,
        default=config.notification_seconds,
        help="How long notifications stay visible (default: %(default)s).",
    )
    return parser


async def ask(question: str) -> bool:
    answer = await asyncio.to_thread(input, f"{question} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


async def handle_command(view: PhonebookView, line: str) -> bool:
    """
    Run one prompt command against the view.

    Returns:
        False when the user asked to quit
    """
    command, _, rest = line.strip().partition(" ")
    rest = rest.strip()

    if command in ("quit", "exit"):
        return False

    if command == "filter":
        view.set_filter(rest)
    elif command == "add":
        name, _, number = rest.rpartition(" ")
        if not name:
            print("usage: add <name> <number>")
            return True
        view.new_name, view.new_number = name.strip(), number
        await view.submit()
    elif command == "delete":
        person = view.find_by_name(rest)
        if person is None:
            print(f"no entry named {rest!r}")
            return True
        await view.delete(person.id)
    elif command == "list":
        await view.load()
    elif command:
        print(f"unknown command: {command}")
        return True

    print(render(view))
    return True


def redraw_when_cleared(view: PhonebookView) -> Callable[[Optional[Notification]], None]:
    """Notifier listener reprinting the list once the banner times out."""

    def redraw(notification: Optional[Notification]) -> None:
        if notification is None:
            print(f"\n{render(view)}\n> ", end="", flush=True)

    return redraw


async def run(base_url: str, notification_seconds: float) -> None:
    config = get_config()

    async with PersonsClient(
        base_url,
        persons_path=config.persons_path,
        timeout=config.request_timeout
    ) as client:
        view = PhonebookView(client, Notifier(notification_seconds), confirm=ask)
        view.notifier.subscribe(redraw_when_cleared(view))
        await view.load()
        print(render(view))

        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            if not await handle_command(view, line):
                break


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    config = get_config()
    configure_logging(
        log_level=config.log_level,
        json_logs=False,
        service_name="phonebook",
        stream=sys.stderr,
    )

    args = _build_parser().parse_args(argv)

    try:
        asyncio.run(run(args.base_url, args.notification_seconds))
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt_received")
    return 0


if __name__ == "__main__":
    sys.exit(main())
