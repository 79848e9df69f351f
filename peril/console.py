"""Prompts, help text and other terminal output for clients and the server."""

from __future__ import annotations

import random
import sys
from typing import TextIO

from peril.gamestate import GameError

_MALICIOUS_LOGS = (
    "Never interrupt your enemy when he is making a mistake.",
    "The hardest thing of all for a soldier is to retreat.",
    "A soldier will fight long and hard for a bit of colored ribbon.",
    "It is well that war is so terrible, otherwise we should grow too fond of it.",
    "The art of war is simple enough. Find out where your enemy is. "
    "Get at him as soon as you can. Strike him as hard as you can, "
    "and keep moving on.",
    "All warfare is based on deception.",
)

_CLIENT_HELP = (
    "Possible commands:",
    "* move <location> <unitID> <unitID> <unitID>...",
    "    example:",
    "    move asia 1",
    "* spawn <location> <rank>",
    "    example:",
    "    spawn europe infantry",
    "* status",
    "* spam <n>",
    "    example:",
    "    spam 5",
    "* quit",
    "* help",
)

_SERVER_HELP = (
    "Possible commands:",
    "* pause",
    "* resume",
    "* quit",
    "* help",
)

_QUIT_MESSAGE = "I hate this game! (╯°□°)╯︵ ┻━┻"


def _emit(lines: tuple[str, ...]) -> str:
    """Write the lines to standard output and return the text written."""
    text = "".join(f"{line}\n" for line in lines)
    sys.stdout.write(text)
    sys.stdout.flush()
    return text


def print_client_help() -> str:
    """Show the commands a client accepts and return the text shown."""
    return _emit(_CLIENT_HELP)


def print_server_help() -> str:
    """Show the commands the server accepts and return the text shown."""
    return _emit(_SERVER_HELP)


def get_input(stream: TextIO | None = None) -> list[str]:
    """Prompt, read one line and return its words; empty at end of input."""
    print("> ", end="", flush=True)
    line = (stream if stream is not None else sys.stdin).readline()
    return line.split()


def client_welcome(stream: TextIO | None = None) -> str:
    """Greet the player and return the username they enter."""
    print("Welcome to the Peril client!")
    print("Please enter your username:")
    words = get_input(stream)
    if not words:
        raise GameError("you must enter a username. goodbye")
    username = words[0]
    print(f"Welcome, {username}!")
    print_client_help()
    return username


def get_malicious_log() -> str:
    """Return one of the quotes used to flood the game log."""
    return random.choice(_MALICIOUS_LOGS)


def print_quit() -> str:
    """Show the farewell message and return it."""
    return _emit((_QUIT_MESSAGE,))