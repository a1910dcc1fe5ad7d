"""
Terminal front end for Wumpus World.

Draws the board, reads one key per turn and forwards it to the engine.
The front end never changes game state itself.
"""

from typing import Callable, Dict, List, Optional
import argparse
import logging
import sys

from engine import GameEngine, InvalidActionError, new_game
from display import BoardRenderer, get_renderer

logger = logging.getLogger(__name__)

KEY_BINDINGS: Dict[str, str] = {
    'w': 'up',
    'a': 'left',
    's': 'down',
    'd': 'right',
    'g': 'pick_up',
    'f': 'shoot',
    'e': 'sense',
    'r': 'restart',
}

QUIT_KEYS = ('q', 'quit', 'exit')

HELP_TEXT = "Keys: w/a/s/d move, g pick up gold, f shoot arrow, e sense, r restart, q quit"


def resolve_command(key: str) -> str:
    """Map a key (or a full action name) to an action name."""
    key = key.strip().lower()
    if key in KEY_BINDINGS:
        return KEY_BINDINGS[key]
    if key in KEY_BINDINGS.values():
        return key
    raise InvalidActionError(f"Unknown command: {key!r}")


def run(
    engine: GameEngine,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    renderer: Optional[BoardRenderer] = None,
) -> int:
    """
    Play until the user quits or input runs out.

    Returns:
        Number of actions applied
    """
    renderer = renderer or get_renderer()
    applied = 0

    output_fn(HELP_TEXT)
    while True:
        output_fn(renderer.render_screen(engine.get_state()))

        try:
            key = input_fn('> ')
        except EOFError:
            break

        if key.strip().lower() in QUIT_KEYS:
            break

        try:
            action = resolve_command(key)
        except InvalidActionError as e:
            output_fn(f"{e}. {HELP_TEXT}")
            continue

        if action not in engine.get_valid_actions():
            logger.debug("Ignoring disabled action %s", action)
            output_fn(f"'{action}' is not available right now.")
            continue

        engine.take_action(action)
        applied += 1

    return applied


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Wumpus World in the terminal")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible board")
    parser.add_argument("--verbose", action="store_true", help="Log game transitions")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level)
    # basicConfig skips the level when handlers are already installed
    logging.getLogger().setLevel(level)

    engine = new_game(seed=args.seed)
    run(engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
