"""
Wumpus World - Game Engine

Core game state and action logic for a 4x4 Wumpus World.

This module is the single source of truth for:
- GameState dataclass (immutable; every action returns a new state)
- Board generation with an injectable random source
- Percept and outcome evaluation after every move
- Action handlers (move, pick up gold, shoot arrow, sense, restart)
"""

from dataclasses import dataclass, asdict, replace
from typing import Optional, Dict, Any, List, Tuple, Iterable
from enum import Enum
import logging
import random

logger = logging.getLogger(__name__)


# =============================================================================
# BOARD CONSTANTS
# Fixed for every game. Grid size and hazard counts are not configurable.
# =============================================================================

GRID_SIZE = 4
START = (0, 0)
PIT_COUNT = 3

# Move deltas (x grows to the right, y grows downward)
DIRECTIONS = {
    'up': (0, -1),
    'down': (0, 1),
    'left': (-1, 0),
    'right': (1, 0),
}

ACTIONS = ('up', 'down', 'left', 'right', 'pick_up', 'shoot', 'sense', 'restart')

MESSAGES = {
    'eaten': "\U0001f480 You were eaten by the Wumpus!",
    'pit': "\U0001f480 You fell into a pit!",
    'won': "\U0001f389 You returned home with the gold!",
    'gold': "\U0001fa99 You picked up the gold!",
    'hit': "\U0001f3af You killed the Wumpus!",
    'miss': "\u274c You missed the Wumpus.",
    'sense': "\U0001f441\ufe0f You sense: {percepts}",
    'nothing': "\U0001f441\ufe0f Nothing sensed.",
}

Cell = Tuple[int, int]


class Status(str, Enum):
    PLAYING = 'Playing'
    WON = 'Won'
    LOST = 'Lost'


class Percept(str, Enum):
    GLITTER = 'Glitter'
    STENCH = 'Stench'
    BREEZE = 'Breeze'


# =============================================================================
# GAME STATE DATACLASS
# =============================================================================

@dataclass(frozen=True)
class GameState:
    """
    Complete game state for one board.

    Frozen: handlers never mutate a state, they return a new one built
    with dataclasses.replace. Hazard and gold membership is computed by
    comparing positions, nothing is stored per cell.
    """

    gold: Cell
    monster: Cell
    pits: Tuple[Cell, ...]
    player: Cell = START

    # Inventory and hazard flags
    has_gold: bool = False
    monster_alive: bool = True
    arrow_used: bool = False

    # Derived at the player's cell, replaced after every move
    percepts: Tuple[Percept, ...] = ()

    status: Status = Status.PLAYING
    message: str = ''

    def __post_init__(self):
        """Validate cell shapes and bounds."""
        object.__setattr__(self, 'pits', tuple(self.pits))
        for cell in (self.gold, self.monster, self.player, *self.pits):
            _check_cell(cell)
        if len(set(self.pits)) != PIT_COUNT or len(self.pits) != PIT_COUNT:
            raise InvalidLayoutError(f"Expected {PIT_COUNT} distinct pits, got {self.pits!r}")
        object.__setattr__(self, 'status', Status(self.status))
        object.__setattr__(self, 'percepts', tuple(Percept(p) for p in self.percepts))

    def is_over(self) -> bool:
        return self.status is not Status.PLAYING

    def to_dict(self) -> Dict[str, Any]:
        """Serialize state to a plain dictionary (for rendering and diffs)."""
        data = asdict(self)
        data['status'] = self.status.value
        data['percepts'] = [p.value for p in self.percepts]
        return data


def _check_cell(cell) -> None:
    if (not isinstance(cell, tuple) or len(cell) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in cell)):
        raise InvalidCellError(f"Cell must be an (x, y) pair of ints: {cell!r}")
    x, y = cell
    if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
        raise InvalidCellError(f"Cell outside the {GRID_SIZE}x{GRID_SIZE} board: {cell!r}")


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_adjacent(a: Cell, b: Cell) -> bool:
    """Orthogonal neighbours only; the same cell and diagonals do not count."""
    return manhattan(a, b) == 1


def _clamp(value: int) -> int:
    return max(0, min(GRID_SIZE - 1, value))


# =============================================================================
# BOARD GENERATOR
# =============================================================================

def random_cell(exclude: Iterable[Cell], rng) -> Cell:
    """
    Draw a cell uniformly from the board, resampling until it is not excluded.

    Args:
        exclude: Cells already taken
        rng: Random source exposing randrange (random.Random or a stand-in)
    """
    taken = set(exclude)
    while True:
        cell = (rng.randrange(GRID_SIZE), rng.randrange(GRID_SIZE))
        if cell not in taken:
            return cell


def generate_board(rng=None) -> GameState:
    """
    Place gold, the Wumpus and the pits, and return a fresh game state.

    Gold excludes the start cell, the Wumpus excludes start and gold, each
    pit excludes everything placed before it.
    """
    rng = rng or random.Random()

    gold = random_cell([START], rng)
    monster = random_cell([START, gold], rng)
    pits: List[Cell] = []
    while len(pits) < PIT_COUNT:
        pits.append(random_cell([START, gold, monster, *pits], rng))

    state = GameState(gold=gold, monster=monster, pits=tuple(pits))
    logger.info("New board: gold=%s wumpus=%s pits=%s", gold, monster, pits)

    # Placing the player on the start cell counts as a position change
    return evaluate_percepts(state)


# =============================================================================
# EVALUATORS
# Run synchronously after every position change while the game is on.
# =============================================================================

def evaluate_percepts(state: GameState) -> GameState:
    """Recompute the percepts visible at the player's cell."""
    if state.is_over():
        return state

    percepts = []
    if not state.has_gold and state.player == state.gold:
        percepts.append(Percept.GLITTER)
    if state.monster_alive and is_adjacent(state.player, state.monster):
        percepts.append(Percept.STENCH)
    if any(is_adjacent(state.player, pit) for pit in state.pits):
        percepts.append(Percept.BREEZE)

    return replace(state, percepts=tuple(percepts))


def evaluate_outcome(state: GameState) -> GameState:
    """Check win/lose conditions. First match wins."""
    if state.is_over():
        return state

    if state.monster_alive and state.player == state.monster:
        logger.info("Game lost at %s: eaten by the Wumpus", state.player)
        return replace(state, status=Status.LOST, message=MESSAGES['eaten'])

    if state.player in state.pits:
        logger.info("Game lost at %s: fell into a pit", state.player)
        return replace(state, status=Status.LOST, message=MESSAGES['pit'])

    if state.has_gold and state.player == START:
        logger.info("Game won")
        return replace(state, status=Status.WON, message=MESSAGES['won'])

    return state


# =============================================================================
# ACTION HANDLERS
# Each takes a state and returns a state. A failed guard returns the
# input unchanged.
# =============================================================================

def move(state: GameState, dx: int, dy: int) -> GameState:
    """Step one cell in a cardinal direction, clamped to the board."""
    if (not all(isinstance(v, int) and not isinstance(v, bool) for v in (dx, dy))
            or (dx, dy) not in DIRECTIONS.values()):
        raise InvalidDirectionError(f"Not a cardinal step: {(dx, dy)!r}")

    if state.is_over():
        return state

    x, y = state.player
    state = replace(state, player=(_clamp(x + dx), _clamp(y + dy)))
    logger.debug("Player moved to %s", state.player)

    state = evaluate_percepts(state)
    return evaluate_outcome(state)


def pick_up_gold(state: GameState) -> GameState:
    """Take the gold when standing on it. Winning still needs a walk home."""
    if state.is_over() or state.has_gold or state.player != state.gold:
        return state

    state = replace(state, has_gold=True, message=MESSAGES['gold'])
    return evaluate_percepts(state)


def shoot_arrow(state: GameState) -> GameState:
    """Fire the single arrow. Hits only a live Wumpus in an adjacent cell."""
    if state.arrow_used or not state.monster_alive or state.is_over():
        return state

    if is_adjacent(state.player, state.monster):
        logger.debug("Arrow hit the Wumpus at %s", state.monster)
        state = replace(state, arrow_used=True, monster_alive=False, message=MESSAGES['hit'])
    else:
        state = replace(state, arrow_used=True, message=MESSAGES['miss'])
    return evaluate_percepts(state)


def sense(state: GameState) -> GameState:
    """Report the stored percepts without recomputing them."""
    if state.is_over():
        return state

    if state.percepts:
        names = ', '.join(p.value for p in state.percepts)
        return replace(state, message=MESSAGES['sense'].format(percepts=names))
    return replace(state, message=MESSAGES['nothing'])


def restart(state: Optional[GameState] = None, rng=None) -> GameState:
    """Throw the current board away and generate a new one."""
    return generate_board(rng)


def available_actions(state: GameState) -> List[str]:
    """Return the actions whose controls are enabled for this state."""
    if state.is_over():
        return ['restart']

    actions = ['up', 'down', 'left', 'right']
    if not state.has_gold:
        actions.append('pick_up')
    if not state.arrow_used and state.monster_alive:
        actions.append('shoot')
    actions.extend(['sense', 'restart'])
    return actions


def apply_action(state: GameState, action: str, rng=None) -> GameState:
    """Dispatch an action name to its handler."""
    if action in DIRECTIONS:
        return move(state, *DIRECTIONS[action])
    if action == 'pick_up':
        return pick_up_gold(state)
    if action == 'shoot':
        return shoot_arrow(state)
    if action == 'sense':
        return sense(state)
    if action == 'restart':
        return restart(state, rng)
    raise InvalidActionError(f"Unknown action: {action}")


# =============================================================================
# GAME ENGINE CLASS
# Owns the current state and random source for the view layer.
# =============================================================================

class GameEngine:
    """
    Holds one game session.

    The view layer reads snapshots and forwards action names; all rules
    live in the reducer functions above.
    """

    def __init__(self, state: Optional[GameState] = None, rng=None):
        self.rng = rng or random.Random()
        self.state = state or generate_board(self.rng)
        self.history: List[str] = []

    def take_action(self, action: str) -> Dict[str, Any]:
        """
        Apply one action.

        Args:
            action: One of ACTIONS

        Returns:
            Dict with the changed fields and the resulting status
        """
        start_state = self.state.to_dict()
        self.state = apply_action(self.state, action, self.rng)

        if action == 'restart':
            self.history = []
        else:
            self.history.append(action)

        return {
            'action': action,
            'state_changes': self._calculate_changes(start_state, self.state.to_dict()),
            'message': self.state.message,
            'percepts': [p.value for p in self.state.percepts],
            'status': self.state.status.value,
            'game_over': self.state.is_over(),
            'victory': self.state.status is Status.WON,
        }

    def _calculate_changes(self, start: Dict, end: Dict) -> Dict[str, Any]:
        """Calculate delta between two states."""
        changes = {}
        for key in start:
            if key in end and start[key] != end[key]:
                changes[key] = {'from': start[key], 'to': end[key]}
        return changes

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    def get_state(self) -> GameState:
        return self.state

    def is_game_over(self) -> bool:
        return self.state.is_over()

    def is_victory(self) -> bool:
        return self.state.status is Status.WON

    def get_valid_actions(self) -> List[str]:
        return available_actions(self.state)

    def get_summary(self) -> Dict[str, Any]:
        """Read-only view of what the player is allowed to see."""
        return {
            'player': self.state.player,
            'has_gold': self.state.has_gold,
            'arrow_used': self.state.arrow_used,
            'percepts': [p.value for p in self.state.percepts],
            'status': self.state.status.value,
            'message': self.state.message,
            'moves': len(self.history),
        }


# =============================================================================
# EXCEPTIONS
# =============================================================================

class InvalidActionError(ValueError):
    """Raised when an unknown action is requested."""
    pass


class InvalidDirectionError(InvalidActionError):
    """Raised when a move delta is not one of the four cardinal steps."""
    pass


class InvalidCellError(ValueError):
    """Raised when a cell is malformed or off the board."""
    pass


class InvalidLayoutError(ValueError):
    """Raised when a board does not have the fixed number of pits."""
    pass


# =============================================================================
# NEW GAME FACTORY
# =============================================================================

def new_game(seed: Optional[int] = None) -> GameEngine:
    """Create a new game, reproducible when a seed is given."""
    return GameEngine(rng=random.Random(seed))
