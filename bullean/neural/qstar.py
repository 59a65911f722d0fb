"""Tabular Q-learning agent and the position-choosing game it plays."""

from __future__ import annotations

import math
import random
import sys
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence, TextIO, runtime_checkable

STARTING_LIVES = 6

LOST = 3
ACTIVE = 1
WON = 2

BUY = 1
SELL = -1

HIT_REWARD = 10.0
MISS_REWARD = -10.0


def _fmt(x: float) -> str:
    """Compact float text: integral values without a fractional part."""
    x = float(x)
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "+Inf" if x > 0 else "-Inf"
    if x.is_integer() and abs(x) < 1e21:
        return str(int(x))
    return repr(x)


def _fmt_list(values: Sequence[float]) -> str:
    return "[" + " ".join(_fmt(v) for v in values) + "]"


@runtime_checkable
class State(Protocol):
    """A model state with a stable text key and the actions open from it."""

    def __str__(self) -> str:
        ...

    def next(self) -> list["Action"]:
        ...


@runtime_checkable
class Action(Protocol):
    """An action identified by a float that can be applied to a state."""

    def as_float(self) -> float:
        ...

    def apply(self, state: Any) -> Any:
        ...


@runtime_checkable
class Rewarder(Protocol):
    """Scores an action taken in a state against a target signal."""

    def reward(self, action: "StateAction", signal: float) -> float:
        ...


@dataclass
class StateAction:
    """An action paired with the state it is taken in, and its Q-value."""

    state: Any
    action: Any
    value: float = 0.0


def next_action(agent: Any, state: Any) -> StateAction:
    """The highest-valued action for `state`; ties are broken at random.

    While the best value seen so far is exactly zero, every action is kept
    as a candidate.
    """
    best: list[StateAction] = []
    best_val = 0.0
    for action in state.next():
        val = agent.value(state, action)
        if best_val == 0.0:
            best.append(StateAction(state, action, val))
            best_val = val
        elif val > best_val:
            best = [StateAction(state, action, val)]
            best_val = val
        elif val == best_val:
            best.append(StateAction(state, action, val))
    if not best:
        raise ValueError("state offers no actions")
    return random.choice(best)


class QStar:
    """A Q-learning agent storing Q-values per state key and action value."""

    def __init__(
        self,
        lr: float,
        d: float,
        mapping: Mapping[float, float] | None = None,
        lives: int = STARTING_LIVES,
    ) -> None:
        self.q: dict[str, dict[float, float]] = {}
        self.lr = lr
        self.d = d
        self.mapping: dict[float, float] = dict(mapping) if mapping is not None else {}
        self.lives = lives

    def _actions(self, state_key: str) -> dict[float, float]:
        return self.q.setdefault(state_key, {})

    def learn(self, action: StateAction, rewarder: Any, signal: float) -> None:
        """Update the Q-value of `action` from the reward and the best next value."""
        current = str(action.state)
        following = str(action.action.apply(action.state))

        actions = self._actions(current)
        max_next = max([0.0, *self._actions(following).values()])

        key = action.action.as_float()
        current_val = actions.get(key, 0.0)
        actions[key] = current_val + self.lr * (
            rewarder.reward(action, signal) + self.d * max_next - current_val
        )

    def value(self, state: Any, action: Any) -> float:
        """The current Q-value of `action` in `state`."""
        return self._actions(str(state)).get(action.as_float(), 0.0)

    def predict(self, state: Sequence[float]) -> list[float]:
        """The best action for `state`, as a one-element list."""
        game = Game(list(state), False, self.mapping, self.lives)
        return [next_action(self, game).action.as_float()]

    def __str__(self) -> str:
        parts = []
        for key, actions in sorted(self.q.items()):
            inner = " ".join(f"{_fmt(k)}:{_fmt(v)}" for k, v in sorted(actions.items()))
            parts.append(f"{key}:map[{inner}]")
        return "map[" + " ".join(parts) + "]"


class Game:
    """An episode in which the agent chooses among the mapped positions."""

    def __init__(
        self,
        state: Sequence[float],
        debug: bool = False,
        positions: Mapping[float, float] | None = None,
        lives: int = STARTING_LIVES,
        stream: TextIO | None = None,
    ) -> None:
        self.debug = debug
        self.stream = stream
        self.state: list[float] = []
        self.lives = lives
        self.attempted: set[float] = set()
        self.positions: Mapping[float, float] = {}
        self.new(state, positions if positions is not None else {}, lives)

    def new(self, states: Sequence[float], positions: Mapping[float, float], lives: int) -> None:
        """Reset the game to a fresh episode."""
        self.state = list(states)
        self.lives = lives
        self.attempted = set()
        self.positions = positions

    def is_complete(self) -> int:
        """Episode status; episodes never report completion."""
        return 0

    def choose(self, position: float) -> bool:
        """Attempt `position`; each matching state entry costs a life."""
        self.attempted.add(position)
        hits = sum(1 for key in self.state if key == position)
        self.lives -= hits
        return hits > 0

    def reward(self, action: StateAction, signal: float) -> float:
        """HIT_REWARD when the chosen action matches `signal`, MISS_REWARD otherwise."""
        choice = float(action.action.as_float())
        if float(signal) == choice:
            return HIT_REWARD
        return MISS_REWARD

    def next(self) -> list["Choice"]:
        """A choice for every position not yet attempted."""
        return [Choice(position) for position in self.positions if position not in self.attempted]

    def log(self, msg: str, *args: Any) -> None:
        """Print a debug line when the game is in debug mode."""
        if not self.debug:
            return
        text = msg % args if args else msg
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(
            f"[GAME {_fmt_list(self.state)}] ({len(self.attempted)} moves, "
            f"{self.lives} lives) {text}\n"
        )

    def __str__(self) -> str:
        return _fmt_list(self.state)


@dataclass(frozen=True)
class Choice:
    """Choosing one position in a game."""

    position: float

    def as_float(self) -> float:
        return self.position

    def apply(self, state: Any) -> Game:
        """Apply the choice to a game and return that game."""
        if not isinstance(state, Game):
            raise TypeError("a choice can only be applied to a Game")
        state.choose(self.position)
        return state

    def __str__(self) -> str:
        return _fmt(self.position)