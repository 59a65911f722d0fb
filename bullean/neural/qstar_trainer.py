"""Trainer that fits a Q-learning agent on labelled examples."""

from __future__ import annotations

import math
import sys
from typing import Iterable, Mapping, TextIO

from bullean.neural.core import Example
from bullean.neural.qstar import Game, QStar, next_action


class QStarTrainer:
    """Plays one game per example and lets the agent learn from the signal."""

    def __init__(
        self,
        mapping: Mapping[float, float],
        debug: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.mapping = dict(mapping)
        self.debug = debug
        self.stream = stream

    def _print(self, text: str) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(text)

    def train(
        self,
        agent: QStar,
        train_data: Iterable[Example],
        validate_data: Iterable[Example],
        iterations: int,
    ) -> tuple[float, QStar]:
        """Run `iterations` passes over the data; return 0.0 and the agent."""
        if not isinstance(agent, QStar):
            raise TypeError("QStarTrainer can only train a QStar agent")
        examples = list(train_data)
        wins = 0
        last_wins = 0
        count = 0
        progress_at = len(examples)

        def progress() -> None:
            nonlocal last_wins
            if count > 0 and count % progress_at == 0:
                rate = (wins - last_wins) / progress_at * 100.0
                last_wins = wins
                self._print(
                    f"{count} games played: {wins} WINS {count - wins} LOSSES "
                    f"{rate:.0f}% WIN RATE\n"
                )

        for _ in range(iterations):
            count = 0
            for example in examples:
                signal = example.response[0]
                game = Game(example.input, self.debug, self.mapping, iterations, self.stream)
                game.log("Game created")

                action = next_action(agent, game)
                agent.learn(action, game, signal)

                if game.reward(action, signal) > 0.0:
                    game.log("%s was selected", action.action.as_float())
                game.log("%s was incorrect", action.action.as_float())

                progress()
                count += 1

        progress()

        rate = wins / count * 100.0 if count else math.nan
        self._print(
            f"\nAgent performance: {count} games played, {wins} WINS "
            f"{count - wins} LOSSES {rate:.0f}% WIN RATE\n"
        )
        return 0.0, agent