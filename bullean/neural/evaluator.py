"""An ensemble of models trained on disjoint data slices and combined by vote."""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from bullean.neural.core import Examples, Neural

logger = logging.getLogger(__name__)


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


class Evaluator:
    """Trains several models side by side and predicts by majority vote."""

    def __init__(self, neurals: list[Neural]) -> None:
        self.neurals = neurals

    def _trained_count(self) -> int:
        count = len(self.neurals)
        return count - 1 if count > 3 else count

    def train(self, train_data: Sequence, validate_data: Sequence) -> None:
        """Give each model an equal consecutive slice of the data and train them in parallel.

        With more than three models the last one is left untrained.
        """
        count = self._trained_count()
        if count == 0:
            raise ValueError("no models to train")
        train_data = Examples(train_data)
        validate_data = Examples(validate_data)
        t_amount = len(train_data) // count
        v_amount = len(validate_data) // count

        with ThreadPoolExecutor(max_workers=count) as pool:
            futures = {
                pool.submit(
                    neural.trainer.train,
                    neural.model,
                    train_data[i * t_amount : (i + 1) * t_amount],
                    validate_data[i * v_amount : (i + 1) * v_amount],
                    neural.iterations,
                ): neural
                for i, neural in enumerate(self.neurals[:count])
            }
            for future, neural in futures.items():
                _, neural.model = future.result()

    def predict(self, input_values: Sequence[float]) -> list[float]:
        """Vote buy / sell / hold; returns [1,0,0], [0,1,0] or [0,0,1]."""
        buys = sells = holds = 0
        predictions = []
        for neural in self.neurals:
            prediction = neural.model.predict(list(input_values))
            predictions.append(prediction)
            if _round_half_away(prediction[0]) == 1:
                buys += 1
            elif _round_half_away(prediction[1]) == 1:
                sells += 1
            else:
                holds += 1
        logger.debug("ensemble predictions: %s", predictions)

        if buys > sells and buys > holds:
            return [1.0, 0.0, 0.0]
        if sells > buys and sells > holds:
            return [0.0, 1.0, 0.0]
        return [0.0, 0.0, 1.0]