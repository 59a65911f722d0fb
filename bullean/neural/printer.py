"""Training progress reporting and validation metrics."""

from __future__ import annotations

import sys
from datetime import timedelta
from typing import Iterable, TextIO

from bullean.neural.activation import arg_max
from bullean.neural.core import Example, LossType, Mode
from bullean.neural.loss import get_loss
from bullean.neural.network import FFNN

_MIN_WIDTH = 16
_PADDING = 3


class _TabWriter:
    """Buffers tab-separated cells and aligns them into columns on flush."""

    def __init__(self, min_width: int, padding: int) -> None:
        self.min_width = min_width
        self.padding = padding
        self._pieces: list[str] = []

    def write(self, text: str) -> None:
        self._pieces.append(text)

    def flush(self, stream: TextIO) -> None:
        text = "".join(self._pieces)
        self._pieces.clear()
        *complete, partial = text.split("\n")
        rows = [line.split("\t") for line in complete]
        if partial:
            rows.append(partial.split("\t"))

        widths: list[int] = []
        for row in rows:
            for column, cell in enumerate(row[:-1]):
                needed = max(self.min_width, len(cell) + self.padding)
                if column == len(widths):
                    widths.append(needed)
                else:
                    widths[column] = max(widths[column], needed)

        out = []
        for number, row in enumerate(rows):
            cells = [cell.ljust(width) for cell, width in zip(row[:-1], widths)]
            line = "".join(cells) + row[-1]
            out.append(line + ("\n" if number < len(complete) else ""))
        stream.write("".join(out))
        stream.flush()


def _fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if rest == 0:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{str(rest).rjust(digits, '0').rstrip('0')}"


def _format_duration(seconds: float) -> str:
    nanos = round(seconds * 1e9)
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000:
        return f"{sign}{nanos}ns"
    if nanos < 1_000_000:
        return f"{sign}{_fraction(nanos, 1_000)}µs"
    if nanos < 1_000_000_000:
        return f"{sign}{_fraction(nanos, 1_000_000)}ms"
    hours, rest = divmod(nanos, 3_600 * 10**9)
    minutes, rest = divmod(rest, 60 * 10**9)
    text = sign
    if hours:
        text += f"{hours}h"
    if hours or minutes:
        text += f"{minutes}m"
    return text + _fraction(rest, 10**9) + "s"


class StatsPrinter:
    """Prints a table of epochs, elapsed time, loss and accuracy.

    Output is written to `stream`, or to standard output when none is given.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream
        self._writer = _TabWriter(_MIN_WIDTH, _PADDING)

    def _target(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def init(self, network: FFNN) -> None:
        """Queue the table header; it is printed with the first progress row."""
        loss = str(LossType(network.config.loss))
        self._writer.write(f"Epochs\tElapsed\tLoss ({loss})\t")
        if network.config.mode == Mode.MULTI_CLASS:
            self._writer.write("Accuracy\t\n---\t---\t---\t---\t\n")
        else:
            self._writer.write("\n---\t---\t---\t\n")

    def print_progress(
        self,
        network: FFNN,
        validation: Iterable[Example],
        elapsed: timedelta | float,
        iteration: int,
    ) -> float:
        """Print one row for `iteration` and return the validation accuracy."""
        examples = list(validation)
        seconds = elapsed.total_seconds() if isinstance(elapsed, timedelta) else float(elapsed)
        self._writer.write(
            f"{iteration}\t{_format_duration(seconds)}\t"
            f"{cross_validate(network, examples):.4f}\t{format_accuracy(network, examples)}\n"
        )
        self._writer.flush(self._target())
        return accuracy(network, examples)


def format_accuracy(network: FFNN, validation: Iterable[Example]) -> str:
    """The accuracy cell for multi-class networks, empty otherwise."""
    if network.config.mode == Mode.MULTI_CLASS:
        return f"{accuracy(network, validation):.2f}\t"
    return ""


def accuracy(network: FFNN, validation: Iterable[Example]) -> float:
    """Share of examples whose predicted class matches the response."""
    examples = list(validation)
    if not examples:
        raise ValueError("no validation examples")
    correct = sum(
        arg_max(example.response) == arg_max(network.predict(example.input))
        for example in examples
    )
    return correct / len(examples)


def cross_validate(network: FFNN, validation: Iterable[Example]) -> float:
    """The network's loss over the validation examples."""
    examples = list(validation)
    predictions = [network.predict(example.input) for example in examples]
    responses = [example.response for example in examples]
    return get_loss(network.config.loss).f(predictions, responses)