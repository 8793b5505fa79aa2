"""Quality-version selection for several objects under a bandwidth budget.

The search is a depth-first pulse over a layered graph: one layer per
object, one node per quality version.  Partial paths are pruned by
per-node dominance labels, by a feasibility bound on the cheapest
completion, and by an upper bound on the best reachable value.
"""

from __future__ import annotations

import random
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

DEFAULT_NUMBER_LABELS = 20
_MIN_NUMBER_LABELS = 4

_FLOAT = r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)"
_PAIR = re.compile(rf"\s*({_FLOAT})\s*({_FLOAT})", re.IGNORECASE)

Metadata = bytes | bytearray | memoryview | str


def _as_text(metadata: Metadata) -> str:
    if isinstance(metadata, str):
        return metadata
    return bytes(metadata).decode("utf-8", errors="replace")


def parse_metadata(
    metadata: Metadata,
    n_mod: int,
    n_ver: int,
    weights: Sequence[float],
) -> list[list[tuple[float, float]]]:
    """Read the ``cost value`` table that follows a one-line header.

    Line ``t`` after the header describes version ``t % n_ver`` of object
    ``t // n_ver``; its value is scaled by that object's weight.  Lines
    that do not start with two numbers leave their slot at ``(0, 0)``.
    """
    if n_mod < 0 or n_ver < 0:
        raise ValueError("object and version counts must not be negative")
    if len(weights) < n_mod:
        raise ValueError("one weight is needed per object")
    table = [[(0.0, 0.0)] * n_ver for _ in range(n_mod)]
    lines = _as_text(metadata).split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for t, line in enumerate(lines[1:]):
        if t >= n_mod * n_ver:
            break
        match = _PAIR.match(line)
        if match is None:
            continue
        mod, ver = divmod(t, n_ver)
        table[mod][ver] = (float(match[1]), float(match[2]) * weights[mod])
    return table


@dataclass
class _Node:
    version: int
    cost: float
    value: float
    capacity: int
    minimum_cost: float = 0.0
    maximum_value: float = 0.0
    labels: list[tuple[float, float]] = field(default_factory=list)

    def is_dominated(self, cost: float, value: float, rng: random.Random) -> bool:
        """Check ``(cost, value)`` against stored labels, remembering it if not dominated."""
        for label_cost, label_value in self.labels:
            if (label_cost <= cost and label_value > value) or (
                label_cost < cost and label_value >= value
            ):
                return True
        self._remember(cost, value, rng)
        return False

    def _remember(self, cost: float, value: float, rng: random.Random) -> None:
        if len(self.labels) < self.capacity - 1:
            self.labels.append((cost, value))
            return
        indices = range(len(self.labels))
        cheapest = min(indices, key=lambda i: self.labels[i][0])
        richest = max(indices, key=lambda i: self.labels[i][1])
        candidates = [i for i in indices if i not in (cheapest, richest)]
        self.labels[rng.choice(candidates)] = (cost, value)


class _PulseSearch:
    def __init__(
        self,
        table: list[list[tuple[float, float]]],
        budget: float,
        number_labels: int,
        rng: random.Random,
    ) -> None:
        self.layers = [
            [_Node(ver, cost, value, number_labels) for ver, (cost, value) in enumerate(row)]
            for row in table
        ]
        self.budget = budget
        self.rng = rng
        self.best_value = 0.0
        self.best: list[int] | None = None
        for depth, layer in enumerate(self.layers):
            rest = self.layers[depth + 1 :]
            rest_cost = sum(later[0].cost for later in rest)
            rest_value = sum(later[-1].value for later in rest)
            for node in layer:
                node.minimum_cost = node.cost + rest_cost
                node.maximum_value = node.value + rest_value

    def run(self) -> list[int] | None:
        choices: list[int] = []
        for node in self.layers[0]:
            self._visit(0, node, 0.0, 0.0, choices)
        return self.best

    def _visit(
        self, depth: int, node: _Node, cost: float, value: float, choices: list[int]
    ) -> None:
        total_cost = cost + node.cost
        total_value = value + node.value
        # All three checks run, so labels are updated even on pruned paths.
        dominated = node.is_dominated(total_cost, total_value, self.rng)
        infeasible = cost + node.minimum_cost > self.budget
        unpromising = value + node.maximum_value <= self.best_value
        if dominated or infeasible or unpromising:
            return
        choices.append(node.version)
        try:
            if depth == len(self.layers) - 1:
                self.best = list(choices)
                self.best_value = total_value
                return
            for following in self.layers[depth + 1]:
                self._visit(depth + 1, following, total_cost, total_value, choices)
        finally:
            choices.pop()


def dp_based_solution(
    n_mod: int,
    n_ver: int,
    metadata: Metadata,
    screen_ratio: Sequence[float],
    bandwidth: float,
    number_labels: int = DEFAULT_NUMBER_LABELS,
    rng: random.Random | None = None,
) -> list[int]:
    """Choose one version per object maximising weighted value within ``bandwidth``.

    Objects for which no feasible improving path is found get version 0.
    """
    if number_labels < _MIN_NUMBER_LABELS:
        raise ValueError(f"number_labels must be at least {_MIN_NUMBER_LABELS}")
    table = parse_metadata(metadata, n_mod, n_ver, screen_ratio)
    if n_mod == 0 or n_ver == 0:
        return [0] * n_mod
    search = _PulseSearch(table, float(bandwidth), number_labels, rng or random.Random())
    best = search.run()
    return best if best is not None else [0] * n_mod