"""Level-of-detail selection front end over the selection algorithms."""

from __future__ import annotations

import random
from collections.abc import Sequence
from enum import Enum

from pcstream.algorithm import DEFAULT_NUMBER_LABELS, Metadata, dp_based_solution


class LodSelectorType(Enum):
    """Available selection strategies."""

    DP_BASED = "dp_based"
    LM_BASED = "lm_based"
    EQUAL = "equal"
    HYBRID = "hybrid"


class LodSelectionError(RuntimeError):
    """Raised when a selection cannot be made or is not yet available."""


class LodSelector:
    """Pick a quality version for every object of a segment.

    An unrecognised ``kind`` falls back to the LM-based strategy.
    """

    def __init__(self, kind: LodSelectorType | str = LodSelectorType.DP_BASED) -> None:
        try:
            self.kind = LodSelectorType(kind)
        except ValueError:
            self.kind = LodSelectorType.LM_BASED
        self.n_mod = 0
        self.n_ver = 0
        self.selection: list[int] | None = None
        self.number_labels = DEFAULT_NUMBER_LABELS
        self.rng = random.Random()

    def _require_supported(self) -> None:
        if self.kind is not LodSelectorType.DP_BASED:
            raise LodSelectionError(f"{self.kind.value} selection is not available")

    def post(
        self,
        n_mod: int,
        n_ver: int,
        metadata: Metadata,
        screen_ratio: Sequence[float],
        bandwidth: float,
    ) -> None:
        """Compute a selection from segment metadata, screen ratios and bandwidth."""
        self._require_supported()
        self.n_mod = n_mod
        self.n_ver = n_ver
        self.selection = dp_based_solution(
            n_mod,
            n_ver,
            metadata,
            screen_ratio,
            bandwidth,
            number_labels=self.number_labels,
            rng=self.rng,
        )

    def get(self) -> list[int]:
        """Return the latest selection."""
        self._require_supported()
        if self.selection is None:
            raise LodSelectionError("no selection has been computed")
        return list(self.selection)