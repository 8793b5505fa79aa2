"""Download-speed aggregation into a single bandwidth estimate."""

from __future__ import annotations

import math
from collections.abc import Iterable


class BandwidthEstimationError(RuntimeError):
    """Raised when no bandwidth estimate can be produced."""


class HarmonicBandwidthEstimator:
    """Estimate bandwidth as the harmonic mean of observed download speeds.

    Negative speeds mark failed measurements and are ignored.
    """

    def __init__(self) -> None:
        self.estimate: int | None = None

    def post(self, speeds: Iterable[float]) -> None:
        """Replace the current estimate with one computed from ``speeds``."""
        self.estimate = None
        observed = list(speeds)
        if not observed:
            raise BandwidthEstimationError("no download speeds to estimate from")
        valid = [speed for speed in observed if speed >= 0]
        if not valid:
            raise BandwidthEstimationError("no valid download speeds to estimate from")
        if any(speed == 0 for speed in valid):
            # An idle link dominates the harmonic mean.
            self.estimate = 0
            return
        reciprocal_sum = math.fsum(1.0 / speed for speed in valid)
        self.estimate = int(len(valid) / reciprocal_sum)

    def get(self) -> int:
        """Return the latest estimate."""
        if self.estimate is None:
            raise BandwidthEstimationError("no bandwidth estimate is available")
        return self.estimate