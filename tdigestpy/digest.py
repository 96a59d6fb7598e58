"""Merging t-digest: a compact, mergeable sketch of a distribution."""

from __future__ import annotations

import math
import operator
import sys
from dataclasses import dataclass

__all__ = ["Centroid", "DigestOverflowError", "TDigest"]

_CAPACITY_MULTIPLIER = 6
_CAPACITY_FIXED_OFFSET = 10
_MAX_COMPRESSION = (2**64 - 1) // 8 // _CAPACITY_MULTIPLIER - _CAPACITY_FIXED_OFFSET
_LLONG_MAX = 2**63 - 1
_LLONG_MIN = -(2**63)
_DBL_MAX = sys.float_info.max


class DigestOverflowError(ArithmeticError):
    """Raised when adding weight would overflow the digest's counters."""


@dataclass(frozen=True)
class Centroid:
    """A cluster of samples summarised by its mean and total weight."""

    mean: float
    weight: int


def _fits_long_long(value: int) -> bool:
    return _LLONG_MIN <= value <= _LLONG_MAX


def _scale_denominator(total_weight: float) -> float:
    """Return 2*pi*w*log(w), following IEEE semantics for w <= 0."""
    if total_weight < 0 or math.isnan(total_weight):
        return math.nan
    if total_weight == 0:
        return math.nan  # 0 * -inf
    if math.isinf(total_weight):
        return math.inf
    return 2 * math.pi * total_weight * math.log(total_weight)


def _check_overflow(unmerged_weight: float, total_weight: float) -> None:
    if unmerged_weight == math.inf or total_weight == math.inf:
        raise DigestOverflowError("weight overflows double precision")
    if _scale_denominator(total_weight) == math.inf:
        raise DigestOverflowError("scale denominator overflows double precision")


class TDigest:
    """Adaptive histogram holding merged centroids followed by buffered samples.

    ``len()`` of a digest is the number of centroids it currently holds.
    """

    def __init__(self, compression: float = 100) -> None:
        compression = float(compression)
        if math.isnan(compression) or compression < 0:
            raise ValueError(f"invalid compression: {compression!r}")
        if math.isinf(compression) or int(compression) > _MAX_COMPRESSION:
            raise ValueError(f"compression too large: {compression!r}")
        self._compression = compression
        self._capacity = _CAPACITY_MULTIPLIER * int(compression) + _CAPACITY_FIXED_OFFSET
        self._nodes: list[Centroid] = []
        self.reset()

    def reset(self) -> None:
        """Empty the digest, keeping its compression and capacity."""
        self._min = _DBL_MAX
        self._max = -_DBL_MAX
        self._nodes = []
        self._merged_count = 0
        self._merged_weight = 0
        self._unmerged_weight = 0
        self._total_compressions = 0

    @property
    def compression(self) -> float:
        return self._compression

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def min(self) -> float:
        """Smallest value seen; the largest finite float while empty."""
        return self._min

    @property
    def max(self) -> float:
        """Largest value seen; the most negative finite float while empty."""
        return self._max

    @property
    def merged_count(self) -> int:
        return self._merged_count

    @property
    def unmerged_count(self) -> int:
        return len(self._nodes) - self._merged_count

    @property
    def merged_weight(self) -> int:
        return self._merged_weight

    @property
    def unmerged_weight(self) -> int:
        return self._unmerged_weight

    @property
    def total_compressions(self) -> int:
        return self._total_compressions

    def add(self, value: float, weight: int = 1) -> None:
        """Add a sample with the given integer weight."""
        value = float(value)
        weight = operator.index(weight)
        if len(self._nodes) >= self._capacity - 1:
            self.compress()
        if len(self._nodes) >= self._capacity:
            raise DigestOverflowError("digest is full")
        new_unmerged = self._unmerged_weight + weight
        if not _fits_long_long(new_unmerged):
            raise DigestOverflowError("unmerged weight overflows")
        new_total = new_unmerged + self._merged_weight
        if not _fits_long_long(new_total):
            raise DigestOverflowError("total weight overflows")
        _check_overflow(float(new_unmerged), float(new_total))

        if value < self._min:
            self._min = value
        if value > self._max:
            self._max = value
        self._nodes.append(Centroid(value, weight))
        self._unmerged_weight = new_unmerged

    def compress(self) -> None:
        """Fold buffered samples into the merged centroids."""
        if self.unmerged_count == 0:
            return
        self._nodes.sort(key=lambda node: node.mean)
        total_weight = float(self._merged_weight) + float(self._unmerged_weight)
        _check_overflow(float(self._unmerged_weight), total_weight)
        if total_weight <= 1:
            return
        denominator = _scale_denominator(total_weight)
        if denominator == math.inf:
            raise DigestOverflowError("scale denominator overflows double precision")
        normalizer = self._compression / denominator
        if normalizer == math.inf:
            raise DigestOverflowError("normalizer overflows double precision")

        first, *rest = self._nodes
        cur_mean, cur_weight = first.mean, first.weight
        merged: list[Centroid] = []
        weight_so_far = 0.0
        for node in rest:
            proposed = float(cur_weight) + float(node.weight)
            z = proposed * normalizer
            q0 = weight_so_far / total_weight
            q2 = (weight_so_far + proposed) / total_weight
            if z <= q0 * (1 - q0) and z <= q2 * (1 - q2):
                cur_weight += node.weight
                delta = node.mean - cur_mean
                cur_mean += (delta * float(node.weight)) / float(cur_weight)
            else:
                weight_so_far += float(cur_weight)
                merged.append(Centroid(cur_mean, cur_weight))
                cur_mean, cur_weight = node.mean, node.weight
        merged.append(Centroid(cur_mean, cur_weight))

        self._nodes = merged
        self._merged_count = len(merged)
        self._merged_weight = int(total_weight)
        self._unmerged_weight = 0
        self._total_compressions += 1

    def merge(self, other: TDigest) -> None:
        """Add every centroid of ``other`` into this digest."""
        self.compress()
        other.compress()
        for node in list(other._nodes):
            self.add(node.mean, node.weight)

    def size(self) -> int:
        """Total weight of all samples added."""
        return self._merged_weight + self._unmerged_weight

    def centroid_count(self) -> int:
        """Number of centroids, merged and buffered."""
        return len(self._nodes)

    def centroids(self) -> tuple[Centroid, ...]:
        """All centroids: merged ones first, in mean order, then buffered ones."""
        return tuple(self._nodes)

    def _check_position(self, pos: int) -> int:
        pos = operator.index(pos)
        if not 0 <= pos < self._capacity:
            raise IndexError(f"centroid position {pos} out of range")
        return pos

    def centroid_weight_at(self, pos: int) -> int:
        """Weight of the centroid at ``pos``; 0 for an unused slot."""
        pos = self._check_position(pos)
        return self._nodes[pos].weight if pos < len(self._nodes) else 0

    def centroid_mean_at(self, pos: int) -> float:
        """Mean of the centroid at ``pos``; NaN beyond the merged centroids."""
        pos = self._check_position(pos)
        if pos > self._merged_count:
            return math.nan
        return self._nodes[pos].mean if pos < len(self._nodes) else 0.0

    def __len__(self) -> int:
        return len(self._nodes)