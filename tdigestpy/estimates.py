"""Distribution estimates read from a t-digest: CDF, quantiles, trimmed means."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import pairwise, takewhile

from .digest import Centroid, TDigest

__all__ = [
    "cdf",
    "quantile",
    "quantiles",
    "trimmed_mean",
    "trimmed_mean_symmetric",
]

_CDF_MEDIAN = 0.5


def _div(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics instead of raising on a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _cmax(x: float, y: float) -> float:
    return x if x > y else y


def _cmin(x: float, y: float) -> float:
    return x if x < y else y


def _ieee_floor(x: float) -> float:
    return x if math.isnan(x) or math.isinf(x) else float(math.floor(x))


def _ieee_ceil(x: float) -> float:
    return x if math.isnan(x) or math.isinf(x) else float(math.ceil(x))


def _weighted_average_sorted(x1: float, w1: float, x2: float, w2: float) -> float:
    x = _div(x1 * w1 + x2 * w2, w1 + w2)
    return _cmax(x1, _cmin(x, x2))


def _weighted_average(x1: float, w1: float, x2: float, w2: float) -> float:
    if x1 <= x2:
        return _weighted_average_sorted(x1, w1, x2, w2)
    return _weighted_average_sorted(x2, w2, x1, w1)


def _merged_nodes(digest: TDigest) -> tuple[Centroid, ...]:
    return digest.centroids()[: digest.merged_count]


def cdf(digest: TDigest, value: float) -> float:
    """Estimated fraction of the samples that are less than or equal to ``value``."""
    digest.compress()
    nodes = _merged_nodes(digest)
    if not nodes:
        return math.nan
    if value < digest.min:
        return 0.0
    if value > digest.max:
        return 1.0
    if len(nodes) == 1:
        width = digest.max - digest.min
        if value - digest.min <= width:
            return _CDF_MEDIAN
        return _div(value - digest.min, width)

    total = float(digest.merged_weight)

    left = nodes[0]
    left_weight = float(left.weight)
    if value < left.mean:
        width = left.mean - digest.min
        if width > 0:
            if value == digest.min:
                return _div(_CDF_MEDIAN, total)
            return _div(1 + (value - digest.min) / width * (left_weight / 2 - 1), total)
        return 0.0

    right = nodes[-1]
    right_weight = float(right.weight)
    if value > right.mean:
        width = digest.max - right.mean
        if width > 0:
            if value == digest.max:
                return 1 - _div(_CDF_MEDIAN, total)
            dq = _div(1 + (digest.max - value) / width * (right_weight / 2 - 1), total)
            return 1 - dq
        return 1.0

    weight_so_far = 0.0
    for idx, (node, nxt) in enumerate(pairwise(nodes)):
        if node.mean == value:
            # Treat every centroid sitting exactly at value as one.
            dw = sum(
                float(c.weight)
                for c in takewhile(lambda c: c.mean == value, nodes[idx:])
            )
            return _div(weight_so_far + dw / 2, total)
        if node.mean <= value < nxt.mean:
            node_weight = float(node.weight)
            next_weight = float(nxt.weight)
            if nxt.mean - node.mean > 0:
                # Singleton centroids hold all their weight exactly at their mean.
                left_excluded = 0.0
                right_excluded = 0.0
                if node_weight == 1:
                    if next_weight == 1:
                        return _div(weight_so_far + 1, total)
                    left_excluded = 0.5
                elif next_weight == 1:
                    right_excluded = 0.5
                dw = (node_weight + next_weight) / 2
                dw_no_singleton = dw - left_excluded - right_excluded
                base = weight_so_far + node_weight / 2 + left_excluded
                return _div(
                    base + dw_no_singleton * (value - node.mean) / (nxt.mean - node.mean),
                    total,
                )
            dw = (node_weight + next_weight) / 2
            return _div(weight_so_far + dw, total)
        weight_so_far += float(node.weight)
    return 1 - _div(_CDF_MEDIAN, total)


@dataclass
class _QuantileWalker:
    """Walks the merged centroids left to right, resolving ranks to values."""

    digest: TDigest
    nodes: Sequence[Centroid]
    weight_so_far: float
    position: int = 0

    def value_at(self, index: float) -> float:
        digest = self.digest
        nodes = self.nodes
        total = float(digest.merged_weight)
        left = nodes[0]
        left_weight = float(left.weight)

        if left_weight > 1 and index < left_weight / 2:
            # One sample sits at min, so interpolate with reduced weight.
            return digest.min + _div(index - 1, left_weight / 2 - 1) * (left.mean - digest.min)

        if index > total - 1:
            return digest.max

        right = nodes[-1]
        right_weight = float(right.weight)
        if right_weight > 1 and total - index <= right_weight / 2:
            return digest.max - _div(total - index - 1, right_weight / 2 - 1) * (
                digest.max - right.mean
            )

        while self.position < len(nodes) - 1:
            node = nodes[self.position]
            nxt = nodes[self.position + 1]
            node_weight = float(node.weight)
            next_weight = float(nxt.weight)
            dw = (node_weight + next_weight) / 2
            if self.weight_so_far + dw > index:
                left_unit = 0.0
                if node_weight == 1:
                    if index - self.weight_so_far < 0.5:
                        return node.mean
                    left_unit = 0.5
                right_unit = 0.0
                if next_weight == 1:
                    if self.weight_so_far + dw - index <= 0.5:
                        return nxt.mean
                    right_unit = 0.5
                z1 = index - self.weight_so_far - left_unit
                z2 = self.weight_so_far + dw - index - right_unit
                return _weighted_average(node.mean, z2, nxt.mean, z1)
            self.weight_so_far += dw
            self.position += 1

        z1 = index - total - right_weight / 2.0
        z2 = right_weight / 2 - z1
        return _weighted_average(right.mean, z1, digest.max, z2)


def _walker(digest: TDigest, nodes: Sequence[Centroid]) -> _QuantileWalker:
    return _QuantileWalker(digest, nodes, float(nodes[0].weight) / 2)


def quantile(digest: TDigest, q: float) -> float:
    """Estimated value below which the fraction ``q`` of the samples fall."""
    digest.compress()
    count = digest.centroid_count()
    if q < 0.0 or q > 1.0 or count == 0:
        return math.nan
    if count == 1:
        return digest.centroids()[0].mean
    index = q * float(digest.merged_weight)
    if index < 1:
        return digest.min
    nodes = _merged_nodes(digest)
    if not nodes:
        return digest.min
    return _walker(digest, nodes).value_at(index)


def quantiles(digest: TDigest, qs: Iterable[float]) -> list[float]:
    """Estimated values for a sequence of fractions, expected in ascending order."""
    digest.compress()
    qs = list(qs)
    nodes = _merged_nodes(digest)
    if not nodes:
        return [math.nan] * len(qs)
    if len(nodes) == 1:
        mean = nodes[0].mean
        return [math.nan if q < 0.0 or q > 1.0 else mean for q in qs]
    walker = _walker(digest, nodes)
    total = float(digest.merged_weight)
    return [walker.value_at(q * total) for q in qs]


def _trimmed_mean(digest: TDigest, leftmost_weight: float, rightmost_weight: float) -> float:
    count_done = 0.0
    trimmed_sum = 0.0
    trimmed_count = 0.0
    for node in _merged_nodes(digest):
        weight = float(node.weight)
        count_add = weight
        count_add -= _cmin(_cmax(0, leftmost_weight - count_done), count_add)
        count_add = _cmin(_cmax(0, rightmost_weight - count_done), count_add)
        count_done += weight
        trimmed_sum += node.mean * count_add
        trimmed_count += count_add
        if count_done >= rightmost_weight:
            break
    return _div(trimmed_sum, trimmed_count)


def trimmed_mean_symmetric(digest: TDigest, proportion_to_cut: float) -> float:
    """Mean after cutting the same fraction off both tails."""
    digest.compress()
    if digest.merged_count == 0 or proportion_to_cut < 0.0 or proportion_to_cut > 1.0:
        return math.nan
    if digest.merged_count == 1:
        return digest.centroids()[0].mean
    total = float(digest.merged_weight)
    leftmost = _ieee_floor(total * proportion_to_cut)
    rightmost = _ieee_ceil(total * (1.0 - proportion_to_cut))
    return _trimmed_mean(digest, leftmost, rightmost)


def trimmed_mean(digest: TDigest, leftmost_cut: float, rightmost_cut: float) -> float:
    """Mean of the samples between the ``leftmost_cut`` and ``rightmost_cut`` fractions."""
    digest.compress()
    if (
        digest.merged_count == 0
        or leftmost_cut < 0.0
        or leftmost_cut > 1.0
        or rightmost_cut < 0.0
        or rightmost_cut > 1.0
    ):
        return math.nan
    if digest.merged_count == 1:
        return digest.centroids()[0].mean
    total = float(digest.merged_weight)
    leftmost = _ieee_floor(total * leftmost_cut)
    rightmost = _ieee_ceil(total * rightmost_cut)
    return _trimmed_mean(digest, leftmost, rightmost)