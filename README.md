# tdigestpy

A merging t-digest for Python: a small, mergeable summary of a stream of
numbers that answers quantile, CDF and trimmed-mean questions with high
accuracy at the tails.

Values are buffered as they arrive and periodically merged into a bounded set
of weighted centroids. The `compression` parameter (default 100) controls how
many centroids are kept: 100 is a common choice, 1000 is very large. A digest
holds at most `6 * int(compression) + 10` centroids, available as its
`capacity` property. A negative, NaN or infinite compression raises
`ValueError`.

## Installation

```
pip install .
```

No third-party dependencies are required.

## Usage

```python
from tdigestpy.digest import TDigest
from tdigestpy.estimates import cdf, quantile, quantiles, trimmed_mean, trimmed_mean_symmetric

digest = TDigest(100)
for value in range(1, 10_001):
    digest.add(float(value), 1)

median = quantile(digest, 0.5)
p01, p99 = quantiles(digest, [0.01, 0.99])
fraction_below = cdf(digest, 2500.0)
mean_without_tails = trimmed_mean(digest, 0.1, 0.9)
mean_symmetric = trimmed_mean_symmetric(digest, 0.1)

print(digest.size(), digest.centroid_count(), len(digest))
```

`add(value, weight=1)` takes an integer weight. `size()` is the total weight
added; `centroid_count()` and `len(digest)` are the number of centroids held,
merged and buffered.

Estimates on an empty digest, and quantile or trim fractions outside
`[0, 1]`, give `nan`. `quantiles()` walks the centroids once, so pass its
fractions in ascending order.

### Merging

Digests built on separate parts of a stream can be combined:

```python
left = TDigest(100)
right = TDigest(100)
# ... add values to each ...
left.merge(right)
```

`merge()` compresses both digests and then adds each centroid of `right` to
`left`.

### Inspecting the digest

`compress()` folds buffered values into centroids. `centroids()` returns a
tuple of `Centroid(mean, weight)` records: merged centroids first, in mean
order, then any buffered ones. `centroid_mean_at(pos)` and
`centroid_weight_at(pos)` read a single position; a position outside
`[0, capacity)` raises `IndexError`, an unused slot gives weight `0`, and a
mean past the merged centroids gives `nan`.

Read-only properties: `compression`, `capacity`, `min`, `max`,
`merged_count`, `unmerged_count`, `merged_weight`, `unmerged_weight` and
`total_compressions`. While the digest is empty, `min` is the largest finite
float and `max` the most negative one. `reset()` empties the digest while
keeping its compression.

### Errors

`add()` raises `tdigestpy.digest.DigestOverflowError` (a subclass of
`ArithmeticError`) when the new weight would overflow the digest's 64-bit
totals or double-precision arithmetic; the sample is then not added.
`merge()` raises the same error if one of its additions fails, after the
centroids before it have already been added.

## Example program

A demonstration that fills a digest of compression 500 with uniform random
values in `[0, 10)`, then prints the CDF of the first ten values and the
deciles:

```
tdigestpy-example
tdigestpy-example --samples 10000 --seed 42
```

`--samples` sets how many values are added (default 1,000,000, at least 10);
`--seed` makes the run repeatable.

## Running the tests

```
pip install ".[test]"
pytest
```