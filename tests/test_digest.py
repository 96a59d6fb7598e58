import math
import random
import sys

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tdigestpy.digest import Centroid, DigestOverflowError, TDigest


def _filled(values, compression=100):
    digest = TDigest(compression)
    for v in values:
        digest.add(v, 1)
    return digest


def test_empty_digest_state():
    digest = TDigest(100)
    assert digest.size() == 0
    assert digest.centroid_count() == 0
    assert len(digest) == 0
    assert digest.min == sys.float_info.max
    assert digest.max == -sys.float_info.max
    assert digest.centroids() == ()


def test_capacity_from_compression():
    assert TDigest(100).capacity == 610
    assert TDigest(100).compression == 100.0


@pytest.mark.parametrize("compression", [-5, float("nan"), float("inf"), 1e30])
def test_invalid_compression_rejected(compression):
    with pytest.raises(ValueError):
        TDigest(compression)


def test_add_tracks_min_max_and_size():
    digest = TDigest(100)
    digest.add(3.0, 2)
    digest.add(-1.5, 1)
    digest.add(7.25, 4)
    assert digest.min == -1.5
    assert digest.max == 7.25
    assert digest.size() == 7
    assert digest.unmerged_weight == 7
    assert digest.unmerged_count == 3


def test_add_rejects_non_integer_weight():
    digest = TDigest(100)
    with pytest.raises(TypeError):
        digest.add(1.0, 1.5)


def test_compress_sorts_and_preserves_weight():
    rng = random.Random(7)
    values = [rng.uniform(0, 10) for _ in range(500)]
    digest = _filled(values)
    digest.compress()
    means = [c.mean for c in digest.centroids()]
    assert means == sorted(means)
    assert sum(c.weight for c in digest.centroids()) == 500
    assert digest.size() == 500
    assert digest.merged_weight == 500
    assert digest.unmerged_count == 0
    assert digest.merged_count == digest.centroid_count()
    assert digest.total_compressions >= 1


def test_compress_without_pending_is_noop():
    digest = _filled([1.0, 2.0, 3.0])
    digest.compress()
    before = digest.centroids()
    count = digest.total_compressions
    digest.compress()
    assert digest.centroids() == before
    assert digest.total_compressions == count


def test_single_unit_sample_stays_unmerged():
    digest = TDigest(100)
    digest.add(4.0, 1)
    digest.compress()
    assert digest.merged_count == 0
    assert digest.unmerged_count == 1
    assert digest.centroids() == (Centroid(4.0, 1),)
    assert digest.total_compressions == 0


def test_centroid_count_stays_within_capacity():
    rng = random.Random(3)
    digest = TDigest(50)
    for _ in range(20000):
        digest.add(rng.gauss(0, 1), 1)
        assert digest.centroid_count() < digest.capacity
    assert digest.size() == 20000


def test_identical_values_keep_their_mean():
    digest = _filled([5.0] * 1000)
    digest.compress()
    assert all(c.mean == 5.0 for c in digest.centroids())
    assert digest.size() == 1000


def test_merge_combines_digests():
    a = _filled([float(i) for i in range(100)])
    b = _filled([float(i) for i in range(200, 350)])
    a.merge(b)
    assert a.size() == 250
    assert a.min == 0.0
    assert a.max == 349.0
    assert b.size() == 150
    a.compress()
    assert sum(c.weight for c in a.centroids()) == 250


def test_merge_into_itself_doubles_weight():
    digest = _filled([1.0, 2.0, 3.0, 4.0])
    digest.merge(digest)
    assert digest.size() == 8


def test_weight_overflow_raises():
    digest = TDigest(100)
    digest.add(1.0, 2**63 - 1)
    with pytest.raises(DigestOverflowError):
        digest.add(2.0, 1)
    assert digest.size() == 2**63 - 1


def test_reset_empties_digest():
    digest = _filled([1.0, 2.0, 3.0])
    digest.compress()
    digest.reset()
    assert digest.size() == 0
    assert digest.centroid_count() == 0
    assert digest.merged_count == 0
    assert digest.total_compressions == 0
    assert digest.min == sys.float_info.max
    assert digest.compression == 100.0


def test_centroid_accessors():
    digest = TDigest(100)
    digest.add(1.0, 3)
    digest.add(2.0, 5)
    digest.compress()
    count = digest.centroid_count()
    first = digest.centroids()[0]
    assert digest.centroid_weight_at(0) == first.weight
    assert digest.centroid_mean_at(0) == first.mean
    assert digest.centroid_weight_at(count) == 0
    assert math.isnan(digest.centroid_mean_at(digest.merged_count + 1))
    with pytest.raises(IndexError):
        digest.centroid_weight_at(digest.capacity)
    with pytest.raises(IndexError):
        digest.centroid_mean_at(-1)


def test_len_counts_centroids():
    digest = _filled([1.0, 2.0, 3.0])
    assert len(digest) == digest.centroid_count()
    assert len(digest) == 3


@settings(max_examples=50, deadline=None)
@given(
    st.lists(
        st.tuples(
            st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
            st.integers(min_value=1, max_value=50),
        ),
        min_size=2,
        max_size=300,
    )
)
def test_compress_preserves_total_and_mean(samples):
    digest = TDigest(100)
    for value, weight in samples:
        digest.add(value, weight)
    total = sum(w for _, w in samples)
    expected_sum = math.fsum(v * w for v, w in samples)
    digest.compress()
    centroids = digest.centroids()
    assert sum(c.weight for c in centroids) == total
    assert digest.size() == total
    got_sum = math.fsum(c.mean * c.weight for c in centroids)
    assert got_sum == pytest.approx(expected_sum, rel=1e-6, abs=1e-3 * total)
    assert all(digest.min <= c.mean <= digest.max for c in centroids)