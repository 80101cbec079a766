"""Vote-vector distances and the average-link cluster distance.

Two pairwise metrics are available:

- ``disagreement`` (default): ``1 - matches / B``, the fraction of bills on
  which two legislators cast different tokens. Historically called a Jaccard
  distance, but it always divides by the full bill count.
- ``jaccard``: a true Jaccard distance over the sets of (bill, token) pairs.
  Two vectors share ``m`` pairs and their union holds ``2B - m``, so the
  distance is ``1 - m / (2B - m)``. Opt-in only.

Both are symmetric, zero on identical vectors, and lie in [0, 1].
"""

from collections.abc import Callable, Mapping, Sequence

import numpy as np

from vote_clusterer.config import DEFAULT_METRIC, LINKAGE_SCALE
from vote_clusterer.models import EntityId, VoteVector


def _matches(a: VoteVector, b: VoteVector, number_of_bills: int) -> int:
    return sum(1 for i in range(number_of_bills) if a[i] == b[i])


def disagreement_distance(a: VoteVector, b: VoteVector, number_of_bills: int) -> float:
    """Share of bills on which ``a`` and ``b`` disagree."""
    return 1 - _matches(a, b, number_of_bills) / number_of_bills


def jaccard_distance(a: VoteVector, b: VoteVector, number_of_bills: int) -> float:
    """Jaccard distance between the (bill, token) sets of ``a`` and ``b``."""
    m = _matches(a, b, number_of_bills)
    return 1 - m / (2 * number_of_bills - m)


MetricFn = Callable[[VoteVector, VoteVector, int], float]

METRIC_FUNCTIONS: dict[str, MetricFn] = {
    "disagreement": disagreement_distance,
    "jaccard": jaccard_distance,
}


def get_metric(name: str) -> MetricFn:
    try:
        return METRIC_FUNCTIONS[name]
    except KeyError:
        known = ", ".join(sorted(METRIC_FUNCTIONS))
        raise ValueError(f"unknown metric {name!r} (expected one of: {known})") from None


def average_linkage(
    cluster_a: Mapping[EntityId, VoteVector],
    cluster_b: Mapping[EntityId, VoteVector],
    number_of_bills: int,
    metric: str = DEFAULT_METRIC,
) -> float:
    """Mean pairwise distance between members of two clusters, scaled by 100.

    L(A, B) = 1 / (|A| * |B|) * sum over u in A, v in B of 100 * d(u, v)
    """
    if not cluster_a or not cluster_b:
        raise ValueError("average linkage is undefined for an empty cluster")
    distance = get_metric(metric)

    total = 0.0
    for u in cluster_a.values():
        for v in cluster_b.values():
            total += distance(u, v, number_of_bills) * LINKAGE_SCALE
    return total / (len(cluster_a) * len(cluster_b))


def encode_votes(vectors: Sequence[VoteVector]) -> np.ndarray:
    """Map vote tokens to integer codes; returns an (n, B) int array.

    Codes are assigned in first-seen order. Only equality between codes is
    meaningful.
    """
    codes: dict[str, int] = {}
    rows = [[codes.setdefault(token, len(codes)) for token in vec] for vec in vectors]
    return np.array(rows, dtype=np.int64)


def distance_matrix(
    vectors: Sequence[VoteVector],
    number_of_bills: int,
    metric: str = DEFAULT_METRIC,
) -> np.ndarray:
    """Full symmetric (n, n) matrix of pairwise distances between vote vectors.

    Entries equal the scalar metric functions exactly (same integer match
    counts, same float division), so either can be used interchangeably.
    """
    get_metric(metric)
    n = len(vectors)
    if n == 0:
        return np.zeros((0, 0), dtype=np.float64)

    encoded = encode_votes([vec[:number_of_bills] for vec in vectors])
    matches = (encoded[:, None, :] == encoded[None, :, :]).sum(axis=2)

    if metric == "jaccard":
        return 1.0 - matches / (2 * number_of_bills - matches)
    return 1.0 - matches / number_of_bills
