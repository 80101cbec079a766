"""Bottom-up average-link clustering of legislators by voting record.

Every legislator starts in a cluster of their own (ClusterId == EntityId).
Each step scans all pairs of live clusters, merges the pair with the
smallest average-link distance, and retires the absorbed ClusterId. The loop
stops as soon as the target count is reached.

Tie-break: pairs are ranked in discovery order. The outer cluster comes
before the inner one, both in ClusterSet order, and only a strictly
smaller linkage displaces the current best. So among equal minima the first
pair found wins, and the earlier cluster of the pair survives the merge.

Pairwise entity distances are computed once, as a matrix. Cluster-pair
linkages are cached between steps; a merge only invalidates the pairs that
involve its two clusters.
"""

import math
from collections.abc import Sequence

import numpy as np

from vote_clusterer.config import DEFAULT_METRIC, LINKAGE_SCALE
from vote_clusterer.distance import distance_matrix
from vote_clusterer.errors import InvariantViolation
from vote_clusterer.models import Cluster, ClusterId, ClusteringResult, EntityId, VoteVector


class AgglomerativeClusterer:
    """Owns the ClusterSet for one run and merges it down to a target size."""

    def __init__(
        self,
        vectors: Sequence[VoteVector],
        number_of_bills: int,
        metric: str = DEFAULT_METRIC,
    ):
        if number_of_bills < 1:
            raise ValueError(f"number_of_bills must be positive, got {number_of_bills}")
        for entity, vec in enumerate(vectors):
            if len(vec) != number_of_bills:
                raise ValueError(
                    f"entity {entity} has {len(vec)} votes, expected {number_of_bills}"
                )

        self.number_of_bills = number_of_bills
        self.metric = metric
        self._distances = distance_matrix(vectors, number_of_bills, metric)
        self._scaled = self._distances * LINKAGE_SCALE
        # (earlier, later) ClusterId pair -> linkage; dropped when either side merges
        self._pair_linkage: dict[tuple[ClusterId, ClusterId], float] = {}

        # ClusterSet: insertion order is discovery order for the pair scan
        self.clusters: dict[ClusterId, Cluster] = {
            entity: {entity: tuple(vec)} for entity, vec in enumerate(vectors)
        }
        self.initial_count = len(self.clusters)
        self.merges = 0

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)

    @property
    def distances(self) -> np.ndarray:
        """Entity-by-entity distance matrix (unscaled)."""
        return self._distances

    def members(self, cluster_id: ClusterId) -> list[EntityId]:
        return list(self.clusters[cluster_id])

    def linkage(self, a: ClusterId, b: ClusterId) -> float:
        """Average-link distance between two live clusters.

        Adds the scaled member-pair distances one at a time, ``a``'s members
        outer and ``b``'s inner, so the result is bit-identical to
        ``distance.average_linkage(clusters[a], clusters[b], ...)``.
        """
        rows = self.members(a)
        cols = self.members(b)
        block = self._scaled[np.ix_(rows, cols)]
        # cumsum accumulates left to right; sum() would use pairwise summation
        total = float(np.cumsum(block, axis=None)[-1])
        return total / (len(rows) * len(cols))

    def closest_pair(self) -> tuple[ClusterId, ClusterId] | None:
        """The first pair of distinct live clusters with minimal linkage.

        Returns None when fewer than two clusters are live.
        """
        ids = list(self.clusters)
        best: tuple[ClusterId, ClusterId] | None = None
        smallest = math.inf
        for i, a in enumerate(ids):
            for b in ids[i + 1 :]:
                key = (a, b)
                link = self._pair_linkage.get(key)
                if link is None:
                    link = self._pair_linkage[key] = self.linkage(a, b)
                if link < smallest:
                    best = key
                    smallest = link
        return best

    def merge(self, keep: ClusterId, absorb: ClusterId) -> None:
        """Move every member of ``absorb`` into ``keep`` and retire ``absorb``."""
        if keep == absorb:
            raise ValueError(f"cannot merge cluster {keep} with itself")
        absorbed = self.clusters.pop(absorb)
        self.clusters[keep].update(absorbed)
        self.merges += 1
        self._pair_linkage = {
            pair: link
            for pair, link in self._pair_linkage.items()
            if keep not in pair and absorb not in pair
        }

    def run(self, target_count: int) -> ClusteringResult:
        """Merge until at most ``target_count`` clusters remain.

        Raises InvariantViolation if a merge is still needed but no pair of
        clusters can be found.
        """
        while len(self.clusters) > target_count:
            pair = self.closest_pair()
            if pair is None:
                raise InvariantViolation(len(self.clusters), target_count)
            self.merge(*pair)
        return self.result()

    def result(self) -> ClusteringResult:
        """Snapshot of the current ClusterSet (copied, not shared)."""
        return ClusteringResult(
            clusters={cid: dict(members) for cid, members in self.clusters.items()},
            initial_count=self.initial_count,
            merges=self.merges,
        )


def cluster_votes(
    vectors: Sequence[VoteVector],
    number_of_bills: int,
    target_count: int,
    metric: str = DEFAULT_METRIC,
) -> ClusteringResult:
    """Cluster ``vectors`` down to ``target_count`` groups in one call."""
    return AgglomerativeClusterer(vectors, number_of_bills, metric).run(target_count)
