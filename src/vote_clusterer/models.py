"""Types for vote vectors and clusters."""

from dataclasses import dataclass

VoteVector = tuple[str, ...]  # one token per bill, e.g. ("Yea", "Nay", "Not Voting")
EntityId = int  # 0-based input line number
ClusterId = int
Cluster = dict[EntityId, VoteVector]


@dataclass(frozen=True)
class ClusteringResult:
    """Outcome of one agglomerative run."""

    clusters: dict[ClusterId, Cluster]
    initial_count: int
    merges: int

    @property
    def final_count(self) -> int:
        return len(self.clusters)

    def memberships(self) -> list[list[EntityId]]:
        """Member ids per live cluster, in ClusterSet order."""
        return [list(members) for members in self.clusters.values()]
