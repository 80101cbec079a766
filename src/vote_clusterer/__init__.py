"""Vote Clusterer - group legislators into voting blocs by agglomerative clustering."""

__version__ = "0.1.0"

from vote_clusterer.clusterer import AgglomerativeClusterer as AgglomerativeClusterer
from vote_clusterer.clusterer import cluster_votes as cluster_votes
from vote_clusterer.distance import average_linkage as average_linkage
from vote_clusterer.distance import disagreement_distance as disagreement_distance
from vote_clusterer.distance import jaccard_distance as jaccard_distance
from vote_clusterer.errors import InvariantViolation as InvariantViolation
from vote_clusterer.errors import LoadError as LoadError
from vote_clusterer.loader import load_vote_vectors as load_vote_vectors
from vote_clusterer.models import ClusteringResult as ClusteringResult
