"""
Tests for output assembly in output.py.

Verifies cluster line formatting and ordering, the polars assignment table,
the silhouette score on a precomputed distance matrix, and the files written
by save_assignments().

Run: uv run pytest tests/test_output.py -v
"""

import numpy as np
import polars as pl
import pytest

from vote_clusterer.distance import distance_matrix
from vote_clusterer.output import (
    assignments_frame,
    format_clusters,
    save_assignments,
    silhouette,
    sorted_memberships,
)

# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def memberships() -> list[list[int]]:
    """Unsorted clusters as they might come out of the ClusterSet."""
    return [[5, 2], [3, 0, 1], [4]]


@pytest.fixture
def two_bloc_distances() -> np.ndarray:
    """Legislators 0-2 always vote Yea, 3-5 always Nay (with one stray vote each)."""
    votes = [
        ("Yea", "Yea", "Yea", "Yea"),
        ("Yea", "Yea", "Yea", "Nay"),
        ("Yea", "Yea", "Nay", "Yea"),
        ("Nay", "Nay", "Nay", "Nay"),
        ("Nay", "Nay", "Nay", "Yea"),
        ("Nay", "Nay", "Yea", "Nay"),
    ]
    return distance_matrix(votes, 4)


# ── sorted_memberships / format_clusters ────────────────────────────────────


class TestFormatClusters:
    """One line per cluster, members ascending, clusters by smallest member."""

    def test_sorted_memberships(self, memberships: list) -> None:
        assert sorted_memberships(memberships) == [[0, 1, 3], [2, 5], [4]]

    def test_default_separator(self, memberships: list) -> None:
        assert format_clusters(memberships) == ["0,1,3", "2,5", "4"]

    def test_custom_separator(self, memberships: list) -> None:
        assert format_clusters(memberships, separator=", ") == ["0, 1, 3", "2, 5", "4"]

    def test_no_brackets(self, memberships: list) -> None:
        assert not any("[" in line or "]" in line for line in format_clusters(memberships))

    def test_worked_example(self) -> None:
        assert format_clusters([[2], [1, 0]]) == ["0,1", "2"]

    def test_empty(self) -> None:
        assert format_clusters([]) == []

    def test_empty_cluster_is_reported(self) -> None:
        with pytest.raises(ValueError, match="empty cluster"):
            format_clusters([[0, 1], []])

    def test_accepts_dict_keys(self) -> None:
        clusters = {0: {0: (), 3: ()}, 1: {1: ()}}
        assert format_clusters(c.keys() for c in clusters.values()) == ["0,3", "1"]


# ── assignments_frame ────────────────────────────────────────────────────────


class TestAssignmentsFrame:
    """Long assignment table keyed by entity_id."""

    def test_columns_and_height(self, memberships: list) -> None:
        frame = assignments_frame(memberships)
        assert frame.columns == ["entity_id", "cluster", "cluster_size"]
        assert frame.height == 6

    def test_sorted_by_entity(self, memberships: list) -> None:
        frame = assignments_frame(memberships)
        assert frame["entity_id"].to_list() == [0, 1, 2, 3, 4, 5]

    def test_labels_follow_output_order(self, memberships: list) -> None:
        frame = assignments_frame(memberships)
        assert frame["cluster"].to_list() == [0, 0, 1, 0, 2, 1]
        assert frame["cluster_size"].to_list() == [3, 3, 2, 3, 1, 2]

    def test_empty(self) -> None:
        frame = assignments_frame([])
        assert frame.height == 0
        assert frame.schema["entity_id"] == pl.Int64


# ── silhouette ───────────────────────────────────────────────────────────────


class TestSilhouette:
    """Cluster quality on the precomputed vote distance matrix."""

    def test_well_separated_blocs(self, two_bloc_distances: np.ndarray) -> None:
        score = silhouette(two_bloc_distances, [[0, 1, 2], [3, 4, 5]])
        assert score is not None
        assert score > 0.5

    def test_bad_split_scores_lower(self, two_bloc_distances: np.ndarray) -> None:
        good = silhouette(two_bloc_distances, [[0, 1, 2], [3, 4, 5]])
        bad = silhouette(two_bloc_distances, [[0, 3, 4], [1, 2, 5]])
        assert bad < good

    def test_single_cluster_undefined(self, two_bloc_distances: np.ndarray) -> None:
        assert silhouette(two_bloc_distances, [[0, 1, 2, 3, 4, 5]]) is None

    def test_all_singletons_undefined(self, two_bloc_distances: np.ndarray) -> None:
        assert silhouette(two_bloc_distances, [[i] for i in range(6)]) is None


# ── save_assignments ─────────────────────────────────────────────────────────


class TestSaveAssignments:
    """Assignment table written as parquet and CSV."""

    def test_writes_both_files(self, tmp_path, memberships: list) -> None:
        paths = save_assignments(assignments_frame(memberships), tmp_path)
        assert [p.name for p in paths] == ["assignments.parquet", "assignments.csv"]
        assert all(p.exists() for p in paths)

    def test_parquet_round_trip(self, tmp_path, memberships: list) -> None:
        frame = assignments_frame(memberships)
        save_assignments(frame, tmp_path)
        assert pl.read_parquet(tmp_path / "assignments.parquet").equals(frame)

    def test_csv_header(self, tmp_path, memberships: list) -> None:
        save_assignments(assignments_frame(memberships), tmp_path)
        header = (tmp_path / "assignments.csv").read_text(encoding="utf-8").splitlines()[0]
        assert header == "entity_id,cluster,cluster_size"

    def test_progress_goes_to_stderr(self, tmp_path, memberships: list, capsys) -> None:
        save_assignments(assignments_frame(memberships), tmp_path)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "assignments.parquet" in captured.err
