"""Output assembly for a finished clustering run."""

import sys
from collections.abc import Iterable
from pathlib import Path

import numpy as np
import polars as pl
from sklearn.metrics import silhouette_score

from vote_clusterer.config import OUTPUT_SEPARATOR
from vote_clusterer.models import EntityId


def sorted_memberships(memberships: Iterable[Iterable[EntityId]]) -> list[list[EntityId]]:
    """Sort members within each cluster, then clusters by their smallest member."""
    groups = [sorted(members) for members in memberships]
    if any(not g for g in groups):
        raise ValueError("empty cluster in final membership")
    return sorted(groups, key=lambda g: g[0])


def format_clusters(
    memberships: Iterable[Iterable[EntityId]],
    separator: str = OUTPUT_SEPARATOR,
) -> list[str]:
    """One line per cluster: "0,1,5" style, no brackets."""
    return [separator.join(str(e) for e in group) for group in sorted_memberships(memberships)]


def assignments_frame(memberships: Iterable[Iterable[EntityId]]) -> pl.DataFrame:
    """Long table of (entity_id, cluster, cluster_size), one row per legislator.

    Cluster labels are 0-based positions in the sorted output, so label 0 is
    the cluster holding the smallest EntityId.
    """
    rows = []
    for label, group in enumerate(sorted_memberships(memberships)):
        for entity in group:
            rows.append({"entity_id": entity, "cluster": label, "cluster_size": len(group)})
    schema = {"entity_id": pl.Int64, "cluster": pl.Int64, "cluster_size": pl.Int64}
    return pl.DataFrame(rows, schema=schema).sort("entity_id")


def silhouette(distances: np.ndarray, memberships: Iterable[Iterable[EntityId]]) -> float | None:
    """Silhouette score of the partition on a precomputed distance matrix.

    Returns None when the score is undefined: fewer than two clusters, or
    as many clusters as legislators.
    """
    frame = assignments_frame(memberships)
    n_labels = frame["cluster"].n_unique()
    if n_labels < 2 or n_labels >= frame.height:
        return None

    ids = frame["entity_id"].to_numpy()
    sub = distances[np.ix_(ids, ids)]
    return float(silhouette_score(sub, frame["cluster"].to_numpy(), metric="precomputed"))


def save_assignments(frame: pl.DataFrame, data_dir: Path) -> list[Path]:
    """Write the assignment table as parquet and CSV into ``data_dir``."""
    parquet_path = data_dir / "assignments.parquet"
    csv_path = data_dir / "assignments.csv"
    frame.write_parquet(parquet_path)
    frame.write_csv(csv_path)
    print(f"  Saved: {parquet_path.name} ({frame.height} rows)", file=sys.stderr)
    print(f"  Saved: {csv_path.name} ({frame.height} rows)", file=sys.stderr)
    return [parquet_path, csv_path]
