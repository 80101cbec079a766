"""Command-line interface for the vote clusterer.

Cluster lines are written to stdout; progress and diagnostics go to stderr.
"""

import argparse
import sys
from pathlib import Path

from vote_clusterer.clusterer import AgglomerativeClusterer
from vote_clusterer.config import (
    DEFAULT_METRIC,
    DEFAULT_NUMBER_OF_BILLS,
    DEFAULT_TARGET_CLUSTERS,
    DEFAULT_TRAINING_PATH,
    METRICS,
    OUTPUT_SEPARATOR,
)
from vote_clusterer.errors import ClusteringError
from vote_clusterer.loader import load_vote_vectors
from vote_clusterer.output import assignments_frame, format_clusters, save_assignments, silhouette
from vote_clusterer.run_context import RunContext


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _log(message: str = "") -> None:
    print(message, file=sys.stderr)


def print_header(title: str) -> None:
    width = 60
    _log(f"\n{'=' * width}")
    _log(f"  {title}")
    _log(f"{'=' * width}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vote-clusterer",
        description="Group legislators into voting blocs by average-link agglomerative clustering.",
    )
    parser.add_argument(
        "training_file",
        nargs="?",
        type=Path,
        default=Path(DEFAULT_TRAINING_PATH),
        help=f"Comma-separated votes, one legislator per line (default: {DEFAULT_TRAINING_PATH})",
    )
    parser.add_argument(
        "--bills",
        "-b",
        type=_positive_int,
        default=DEFAULT_NUMBER_OF_BILLS,
        help=f"Number of vote fields per line (default: {DEFAULT_NUMBER_OF_BILLS})",
    )
    parser.add_argument(
        "--clusters",
        "-k",
        type=_positive_int,
        default=DEFAULT_TARGET_CLUSTERS,
        help=f"Number of clusters to stop at (default: {DEFAULT_TARGET_CLUSTERS})",
    )
    parser.add_argument(
        "--metric",
        choices=METRICS,
        default=DEFAULT_METRIC,
        help=f"Pairwise vote distance (default: {DEFAULT_METRIC})",
    )
    parser.add_argument(
        "--separator",
        default=OUTPUT_SEPARATOR,
        help=f"Separator between members on an output line (default: {OUTPUT_SEPARATOR!r})",
    )
    parser.add_argument(
        "--results-dir",
        "-o",
        type=Path,
        default=None,
        help="Also write run_log.txt, run_info.json and assignment tables under this directory",
    )
    return parser


def run(args: argparse.Namespace, data_dir: Path | None = None) -> list[str]:
    """Load, cluster, and print one line per cluster. Returns the printed lines."""
    print_header("Vote Clustering")

    vectors = load_vote_vectors(args.training_file, args.bills)
    _log(f"  Loaded {len(vectors)} legislators x {args.bills} bills from {args.training_file}")

    clusterer = AgglomerativeClusterer(vectors, args.bills, metric=args.metric)
    result = clusterer.run(args.clusters)
    _log(
        f"  {result.merges} merges ({args.metric} distance, average link): "
        f"{result.initial_count} -> {result.final_count} clusters"
    )

    memberships = result.memberships()
    score = silhouette(clusterer.distances, memberships)
    if score is not None:
        _log(f"  Silhouette = {score:.4f}")

    lines = format_clusters(memberships, separator=args.separator)
    for line in lines:
        print(line)

    if data_dir is not None:
        save_assignments(assignments_frame(memberships), data_dir)
    return lines


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.results_dir is None:
            run(args)
        else:
            params = {k: str(v) if isinstance(v, Path) else v for k, v in vars(args).items()}
            with RunContext(
                dataset=args.training_file.stem,
                params=params,
                results_root=args.results_dir,
            ) as ctx:
                run(args, data_dir=ctx.data_dir)
    except ClusteringError as e:
        parser.exit(1, f"error: {e}\n")
