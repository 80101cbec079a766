"""Exceptions raised while loading votes or clustering them."""


class ClusteringError(Exception):
    """Base class for errors that abort a clustering run."""


class LoadError(ClusteringError):
    """The vote file could not be read, or a row is malformed."""

    def __init__(self, message: str, path: str | None = None, line_number: int | None = None):
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}:{line_number}" if line_number is not None else path
        elif line_number is not None:
            location = f"line {line_number}"
        super().__init__(f"{location}: {message}" if location else message)


class InvariantViolation(ClusteringError):
    """No mergeable pair exists although the target count was not reached.

    Signals corrupted ClusterSet state (fewer than two live clusters while
    the loop still wants to merge). Never recovered from locally.
    """

    def __init__(self, cluster_count: int, target: int):
        self.cluster_count = cluster_count
        self.target = target
        super().__init__(
            f"no pair of clusters to merge ({cluster_count} live, target {target})"
        )
