"""Read per-legislator vote vectors from a delimited text file.

Each line holds one legislator's votes, one token per bill, with no header
row. Only the first ``number_of_bills`` fields are kept; anything after them
(a name, a party label) is ignored without validation. Tokens are compared
only for equality later on, so no vocabulary check happens here.

Line order defines EntityIds: line 1 of the file is entity 0.
"""

from collections.abc import Iterable
from pathlib import Path

from vote_clusterer.config import FIELD_DELIMITER
from vote_clusterer.errors import LoadError
from vote_clusterer.models import VoteVector


def _check_bill_count(number_of_bills: int) -> None:
    if number_of_bills < 1:
        raise ValueError(f"number_of_bills must be positive, got {number_of_bills}")


def parse_vote_lines(
    lines: Iterable[str],
    number_of_bills: int,
    delimiter: str = FIELD_DELIMITER,
    source: str | None = None,
) -> list[VoteVector]:
    """Split each line into a vote vector of exactly ``number_of_bills`` tokens.

    Raises LoadError (with the 1-based line number) for a line with fewer
    fields than bills.
    """
    _check_bill_count(number_of_bills)

    vectors: list[VoteVector] = []
    for line_number, line in enumerate(lines, start=1):
        fields = line.rstrip("\r\n").split(delimiter)
        # trailing empty fields do not count as votes ("Yea,Nay," has two)
        while fields and fields[-1] == "":
            fields.pop()
        if len(fields) < number_of_bills:
            raise LoadError(
                f"expected at least {number_of_bills} vote fields, found {len(fields)}",
                path=source,
                line_number=line_number,
            )
        vectors.append(tuple(fields[:number_of_bills]))
    return vectors


def load_vote_vectors(
    path: Path | str,
    number_of_bills: int,
    delimiter: str = FIELD_DELIMITER,
) -> list[VoteVector]:
    """Load every vote vector from ``path`` (UTF-8), in file order."""
    _check_bill_count(number_of_bills)
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return parse_vote_lines(f, number_of_bills, delimiter, source=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"cannot read vote file: {e}", path=str(path)) from e
