"""Poll export format: candidates on the first row, one ballot per row.

The first row of the file lists the candidates standing. Every following row
is one ballot, naming candidates from the most preferred to the least
preferred. Empty cells and surrounding whitespace are ignored, so rows may
have any length. Rows with no names are skipped. The number of seats is not
part of the format.

Example::

    a,b,c,d
    c,b,a
    b,c
    d,a

Ballots ranking a candidate not on the first row are loaded as they are;
the counting engine purges them as spoiled. Ballots ranking a candidate
twice are rejected with a :class:`CSVParseError`.
"""

import csv
import io
from typing import List, Iterable, Optional

import pollstv.io.core
from pollstv.ballot import Ballot, BallotError, Candidate, \
    RankedBallotValidator
from pollstv.io.core import ElectionData


class CSVParseError(pollstv.io.core.ParseError):
    pass


class NotSupportedInCSV(pollstv.io.core.NotSupportedInFormat):
    FORMAT = 'CSV poll export'


BALLOT_VALIDATOR = RankedBallotValidator()


def load_lines(lines: Iterable[str],
               delimiter: str = ',',
               ) -> ElectionData:
    rows = csv.reader(lines, delimiter=delimiter)
    try:
        candidates = list(_parse_row(next(rows)))
    except StopIteration as e:
        raise CSVParseError('empty CSV file: candidate row missing') from e
    if not candidates:
        raise CSVParseError('no candidates on the first row')
    if len(set(candidates)) != len(candidates):
        raise CSVParseError(f'duplicate candidates: {candidates!r}')
    ballots = []
    for row in rows:
        ballot = _parse_row(row)
        if not ballot:
            continue
        try:
            BALLOT_VALIDATOR.validate(ballot)
        except BallotError as e:
            raise CSVParseError(
                f'invalid ballot on line {rows.line_num}: {e}'
            ) from e
        ballots.append(ballot)
    return ElectionData(candidates=candidates, ballots=ballots)


load, loads = pollstv.io.core.loaders(load_lines)


def dump_lines(candidates: List[Candidate],
               ballots: Iterable[Ballot],
               n_seats: Optional[int] = None,
               delimiter: str = ',',
               ) -> Iterable[str]:
    if n_seats is not None:
        raise NotSupportedInCSV('number of seats')
    yield _dump_row(candidates, delimiter)
    for ballot in ballots:
        yield _dump_row(ballot, delimiter)


dump, dumps = pollstv.io.core.dumpers(dump_lines)


def _parse_row(row: List[str]) -> Ballot:
    return tuple(cell.strip() for cell in row if cell.strip())


def _dump_row(names: Iterable[Candidate], delimiter: str) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, delimiter=delimiter, lineterminator='\n').writerow(
        [str(name) for name in names]
    )
    return buffer.getvalue()
