"""BLT ballot files, the input format of many STV counting programs.

A BLT file starts with a header line with the number of candidates and the
number of seats. Optional lines with negative numbers list withdrawn
candidates by their 1-based index. Each ballot line then gives a weight
(the number of identical ballots), the indices of the ranked candidates and
a terminating zero. A single zero ends the ballot list; quoted candidate
names and an optional quoted election title follow::

    4 2
    -2
    3 1 3 4 0
    4 1 3 2 0
    0
    "Amy"
    "Bob"
    "Chuck"
    "Diane"
    "Gardening Club Election"

Weighted lines are expanded to the given number of ballots, so weights must
be positive integers. Withdrawn candidates are left out of the loaded
candidate list and skipped on every ballot, so the later preferences of
their voters still count. Ballots ranking a candidate twice are rejected.
"""

import collections
from typing import List, Tuple, Set, Iterable, Optional

import pollstv.io.core
import pollstv.util
from pollstv.ballot import Ballot, BallotError, Candidate, \
    RankedBallotValidator
from pollstv.io.core import ElectionData


class NotSupportedInBLT(pollstv.io.core.NotSupportedInFormat):
    FORMAT = 'BLT file'


class BLTParseError(pollstv.io.core.ParseError):
    pass


BALLOT_VALIDATOR = RankedBallotValidator()


def dump_lines(candidates: Optional[List[Candidate]],
               ballots: Iterable[Ballot],
               n_seats: int,
               election_name: Optional[str] = None,
               withdrawn: Iterable[Candidate] = (),
               ) -> Iterable[str]:
    ballots = list(ballots)
    withdrawn = list(withdrawn)
    if candidates is None:
        candidates = pollstv.util.all_ranked_candidates(ballots)
    candidates = list(candidates) + [
        cand for cand in withdrawn if cand not in candidates
    ]
    yield _dump_numline([len(candidates), n_seats])
    withdrawn_inds = [
        -(i + 1) for i, cand in enumerate(candidates) if cand in withdrawn
    ]
    if withdrawn_inds:
        yield _dump_numline(withdrawn_inds)
    for ballot, n_ballots in collections.Counter(ballots).items():
        yield _dump_numline(_dump_ballot(ballot, candidates, n_ballots))
    yield _dump_numline([0])
    for cand in candidates:
        yield _dump_strline(str(cand))
    if election_name is not None:
        yield _dump_strline(election_name)


dump, dumps = pollstv.io.core.dumpers(dump_lines)


def _dump_ballot(ballot: Ballot,
                 candidates: List[Candidate],
                 n_ballots: int,
                 ) -> List[int]:
    try:
        cand_indices = [candidates.index(cand) + 1 for cand in ballot]
    except ValueError as e:
        raise NotSupportedInBLT(f'candidates not listed: {ballot}') from e
    return [n_ballots] + cand_indices + [0]


def _dump_numline(nums: List[int]) -> str:
    return ' '.join(str(num) for num in nums)


def _dump_strline(string: str) -> str:
    return f'"{string}"'


def load_lines(blt_lines: Iterable[str]) -> ElectionData:
    try:
        n_cands, n_seats = _parse_header(next(blt_lines))
    except StopIteration as e:
        raise BLTParseError('empty BLT file') from e
    ballots, withdrawn = _parse_body(blt_lines, n_cands)
    names, election_name = _parse_strings(blt_lines, n_cands)
    if names is None:
        names = [str(i + 1) for i in range(n_cands)]
    return ElectionData(
        candidates=[
            name for i, name in enumerate(names) if i + 1 not in withdrawn
        ],
        ballots=[
            tuple(names[i - 1] for i in ballot if i not in withdrawn)
            for ballot in ballots
        ],
        n_seats=n_seats,
        election_name=election_name,
    )


load, loads = pollstv.io.core.loaders(load_lines)


def _parse_header(blt_line: str) -> Tuple[int, int]:
    blt_result = _parse_numline(blt_line)
    if len(blt_result) == 2:
        return tuple(blt_result)
    else:
        raise BLTParseError(f'need two integers (candidate and seat count)'
                            f' in BLT file header line, got {blt_result!r}')


def _parse_body(blt_lines: Iterable[str],
                n_cands: int,
                ) -> Tuple[List[Tuple[int, ...]], Set[int]]:
    ballots = []
    withdrawn = set()
    ballots_encountered = False
    for line in blt_lines:
        result = _parse_numline(line)
        if not result:
            continue    # ignore empty lines
        elif result == [0]:
            # End-of-ballots line, return.
            return ballots, withdrawn
        elif result[0] < 0:
            if ballots_encountered:
                raise BLTParseError('withdrawn candidate line after ballot'
                                    f' line: {line!r}')
            # Withdrawn candidates. Allow more than one per line.
            withdrawn.update(-n for n in result)
        else:
            weight, ballot = _parse_ballot(result, n_cands)
            ballots.extend([ballot] * weight)
            ballots_encountered = True
    raise BLTParseError('incomplete BLT file:'
                        ' EOF before ballot list terminator')


def _parse_strings(blt_lines: Iterable[str],
                   n_cands: int,
                   ) -> Tuple[Optional[List[str]], Optional[str]]:
    parsed_lines = []
    empty_encountered = False
    for blt_line in blt_lines:
        blt_line = _clean_line(blt_line)
        if blt_line.startswith('"') and blt_line.endswith('"'):
            if empty_encountered:
                raise BLTParseError(f'nonempty line after empty: {blt_line!r}')
            parsed_lines.append(blt_line[1:-1])
        elif not blt_line:
            empty_encountered = True
        else:
            raise BLTParseError(f'invalid BLT string line: {blt_line!r}')
    if not parsed_lines:
        return None, None
    elif len(parsed_lines) < n_cands:
        if len(parsed_lines) == 1:
            return None, parsed_lines[0]
        raise BLTParseError(f'not enough candidate names: {len(parsed_lines)}'
                            f' given, {n_cands} set in header')
    elif len(parsed_lines) == n_cands:
        return parsed_lines, None
    elif len(parsed_lines) == n_cands + 1:
        return parsed_lines[:-1], parsed_lines[-1]
    else:
        raise BLTParseError(f'too many strings: {len(parsed_lines)} found'
                            f' but expecting {n_cands} candidate names + title')


def _clean_line(blt_line: str) -> str:
    blt_line = blt_line.strip()
    # Ignore everything after the first hash sign after the last double quote.
    hash_search_start = blt_line.rfind('"') if '"' in blt_line else 0
    leftmost_hash = blt_line[hash_search_start:].find('#')
    if leftmost_hash == -1:
        return blt_line
    else:
        return blt_line[:(hash_search_start + leftmost_hash)].rstrip()


def _parse_ballot(nums: List[int],
                  n_cands: int,
                  ) -> Tuple[int, Tuple[int, ...]]:
    # The first element is weight, the rest are candidate indices
    # terminated by a zero.
    if nums[-1] != 0:
        raise BLTParseError('ballot line must be zero-terminated,'
                            f' got {nums!r}')
    weight, indices = nums[0], tuple(nums[1:-1])
    if weight < 1:
        raise BLTParseError(f'ballot weight must be positive, got {weight}')
    for index in indices:
        if not 1 <= index <= n_cands:
            raise BLTParseError(f'candidate index out of range: {index}')
    try:
        BALLOT_VALIDATOR.validate(indices)
    except BallotError as e:
        raise BLTParseError(f'invalid ballot line {nums!r}: {e}') from e
    return weight, indices


def _parse_numline(blt_line: str) -> List[int]:
    blt_line = _clean_line(blt_line)
    # Return empty lines as empty.
    if not blt_line:
        return []
    nums = []
    for i, numstr in enumerate(blt_line.split()):
        try:
            nums.append(int(numstr))
        except ValueError as e:
            raise BLTParseError(f'invalid BLT numberline item {i}:'
                                f' {numstr!r}, integer expected') from e
    return nums
