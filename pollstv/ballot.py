'''Ballot types, ballot validators and the purge of spoiled ballots.

A ballot is a ranking of candidates: a tuple of candidate identifiers ordered
from the most to the least preferred, with no candidate repeated. Any
hashable object (usually the option name as a string) can serve as
a candidate identifier.

The counting engine itself never rejects a ballot. Before the first round, it
purges *spoiled* ballots (see :func:`purge_spoiled`) and counts the rest.
Rejecting ballots that break the poll rules (repeated candidates, too many
preferences) is the task of the layer accepting the votes; the
:class:`RankedBallotValidator` is provided for that layer and raises
a subclass of :class:`BallotError` for an invalid ballot.
'''

import logging
from typing import Any, Collection, Hashable, Iterable, List, Optional, Tuple

from pollstv.persist import simple_serialization


Candidate = Hashable
Ballot = Tuple[Candidate, ...]

logger = logging.getLogger(__name__)


class BallotError(Exception):
    '''A ballot is invalid given the poll rules.'''
    pass


class BallotLengthError(BallotError):
    '''A ballot ranks too many candidates.

    :param value: Number of candidates ranked on the ballot.
    :param max_value: Maximum number of rankings permissible.
    '''
    def __init__(self, value: int, max_value: int):
        self.value = value
        self.max_value = max_value
        super().__init__(
            f'invalid ballot length: {value}, must be <={max_value}'
        )


class RepeatedCandidateError(BallotError):
    '''A ballot ranks a single candidate more than once.

    :param candidate: The repeated candidate.
    '''
    def __init__(self, candidate: Candidate):
        self.candidate = candidate
        super().__init__(f'candidate ranked more than once: {candidate}')


class UnknownCandidateError(BallotError):
    '''A ballot ranks a candidate that is not standing.

    :param candidate: The candidate that was not found.
    '''
    def __init__(self, candidate: Any):
        self.candidate = candidate
        super().__init__(f'candidate voted for but not running: {candidate}')


def is_spoiled(ballot: Iterable[Candidate],
               candidates: Collection[Candidate],
               ) -> bool:
    '''Return True if any of the ranked candidates is not standing.'''
    return any(cand not in candidates for cand in ballot)


def purge_spoiled(candidates: Iterable[Candidate],
                  ballots: Iterable[Iterable[Candidate]],
                  ) -> Tuple[List[Ballot], int]:
    '''Discard ballots ranking any candidate that is not standing.

    The whole ballot is discarded even if the unknown candidate is ranked
    below valid ones. Purging never fails; it may leave no ballots at all.

    :param candidates: Candidates standing in the election.
    :param ballots: Ballots as submitted.
    :returns: A 2-tuple with the valid ballots (converted to tuples, in their
        original order) and the number of ballots discarded.
    '''
    known = frozenset(candidates)
    valid = []
    n_spoiled = 0
    for ballot in ballots:
        ballot = tuple(ballot)
        if is_spoiled(ballot, known):
            for cand in ballot:
                if cand not in known:
                    logger.info('candidate voted for but not running: %s',
                                cand)
            n_spoiled += 1
        else:
            valid.append(ballot)
    return valid, n_spoiled


@simple_serialization
class RankedBallotValidator:
    '''Validate a ranked ballot against the poll rules.

    :param candidates: Candidates standing in the poll. If given, ballots
        ranking any other candidate are invalid; if None, any candidate is
        accepted.
    :param max_ranked: Maximum number of candidates a single ballot may rank.
        None means no limit.
    '''
    def __init__(self,
                 candidates: Optional[Collection[Candidate]] = None,
                 max_ranked: Optional[int] = None,
                 ):
        self.candidates = candidates
        self.max_ranked = max_ranked

    def validate(self, ballot: Iterable[Candidate]) -> None:
        '''Check if the ballot satisfies the poll rules.

        :raises BallotLengthError: If too many candidates are ranked.
        :raises RepeatedCandidateError: If a candidate is ranked twice.
        :raises UnknownCandidateError: If a ranked candidate is not standing.
        '''
        ballot = tuple(ballot)
        if self.max_ranked is not None and len(ballot) > self.max_ranked:
            raise BallotLengthError(len(ballot), self.max_ranked)
        seen = set()
        for cand in ballot:
            if cand in seen:
                raise RepeatedCandidateError(cand)
            if self.candidates is not None and cand not in self.candidates:
                raise UnknownCandidateError(cand)
            seen.add(cand)

    def is_valid(self, ballot: Iterable[Candidate]) -> bool:
        '''Return True if the ballot satisfies the poll rules.'''
        try:
            self.validate(ballot)
        except BallotError:
            return False
        return True
