'''Reusable transferable vote evaluator and ranking of its results.

While an :class:`pollstv.election.Election` holds the state of a single count,
the :class:`TransferableVoteSelector` holds only the counting rules. It can
evaluate any number of polls, each in a fresh election, and it can be stored
and restored by :func:`pollstv.persist.to_dict` and
:func:`pollstv.persist.from_dict`.
'''

from typing import Dict, Iterable, List, Optional, Tuple, Union

import pollstv.quota
import pollstv.util
from pollstv.ballot import Candidate
from pollstv.election import Election, ElectionResults, TIE_BREAKS
from pollstv.persist import simple_serialization


@simple_serialization
class TransferableVoteSelector:
    '''Select candidates by single transferable vote.

    See :mod:`pollstv.election` for the counting process.

    :param quota_function: A callable producing the quota threshold from the
        number of valid ballots and number of seats. The quota functions in
        :mod:`pollstv.quota` can be referenced by string name.
    :param tie_break: Policy for elimination ties, ``order`` or ``random``.
    :param seed: Seed for the random surplus draw. With a fixed seed, the
        selector gives the same result for the same poll every time.
    '''
    def __init__(self,
                 quota_function: Union[str, pollstv.quota.QuotaFunction] =
                     'droop',
                 tie_break: str = 'order',
                 seed: Optional[int] = None,
                 ):
        if tie_break not in TIE_BREAKS:
            raise ValueError(f'invalid tie break policy: {tie_break!r},'
                             ' supported: ' + ', '.join(TIE_BREAKS))
        self.quota_function = pollstv.quota.construct(quota_function)
        self.tie_break = tie_break
        self.seed = seed

    def evaluate(self,
                 candidates: Iterable[Candidate],
                 ballots: Iterable[Iterable[Candidate]],
                 n_seats: int = 1,
                 ) -> ElectionResults:
        '''Count a poll by transferable vote.

        :param candidates: Candidates standing in the poll.
        :param ballots: Ranked ballots.
        :param n_seats: Number of candidates to elect.
        '''
        return self.election(candidates, ballots, n_seats).results()

    def election(self,
                 candidates: Iterable[Candidate],
                 ballots: Iterable[Iterable[Candidate]],
                 n_seats: int = 1,
                 ) -> Election:
        '''Prepare an uncounted election under the rules of this selector.'''
        return Election(
            candidates,
            ballots,
            n_seats,
            quota_function=self.quota_function,
            tie_break=self.tie_break,
            seed=self.seed,
        )


def rank_elected(elected: Dict[Candidate, int]
                 ) -> List[Tuple[int, int, List[Candidate]]]:
    '''Rank elected candidates by their ballot counts at election.

    Candidates with equal counts share a rank; the next count gets the next
    rank number (so two candidates tied for 1st are followed by the 2nd).

    :param elected: Elected candidates mapped to their ballot counts.
    :returns: A list of (rank, count, candidates) tuples, best rank first.
        Tied candidates keep their order of election.
    '''
    ranking = []
    for cand, count in pollstv.util.sorted_votes(elected):
        if ranking and ranking[-1][1] == count:
            ranking[-1][2].append(cand)
        else:
            ranking.append((len(ranking) + 1, count, [cand]))
    return ranking
