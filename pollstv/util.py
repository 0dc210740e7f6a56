'''Various utility functions for other modules of Pollstv.

There should normally be no need to use these functions directly.
'''

import operator
from typing import Any, List, Tuple, Dict, Iterable

from pollstv.ballot import Ballot, Candidate


def sorted_votes(votes: Dict[Any, int],
                 descending: bool = True,
                 ) -> List[Tuple[Any, int]]:
    '''Return votes items sorted by value.'''
    return list(sorted(
        votes.items(),
        key=operator.itemgetter(1),
        reverse=descending
    ))


def all_ranked_candidates(ballots: Iterable[Ballot]) -> List[Candidate]:
    '''Return a list of all candidates appearing in any of the ballots.

    Candidates ranked first on any ballot come first, in the order of their
    first appearance; then the remaining second preferences and so on.
    '''
    ballots = list(ballots)
    output = []
    rank_i = 0
    while True:
        used = False
        for ballot in ballots:
            if len(ballot) > rank_i:
                used = True
                if ballot[rank_i] not in output:
                    output.append(ballot[rank_i])
        if used:
            rank_i += 1
        else:
            return output


def ordinal(n: int) -> str:
    '''Return the English ordinal word for a rank: 1st, 2nd, 3rd, 4th...'''
    if 10 <= n % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(n % 10, 'th')
    return f'{n}{suffix}'
