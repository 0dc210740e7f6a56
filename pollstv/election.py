'''Single transferable vote counting of a multi-winner ranked poll.

An :class:`Election` is built from the candidates standing, the ballots cast
and the number of seats. At construction, spoiled ballots (those ranking any
candidate that is not standing) are purged. Calling :meth:`Election.results`
then runs the count:

1.  Every valid ballot is put on the pile of its first preference.
2.  In each round, all candidates whose piles reach the quota are elected at
    once, their pile sizes recorded. From each such pile, as many ballots as
    the surplus over the quota are drawn at random and moved to the pile of
    their next preference that is still in the race; the rest of the pile
    stays with the winner and takes no further part.
3.  If nobody reached the quota, the candidate with the smallest pile is
    eliminated, their pile size recorded, and all their ballots moved on
    the same way.
4.  Ballots with no further preference still in the race are exhausted.
5.  Rounds repeat until all seats are filled or nobody is left to eliminate;
    in the latter case, the count halts with a partial result.

The only random element is the surplus draw (and, optionally, elimination
tie breaking); both use a generator private to the election, seeded by the
`seed` parameter to allow an exact replay.
'''

import dataclasses
import enum
import logging
import random
from typing import Any, List, Dict, Tuple, Iterable, Optional, Union

import pollstv.persist
import pollstv.quota
from pollstv.ballot import Ballot, Candidate, purge_spoiled


TIE_BREAKS = ('order', 'random')

logger = logging.getLogger(__name__)


class VotingSystemError(Exception):
    '''An election with a valid setup ended up in an unresolvable state.'''
    pass


class CountState(enum.Enum):
    '''Stage of the counting process.'''
    COUNTING = 'counting'
    WINNER_ROUND = 'winner'
    LOSER_ROUND = 'loser'
    DONE = 'done'


@dataclasses.dataclass(frozen=True)
class Round:
    '''Record of a single counting round.

    :param number: 1-based round number.
    :param kind: :attr:`CountState.WINNER_ROUND` if candidates were elected
        in the round, :attr:`CountState.LOSER_ROUND` if one was eliminated.
    :param totals: Pile sizes of all candidates in the race at the start of
        the round.
    :param decided: Candidates elected or eliminated in the round.
    :param transferred: Ballots moved to another candidate's pile.
    :param exhausted: Moved ballots that had no preference left in the race.
    :param kept: Ballots that stayed with the elected candidates (never
        moved on). Always zero for loser rounds.
    '''
    number: int
    kind: CountState
    totals: Dict[Candidate, int]
    decided: List[Candidate]
    transferred: int = 0
    exhausted: int = 0
    kept: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'kind': self.kind.value,
            'totals': pollstv.persist.serialize_value(self.totals),
            'decided': pollstv.persist.serialize_value(self.decided),
            'transferred': self.transferred,
            'exhausted': self.exhausted,
            'kept': self.kept,
        }


@dataclasses.dataclass(frozen=True)
class ElectionResults:
    '''Final state of a counted election.

    :param elected: Elected candidates mapped to their pile size at the time
        of their election, in the order of election.
    :param eliminated: Eliminated candidates mapped to their pile size at the
        time of their elimination, in the order of elimination.
    :param seats: Number of seats to be filled.
    :param quota: Number of ballots needed for election.
    :param spoiled_count: Ballots purged before counting.
    :param exhausted_count: Ballots that ran out of preferences, including
        ballots that ranked nobody.
    :param continuing: Pile sizes of candidates neither elected nor
        eliminated when the count finished.
    :param rounds: Records of all counting rounds.
    '''
    elected: Dict[Candidate, int]
    eliminated: Dict[Candidate, int]
    seats: int
    quota: int
    spoiled_count: int = 0
    exhausted_count: int = 0
    continuing: Dict[Candidate, int] = dataclasses.field(default_factory=dict)
    rounds: List[Round] = dataclasses.field(default_factory=list)

    @property
    def complete(self) -> bool:
        '''True if all seats were filled.'''
        return len(self.elected) == self.seats

    def to_dict(self) -> Dict[str, Any]:
        return {
            'elected': pollstv.persist.serialize_value(self.elected),
            'eliminated': pollstv.persist.serialize_value(self.eliminated),
            'seats': self.seats,
            'quota': self.quota,
            'spoiled_count': self.spoiled_count,
            'exhausted_count': self.exhausted_count,
            'continuing': pollstv.persist.serialize_value(self.continuing),
            'rounds': [rnd.to_dict() for rnd in self.rounds],
        }


class Election:
    '''A single count of a multi-winner ranked poll by transferable vote.

    The election is counted once; build a new instance for every tally.

    :param candidates: Candidates standing. Their order is the order used
        for breaking elimination ties under the default policy.
    :param ballots: Ballots cast, each an ordering of candidates from most to
        least preferred. Ballots ranking anyone not standing are purged.
    :param seats: Number of candidates to elect.
    :param quota_function: A callable producing the quota from the number of
        valid ballots and the number of seats, or the name of one from
        :mod:`pollstv.quota`.
    :param tie_break: How to choose whom to eliminate when more candidates
        share the smallest pile. ``order`` eliminates the one listed first
        in `candidates`, ``random`` draws one at random.
    :param seed: Seed for the random generator drawing surplus ballots (and
        breaking ties under the ``random`` policy). None leaves the count
        unreproducible.
    '''
    def __init__(self,
                 candidates: Iterable[Candidate],
                 ballots: Iterable[Iterable[Candidate]],
                 seats: int,
                 quota_function: Union[str, pollstv.quota.QuotaFunction] =
                     'droop',
                 tie_break: str = 'order',
                 seed: Optional[int] = None,
                 ):
        if tie_break not in TIE_BREAKS:
            raise ValueError(f'invalid tie break policy: {tie_break!r},'
                             ' supported: ' + ', '.join(TIE_BREAKS))
        self.candidates = list(candidates)
        self.seats = seats
        self.quota_function = pollstv.quota.construct(quota_function)
        self.tie_break = tie_break
        self.seed = seed
        self.ballots, self.spoiled_count = purge_spoiled(
            self.candidates, ballots
        )
        logger.info('%d spoiled ballots purged', self.spoiled_count)
        self.state = CountState.COUNTING
        self.elected: Dict[Candidate, int] = {}
        self.eliminated: Dict[Candidate, int] = {}
        self._random = random.Random(seed)
        self._exhausted = 0
        self._rounds: List[Round] = []

    def total_votes(self) -> int:
        '''Return the number of valid ballots.'''
        return len(self.ballots)

    def quota(self) -> int:
        '''Return the number of ballots a candidate must reach to get a seat.'''
        return self.quota_function(self.total_votes(), self.seats)

    def results(self) -> ElectionResults:
        '''Count the election and return its results.

        :raises VotingSystemError: If the election was already counted, or if
            more candidates reach the quota than there are seats left (only
            possible with quotas lower than Droop).
        '''
        if self.state is not CountState.COUNTING:
            raise VotingSystemError('election already counted')
        quota = self.quota()
        logger.info('quota computed at %d from %d ballots for %d seats',
                    quota, self.total_votes(), self.seats)
        piles = self._initial_piles()
        while len(self.elected) < self.seats:
            number = len(self._rounds) + 1
            totals = {cand: len(pile) for cand, pile in piles.items()}
            logger.debug('round %d pile sizes: %s', number, totals)
            winners = [cand for cand, size in totals.items() if size >= quota]
            if winners:
                rnd = self._winner_round(number, piles, totals, winners, quota)
            else:
                loser = self._select_loser(totals)
                if loser is None:
                    logger.info('nobody left to eliminate, halting with'
                                ' %d of %d seats filled',
                                len(self.elected), self.seats)
                    break
                rnd = self._loser_round(number, piles, totals, loser)
            self._rounds.append(rnd)
        else:
            logger.info('%d seats filled, terminating', self.seats)
        self.state = CountState.DONE
        return ElectionResults(
            elected=dict(self.elected),
            eliminated=dict(self.eliminated),
            seats=self.seats,
            quota=quota,
            spoiled_count=self.spoiled_count,
            exhausted_count=self._exhausted,
            continuing={cand: len(pile) for cand, pile in piles.items()},
            rounds=list(self._rounds),
        )

    def _initial_piles(self) -> Dict[Candidate, List[Ballot]]:
        piles = {cand: [] for cand in self.candidates}
        for ballot in self.ballots:
            if ballot:
                piles[ballot[0]].append(ballot)
            else:
                self._exhausted += 1
        return piles

    def _winner_round(self,
                      number: int,
                      piles: Dict[Candidate, List[Ballot]],
                      totals: Dict[Candidate, int],
                      winners: List[Candidate],
                      quota: int,
                      ) -> Round:
        self.state = CountState.WINNER_ROUND
        if len(winners) > self.seats - len(self.elected):
            raise VotingSystemError(
                f'{len(winners)} candidates reached quota {quota} but only'
                f' {self.seats - len(self.elected)} seats remain'
            )
        # All winners of the round must be out of the race before any
        # surplus moves, or ballots could be transferred among them.
        winner_piles = {}
        for cand in winners:
            self.elected[cand] = totals[cand]
            winner_piles[cand] = piles.pop(cand)
        logger.info('round %d: %s elected by quota', number, winners)
        transferred = exhausted = kept = 0
        for cand, pile in winner_piles.items():
            surplus = len(pile) - quota
            drawn = self._random.sample(pile, surplus)
            moved, lost = self._transfer(drawn, piles)
            logger.debug('%s: %d surplus ballots drawn, %d transferred,'
                         ' %d exhausted', cand, surplus, moved, lost)
            transferred += moved
            exhausted += lost
            kept += len(pile) - surplus
        return Round(
            number, CountState.WINNER_ROUND, totals, winners,
            transferred=transferred, exhausted=exhausted, kept=kept,
        )

    def _loser_round(self,
                     number: int,
                     piles: Dict[Candidate, List[Ballot]],
                     totals: Dict[Candidate, int],
                     loser: Candidate,
                     ) -> Round:
        self.state = CountState.LOSER_ROUND
        self.eliminated[loser] = totals[loser]
        logger.info('round %d: eliminating %s', number, loser)
        transferred, exhausted = self._transfer(piles.pop(loser), piles)
        logger.debug('%s: %d ballots transferred, %d exhausted',
                     loser, transferred, exhausted)
        return Round(
            number, CountState.LOSER_ROUND, totals, [loser],
            transferred=transferred, exhausted=exhausted,
        )

    def _select_loser(self, totals: Dict[Candidate, int]
                      ) -> Optional[Candidate]:
        if not totals:
            return None
        fewest = min(totals.values())
        tied = [cand for cand, size in totals.items() if size == fewest]
        if len(tied) == 1:
            return tied[0]
        logger.info('tie for elimination at %d ballots: %s, broken by %s',
                    fewest, tied, self.tie_break)
        if self.tie_break == 'random':
            return self._random.choice(tied)
        else:
            # piles keep the candidate declaration order
            return tied[0]

    def _transfer(self,
                  ballots: List[Ballot],
                  piles: Dict[Candidate, List[Ballot]],
                  ) -> Tuple[int, int]:
        transferred = exhausted = 0
        for ballot in ballots:
            remaining = self._strip_inactive(ballot)
            if remaining:
                piles[remaining[0]].append(remaining)
                transferred += 1
            else:
                exhausted += 1
        self._exhausted += exhausted
        return transferred, exhausted

    def _strip_inactive(self, ballot: Ballot) -> Ballot:
        return tuple(
            cand for cand in ballot
            if cand not in self.elected and cand not in self.eliminated
        )


def tally(candidates: Iterable[Candidate],
          ballots: Iterable[Iterable[Candidate]],
          seats: int,
          **kwargs,
          ) -> ElectionResults:
    '''Count an election in one go.

    Accepts the same arguments as :class:`Election`.
    '''
    return Election(candidates, ballots, seats, **kwargs).results()
