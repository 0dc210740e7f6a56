import sys
import os
import random
import dataclasses

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import pollstv.election
from pollstv.election import Election, CountState, VotingSystemError

MULTIROUND_CANDIDATES = list('abcd')
MULTIROUND_BALLOTS = [
    tuple('cba'),
    tuple('cba'),
    tuple('bc'),
    tuple('ab'),
    tuple('cb'),
    tuple('ba'),
    tuple('cba'),
    tuple('da'),
    tuple('ab'),
]


def random_poll(seed):
    gen = random.Random(seed)
    candidates = [f'opt{i}' for i in range(gen.randint(1, 8))]
    ballots = []
    for i in range(gen.randint(0, 120)):
        ballot = gen.sample(candidates, gen.randint(0, len(candidates)))
        if gen.random() < .05:
            ballot.insert(gen.randint(0, len(ballot)), 'withdrawn')
        ballots.append(ballot)
    return candidates, ballots, gen.randint(1, len(candidates) + 1)


def test_quota_calculation():
    election = Election(['a'], [()] * 100, 2)
    assert election.total_votes() == 100
    assert election.quota() == 34


def test_election_results():
    election = Election(MULTIROUND_CANDIDATES, MULTIROUND_BALLOTS, 2)
    assert election.quota() == 4
    results = election.results()
    assert results.elected == {'a': 4, 'c': 4}
    assert results.eliminated == {'b': 2, 'd': 1}
    assert list(results.elected) == ['c', 'a']
    assert list(results.eliminated) == ['d', 'b']
    assert [rnd.kind for rnd in results.rounds] == [
        CountState.WINNER_ROUND,
        CountState.LOSER_ROUND,
        CountState.LOSER_ROUND,
        CountState.WINNER_ROUND,
    ]
    assert results.rounds[1].totals == {'a': 2, 'b': 2, 'd': 1}
    # the b, c ballot has nobody left after b is eliminated
    assert results.exhausted_count == 1
    assert results.complete


def test_spoiled_vote_removal():
    election = Election(['a'], [['a'], ['a'], ['z'], ['a']], 1)
    assert election.spoiled_count == 1
    assert election.quota() == 2
    results = election.results()
    assert results.spoiled_count == 1
    assert results.elected == {'a': 3}
    assert results.eliminated == {}


def test_spoiled_anywhere_on_ballot():
    election = Election(['a', 'b'], [['a', 'b', 'z'], ['b'], ['a']], 1)
    assert election.spoiled_count == 1
    assert election.total_votes() == 2


def test_batch_election():
    ballots = [('a', 'c')] * 4 + [('b', 'c')] * 4 + [('c',)]
    results = Election('abc', ballots, 2).results()
    assert len(results.rounds) == 1
    assert results.rounds[0].decided == ['a', 'b']
    assert results.elected == {'a': 4, 'b': 4}
    assert results.continuing == {'c': 1}


def test_surplus_transfer():
    ballots = [('a', 'b')] * 6 + [('c',), ('b',)]
    results = Election('abc', ballots, 2, seed=1711).results()
    assert results.quota == 3
    assert results.elected == {'a': 6, 'b': 4}
    first, second = results.rounds
    assert (first.transferred, first.exhausted, first.kept) == (3, 0, 3)
    assert (second.transferred, second.exhausted, second.kept) == (0, 1, 3)
    assert results.exhausted_count == 1


def test_surplus_drawn_at_random():
    ballots = [('a', 'b')] * 4 + [('a', 'c')] * 4 + [('a',)] * 2
    ballots += [('b',), ('c',)]
    outcomes = set()
    for seed in range(30):
        results = Election('abc', ballots, 1, seed=seed).results()
        assert results.quota == 7
        assert results.elected == {'a': 10}
        (rnd,) = results.rounds
        assert rnd.transferred + rnd.exhausted == 3
        assert rnd.kept == 7
        assert rnd.exhausted == results.exhausted_count
        moved_b = results.continuing['b'] - 1
        moved_c = results.continuing['c'] - 1
        assert moved_b + moved_c == rnd.transferred
        outcomes.add((moved_b, moved_c, rnd.exhausted))
    assert len(outcomes) > 1


def test_batch_winners_leave_before_surplus_moves():
    ballots = [('a', 'b', 'c')] * 5 + [('b', 'a', 'c')] * 5 + [('c',)] * 2
    for seed in range(20):
        results = Election('abc', ballots, 3, seed=seed).results()
        assert results.quota == 4
        assert results.elected == {'a': 5, 'b': 5, 'c': 4}
        assert results.rounds[0].decided == ['a', 'b']
        assert results.rounds[0].transferred == 2


def test_results_frozen():
    election = Election(MULTIROUND_CANDIDATES, MULTIROUND_BALLOTS, 2, seed=5)
    results = election.results()
    with pytest.raises(dataclasses.FrozenInstanceError):
        results.quota = 1
    with pytest.raises(dataclasses.FrozenInstanceError):
        results.rounds[0].kept = 0
    results.elected.clear()
    assert len(election.elected) == 2


def test_no_elect_remaining_shortcut():
    # the last continuing candidate is still eliminated if short of quota
    ballots = [('a', 'b')] * 6 + [('c',)] * 2 + [('b',)]
    results = Election('abc', ballots, 2, seed=1711).results()
    assert results.quota == 4
    assert results.elected == {'a': 6}
    assert results.eliminated == {'c': 2, 'b': 3}
    assert not results.complete


def test_tie_break_order():
    ballots = [('z',), ('z',), ('x', 'z'), ('y', 'x')]
    results = Election('xyz', ballots, 1).results()
    assert results.eliminated == {'x': 1}
    assert results.elected == {'z': 3}
    results = Election('yxz', ballots, 1).results()
    assert results.eliminated == {'y': 1, 'x': 2}
    assert results.elected == {'z': 3}


def test_tie_break_random():
    ballots = [('z',), ('z',), ('x', 'z'), ('y', 'x')]
    election = Election('xyz', ballots, 1, tie_break='random', seed=3)
    results = election.results()
    assert next(iter(results.eliminated)) in ('x', 'y')
    assert not set(results.elected) & set(results.eliminated)
    assert Election(
        'xyz', ballots, 1, tie_break='random', seed=3
    ).results() == results


def test_more_seats_than_candidates():
    results = Election('ab', [('a',), ('a',), ('b',)], 3).results()
    assert results.quota == 1
    assert results.elected == {'a': 2, 'b': 1}
    assert not results.complete


def test_no_ballots():
    results = Election('abc', [], 1).results()
    assert results.elected == {}
    assert results.eliminated == {'a': 0, 'b': 0, 'c': 0}
    assert len(results.rounds) == 3


def test_counted_twice():
    election = Election(MULTIROUND_CANDIDATES, MULTIROUND_BALLOTS, 2)
    election.results()
    assert election.state == CountState.DONE
    with pytest.raises(VotingSystemError):
        election.results()


def test_low_quota_overflow():
    election = Election('abcd', [('a',), ('b',), ('c',), ('d',)], 3,
                        quota_function='hare_rounded')
    assert election.quota() == 1
    with pytest.raises(VotingSystemError):
        election.results()


def test_bad_setup():
    with pytest.raises(ValueError):
        Election('ab', [], 1, tie_break='alphabetical')
    with pytest.raises(KeyError):
        Election('ab', [], 1, quota_function='imperiali')


@pytest.mark.parametrize('seed', list(range(40)))
def test_invariants(seed):
    candidates, ballots, seats = random_poll(seed)
    election = Election(candidates, ballots, seats, seed=seed)
    results = election.results()
    valid = election.total_votes()
    assert valid + results.spoiled_count == len(ballots)
    assert valid == (
        sum(rnd.kept for rnd in results.rounds)
        + sum(results.continuing.values())
        + results.exhausted_count
    )
    assert not set(results.elected) & set(results.eliminated)
    assert len(results.elected) <= seats
    assert len(results.rounds) <= len(candidates)
    assert all(count >= results.quota for count in results.elected.values())


@pytest.mark.parametrize('seed', [0, 1711, 2024])
def test_seeded_replay(seed):
    candidates, ballots, seats = random_poll(seed)
    first = Election(candidates, ballots, seats, seed=seed).results()
    second = Election(candidates, ballots, seats, seed=seed).results()
    assert first == second


def test_tally():
    results = pollstv.election.tally(
        MULTIROUND_CANDIDATES, MULTIROUND_BALLOTS, 2, seed=5
    )
    assert results.elected == {'c': 4, 'a': 4}


def test_results_to_dict():
    results = Election(['a'], [['a'], ['a'], ['z'], ['a']], 1).results()
    assert results.to_dict() == {
        'elected': {'a': 3},
        'eliminated': {},
        'seats': 1,
        'quota': 2,
        'spoiled_count': 1,
        'exhausted_count': 1,
        'continuing': {},
        'rounds': [{
            'number': 1,
            'kind': 'winner',
            'totals': {'a': 3},
            'decided': ['a'],
            'transferred': 0,
            'exhausted': 1,
            'kept': 2,
        }],
    }
