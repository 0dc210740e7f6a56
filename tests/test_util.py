import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import pollstv.util


@pytest.mark.parametrize(('n', 'word'), [
    (1, '1st'),
    (2, '2nd'),
    (3, '3rd'),
    (4, '4th'),
    (11, '11th'),
    (12, '12th'),
    (13, '13th'),
    (21, '21st'),
    (102, '102nd'),
    (111, '111th'),
])
def test_ordinal(n, word):
    assert pollstv.util.ordinal(n) == word


def test_all_ranked_candidates():
    ballots = [('c', 'b'), ('a',), ('c', 'd', 'e'), ()]
    assert pollstv.util.all_ranked_candidates(ballots) == list('cabde')
    assert pollstv.util.all_ranked_candidates([]) == []


def test_sorted_votes():
    votes = {'a': 1, 'b': 3, 'c': 2}
    assert pollstv.util.sorted_votes(votes) == [('b', 3), ('c', 2), ('a', 1)]
