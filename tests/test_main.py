import sys
import os
import io

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import pollstv.__main__ as cli
from pollstv.election import ElectionResults

POLL_CSV = 'a,b,c,d\nc,b,a\nc,b,a\nb,c\na,b\nc,b\nb,a\nc,b,a\nd,a\na,b\n'


def test_main_csv(capsys):
    cli.main(io.StringIO(POLL_CSV), n_seats=2, seed=1, quiet=True)
    out = capsys.readouterr().out
    assert 'Received 9 ranked ballots' in out
    assert 'Quota: 4 ballots (0 spoiled, 1 exhausted)' in out
    assert '1st   a, c (4 ballots)' in out or '1st   c, a (4 ballots)' in out
    assert 'd (1 ballots)' in out


def test_main_blt_seats_from_file(capsys):
    blt = '3 2\n3 1 0\n3 2 0\n1 3 0\n0\n"X"\n"Y"\n"Z"\n"Test Poll"\n'
    cli.main(io.StringIO(blt), input_format='blt', quiet=True)
    out = capsys.readouterr().out
    assert 'Counting Test Poll' in out
    assert 'Awarding 2 seats' in out
    assert '1st   X, Y (3 ballots)' in out


def test_main_empty():
    with pytest.warns(UserWarning):
        cli.main(io.StringIO('a,b\n'), quiet=True)


def test_main_bad_format():
    with pytest.raises(ValueError):
        cli.load_ballots(io.StringIO(POLL_CSV), 'xlsx')


def test_show_partial(capsys):
    cli.show_results(ElectionResults(
        elected={'a': 2}, eliminated={'b': 0}, seats=2, quota=2,
    ))
    out = capsys.readouterr().out
    assert 'Only 1 of 2 seats filled' in out
    assert 'b (0 ballots)' in out


def test_show_nobody(capsys):
    cli.show_results(ElectionResults(
        elected={}, eliminated={}, seats=1, quota=1,
    ))
    assert 'Nobody elected' in capsys.readouterr().out


def test_main_quota_choice(capsys):
    args = cli.argparser.parse_args(['-I', '-Q', 'hare_rounded'])
    assert args.quota == 'hare_rounded'
    cli.main(io.StringIO(POLL_CSV), n_seats=2, quota=args.quota, quiet=True)
    out = capsys.readouterr().out
    assert 'Quota: 5 ballots' in out
    assert '1st   c (5 ballots)' in out
    assert 'Only 1 of 2 seats filled' in out


def test_unknown_quota_rejected():
    with pytest.raises(SystemExit):
        cli.argparser.parse_args(['-I', '-Q', 'imperiali'])
