"""A commandline tool for quick counting of ranked polls by STV.

Reads candidates and ballots from a poll export (CSV) or a BLT ballot file,
counts them by single transferable vote and shows the elected candidates
ranked by their ballot counts.
"""

import argparse
import io
import logging
import sys
import warnings
from typing import Optional

import pollstv.io.blt
import pollstv.io.csv
import pollstv.quota
import pollstv.util
from pollstv.election import ElectionResults, TIE_BREAKS
from pollstv.evaluate import TransferableVoteSelector, rank_elected
from pollstv.io.core import ElectionData

argparser = argparse.ArgumentParser(
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load candidates and ballots from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load candidates and ballots from standard input',
)
argparser.add_argument(
    '-f', '--input-format',
    help='format of input ballot data',
    choices=['csv', 'blt'],
    default='csv',
)
argparser.add_argument(
    '-n', '--n-seats',
    type=int,
    help=(
        'award this many seats in the election (overrides the number'
        ' given in the ballot file); default (None) gives preference'
        ' to the ballot file and fills in 1 (single-winner election)'
        ' if there is none'
    ),
)
argparser.add_argument(
    '-t', '--tie-break',
    choices=TIE_BREAKS,
    default='order',
    help=(
        'how to choose whom to eliminate when more candidates have the'
        ' fewest ballots: first listed, or at random'
    ),
)
argparser.add_argument(
    '-S', '--seed',
    type=int,
    help='seed for the random surplus draw, to make the count repeatable',
)
argparser.add_argument(
    '-Q', '--quota',
    choices=sorted(pollstv.quota.QUOTAS),
    default='droop',
    help='quota a candidate must reach to be elected',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all counting log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any counting log messages',
)

INPUT_FORMATS = {
    'csv': pollstv.io.csv.load,
    'blt': pollstv.io.blt.load,
}


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         input_format: str = 'csv',
         n_seats: Optional[int] = None,
         tie_break: str = 'order',
         seed: Optional[int] = None,
         quota: str = 'droop',
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    data = load_ballots(input_file, input_format=input_format)
    if not data.candidates:
        warnings.warn('no candidates standing: cannot count, terminating')
        return
    if not data.ballots:
        warnings.warn('no ballots cast: cannot count, terminating')
        return
    if n_seats is None:
        n_seats = data.n_seats if data.n_seats else 1
    selector = TransferableVoteSelector(
        quota_function=quota, tie_break=tie_break, seed=seed
    )
    print()
    if data.election_name:
        print(f'Counting {data.election_name}')
    show_ballot_stats(data, n_seats)
    print()
    print('Counting the ballots...')
    results = selector.evaluate(data.candidates, data.ballots, n_seats)
    print()
    print('Election result:')
    show_results(results)


def load_ballots(input_file: io.TextIOBase,
                 input_format: str,
                 ) -> ElectionData:
    """Load candidates and ballots from the given file."""
    try:
        loader = INPUT_FORMATS[input_format]
    except KeyError as e:
        raise ValueError(
            f'invalid input ballot file format: {input_format}, '
            'supported: ' + ', '.join(INPUT_FORMATS.keys())
        ) from e
    return loader(input_file)


def show_ballot_stats(data: ElectionData, n_seats: int) -> None:
    print(f'Received {len(data.ballots)} ranked ballots')
    print(f'Awarding {n_seats} seats')
    print(f'{len(data.candidates)} candidates standing:')
    for cand in data.candidates:
        print(' ' * 10 + str(cand))


def show_results(results: ElectionResults) -> None:
    """Show the elected candidates by rank, then the eliminated ones."""
    print(f'Quota: {results.quota} ballots'
          f' ({results.spoiled_count} spoiled,'
          f' {results.exhausted_count} exhausted)')
    if not results.elected:
        print('Nobody elected')
    else:
        ranking = rank_elected(results.elected)
        left_col = [pollstv.util.ordinal(rank) for rank, _, _ in ranking]
        n_just_chars = len(max(left_col, key=len))
        for left, (rank, count, cands) in zip(left_col, ranking):
            names = ', '.join(str(cand) for cand in cands)
            print(left.rjust(n_just_chars), ' ', f'{names} ({count} ballots)')
    if not results.complete:
        print(f'Only {len(results.elected)} of {results.seats} seats filled')
    if results.eliminated:
        print()
        print('Eliminated:')
        for cand, count in results.eliminated.items():
            print(' ' * 10 + f'{cand} ({count} ballots)')


def cli() -> None:
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))


if __name__ == '__main__':
    cli()
