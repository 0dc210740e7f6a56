'''Quota functions deciding how many ballots a candidate needs for a seat.

A quota function takes the total number of valid ballots and the number of
seats to fill and returns the number of ballots a pile must reach for its
candidate to be elected. The counting engine works with whole ballots, so all
quota functions here return integers.

All supported quota functions are assembled in the `QUOTAS` dictionary keyed
by their name. `get()` retrieves from this dictionary by string key;
`construct()` also accepts callables and passes them through.
'''

import math
from fractions import Fraction
from typing import Callable, Dict, Union


QuotaFunction = Callable[[int, int], int]

QUOTAS: Dict[str, QuotaFunction] = {}


def quota_mark(func: QuotaFunction) -> QuotaFunction:
    '''Register a quota function under its own name.'''
    QUOTAS[func.__name__] = func
    return func


def get(quota_def: str) -> QuotaFunction:
    '''Return a quota function by its name.'''
    try:
        return QUOTAS[quota_def]
    except KeyError:
        raise KeyError(f'unknown quota: {quota_def}')


def construct(quota_def: Union[str, QuotaFunction]) -> QuotaFunction:
    '''Construct a quota function.

    Get a quota function by its name from the register. If a custom
    callable is given, pass it through unchanged.
    '''
    return quota_def if hasattr(quota_def, '__call__') else get(quota_def)


@quota_mark
def droop(votes: int, seats: int) -> int:
    '''Droop quota, the most widely used one.

    This is the smallest integer quota guaranteeing the number of passing
    candidates will not be higher than the number of seats. With 100 ballots
    and 2 seats, it is 34.
    '''
    return int(Fraction(votes, seats + 1)) + 1


@quota_mark
def hagenbach_bischoff_ceil(votes: int, seats: int) -> int:
    '''Hagenbach-Bischoff quota, rounding up.

    Identical to the Droop quota unless the number of ballots is divisible
    by the number of seats plus one; then it is one ballot lower.
    '''
    return int(math.ceil(Fraction(votes, seats + 1)))


@quota_mark
def hare_rounded(votes: int, seats: int) -> int:
    '''Hare quota, rounded with halves going up.

    Much higher than Droop for small seat counts; candidates elected by it
    leave fewer surplus ballots to transfer.
    '''
    return _round_half_up(Fraction(votes, seats))


def _round_half_up(var: Fraction) -> int:
    if var.limit_denominator(2) == var:
        # This concerns halves (rounding up) and integrals (no effect)
        return int(math.ceil(var))
    else:
        return int(round(var))
