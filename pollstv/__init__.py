"""Pollstv - single transferable vote counting for ranked polls.

Pollstv counts multi-winner ranked polls by single transferable vote (STV).
It takes the candidates standing, the ranked ballots cast and the number of
seats, and determines who is elected, recording for every candidate elected
or eliminated the number of ballots they held when that was decided.

-   The ``election`` module holds the counting engine itself, the
    :class:`Election`, and its results.
-   The ``evaluate`` module wraps the counting rules into a reusable,
    serializable evaluator and ranks the elected candidates for display.
-   The ``ballot`` module defines ballots, purges spoiled ones and offers
    a validator to the layer accepting votes.
-   The ``quota`` module provides the quota functions (Droop by default).
-   The ``io`` subpackage reads and writes ballot files.

Receiving, storing and replacing votes is left to the application around
the engine; Pollstv only counts.
"""
