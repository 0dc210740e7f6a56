"""Shared functionality for ballot file I/O. Internal."""

from __future__ import annotations

import dataclasses
from typing import List, Tuple, Callable, Iterable, TextIO, Optional

from pollstv.ballot import Ballot, Candidate


class NotSupportedInFormat(Exception):
    """Signals that the given element is not supported by the I/O format."""

    FORMAT: str = NotImplemented

    def __init__(self, what: str):
        super().__init__(f'{what} not supported by {self.FORMAT}')


class ParseError(Exception):
    """An input that is invalid according to the given format was detected."""
    pass


@dataclasses.dataclass
class ElectionData:
    """A container for data loaded from a ballot file."""
    candidates: List[Candidate]
    ballots: List[Ballot]
    n_seats: Optional[int] = None
    election_name: Optional[str] = None


def loaders(line_loader: Callable[..., ElectionData]
            ) -> Tuple[Callable[..., ElectionData],
                       Callable[..., ElectionData]]:
    """Create load() and loads() functions from an iterating function."""

    def load(file: TextIO, **kwargs) -> ElectionData:
        return line_loader(iter(file), **kwargs)

    def loads(text: str, **kwargs) -> ElectionData:
        return line_loader(iter(text.split('\n')), **kwargs)

    return load, loads


def dumpers(line_dumper: Callable[..., Iterable[str]]
            ) -> Tuple[Callable[..., None], Callable[..., str]]:
    """Create dump() and dumps() functions from a line generator function."""

    def dump(file: TextIO, *args, **kwargs) -> None:
        for line in line_dumper(*args, **kwargs):
            if not line.endswith('\n'):
                line += '\n'
            file.write(line)

    def dumps(*args, **kwargs) -> str:
        return ''.join(
            line + ('' if line.endswith('\n') else '\n')
            for line in line_dumper(*args, **kwargs)
        )

    return dump, dumps
