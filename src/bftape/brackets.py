from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

import numpy as np

from .errors import Source, make_bracket_error
from .lexer import flatten

logger = logging.getLogger(__name__)

OPEN = ord('[')
CLOSE = ord(']')

Commands = Union[bytes, bytearray, np.ndarray]


class JumpTable:
    """Bracket partner for every '[' and ']' of a flat command stream.

    Backed by an int32 array of the program's length; non-bracket slots
    hold -1. The array is read-only once built.
    """

    def __init__(self, targets: np.ndarray):
        targets.setflags(write=False)
        self.targets = targets

    def __len__(self) -> int:
        return len(self.targets)

    def __contains__(self, index: int) -> bool:
        return 0 <= index < len(self.targets) and self.targets[index] >= 0

    def __getitem__(self, index: int) -> int:
        if index not in self:
            raise KeyError(index)
        return int(self.targets[index])

    def __iter__(self) -> Iterator[int]:
        return iter(int(i) for i in np.flatnonzero(self.targets >= 0))

    def pairs(self) -> List[Tuple[int, int]]:
        return [(i, int(self.targets[i])) for i in self if i < self.targets[i]]


def resolve(commands: Commands) -> JumpTable:
    """Match brackets in one pass with an explicit stack.

    Raises BFUnmatchedBracketError carrying the unmatched counts when
    any bracket has no partner.
    """
    targets = np.full(len(commands), -1, dtype=np.int32)
    stack: List[int] = []
    unmatched_close = 0

    for pos, cmd in enumerate(commands):
        if cmd == OPEN:
            stack.append(pos)
        elif cmd == CLOSE:
            if stack:
                start = stack.pop()
                targets[start] = pos
                targets[pos] = start
            else:
                unmatched_close += 1

    unmatched_open = len(stack)
    if unmatched_open or unmatched_close:
        err = make_bracket_error(unmatched_open=unmatched_open, unmatched_close=unmatched_close)
        logger.debug("%s (open=%d, close=%d)", err.message, unmatched_open, unmatched_close)
        raise err

    return JumpTable(targets)


def scan_match(commands: Commands, index: int) -> int:
    """Find the partner of the bracket at ``index`` by rescanning.

    Walks forward from '[' or backward from ']' counting nesting depth.
    O(program length) per call; the jump table is the fast path.
    """
    cmd = commands[index]
    if cmd == OPEN:
        step, here, there = 1, OPEN, CLOSE
    elif cmd == CLOSE:
        step, here, there = -1, CLOSE, OPEN
    else:
        raise ValueError(f"no bracket at index {index}")

    depth = 0
    pos = index
    while 0 <= pos < len(commands):
        c = commands[pos]
        if c == here:
            depth += 1
        elif c == there:
            depth -= 1
            if depth == 0:
                return pos
        pos += step

    if step == 1:
        raise make_bracket_error(unmatched_open=1, unmatched_close=0)
    raise make_bracket_error(unmatched_open=0, unmatched_close=1)


@dataclass(frozen=True)
class FlatProgram:
    code: np.ndarray  # uint8 command bytes
    jumps: JumpTable

    def __len__(self) -> int:
        return len(self.code)

    @classmethod
    def from_source(cls, source: Source) -> "FlatProgram":
        commands = flatten(source)
        jumps = resolve(commands)
        if commands:
            code = np.frombuffer(commands, dtype=np.uint8).copy()
        else:
            code = np.zeros(0, dtype=np.uint8)
        code.setflags(write=False)
        return cls(code=code, jumps=jumps)
