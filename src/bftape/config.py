from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import BFInvalidInput

TAPE_SIZE = 30000
PROGRAM_SIZE = 100000


class EOFPolicy(Enum):
    """What ``,`` stores when the input source is exhausted."""

    ZERO = 'zero'
    UNCHANGED = 'unchanged'
    MAX = 'max'  # 255, a C getchar() EOF stored in an unsigned char


class Backend(Enum):
    TREE = 'tree'
    FLAT = 'flat'
    SCAN = 'scan'


@dataclass(frozen=True)
class RunOptions:
    tape_size: int = TAPE_SIZE
    max_program_size: int = PROGRAM_SIZE
    eof: EOFPolicy = EOFPolicy.ZERO
    backend: Backend = Backend.TREE
    jit: bool = True

    def __post_init__(self) -> None:
        if self.tape_size <= 0:
            raise BFInvalidInput(f"tape_size must be positive, got {self.tape_size}")
        if self.max_program_size <= 0:
            raise BFInvalidInput(f"max_program_size must be positive, got {self.max_program_size}")
        # accept plain strings for the enum fields
        try:
            object.__setattr__(self, 'eof', EOFPolicy(self.eof))
            object.__setattr__(self, 'backend', Backend(self.backend))
        except ValueError as e:
            raise BFInvalidInput(str(e)) from e
