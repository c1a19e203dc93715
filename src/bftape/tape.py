from __future__ import annotations

from typing import List

import numpy as np

from .config import TAPE_SIZE
from .errors import BFInvalidInput, BFResourceError


class Tape:
    """Fixed-size byte memory with a single cursor.

    Cell values wrap modulo 256. The cursor wraps modulo the tape length,
    so moving left of cell 0 lands on the last cell and vice versa.
    """

    def __init__(self, size: int = TAPE_SIZE):
        if size <= 0:
            raise BFInvalidInput(f"tape size must be positive, got {size}")
        try:
            self.cells = np.zeros(size, dtype=np.uint8)
        except MemoryError as e:
            raise BFResourceError(f"Error: Out of memory allocating a {size} cell tape") from e
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> int:
        return int(self.cells[index])

    def __setitem__(self, index: int, value: int) -> None:
        self.cells[index] = value & 0xFF

    def reset(self) -> None:
        self.cells[:] = 0
        self.cursor = 0

    # ===== Current cell =====

    @property
    def value(self) -> int:
        return int(self.cells[self.cursor])

    @value.setter
    def value(self, v: int) -> None:
        self.cells[self.cursor] = v & 0xFF

    def move(self, offset: int) -> None:
        self.cursor = (self.cursor + offset) % len(self.cells)

    def add(self, delta: int) -> None:
        self.cells[self.cursor] = (int(self.cells[self.cursor]) + delta) & 0xFF

    # ===== Debug =====

    def format_cells(self, count: int = 100, per_row: int = 8) -> str:
        """Rows of decimal cell values from cell 0, the cursor cell bracketed."""
        count = min(count, len(self.cells))
        rows: List[str] = []
        for start in range(0, count, per_row):
            vals = []
            for i in range(start, min(start + per_row, count)):
                v = str(int(self.cells[i]))
                vals.append(f"[{v}]" if i == self.cursor else v)
            rows.append(f"{start:5d}: " + " ".join(vals))
        return "\n".join(rows)
