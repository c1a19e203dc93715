from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

Source = Union[bytes, bytearray, memoryview, str]


def _as_bytes(source: Source) -> bytes:
    if isinstance(source, str):
        return source.encode('utf-8')
    return bytes(source)


def _locate(data: bytes, position: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of a byte offset."""
    position = max(0, min(position, len(data)))
    line = data.count(b'\n', 0, position) + 1
    last_nl = data.rfind(b'\n', 0, position)
    return line, position - last_nl


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(message: str) -> Optional[str]:
    msg = message.lower()
    if "unmatched '['" in msg:
        return 'Every "[" needs a closing "]" later in the program.'
    if "unmatched ']'" in msg:
        return 'This "]" closes no loop. Remove it or add the missing "[" before it.'
    if 'unexpected end of input' in msg:
        return 'The program ended where a command was expected.'
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class BFInvalidInput(BFError):
    pass


@dataclass
class BFResourceError(BFError):
    pass


@dataclass
class BFSyntaxError(BFError):
    position: int
    line: int
    column: int
    context: str


@dataclass
class BFUnmatchedBracketError(BFError):
    unmatched_open: int
    unmatched_close: int

    @property
    def count(self) -> int:
        return self.unmatched_open + self.unmatched_close


def make_syntax_error(*, message: str, source: Source, position: int) -> BFSyntaxError:
    data = _as_bytes(source)
    line, column = _locate(data, position)
    lines = [ln.decode('utf-8', errors='replace') for ln in data.split(b'\n')]
    ctx = _build_context(lines, line, column) if data else ''
    hint = _hint_for(message)
    hint_block = f"\nHint: {hint}" if hint else ""
    ctx_block = f"\n{ctx}" if ctx else ""
    return BFSyntaxError(
        message=f"SyntaxError: {message} (line {line}, column {column}){ctx_block}{hint_block}",
        position=position,
        line=line,
        column=column,
        context=ctx,
    )


def make_bracket_error(*, unmatched_open: int, unmatched_close: int) -> BFUnmatchedBracketError:
    total = unmatched_open + unmatched_close
    return BFUnmatchedBracketError(
        message=f"Error: {total} unmatched bracket{'' if total == 1 else 's'}",
        unmatched_open=unmatched_open,
        unmatched_close=unmatched_close,
    )
