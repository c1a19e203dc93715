from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from .errors import BFInvalidInput, Source


class TokenKind(Enum):
    RIGHT = '>'
    LEFT = '<'
    INC = '+'
    DEC = '-'
    OUTPUT = '.'
    INPUT = ','
    LOOP_START = '['
    LOOP_END = ']'
    EOF = ''

    @property
    def char(self) -> str:
        return self.value


COMMANDS = b'><+-.,[]'
_KIND_BY_BYTE = {ord(k.value): k for k in TokenKind if k is not TokenKind.EOF}
_NON_COMMANDS = bytes(b for b in range(256) if b not in COMMANDS)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    position: int


def to_buffer(source: Source) -> bytes:
    if isinstance(source, str):
        return source.encode('utf-8')
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    raise BFInvalidInput(f"source must be bytes or str, got {type(source).__name__}")


class Tokenizer:
    """Single-token lookahead cursor over a command buffer.

    Non-command bytes are skipped while scanning. Once the end of the
    buffer is reached every further peek yields an EOF token.
    """

    def __init__(self, source: Optional[Source], length: Optional[int] = None):
        if source is None:
            raise BFInvalidInput('source is missing')
        if length is not None and length < 0:
            raise BFInvalidInput(f"negative source length: {length}")
        self.source = to_buffer(source)
        self.length = len(self.source) if length is None else min(length, len(self.source))
        self.position = 0
        self._current: Optional[Token] = None

    def _scan(self) -> Token:
        pos = self.position
        src = self.source
        while pos < self.length:
            kind = _KIND_BY_BYTE.get(src[pos])
            if kind is not None:
                self.position = pos
                return Token(kind, pos)
            pos += 1
        self.position = self.length
        return Token(TokenKind.EOF, self.length)

    def peek_token(self) -> Token:
        if self._current is None:
            self._current = self._scan()
        return self._current

    def peek(self) -> TokenKind:
        return self.peek_token().kind

    def advance(self) -> None:
        tok = self.peek_token()
        if tok.kind is TokenKind.EOF:
            return
        self.position = tok.position + 1
        self._current = None

    def next_token(self) -> Token:
        tok = self.peek_token()
        self.advance()
        return tok

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind is TokenKind.EOF:
                return


def tokenize(source: Source) -> List[Token]:
    return list(Tokenizer(source))


def flatten(source: Source) -> bytes:
    """Strip everything but the eight command characters."""
    data = to_buffer(source)
    return data.translate(None, _NON_COMMANDS)
