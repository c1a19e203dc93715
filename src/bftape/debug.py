from __future__ import annotations

from typing import Iterable, List

from .errors import Source
from .lexer import Token, TokenKind, Tokenizer


def _tokens(source_or_tokens) -> Iterable[Token]:
    if isinstance(source_or_tokens, (bytes, bytearray, memoryview, str)):
        return Tokenizer(source_or_tokens)
    return source_or_tokens


def format_tokens(source_or_tokens, *, include_eof: bool = False) -> str:
    """Comma separated token names, e.g. ``RIGHT, INC, LOOP_START``."""
    names = [t.kind.name for t in _tokens(source_or_tokens)
             if include_eof or t.kind is not TokenKind.EOF]
    return ", ".join(names)


def list_tokens(source: Source) -> str:
    """One line per token with its byte offset, ending with EOF."""
    out: List[str] = ["Tokens:"]
    for tok in Tokenizer(source):
        if tok.kind is TokenKind.EOF:
            out.append(f"  [{tok.position}] EOF")
        else:
            out.append(f"  [{tok.position}] {tok.kind.name} ({tok.kind.char})")
    return "\n".join(out)
