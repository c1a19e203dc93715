from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .errors import BFResourceError, BFSyntaxError, Source, make_syntax_error
from .lexer import Token, TokenKind, Tokenizer
from .nodes import Input, Loop, ModifyCell, MovePointer, Node, Output, Sequence

logger = logging.getLogger(__name__)

# run-length folded kinds: kind -> (node type, step)
_RUNS = {
    TokenKind.RIGHT: (MovePointer, 1),
    TokenKind.LEFT: (MovePointer, -1),
    TokenKind.INC: (ModifyCell, 1),
    TokenKind.DEC: (ModifyCell, -1),
}


class Parser:
    """
    Parser producing a tree of instruction nodes.

    Grammar:
        program   := statement* EOF
        statement := run | '.' | ',' | loop
        run       := '>'+ | '<'+ | '+'+ | '-'+
        loop      := '[' statement* ']'

    Each run becomes a single MovePointer/ModifyCell carrying the signed
    count. Opposite directions are never folded into the same node.
    Open loops are kept on an explicit stack of (opening token, body)
    frames, so nesting depth is bounded only by the program size.
    """

    def __init__(self, tokenizer: Tokenizer):
        self.tokens = tokenizer

    # ===== Entry point =====

    def parse(self) -> Sequence:
        try:
            return self._parse_program()
        except MemoryError as e:
            raise BFResourceError('Error: Out of memory while building the syntax tree') from e

    def _parse_program(self) -> Sequence:
        root = Sequence()
        frames: List[Tuple[Optional[Token], Sequence]] = [(None, root)]

        while True:
            tok = self.tokens.peek_token()
            kind = tok.kind
            start, body = frames[-1]

            if kind is TokenKind.EOF:
                if start is not None:
                    raise self._error("unmatched '['", start.position)
                return root

            if kind is TokenKind.LOOP_START:
                self.tokens.advance()
                loop = Loop(Sequence())
                body.children.append(loop)
                frames.append((tok, loop.body))
            elif kind is TokenKind.LOOP_END:
                if start is None:
                    raise self._error("unmatched ']'", tok.position)
                self.tokens.advance()
                frames.pop()
            else:
                body.children.append(self._parse_statement())

    # ===== Statements =====

    def _parse_statement(self) -> Node:
        tok = self.tokens.peek_token()
        kind = tok.kind

        if kind in _RUNS:
            node_type, step = _RUNS[kind]
            count = 0
            while self.tokens.peek() is kind:
                self.tokens.advance()
                count += step
            return node_type(count)

        if kind is TokenKind.OUTPUT:
            self.tokens.advance()
            return Output()

        if kind is TokenKind.INPUT:
            self.tokens.advance()
            return Input()

        raise self._error('unexpected end of input', tok.position)

    def _error(self, message: str, position: int) -> BFSyntaxError:
        logger.debug("syntax error at byte %d: %s", position, message)
        return make_syntax_error(
            message=message,
            source=self.tokens.source[:self.tokens.length],
            position=position,
        )


def parse(tokenizer: Tokenizer) -> Sequence:
    return Parser(tokenizer).parse()


def parse_source(source: Source) -> Sequence:
    return parse(Tokenizer(source))
