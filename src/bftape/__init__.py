from .api import RunResult, compile_flat, compile_string, execute, read_program, run_file, run_string
from .brackets import FlatProgram, JumpTable, resolve, scan_match
from .config import Backend, EOFPolicy, RunOptions
from .debug import format_tokens, list_tokens
from .engine import ExitStatus, FlatEngine, ScanningEngine, TreeEngine
from .errors import BFError, BFInvalidInput, BFResourceError, BFSyntaxError, BFUnmatchedBracketError
from .lexer import Token, TokenKind, Tokenizer, flatten, tokenize
from .nodes import Input, Loop, ModifyCell, MovePointer, Output, Sequence, dump_ast, emit
from .parser import Parser, parse, parse_source
from .tape import Tape

__all__ = [
    'RunResult',
    'compile_flat',
    'compile_string',
    'execute',
    'read_program',
    'run_file',
    'run_string',
    'FlatProgram',
    'JumpTable',
    'resolve',
    'scan_match',
    'Backend',
    'EOFPolicy',
    'RunOptions',
    'format_tokens',
    'list_tokens',
    'ExitStatus',
    'FlatEngine',
    'ScanningEngine',
    'TreeEngine',
    'BFError',
    'BFInvalidInput',
    'BFResourceError',
    'BFSyntaxError',
    'BFUnmatchedBracketError',
    'Token',
    'TokenKind',
    'Tokenizer',
    'flatten',
    'tokenize',
    'Input',
    'Loop',
    'ModifyCell',
    'MovePointer',
    'Output',
    'Sequence',
    'dump_ast',
    'emit',
    'Parser',
    'parse',
    'parse_source',
    'Tape',
]
