from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from .brackets import FlatProgram, resolve
from .config import PROGRAM_SIZE, Backend, RunOptions
from .engine import Engine, ExitStatus, FlatEngine, ScanningEngine, TreeEngine
from .errors import BFError, BFInvalidInput, BFResourceError, BFUnmatchedBracketError, Source
from .lexer import Tokenizer, flatten, to_buffer
from .nodes import Sequence
from .parser import parse
from .tape import Tape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    ok: bool
    status: int
    message: str
    steps: int = 0
    tape: Optional[Tape] = None


def read_program(fp: BinaryIO, max_size: int = PROGRAM_SIZE) -> bytes:
    """Read a whole program from a binary file object.

    Programs longer than ``max_size`` bytes are rejected rather than
    truncated.
    """
    data = fp.read(max_size)
    if isinstance(data, str):
        data = data.encode('utf-8')
    if len(data) == max_size and fp.read(1):
        raise BFResourceError(f"Error: Program too large (max {max_size} bytes)")
    return bytes(data)


def compile_string(source: Source) -> Sequence:
    start = time.perf_counter()
    root = parse(Tokenizer(source))
    logger.debug("parsing took %.2f ms", (time.perf_counter() - start) * 1000)
    return root


def compile_flat(source: Source) -> FlatProgram:
    start = time.perf_counter()
    program = FlatProgram.from_source(source)
    logger.debug("bracket resolution took %.2f ms", (time.perf_counter() - start) * 1000)
    return program


def execute(
    source: Source,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    options: Optional[RunOptions] = None,
    tape: Optional[Tape] = None,
) -> Engine:
    """Compile and run ``source``, raising BFError on static errors.

    A caller-supplied ``tape`` is used as is; when ``options`` is given
    too, its ``tape_size`` must equal the tape's length.

    Returns the engine; its tape and step count reflect the finished run.
    """
    opts = options if options is not None else RunOptions()
    if source is None:
        raise BFInvalidInput('source is missing')
    data = to_buffer(source)
    if len(data) > opts.max_program_size:
        raise BFResourceError(f"Error: Program too large (max {opts.max_program_size} bytes)")
    if tape is None:
        tape = Tape(opts.tape_size)
    elif options is not None and len(tape) != opts.tape_size:
        raise BFInvalidInput(
            f"tape has {len(tape)} cells but options.tape_size is {opts.tape_size}")

    kwargs = dict(tape=tape, stdin=stdin, stdout=stdout, eof=opts.eof)
    if opts.backend is Backend.TREE:
        # bracket errors surface as BFUnmatchedBracketError on every backend
        resolve(flatten(data))
        program = compile_string(data)
        engine = TreeEngine(**kwargs)
    elif opts.backend is Backend.FLAT:
        program = compile_flat(data)
        engine = FlatEngine(jit=opts.jit, **kwargs)
    else:
        program = flatten(data)
        engine = ScanningEngine(**kwargs)

    start = time.perf_counter()
    engine.execute(program)
    logger.debug("execution took %.2f ms (%d steps)",
                 (time.perf_counter() - start) * 1000, engine.steps)
    return engine


def _failure(e: BFError) -> RunResult:
    logger.warning("%s", e.message)
    if isinstance(e, BFUnmatchedBracketError):
        return RunResult(ok=False, status=e.count, message=e.message)
    return RunResult(ok=False, status=int(ExitStatus.ERROR), message=e.message)


def run_string(
    source: Source,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Like execute(), but reports errors as a failed RunResult.

    The status of a failed run is the unmatched bracket count for
    bracket errors and 1 for everything else.
    """
    try:
        engine = execute(source, stdin=stdin, stdout=stdout, options=options)
    except BFError as e:
        return _failure(e)
    return RunResult(ok=True, status=int(ExitStatus.OK), message="", steps=engine.steps, tape=engine.tape)


def run_file(
    path: str | Path,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    options: Optional[RunOptions] = None,
) -> RunResult:
    opts = options if options is not None else RunOptions()
    try:
        with open(path, 'rb') as fp:
            source = read_program(fp, opts.max_program_size)
    except OSError:
        return _failure(BFInvalidInput(f"Error: Cannot open file '{path}'"))
    except BFError as e:
        return _failure(e)
    return run_string(source, stdin=stdin, stdout=stdout, options=opts)
