#!/usr/bin/env python3
"""
Test actual execution of programs on every backend.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import io

import pytest

from bftape import (
    Backend, EOFPolicy, ExitStatus, FlatEngine, FlatProgram, RunOptions, ScanningEngine,
    Tape, TreeEngine, execute, parse_source,
)

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)

# (backend, jit) combinations that must all behave the same
BACKENDS = [
    (Backend.TREE, True),
    (Backend.FLAT, True),
    (Backend.FLAT, False),
    (Backend.SCAN, True),
]


def run_bf(source, input_data=b"", *, backend=Backend.TREE, jit=True, tape=None, **opts):
    """Execute a program and return (output bytes, engine)."""
    stdout = io.BytesIO()
    options = RunOptions(backend=backend, jit=jit, **opts)
    engine = execute(source, stdin=io.BytesIO(input_data), stdout=stdout,
                     options=options, tape=tape)
    return stdout.getvalue(), engine


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_output_single_value(backend, jit):
    out, _ = run_bf("+++.", backend=backend, jit=jit)
    assert out == b"\x03"


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_pointer_movement(backend, jit):
    out, _ = run_bf(">+.", backend=backend, jit=jit)
    assert out == b"\x01"


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_multiple_increments(backend, jit):
    out, _ = run_bf("+" * 95 + ".+.", backend=backend, jit=jit)
    assert out == bytes([95, 96])


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_hello_world(backend, jit):
    out, _ = run_bf(HELLO_WORLD, backend=backend, jit=jit)
    assert out == b"Hello World!\n"


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_clear_loop_on_nonzero_cell(backend, jit):
    tape = Tape()
    tape[0] = 200
    out, engine = run_bf("[-]", backend=backend, jit=jit, tape=tape)
    assert tape[0] == 0
    assert engine.tape is tape


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_loop_body_skipped_on_zero_cell(backend, jit):
    out, _ = run_bf("[.+]", backend=backend, jit=jit)
    assert out == b""


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_copy_idiom(backend, jit):
    _, engine = run_bf("+[>+<-]", backend=backend, jit=jit)
    assert engine.tape[0] == 0
    assert engine.tape[1] == 1
    assert engine.tape.cursor == 0


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_cell_values_wrap(backend, jit):
    out, _ = run_bf("-.+.+" + "+" * 255 + ".", backend=backend, jit=jit)
    assert out == bytes([255, 0, 0])


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_cursor_wraps_left_of_zero(backend, jit):
    _, engine = run_bf("<+", backend=backend, jit=jit)
    assert engine.tape.cursor == 29999
    assert engine.tape[29999] == 1


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_cursor_wraps_past_the_end(backend, jit):
    _, engine = run_bf(">" * 10 + "+", backend=backend, jit=jit, tape_size=10)
    assert engine.tape.cursor == 0
    assert engine.tape[0] == 1


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_input_echo(backend, jit):
    out, _ = run_bf(",+.,.", b"AZ", backend=backend, jit=jit)
    assert out == b"BZ"


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_eof_writes_zero_by_default(backend, jit):
    out, _ = run_bf("+++,.", backend=backend, jit=jit)
    assert out == b"\x00"


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_eof_unchanged(backend, jit):
    out, _ = run_bf("+++,.", backend=backend, jit=jit, eof=EOFPolicy.UNCHANGED)
    assert out == b"\x03"


@pytest.mark.parametrize("backend,jit", BACKENDS)
def test_eof_max(backend, jit):
    out, _ = run_bf("+++,.", backend=backend, jit=jit, eof="max")
    assert out == b"\xff"


def test_backends_leave_identical_tapes():
    """Multiplication and move loops end in the same state everywhere."""
    source = "++++[>+++++<-]>[>++>+++<<-]>>[-<+>]<<<,[->+<]"
    tapes = []
    for backend, jit in BACKENDS:
        _, engine = run_bf(source, b"\x07", backend=backend, jit=jit)
        tapes.append((engine.tape.cursor, [engine.tape[i] for i in range(6)]))
    assert all(t == tapes[0] for t in tapes)
    assert tapes[0] == (0, [0, 7, 100, 0, 0, 0])


def test_tree_engine_counts_folded_steps():
    engine = TreeEngine(tape=Tape(), stdin=io.BytesIO(), stdout=io.BytesIO())
    assert engine.execute(parse_source("+++>>")) is ExitStatus.OK
    assert engine.steps == 2
    assert engine.tape.cursor == 2


def test_flat_engines_count_every_command():
    program = FlatProgram.from_source("+++.")
    for jit in (True, False):
        engine = FlatEngine(tape=Tape(), stdin=io.BytesIO(), stdout=io.BytesIO(), jit=jit)
        assert engine.execute(program) is ExitStatus.OK
        assert engine.steps == 4


def test_scanning_engine_takes_raw_commands():
    out = io.BytesIO()
    engine = ScanningEngine(tape=Tape(), stdin=io.BytesIO(), stdout=out)
    assert engine.execute(b"++[>+++<-]>.") is ExitStatus.OK
    assert out.getvalue() == b"\x06"


def test_empty_program_runs():
    for backend, jit in BACKENDS:
        out, engine = run_bf("", backend=backend, jit=jit)
        assert out == b""
        assert engine.steps == 0


def test_text_streams():
    """Text sinks receive characters instead of bytes."""
    out = io.StringIO()
    engine = TreeEngine(tape=Tape(), stdin=io.StringIO("z"), stdout=out)
    engine.execute(parse_source(",.-."))
    assert out.getvalue() == "zy"


@pytest.mark.parametrize("backend, jit", BACKENDS)
def test_text_input_is_read_as_utf8(backend, jit):
    """A non-ASCII character feeds one UTF-8 byte per ','."""
    out = io.StringIO()
    execute(",.,.,.,.", stdin=io.StringIO("\u20ac"), stdout=out,
            options=RunOptions(backend=backend, jit=jit))
    assert [ord(c) for c in out.getvalue()] == [0xE2, 0x82, 0xAC, 0]


def test_engine_keeps_tape_between_runs():
    tape = Tape()
    run_bf(">+++", tape=tape)
    out, _ = run_bf(".", tape=tape)
    assert out == b"\x03"
