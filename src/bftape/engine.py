from __future__ import annotations

import io
import logging
import sys
from enum import IntEnum
from typing import BinaryIO, List, Optional, Union

from numba import njit

from .brackets import FlatProgram, resolve, scan_match
from .config import EOFPolicy
from .nodes import Input, Loop, ModifyCell, MovePointer, Output, Sequence
from .tape import Tape

logger = logging.getLogger(__name__)

# stop reasons reported by the batch loop
STOP_BATCH = 0
STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_END = 3

# instructions per batch between returns to Python
BATCH_STEPS = 1_000_000


class ExitStatus(IntEnum):
    OK = 0
    ERROR = 1


@njit(cache=True)
def _run_until_io(code, memory, pc, pointer, jumps, max_steps):
    """
    Run flat commands until an I/O command, the end of the program or
    ``max_steps`` executed commands, whichever comes first.

    '.' and ',' are left for the caller: the loop stops with ``pc`` on
    them. Returns (pc, pointer, stop_reason, steps).
    """
    stop_reason = STOP_BATCH
    mem_len = len(memory)
    prog_len = len(code)
    steps = 0

    while pc < prog_len and steps < max_steps:
        command = code[pc]

        if command == 62:  # '>'
            pointer += 1
            if pointer >= mem_len:
                pointer = 0
        elif command == 60:  # '<'
            pointer -= 1
            if pointer < 0:
                pointer = mem_len - 1
        elif command == 43:  # '+'
            memory[pointer] = (int(memory[pointer]) + 1) & 255
        elif command == 45:  # '-'
            memory[pointer] = (int(memory[pointer]) - 1) & 255
        elif command == 46:  # '.'
            stop_reason = STOP_OUTPUT
            break
        elif command == 44:  # ','
            stop_reason = STOP_INPUT
            break
        elif command == 91:  # '['
            if memory[pointer] == 0:
                pc = jumps[pc]
        elif command == 93:  # ']'
            if memory[pointer] != 0:
                pc = jumps[pc]

        pc += 1
        steps += 1

    if pc >= prog_len:
        stop_reason = STOP_END

    return pc, pointer, stop_reason, steps


class Engine:
    """Shared tape and I/O plumbing for the execution engines."""

    def __init__(
        self,
        tape: Optional[Tape] = None,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        eof: EOFPolicy = EOFPolicy.ZERO,
    ):
        self.tape = tape if tape is not None else Tape()
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.eof = EOFPolicy(eof)
        self.steps = 0
        # UTF-8 bytes of a text character not yet read by ","
        self._pending = b""

    def _output(self, value: int) -> None:
        if isinstance(self.stdout, io.TextIOBase):
            self.stdout.write(chr(value))
        else:
            self.stdout.write(bytes((value,)))

    def _input(self, current: int) -> int:
        """Next input byte, or the EOF policy's value when input is exhausted.

        Text sources are read as UTF-8, one byte per ",".
        """
        if not self._pending:
            data = self.stdin.read(1)
            if isinstance(data, str):
                data = data.encode("utf-8")
            self._pending = bytes(data)
        if self._pending:
            value, self._pending = self._pending[0], self._pending[1:]
            return value
        if self.eof is EOFPolicy.ZERO:
            return 0
        if self.eof is EOFPolicy.MAX:
            return 255
        return current

    def _finish(self) -> ExitStatus:
        flush = getattr(self.stdout, 'flush', None)
        if flush is not None:
            flush()
        logger.debug("%s finished after %d steps, cursor at %d",
                     type(self).__name__, self.steps, self.tape.cursor)
        return ExitStatus.OK


class TreeEngine(Engine):
    """Walks the AST with an explicit stack of (sequence, index) frames.

    A frame's index stays on a Loop node while its body runs, so the
    guard is checked again each time the body frame is popped.
    """

    def execute(self, root: Sequence) -> ExitStatus:
        mem = self.tape.cells
        size = len(mem)
        ptr = self.tape.cursor
        frames: List[list] = [[root.children, 0]]
        steps = 0

        try:
            while frames:
                frame = frames[-1]
                children, i = frame
                if i >= len(children):
                    frames.pop()
                    continue

                node = children[i]
                kind = type(node)
                steps += 1

                if kind is ModifyCell:
                    mem[ptr] = (int(mem[ptr]) + node.delta) & 0xFF
                elif kind is MovePointer:
                    ptr = (ptr + node.offset) % size
                elif kind is Loop:
                    if mem[ptr]:
                        frames.append([node.body.children, 0])
                        continue
                elif kind is Output:
                    self._output(int(mem[ptr]))
                elif kind is Input:
                    mem[ptr] = self._input(int(mem[ptr]))
                elif kind is Sequence:
                    frame[1] = i + 1
                    frames.append([node.children, 0])
                    continue
                else:
                    raise TypeError(f"not an AST node: {node!r}")

                frame[1] = i + 1
        finally:
            self.tape.cursor = ptr
            self.steps += steps

        return self._finish()


class FlatEngine(Engine):
    """Runs a FlatProgram with O(1) jumps through its jump table.

    With ``jit`` the hot loop is numba-compiled; I/O is always serviced
    here in Python between batches.
    """

    def __init__(self, *args, jit: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.jit = jit

    def execute(self, program: FlatProgram) -> ExitStatus:
        run = _run_until_io if self.jit else _run_until_io.py_func
        code = program.code
        jumps = program.jumps.targets
        mem = self.tape.cells
        pc = 0
        ptr = self.tape.cursor

        try:
            while True:
                pc, ptr, stop, n = run(code, mem, pc, ptr, jumps, BATCH_STEPS)
                self.steps += n
                if stop == STOP_END:
                    break
                if stop == STOP_OUTPUT:
                    self._output(int(mem[ptr]))
                elif stop == STOP_INPUT:
                    mem[ptr] = self._input(int(mem[ptr]))
                else:
                    continue
                pc += 1
                self.steps += 1
        finally:
            self.tape.cursor = int(ptr)

        return self._finish()


class ScanningEngine(Engine):
    """Reference interpreter that finds loop partners by rescanning.

    Every taken jump costs a scan over the program; use FlatEngine for
    real work.
    """

    def execute(self, program: Union[FlatProgram, bytes]) -> ExitStatus:
        commands = bytes(program.code) if isinstance(program, FlatProgram) else bytes(program)
        resolve(commands)

        tape = self.tape
        pc = 0
        while pc < len(commands):
            cmd = commands[pc]
            if cmd == 62:
                tape.move(1)
            elif cmd == 60:
                tape.move(-1)
            elif cmd == 43:
                tape.add(1)
            elif cmd == 45:
                tape.add(-1)
            elif cmd == 46:
                self._output(tape.value)
            elif cmd == 44:
                tape.value = self._input(tape.value)
            elif cmd == 91:
                if tape.value == 0:
                    pc = scan_match(commands, pc)
            elif cmd == 93:
                if tape.value != 0:
                    pc = scan_match(commands, pc)
            pc += 1
            self.steps += 1

        return self._finish()
