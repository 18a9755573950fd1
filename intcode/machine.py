"""
Intcode Machine — Main Machine Class

Integrates:
  - Program store (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - Arithmetic / comparison ops (cpu/alu.py)
  - Input queue and output log

Execution model:
  1. Decode the instruction at PC
  2. Resolve operands (Position -> read memory, Immediate -> literal)
  3. Execute handler -> write memory, append output, move PC
  4. Repeat while RUNNING and PC is inside the program

State machine:

  INITIALIZED --run()--> RUNNING --HALT--> TERMINATED
                            │  ▲
         input, queue empty │  │ feed_input()
                            ▼  │
                     WAITING_FOR_INPUT

  RUNNING with PC past the end         -> EofWhileRunning raised
  any MachineError during a step       -> raised, machine is dead

Waiting for input is a returned state, never a blocked call: the INPUT
instruction leaves PC on itself, so the next run() re-executes it.
"""

import logging
from collections import deque
from collections.abc import Sequence
from enum import Enum
from typing import Iterable, List, Optional

from .cpu.alu import BINARY_OPS, JUMP_CONDITIONS
from .cpu.decoder import Instruction, Mode, Opcode, decode
from .disasm import format_instruction
from .errors import (
    MachineError, OutOfBounds, InvalidOpcode, InvalidAddressingMode,
    EofWhileRunning, FeedAfterTerminated,
)
from .mem.memory import ProgramStore

log = logging.getLogger(__name__)


class State(Enum):
    INITIALIZED = 'INITIALIZED'
    RUNNING = 'RUNNING'
    WAITING_FOR_INPUT = 'WAITING_FOR_INPUT'
    TERMINATED = 'TERMINATED'


class OutputLog(Sequence):
    """Live, read-only view of a machine's output values.

    Indexing, slicing, len() and iteration see everything produced so far,
    including values appended after the view was taken.
    """

    __slots__ = ('_values',)

    def __init__(self, values: List[int]):
        self._values = values

    def __getitem__(self, index):
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other) -> bool:
        if isinstance(other, OutputLog):
            return self._values == other._values
        if isinstance(other, (list, tuple)):
            return self._values == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"OutputLog({self._values!r})"

    @property
    def last(self) -> Optional[int]:
        return self._values[-1] if self._values else None


class Machine:
    """Resumable Intcode interpreter.

    Usage:
        m = Machine("3,0,4,0,99", [5])
        m.run()              # State.TERMINATED
        list(m.outputs)      # [5]

        m = Machine("3,0,4,0,99")
        m.run()              # State.WAITING_FOR_INPUT
        m.feed_input(7)      # State.TERMINATED, outputs == [7]
    """

    def __init__(self, program_text: str, inputs: Iterable[int] = (),
                 trace: bool = False):
        self.mem = ProgramStore.from_text(program_text)
        self.pc = 0
        self.state = State.INITIALIZED
        self.fault: Optional[MachineError] = None

        self._inputs = deque(inputs)
        self._output: List[int] = []
        self._outputs_view = OutputLog(self._output)

        # Trace output
        self._trace = trace
        self._trace_output: List[str] = []

        # Instruction dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    def __repr__(self) -> str:
        return (f"Machine(state={self.state.name}, pc={self.pc}, "
                f"len={len(self.mem)}, outputs={len(self._output)})")

    # ══════════════════════════════════════════════
    # Public view
    # ══════════════════════════════════════════════

    @property
    def outputs(self) -> OutputLog:
        return self._outputs_view

    @property
    def memory(self) -> List[int]:
        """Copy of the whole program store."""
        return self.mem.snapshot()

    @property
    def pending_inputs(self) -> tuple:
        return tuple(self._inputs)

    @property
    def trace(self) -> List[str]:
        return list(self._trace_output)

    def peek_memory(self, addr: int) -> int:
        return self.mem.read(addr)

    def poke(self, addr: int, value: int):
        """Patch one memory cell, typically before the first run()."""
        self.mem.write(addr, value)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def run(self) -> State:
        """Run until HALT or until an INPUT finds the queue empty.

        Returns TERMINATED or WAITING_FOR_INPUT. Raises EofWhileRunning if
        PC walks off the program, or whatever MachineError a step raised.
        """
        self._check_alive()
        if self.state is State.TERMINATED:
            return self.state

        self._enter_running()
        while self.state is State.RUNNING and self.mem.contains(self.pc):
            self._step()

        if self.state is State.RUNNING:
            self._fail(EofWhileRunning(self.pc, len(self.mem)))

        log.debug("run stopped: %s at pc=%d", self.state.name, self.pc)
        return self.state

    def step(self) -> State:
        """Execute exactly one instruction and return the new state."""
        self._check_alive()
        if self.state is State.TERMINATED:
            return self.state

        self._enter_running()
        if not self.mem.contains(self.pc):
            self._fail(EofWhileRunning(self.pc, len(self.mem)))
        self._step()
        return self.state

    def feed_input(self, value: int) -> State:
        """Queue one input value; resume at once if the machine is waiting."""
        self._check_alive()
        if self.state is State.TERMINATED:
            raise FeedAfterTerminated(value)

        self._inputs.append(value)
        if self.state is State.WAITING_FOR_INPUT:
            return self.run()
        return self.state

    def _enter_running(self):
        if self.state is not State.RUNNING:
            log.debug("%s -> RUNNING at pc=%d", self.state.name, self.pc)
            self.state = State.RUNNING

    def _check_alive(self):
        if self.fault is not None:
            raise self.fault

    def _fail(self, error: MachineError):
        self.fault = error
        log.info("machine fault at pc=%d: %s", self.pc, error)
        raise error

    def _step(self):
        try:
            instr = decode(self.mem, self.pc)

            if self._trace:
                line = f"{instr.address:04d}: {format_instruction(instr)}"
                self._trace_output.append(line)
                log.debug("trace %s", line)

            handler = self._dispatch.get(instr.opcode)
            if handler is None:
                raise InvalidOpcode(instr.opcode, instr.address)
            handler(instr)
        except MachineError as e:
            self._fail(e)

    # ══════════════════════════════════════════════
    # Operand resolution
    # ══════════════════════════════════════════════

    def _resolve(self, instr: Instruction, index: int) -> int:
        """Effective value of operand `index` according to its mode."""
        mode = instr.modes[index]
        raw = instr.operands[index]
        if mode == Mode.POSITION:
            return self.mem.read(raw)
        if mode == Mode.IMMEDIATE:
            return raw
        raise InvalidAddressingMode(mode, instr.address)

    def _destination(self, instr: Instruction, index: int) -> int:
        """Write address given by operand `index`.

        Destinations are always addresses; an Immediate destination is
        rejected instead of being silently treated as Position.
        """
        mode = instr.modes[index]
        if mode != Mode.POSITION:
            reason = ("immediate-mode destination" if mode == Mode.IMMEDIATE
                      else "unknown addressing mode")
            raise InvalidAddressingMode(mode, instr.address, reason)
        addr = instr.operands[index]
        if not self.mem.contains(addr):
            raise OutOfBounds(addr, len(self.mem))
        return addr

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Every handler validates and resolves everything it needs before its
    # single side effect, so a failing step leaves memory untouched.

    def _build_dispatch(self) -> dict:
        return {
            Opcode.ADD:           self._op_binary,
            Opcode.MULTIPLY:      self._op_binary,
            Opcode.LESS_THAN:     self._op_binary,
            Opcode.EQUALS:        self._op_binary,
            Opcode.INPUT:         self._op_input,
            Opcode.OUTPUT:        self._op_output,
            Opcode.JUMP_IF_TRUE:  self._op_jump,
            Opcode.JUMP_IF_FALSE: self._op_jump,
            Opcode.HALT:          self._op_halt,
        }

    def _op_binary(self, instr: Instruction):
        """ADD / MUL / LT / EQ: dest <- op(a, b)"""
        a = self._resolve(instr, 0)
        b = self._resolve(instr, 1)
        dest = self._destination(instr, 2)
        self.mem.write(dest, BINARY_OPS[instr.opcode](a, b))
        self.pc += instr.width

    def _op_input(self, instr: Instruction):
        """IN: dest <- next queued input, or suspend with PC unchanged"""
        if not self._inputs:
            log.debug("pc=%d waiting for input", self.pc)
            self.state = State.WAITING_FOR_INPUT
            return
        dest = self._destination(instr, 0)
        self.mem.write(dest, self._inputs.popleft())
        self.pc += instr.width

    def _op_output(self, instr: Instruction):
        """OUT: append resolved operand to the output log"""
        value = self._resolve(instr, 0)
        self._output.append(value)
        log.debug("pc=%d output %d", self.pc, value)
        self.pc += instr.width

    def _op_jump(self, instr: Instruction):
        """JNZ / JZ: PC <- target when the condition on the first operand holds"""
        condition = self._resolve(instr, 0)
        target = self._resolve(instr, 1)
        if JUMP_CONDITIONS[instr.opcode](condition):
            if target < 0:
                raise OutOfBounds(target, len(self.mem))
            self.pc = target
        else:
            self.pc += instr.width

    def _op_halt(self, instr: Instruction):
        """HLT"""
        self.state = State.TERMINATED
