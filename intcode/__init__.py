"""
Intcode Machine
===============
A resumable interpreter for the Intcode integer instruction set, plus a
driver that wires several machines into amplifier chains and feedback rings.

Architecture:
    ┌────────────┐    ┌──────────┐    ┌───────────┐    ┌──────────────┐
    │ Program    │───>│ Decoder  │───>│ Execution │───>│ Run loop /   │
    │ store      │    │ (opcode, │    │ engine    │    │ state machine│
    │ (memory)   │<───│  modes)  │    │ (handlers)│    │              │
    └────────────┘    └──────────┘    └───────────┘    └──────────────┘
                                                              │
                                                 ┌────────────┴───────┐
                                                 │ AmplifierPipeline  │
                                                 │ (round-robin ring) │
                                                 └────────────────────┘

    - mem/memory.py:  ProgramStore, parse_program
    - cpu/decoder.py: Opcode / Mode enums, decode()
    - cpu/alu.py:     pure arithmetic and jump conditions
    - machine.py:     Machine, State, OutputLog
    - pipeline.py:    AmplifierPipeline, run_amplifiers, find_max_signal
    - disasm.py:      disassemble(), listing()
"""

__version__ = "0.1.0"

from .errors import (
    MachineError, OutOfBounds, InvalidOpcode, InvalidAddressingMode,
    NonNumericProgramToken, EofWhileRunning, FeedAfterTerminated,
)
from .mem.memory import ProgramStore, parse_program
from .cpu.decoder import Opcode, Mode, Instruction, decode, decode_word
from .machine import Machine, State, OutputLog
from .pipeline import AmplifierPipeline, PipelineError, run_amplifiers, find_max_signal
from .disasm import disassemble, listing

__all__ = [
    'MachineError', 'OutOfBounds', 'InvalidOpcode', 'InvalidAddressingMode',
    'NonNumericProgramToken', 'EofWhileRunning', 'FeedAfterTerminated',
    'ProgramStore', 'parse_program',
    'Opcode', 'Mode', 'Instruction', 'decode', 'decode_word',
    'Machine', 'State', 'OutputLog',
    'AmplifierPipeline', 'PipelineError', 'run_amplifiers', 'find_max_signal',
    'disassemble', 'listing',
]
