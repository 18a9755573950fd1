"""
Intcode Machine — Error Taxonomy

Every failure the machine can report derives from MachineError. All of
them are terminal for the affected instance: the run loop never retries,
it stops and raises. A caller that sees one of these should discard the
machine and construct a fresh one.

  OutOfBounds             read/write/jump to an address < 0 or >= length
  InvalidOpcode           instruction word with no known opcode
  InvalidAddressingMode   mode digit other than Position/Immediate, or a
                          non-Position destination operand
  NonNumericProgramToken  program text token that is not a signed integer
  EofWhileRunning         counter ran off the end without a HALT
  FeedAfterTerminated     input supplied to a terminated instance
"""

from typing import Optional

__all__ = [
    'MachineError', 'OutOfBounds', 'InvalidOpcode', 'InvalidAddressingMode',
    'NonNumericProgramToken', 'EofWhileRunning', 'FeedAfterTerminated',
]


class MachineError(Exception):
    """Base class for all machine failures."""


class OutOfBounds(MachineError):
    """Raised when an address falls outside the program store."""
    def __init__(self, address: int, length: int):
        self.address = address
        self.length = length
        super().__init__(
            f"Address {address} out of bounds (program length is {length})")


class InvalidOpcode(MachineError):
    """Raised when the decoder meets an instruction word it cannot map."""
    def __init__(self, opcode: int, address: Optional[int] = None):
        self.opcode = opcode
        self.address = address
        where = f" at {address}" if address is not None else ""
        super().__init__(f"Unknown opcode {opcode}{where}")


class InvalidAddressingMode(MachineError):
    """Raised when an operand is resolved with a mode the machine rejects."""
    def __init__(self, mode: int, address: Optional[int] = None,
                 reason: str = "unknown addressing mode"):
        self.mode = mode
        self.address = address
        where = f" at {address}" if address is not None else ""
        super().__init__(f"{reason.capitalize()} {int(mode)}{where}")


class NonNumericProgramToken(MachineError):
    """Raised at construction when the program text does not parse."""
    def __init__(self, token: str, position: int):
        self.token = token
        self.position = position
        super().__init__(
            f"Token {position}: {token!r} is not a signed decimal integer")


class EofWhileRunning(MachineError):
    """Raised when the counter walks past the program end without halting."""
    def __init__(self, pc: int, length: int):
        self.pc = pc
        self.length = length
        super().__init__(
            f"Program counter {pc} ran off the end of the program "
            f"(length {length}) without a HALT")


class FeedAfterTerminated(MachineError):
    """Raised when input is fed to a machine that has already halted."""
    def __init__(self, value: int):
        self.value = value
        super().__init__(
            f"Attempted to feed input {value} to a terminated machine")
