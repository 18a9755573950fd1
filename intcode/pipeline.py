"""
Intcode Amplifier Pipeline Driver

Wires several machines running the same program into a chain or a ring:

    signal ─> [A] ─> [B] ─> [C] ─> [D] ─> [E] ─> signal
               ▲                            │
               └────────── feedback ────────┘

Each machine is first given its phase setting and run until it asks for
its next input. The driver then walks the machines in a fixed round-robin
order, feeding each the most recent output of the previous one. Every feed
must produce exactly one new output before the machine suspends or halts.

  serial   (feedback=False): one pass A..E, the last output is the signal
  feedback (feedback=True):  keep looping until E reaches TERMINATED

The driver holds no state shared between machines beyond the current
signal value; all transfer happens here, single-threaded.
"""

import itertools
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from . import config
from .machine import Machine, State

log = logging.getLogger(__name__)


class PipelineError(Exception):
    """Raised when a machine breaks the one-input, one-output protocol."""
    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(f"Amplifier {index}: {message}" if index is not None else message)


class AmplifierPipeline:
    """A chain of machines, one per phase setting."""

    def __init__(self, program_text: str, phases: Sequence[int],
                 feedback: bool = True):
        if not phases:
            raise PipelineError("at least one phase setting is required")
        self.phases = tuple(phases)
        self.feedback = feedback
        self.machines: List[Machine] = [
            Machine(program_text, [phase]) for phase in self.phases
        ]
        self.signal: Optional[int] = None
        self.feeds = 0

    def __repr__(self) -> str:
        mode = "feedback" if self.feedback else "serial"
        return f"AmplifierPipeline(phases={self.phases}, {mode}, feeds={self.feeds})"

    @property
    def last(self) -> Machine:
        return self.machines[-1]

    def _done(self, index: int) -> bool:
        if self.last.state is State.TERMINATED:
            return True
        return not self.feedback and index >= len(self.machines)

    def run(self, signal: int = config.INITIAL_SIGNAL) -> int:
        """Drive the pipeline and return the final output of the last machine."""
        # Consume the phase settings
        for machine in self.machines:
            machine.run()

        self.signal = signal
        i = 0
        while not self._done(i):
            index = i % len(self.machines)
            machine = self.machines[index]
            before = len(machine.outputs)
            machine.feed_input(self.signal)
            produced = len(machine.outputs) - before
            if produced != 1:
                raise PipelineError(
                    f"produced {produced} outputs for one input", index)
            self.signal = machine.outputs.last
            self.feeds += 1
            i += 1

        if self.feeds == 0 or not self.last.outputs:
            raise PipelineError("halted without producing a signal",
                                len(self.machines) - 1)
        self.signal = self.last.outputs.last
        log.debug("phases %s -> signal %d after %d feeds",
                  self.phases, self.signal, self.feeds)
        return self.signal


def run_amplifiers(program_text: str, phases: Sequence[int],
                   feedback: bool = True,
                   signal: int = config.INITIAL_SIGNAL) -> int:
    """Build a pipeline for one phase ordering and run it."""
    return AmplifierPipeline(program_text, phases, feedback).run(signal)


def find_max_signal(program_text: str, phases: Iterable[int],
                    feedback: bool = True,
                    signal: int = config.INITIAL_SIGNAL) -> Tuple[int, Tuple[int, ...]]:
    """Try every ordering of `phases`; return (best signal, its ordering).

    Ties keep the first ordering in itertools.permutations order.
    """
    best: Optional[Tuple[int, Tuple[int, ...]]] = None
    for ordering in itertools.permutations(tuple(phases)):
        result = run_amplifiers(program_text, ordering, feedback, signal)
        if best is None or result > best[0]:
            best = (result, ordering)
    log.info("best signal %d with phases %s", best[0], best[1])
    return best
