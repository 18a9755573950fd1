"""
Intcode Machine — Configuration Constants
==========================================

Module-level settings shared by the core, the pipeline driver and the
intcodekit CLI. Edit here rather than threading options through every call.
"""

from pathlib import Path


# =============================================================================
#  PROGRAM TEXT FORMAT
# =============================================================================
DELIMITER = ","

# Characters kept when a program is loaded from a file. Everything else
# (newlines, stray whitespace) is filtered out before parsing.
PROGRAM_CHARS = frozenset("0123456789,-")


# =============================================================================
#  LOGGING
# =============================================================================
LOGGER_NAME = "intcode"
LOG_DIR = Path.cwd() / "logs"

FILE_LOG_FORMAT = (
    "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"


# =============================================================================
#  AMPLIFIER PIPELINE PROFILES
# =============================================================================
# serial:   each amplifier runs once, output of the last is the signal
# feedback: the last amplifier feeds the first until it halts
PIPELINE_PROFILES = {
    "serial": {
        "phases": (0, 1, 2, 3, 4),
        "feedback": False,
        "description": "Single pass through five amplifiers",
    },
    "feedback": {
        "phases": (5, 6, 7, 8, 9),
        "feedback": True,
        "description": "Amplifier ring looped until the last one halts",
    },
}
DEFAULT_PROFILE = "feedback"
INITIAL_SIGNAL = 0
