"""Error taxonomy shared by every engine component.

All engine failures derive from ``SimulatorError`` so the shell and the
web layer can catch one base class and render a message.  None of them
are fatal: the engine keeps serving requests after reporting one.
"""


class SimulatorError(Exception):
    """Base class for every error raised by the simulator engine."""


class CapacityExceededError(SimulatorError):
    """Raise when the block table, process table, or wait queue is full."""


class ProcessNotFoundError(SimulatorError):
    """Raise when freeing a process id that has no active allocation."""


class InvalidConfigurationError(SimulatorError, ValueError):
    """Raise when the initial block layout or limits are unusable."""


class InvalidRequestError(SimulatorError, ValueError):
    """Raise when an allocation request carries an unusable size."""
