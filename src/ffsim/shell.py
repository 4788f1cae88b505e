"""The shell — command interpreter for the simulator.

The shell reads a command string, splits it into a command name and
arguments, dispatches to a handler, and returns a string result.

Design choices:
    - **Returns strings, not prints.**  The shell is fully testable and
      the caller decides how to display output.
    - **Command dispatch via a dict.**  Adding a command means writing
      a method and adding one dict entry.
    - **Engine errors become messages.**  Every ``SimulatorError`` is
      reported as ``Error: ...``; the engine keeps running.
"""

from collections.abc import Callable

from ffsim.errors import SimulatorError
from ffsim.layout import format_layout, format_stats
from ffsim.logging import LogLevel
from ffsim.simulator import Simulator

# Type alias for a command handler: takes a list of args, returns output.
_Handler = Callable[[list[str]], str]


class Shell:
    """Command interpreter bound to one simulator."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, simulator: Simulator) -> None:
        """Create a shell that drives ``simulator``."""
        self._simulator = simulator
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "alloc": self._cmd_alloc,
            "free": self._cmd_free,
            "layout": self._cmd_layout,
            "stats": self._cmd_stats,
            "merge": self._cmd_merge,
            "log": self._cmd_log,
            "exit": self._cmd_exit,
        }

    @property
    def simulator(self) -> Simulator:
        """Return the simulator this shell drives."""
        return self._simulator

    def execute(self, command: str) -> str:
        """Parse and execute one command.

        Args:
            command: The raw command string (e.g. "alloc 212").

        Returns:
            The command output, an error message, or ``EXIT_SENTINEL``.

        """
        parts = command.split()
        if not parts:
            return ""
        name, args = parts[0], parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}"
        return handler(args)

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        return "Available commands: " + ", ".join(sorted(self._commands))

    def _cmd_alloc(self, args: list[str]) -> str:
        """Allocate memory for a new process."""
        if not args:
            return "Usage: alloc <size>"
        try:
            size = int(args[0])
        except ValueError:
            return f"Error: invalid size '{args[0]}'"

        try:
            result = self._simulator.allocate(size)
        except SimulatorError as e:
            return f"Error: {e}"
        if result.queued:
            return f"Process {result.process_id} added to wait queue"
        return f"Process {result.process_id}: memory allocated at address {result.address}"

    def _cmd_free(self, args: list[str]) -> str:
        """Free the memory held by a process."""
        if not args:
            return "Usage: free <pid>"
        try:
            pid = int(args[0])
        except ValueError:
            return f"Error: invalid PID '{args[0]}'"

        try:
            promoted = self._simulator.free(pid)
        except SimulatorError as e:
            return f"Error: {e}"
        lines = [f"Memory for Process {pid} freed"]
        lines.extend(
            f"Process {r.process_id} moved from waiting queue and allocated at address {r.address}"
            for r in promoted
        )
        return "\n".join(lines)

    def _cmd_layout(self, _args: list[str]) -> str:
        """Show blocks, active processes, and the wait queue."""
        return format_layout(self._simulator.snapshot())

    def _cmd_stats(self, _args: list[str]) -> str:
        """Show memory usage and fragmentation."""
        return format_stats(self._simulator.snapshot())

    def _cmd_merge(self, _args: list[str]) -> str:
        """Merge adjacent free blocks and retry waiting requests."""
        result = self._simulator.merge()
        lines = [f"Merged free blocks: {result.blocks_removed} removed"]
        lines.extend(
            f"Process {r.process_id} moved from waiting queue and allocated at address {r.address}"
            for r in result.promoted
        )
        return "\n".join(lines)

    def _cmd_log(self, args: list[str]) -> str:
        """Show the event log: ``log``, ``log <level>``, or ``log <pid>``."""
        min_level: LogLevel | None = None
        pid: int | None = None
        if args and args[0].isdigit():
            pid = int(args[0])
        elif args:
            try:
                min_level = LogLevel[args[0].upper()]
            except KeyError:
                return f"Error: unknown log level '{args[0]}'"
        entries = self._simulator.logger.filter(min_level=min_level, pid=pid)
        return "\n".join(str(e) for e in entries)

    def _cmd_exit(self, _args: list[str]) -> str:
        """Signal the REPL to stop."""
        return self.EXIT_SENTINEL
