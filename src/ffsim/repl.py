"""Interactive REPL (Read-Eval-Print Loop) for the simulator.

The REPL is the thin I/O wrapper around the shell.  It builds the
initial block layout (from a JSON file named on the command line, or by
asking the user), then enters the classic loop:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

``read_int`` and ``prompt_config`` are testable by patching ``input``;
``run()`` is the I/O entrypoint.
"""

import sys
from pathlib import Path

from ffsim.config import DEFAULT_MAX_BLOCKS, MAX_SIZE, SimulatorConfig, load_config
from ffsim.errors import InvalidConfigurationError
from ffsim.layout import format_layout, format_limits
from ffsim.shell import Shell
from ffsim.simulator import Simulator

PROMPT = "ff-sim $ "


def read_int(prompt: str, *, minimum: int, maximum: int) -> int:
    """Ask for an integer until the answer is within ``[minimum, maximum]``.

    Args:
        prompt: Text shown before reading.
        minimum: Smallest accepted value.
        maximum: Largest accepted value.

    Returns:
        The accepted integer.

    """
    while True:
        answer = input(prompt).strip()
        try:
            value = int(answer)
        except ValueError:
            pass
        else:
            if minimum <= value <= maximum:
                return value
        print(f"Invalid input. Please enter an integer between {minimum} and {maximum}.")  # noqa: T201


def prompt_config(*, max_blocks: int = DEFAULT_MAX_BLOCKS) -> SimulatorConfig:
    """Ask the user for the number of blocks and the size of each."""
    count = read_int(
        "Enter the number of memory blocks you want to simulate: ",
        minimum=1,
        maximum=max_blocks,
    )
    sizes = tuple(
        read_int(f"Enter size of memory block {i} (in KB): ", minimum=1, maximum=MAX_SIZE)
        for i in range(1, count + 1)
    )
    return SimulatorConfig(block_sizes=sizes, max_blocks=max_blocks)


def run(config_path: Path | None = None) -> None:
    """Build the simulator and run the interactive REPL.

    Handles Ctrl+C and Ctrl+D as a graceful exit.
    """
    try:
        config = load_config(config_path) if config_path is not None else prompt_config()
        simulator = Simulator(config)
    except InvalidConfigurationError as e:
        print(f"Error: {e}")  # noqa: T201
        return
    except (EOFError, KeyboardInterrupt):
        print("\nExiting...")  # noqa: T201
        return

    shell = Shell(simulator=simulator)
    print(format_limits(config))  # noqa: T201
    print("\n----First Fit Memory Allocation Simulator----\n")  # noqa: T201
    print(format_layout(simulator.snapshot()))  # noqa: T201
    print("Type 'help' for commands, 'exit' to quit.")  # noqa: T201

    try:
        while True:
            try:
                command = input(PROMPT)
            except EOFError:
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    finally:
        print("Exiting...")  # noqa: T201


def main() -> None:
    """Console entry point: ``ff-sim [config.json]``."""
    run(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
