"""System memory — the single aggregate the engine operates on.

The block table, the process table, and the wait queue only make sense
together: a split changes blocks *and* records a process, a free
changes both *and* drains the queue.  ``SystemMemory`` bundles them
(plus the event log) into one object that every engine operation
receives explicitly.  There is no module-level state, so two
simulators never share anything.
"""

from dataclasses import dataclass, field

from ffsim.config import SimulatorConfig
from ffsim.logging import Logger
from ffsim.memory.blocks import BlockTable
from ffsim.memory.processes import ProcessTable
from ffsim.memory.wait_queue import WaitQueue


@dataclass
class SystemMemory:
    """Aggregate state owned by one simulator instance."""

    blocks: BlockTable
    processes: ProcessTable
    wait_queue: WaitQueue
    logger: Logger = field(default_factory=Logger)

    @classmethod
    def from_config(cls, config: SimulatorConfig) -> "SystemMemory":
        """Validate ``config`` and build fresh tables from it.

        Raises:
            InvalidConfigurationError: If the configuration is unusable.

        """
        config.validate()
        return cls(
            blocks=BlockTable(config.block_sizes, max_blocks=config.max_blocks),
            processes=ProcessTable(max_processes=config.max_processes),
            wait_queue=WaitQueue(capacity=config.max_wait_queue),
        )
