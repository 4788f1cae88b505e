"""Simulator — the engine facade used by the shell and the web UI.

The facade owns one ``SystemMemory`` and the process id counter.  Ids
start at 1 and go up by one for every allocation *request*, whether it
is placed or queued, so an id is never handed out twice.

Callers only see three operations plus a read-only snapshot::

    sim = Simulator.from_sizes([100, 500, 200, 300, 600])
    result = sim.allocate(212)      # AllocationResult(process_id=1, address=100)
    sim.free(result.process_id)
    sim.snapshot().blocks
"""

from dataclasses import dataclass

from ffsim.config import (
    DEFAULT_MAX_BLOCKS,
    DEFAULT_MAX_PROCESSES,
    DEFAULT_MAX_WAIT_QUEUE,
    SimulatorConfig,
)
from ffsim.logging import Logger, LogLevel
from ffsim.memory import (
    AllocationResult,
    MemoryBlock,
    Process,
    SystemMemory,
    WaitingRequest,
    allocate,
    drain_wait_queue,
    free,
    validate_size,
)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the engine state at one moment.

    Attributes:
        blocks: Every block in address order.
        active_processes: Active allocations in creation order.
        waiting: Waiting requests from front to rear.
        total_size: Size of the whole address space.
        total_free: Combined size of all free blocks.
        largest_free: Size of the biggest free block.

    """

    blocks: tuple[MemoryBlock, ...]
    active_processes: tuple[Process, ...]
    waiting: tuple[WaitingRequest, ...]
    total_size: int
    total_free: int
    largest_free: int

    @property
    def external_fragmentation(self) -> float:
        """Return ``1 - largest_free / total_free`` (0.0 when nothing is free)."""
        if self.total_free == 0:
            return 0.0
        return 1 - self.largest_free / self.total_free


@dataclass(frozen=True)
class MergeResult:
    """Outcome of an explicit merge of adjacent free blocks."""

    blocks_removed: int
    promoted: tuple[AllocationResult, ...]


class Simulator:
    """First-fit allocation engine with a bounded wait queue."""

    def __init__(self, config: SimulatorConfig) -> None:
        """Create the engine from a configuration.

        Raises:
            InvalidConfigurationError: If the configuration is unusable.
                No state is created in that case.

        """
        self._memory = SystemMemory.from_config(config)
        self._config = config
        self._next_pid = 1
        self._memory.logger.log(
            LogLevel.INFO,
            f"Initialized {len(config.block_sizes)} blocks ({config.total_size}KB total)",
            source="simulator",
        )

    @classmethod
    def from_sizes(
        cls,
        sizes: list[int] | tuple[int, ...],
        *,
        max_blocks: int = DEFAULT_MAX_BLOCKS,
        max_processes: int = DEFAULT_MAX_PROCESSES,
        max_wait_queue: int = DEFAULT_MAX_WAIT_QUEUE,
    ) -> "Simulator":
        """Create an engine from block sizes and optional limits."""
        config = SimulatorConfig(
            block_sizes=tuple(sizes),
            max_blocks=max_blocks,
            max_processes=max_processes,
            max_wait_queue=max_wait_queue,
        )
        return cls(config)

    @property
    def config(self) -> SimulatorConfig:
        """Return the configuration the engine was built from."""
        return self._config

    @property
    def memory(self) -> SystemMemory:
        """Return the aggregate state (for inspection in tests)."""
        return self._memory

    @property
    def logger(self) -> Logger:
        """Return the event log."""
        return self._memory.logger

    @property
    def next_pid(self) -> int:
        """Return the id the next allocation request will receive."""
        return self._next_pid

    def allocate(self, size: int) -> AllocationResult:
        """Allocate ``size`` KB under a fresh process id, or queue it.

        Every valid request consumes an id, including requests that end
        up queued or are rejected for lack of capacity.

        Raises:
            InvalidRequestError: If ``size`` is not a positive integer.
            CapacityExceededError: If a table needed for the request is full.

        """
        validate_size(size)
        pid = self._next_pid
        self._next_pid += 1
        return allocate(self._memory, pid, size)

    def free(self, pid: int) -> list[AllocationResult]:
        """Free the allocation held by ``pid`` and drain the wait queue.

        Returns:
            Waiting requests that were allocated as a result.

        Raises:
            ProcessNotFoundError: If ``pid`` has no active allocation.

        """
        return free(self._memory, pid)

    def merge(self) -> MergeResult:
        """Merge adjacent free blocks, then drain the wait queue."""
        removed = self._memory.blocks.merge_free()
        self._memory.logger.log(
            LogLevel.INFO,
            f"Merged adjacent free blocks ({removed} removed)",
            source="blocks",
        )
        promoted = drain_wait_queue(self._memory) if removed else []
        return MergeResult(blocks_removed=removed, promoted=tuple(promoted))

    def snapshot(self) -> Snapshot:
        """Return a read-only copy of the current state."""
        blocks = self._memory.blocks
        return Snapshot(
            blocks=tuple(blocks.blocks()),
            active_processes=tuple(self._memory.processes.active()),
            waiting=tuple(self._memory.wait_queue),
            total_size=blocks.total_size,
            total_free=blocks.total_free(),
            largest_free=blocks.largest_free(),
        )
