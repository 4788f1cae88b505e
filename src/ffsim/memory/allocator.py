"""First-fit allocator — the only way memory gets handed out.

First fit walks the blocks in address order and takes the first free
block that is big enough.  It never looks further for a tighter fit,
which keeps the search short but leaves small leftovers near the start
of memory.

If no single free block is big enough the request is parked in the
wait queue, even when the *total* free memory would cover it: blocks
are contiguous ranges and are never stitched together on the fly.

Every check that can fail (process table full, block table full) runs
before the first mutation, so a rejected request leaves the tables
exactly as they were.
"""

from dataclasses import dataclass

from ffsim.errors import CapacityExceededError, InvalidRequestError
from ffsim.logging import LogLevel
from ffsim.memory.system import SystemMemory


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of one allocation request.

    Attributes:
        process_id: The id the request was made under.
        address: Start address of the allocated block, or None if queued.

    """

    process_id: int
    address: int | None = None

    @property
    def queued(self) -> bool:
        """Return True if the request is waiting instead of placed."""
        return self.address is None


def validate_size(size: object) -> None:
    """Raise InvalidRequestError unless ``size`` is a positive integer."""
    if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
        msg = f"Allocation size must be a positive integer, got {size!r}"
        raise InvalidRequestError(msg)


def place(memory: SystemMemory, pid: int, size: int) -> int | None:
    """Try to place a request in the first fitting block.

    Does not touch the wait queue.  Used both for fresh requests and for
    requests promoted out of the queue.

    Args:
        memory: The aggregate state.
        pid: The process receiving the memory.
        size: Requested size in KB.

    Returns:
        The start address of the allocated block, or None if no single
        free block can hold ``size``.

    Raises:
        CapacityExceededError: If the process table is full, or the
            block needs splitting and the block table is full.

    """
    index = memory.blocks.find_first_fit(size)
    if index is None:
        return None

    if memory.processes.is_full:
        msg = f"Process table is full ({memory.processes.max_processes} records); cannot allocate for process {pid}"
        raise CapacityExceededError(msg)

    block = memory.blocks.split_at(index, size)
    memory.processes.record(pid, address=block.start, size=size)
    memory.logger.log(
        LogLevel.INFO,
        f"Process {pid} allocated {size}KB at address {block.start}",
        source="allocator",
        pid=pid,
    )
    return block.start


def allocate(memory: SystemMemory, pid: int, size: int) -> AllocationResult:
    """Allocate ``size`` KB for process ``pid`` or queue the request.

    Args:
        memory: The aggregate state.
        pid: Fresh process id supplied by the caller.
        size: Requested size in KB (positive integer).

    Returns:
        The allocation result; ``result.queued`` is True when the
        request went to the wait queue.

    Raises:
        InvalidRequestError: If ``size`` is not a positive integer.
        CapacityExceededError: If a table needed for the request is full.

    """
    validate_size(size)
    try:
        address = place(memory, pid, size)
    except CapacityExceededError as e:
        memory.logger.log(LogLevel.WARNING, str(e), source="allocator", pid=pid)
        raise
    if address is not None:
        return AllocationResult(process_id=pid, address=address)

    if not memory.wait_queue.enqueue(pid, size):
        msg = f"Wait queue is full ({memory.wait_queue.capacity} requests); cannot add process {pid}"
        memory.logger.log(LogLevel.WARNING, msg, source="wait_queue", pid=pid)
        raise CapacityExceededError(msg)

    memory.logger.log(
        LogLevel.INFO,
        f"Process {pid} added to wait queue due to insufficient memory ({size}KB)",
        source="wait_queue",
        pid=pid,
    )
    return AllocationResult(process_id=pid)
