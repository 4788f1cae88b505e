"""Reclaimer — give memory back and let waiting requests in.

Freeing a process marks its block free (without merging neighbours)
and then **drains** the wait queue:

    1. Look at the head request.
    2. If the total free memory is smaller than the head's size, stop.
    3. Otherwise try a first-fit placement for the head.
    4. Placed: remove it from the queue and go back to 1.
       Not placed (free memory is fragmented): stop.

The total-free check is only a cheap pre-filter; step 3 can still fail.
The loop never skips the head, so one large request can hold up
smaller ones behind it (**head-of-line blocking**).  Every iteration
either removes a request or stops, so the loop runs at most once per
queued request.
"""

from ffsim.errors import CapacityExceededError, ProcessNotFoundError
from ffsim.logging import LogLevel
from ffsim.memory.allocator import AllocationResult, place
from ffsim.memory.processes import Process
from ffsim.memory.system import SystemMemory


def drain_wait_queue(memory: SystemMemory) -> list[AllocationResult]:
    """Promote waiting requests from the head until one cannot be placed.

    A full process or block table also stops the drain; the head stays
    queued and the condition is logged.

    Returns:
        The requests that were allocated, in queue order.

    """
    promoted: list[AllocationResult] = []
    while (head := memory.wait_queue.peek_front()) is not None:
        if memory.blocks.total_free() < head.size:
            break

        try:
            address = place(memory, head.process_id, head.size)
        except CapacityExceededError as e:
            memory.logger.log(LogLevel.WARNING, str(e), source="reclaimer", pid=head.process_id)
            break

        if address is None:
            memory.logger.log(
                LogLevel.DEBUG,
                f"Process {head.process_id} still waiting: {head.size}KB needed, free memory is fragmented",
                source="reclaimer",
                pid=head.process_id,
            )
            break

        memory.wait_queue.dequeue_front()
        memory.logger.log(
            LogLevel.INFO,
            f"Process {head.process_id} moved from waiting queue and allocated memory",
            source="reclaimer",
            pid=head.process_id,
        )
        promoted.append(AllocationResult(process_id=head.process_id, address=address))
    return promoted


def free(memory: SystemMemory, pid: int) -> list[AllocationResult]:
    """Release the memory held by ``pid`` and drain the wait queue.

    Args:
        memory: The aggregate state.
        pid: The process whose allocation to free.

    Returns:
        Waiting requests that were allocated as a result.

    Raises:
        ProcessNotFoundError: If ``pid`` has no active allocation.
            Nothing is changed in that case.

    """
    process: Process | None = memory.processes.find_active_by_id(pid)
    if process is None:
        msg = f"Process {pid} not found"
        memory.logger.log(LogLevel.WARNING, msg, source="reclaimer", pid=pid)
        raise ProcessNotFoundError(msg)

    memory.processes.deactivate(pid)
    memory.blocks.mark_free_by_address(process.address)
    memory.logger.log(
        LogLevel.INFO,
        f"Memory for Process {pid} freed ({process.size}KB at address {process.address})",
        source="reclaimer",
        pid=pid,
    )
    return drain_wait_queue(memory)
