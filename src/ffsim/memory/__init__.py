"""Memory subsystem — block table, process table, wait queue, and engine.

Re-exports public symbols so callers can write::

    from ffsim.memory import BlockTable, SystemMemory, allocate, free
"""

from ffsim.memory.allocator import AllocationResult, allocate, place, validate_size
from ffsim.memory.blocks import BlockTable, MemoryBlock
from ffsim.memory.processes import Process, ProcessTable
from ffsim.memory.reclaimer import drain_wait_queue, free
from ffsim.memory.system import SystemMemory
from ffsim.memory.wait_queue import WaitingRequest, WaitQueue

__all__ = [
    "AllocationResult",
    "BlockTable",
    "MemoryBlock",
    "Process",
    "ProcessTable",
    "SystemMemory",
    "WaitQueue",
    "WaitingRequest",
    "allocate",
    "drain_wait_queue",
    "free",
    "place",
    "validate_size",
]
