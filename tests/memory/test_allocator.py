"""Tests for the first-fit allocator.

Allocation either places a request in the lowest-address block that is
big enough, or parks it in the wait queue.  A rejected request must
leave every table exactly as it was.
"""

import pytest

from ffsim.config import SimulatorConfig
from ffsim.errors import CapacityExceededError, InvalidRequestError
from ffsim.logging import LogLevel
from ffsim.memory.allocator import allocate
from ffsim.memory.system import SystemMemory

SIZES = (100, 500, 200, 300, 600)
REQUEST = 212
TOO_BIG = 900


def _memory(
    sizes: tuple[int, ...] = SIZES,
    *,
    max_blocks: int = 50,
    max_processes: int = 50,
    max_wait_queue: int = 50,
) -> SystemMemory:
    """Create aggregate state for testing."""
    return SystemMemory.from_config(
        SimulatorConfig(
            block_sizes=sizes,
            max_blocks=max_blocks,
            max_processes=max_processes,
            max_wait_queue=max_wait_queue,
        )
    )


class TestAllocatePlacement:
    """Verify successful first-fit placement."""

    def test_returns_address_of_first_fit(self) -> None:
        """212KB lands in the 500KB block at address 100."""
        memory = _memory()
        result = allocate(memory, 1, REQUEST)
        assert result.address == 100
        assert not result.queued

    def test_records_process(self) -> None:
        """The owning process is recorded as active."""
        memory = _memory()
        allocate(memory, 1, REQUEST)
        process = memory.processes.find_active_by_id(1)
        assert process is not None
        assert (process.address, process.size) == (100, REQUEST)

    def test_splits_block(self) -> None:
        """The block is cut into an allocated prefix and a free remainder."""
        memory = _memory()
        allocate(memory, 1, REQUEST)
        layout = [(b.start, b.size, b.free) for b in memory.blocks.blocks()]
        assert layout[1:3] == [(100, REQUEST, False), (312, 288, True)]

    def test_logs_allocation(self) -> None:
        """A successful allocation is logged by the allocator."""
        memory = _memory()
        allocate(memory, 1, REQUEST)
        entries = memory.logger.filter(source="allocator")
        assert len(entries) == 1
        assert entries[0].pid == 1
        assert "address 100" in entries[0].message


class TestAllocateQueueing:
    """Verify requests that cannot be placed."""

    def test_queued_when_no_single_block_fits(self) -> None:
        """Enough total free memory is not enough: the fit is per block."""
        memory = _memory()
        allocate(memory, 1, REQUEST)
        result = allocate(memory, 2, TOO_BIG)
        assert result.queued
        assert result.address is None
        assert memory.blocks.total_free() > TOO_BIG
        assert [r.process_id for r in memory.wait_queue] == [2]
        assert memory.processes.find_active_by_id(2) is None

    def test_full_queue_raises_capacity_error(self) -> None:
        """With a one-slot queue the second unfulfillable request is rejected."""
        memory = _memory(max_wait_queue=1)
        allocate(memory, 1, TOO_BIG)
        with pytest.raises(CapacityExceededError, match="Wait queue is full"):
            allocate(memory, 2, TOO_BIG)
        assert [r.process_id for r in memory.wait_queue] == [1]
        assert memory.logger.filter(min_level=LogLevel.WARNING)


class TestAllocateRejection:
    """Verify that rejected requests leave no trace in the tables."""

    def test_block_table_full_leaves_state_untouched(self) -> None:
        """A split on a full block table fails before recording the process."""
        memory = _memory((100, 200), max_blocks=2)
        before = memory.blocks.blocks()
        with pytest.raises(CapacityExceededError, match="Block table is full"):
            allocate(memory, 1, 50)
        assert memory.blocks.blocks() == before
        assert len(memory.processes) == 0
        assert len(memory.wait_queue) == 0

    def test_process_table_full_leaves_blocks_untouched(self) -> None:
        """No block is split when the process cannot be recorded."""
        memory = _memory(max_processes=1)
        allocate(memory, 1, 10)
        before = memory.blocks.blocks()
        with pytest.raises(CapacityExceededError, match="Process table is full"):
            allocate(memory, 2, 10)
        assert memory.blocks.blocks() == before

    @pytest.mark.parametrize("size", [0, -5, 1.5, True])
    def test_invalid_size_rejected(self, size: object) -> None:
        """Sizes must be positive integers."""
        memory = _memory()
        with pytest.raises(InvalidRequestError):
            allocate(memory, 1, size)  # type: ignore[arg-type]
