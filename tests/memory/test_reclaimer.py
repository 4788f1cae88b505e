"""Tests for freeing memory and draining the wait queue.

Freeing marks the block free (no merging) and then serves waiting
requests strictly from the head, stopping at the first one that cannot
be placed in a single block.
"""

import pytest

from ffsim.config import SimulatorConfig
from ffsim.errors import ProcessNotFoundError
from ffsim.logging import LogLevel
from ffsim.memory.allocator import allocate
from ffsim.memory.reclaimer import drain_wait_queue, free
from ffsim.memory.system import SystemMemory


def _memory(
    sizes: tuple[int, ...], *, max_blocks: int = 50, max_processes: int = 50
) -> SystemMemory:
    """Create aggregate state for testing."""
    return SystemMemory.from_config(
        SimulatorConfig(block_sizes=sizes, max_blocks=max_blocks, max_processes=max_processes)
    )


class TestFree:
    """Verify releasing an allocation."""

    def test_free_marks_block_free(self) -> None:
        """The process's block becomes free and the record inactive."""
        memory = _memory((100, 200))
        allocate(memory, 1, 100)
        free(memory, 1)
        assert memory.blocks[0].free
        assert memory.processes.find_active_by_id(1) is None

    def test_free_unknown_process_raises(self) -> None:
        """Freeing an id that never allocated is NotFound."""
        memory = _memory((100,))
        with pytest.raises(ProcessNotFoundError, match="Process 9 not found"):
            free(memory, 9)

    def test_double_free_raises_and_changes_nothing(self) -> None:
        """The second free of the same id is NotFound with no side effects."""
        memory = _memory((100, 200))
        allocate(memory, 1, 50)
        free(memory, 1)
        blocks = memory.blocks.blocks()
        history = memory.processes.history()
        with pytest.raises(ProcessNotFoundError):
            free(memory, 1)
        assert memory.blocks.blocks() == blocks
        assert memory.processes.history() == history

    def test_free_queued_process_is_not_found(self) -> None:
        """A queued request owns no memory, so it cannot be freed."""
        memory = _memory((100,))
        allocate(memory, 1, 500)
        with pytest.raises(ProcessNotFoundError):
            free(memory, 1)
        assert len(memory.wait_queue) == 1

    def test_free_logs_not_found(self) -> None:
        """A failed free is logged as a warning."""
        memory = _memory((100,))
        with pytest.raises(ProcessNotFoundError):
            free(memory, 3)
        warnings = memory.logger.filter(min_level=LogLevel.WARNING, source="reclaimer")
        assert [e.pid for e in warnings] == [3]


class TestDrain:
    """Verify the wait queue drain that follows a free."""

    def test_waiting_requests_promoted_in_order(self) -> None:
        """Two waiting requests are both placed, first one first."""
        memory = _memory((300,))
        allocate(memory, 1, 300)
        allocate(memory, 2, 100)
        allocate(memory, 3, 100)
        promoted = free(memory, 1)
        assert [(r.process_id, r.address) for r in promoted] == [(2, 0), (3, 100)]
        assert len(memory.wait_queue) == 0
        assert [(b.start, b.size, b.free) for b in memory.blocks.blocks()] == [
            (0, 100, False),
            (100, 100, False),
            (200, 100, True),
        ]

    def test_head_of_line_blocking(self) -> None:
        """A small request behind an unsatisfiable head is not served."""
        memory = _memory((100, 100))
        allocate(memory, 1, 100)
        allocate(memory, 2, 100)
        allocate(memory, 3, 150)
        allocate(memory, 4, 50)
        promoted = free(memory, 1)
        assert promoted == []
        assert [r.process_id for r in memory.wait_queue] == [3, 4]
        assert memory.blocks[0].free

    def test_fragmented_free_memory_keeps_head_queued(self) -> None:
        """Total free passes the pre-check but no single block fits."""
        memory = _memory((100, 100, 100))
        for pid in (1, 2, 3):
            allocate(memory, pid, 100)
        allocate(memory, 4, 150)
        free(memory, 1)
        promoted = free(memory, 3)
        assert memory.blocks.total_free() >= 150
        assert promoted == []
        assert [r.process_id for r in memory.wait_queue] == [4]
        entries = memory.logger.filter(source="reclaimer")
        assert any(e.level is LogLevel.DEBUG and e.pid == 4 for e in entries)

    def test_process_table_full_stops_drain(self) -> None:
        """A full process table leaves the head queued and logs a warning."""
        memory = _memory((200,), max_processes=1)
        allocate(memory, 1, 200)
        allocate(memory, 2, 150)
        promoted = free(memory, 1)
        assert promoted == []
        assert [r.process_id for r in memory.wait_queue] == [2]
        assert memory.blocks.total_free() == 200
        warnings = memory.logger.filter(min_level=LogLevel.WARNING, source="reclaimer")
        assert "Process table is full" in warnings[-1].message

    def test_block_table_full_stops_drain(self) -> None:
        """A head that needs a split on a full block table stays queued."""
        memory = _memory((100,), max_blocks=1)
        allocate(memory, 1, 100)
        allocate(memory, 2, 50)
        promoted = free(memory, 1)
        assert promoted == []
        assert [r.process_id for r in memory.wait_queue] == [2]
        assert len(memory.blocks) == 1
        assert memory.blocks[0].free
        warnings = memory.logger.filter(min_level=LogLevel.WARNING, source="reclaimer")
        assert "Block table is full" in warnings[-1].message

    def test_drain_on_empty_queue_is_noop(self) -> None:
        """Nothing to promote when nobody is waiting."""
        memory = _memory((100,))
        assert drain_wait_queue(memory) == []
