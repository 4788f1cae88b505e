"""Tests for the layout printer.

The printer turns a snapshot into the block / process / queue listing
shown after every command.
"""

from ffsim.config import SimulatorConfig
from ffsim.layout import format_layout, format_limits, format_stats
from ffsim.simulator import Simulator

SIZES = [100, 500]


class TestFormatLayout:
    """Verify the three sections of the layout."""

    def test_empty_state(self) -> None:
        """A fresh simulator shows free blocks and empty sections."""
        text = format_layout(Simulator.from_sizes(SIZES).snapshot())
        assert "Block 1: Start_address=0, Size=100KB, Free" in text
        assert "Block 2: Start_address=100, Size=500KB, Free" in text
        assert "No active processes" in text
        assert "No processes waiting" in text

    def test_active_and_waiting(self) -> None:
        """Allocated blocks, processes, and waiting requests are listed."""
        sim = Simulator.from_sizes(SIZES)
        sim.allocate(212)
        sim.allocate(900)
        text = format_layout(sim.snapshot())
        assert "Block 2: Start_address=100, Size=212KB, Allocated" in text
        assert "Block 3: Start_address=312, Size=288KB, Free" in text
        assert "Process 1: Address=100, Size=212KB" in text
        assert "Process 2: Waiting for 900KB" in text


class TestFormatStats:
    """Verify the usage summary."""

    def test_stats_figures(self) -> None:
        """Totals and the fragmentation percentage are shown."""
        sim = Simulator.from_sizes(SIZES)
        sim.allocate(100)
        text = format_stats(sim.snapshot())
        assert "Total memory:   600KB" in text
        assert "Allocated:      100KB" in text
        assert "Largest free:   500KB" in text
        assert "Fragmentation:  0.0%" in text


class TestFormatLimits:
    """Verify the start-up banner."""

    def test_limits_listed(self) -> None:
        """All three limits appear."""
        text = format_limits(SimulatorConfig(block_sizes=(1,), max_wait_queue=7))
        assert "Maximum Memory Blocks: 50" in text
        assert "Maximum Processes: 50" in text
        assert "Maximum Waiting Queue Size: 7" in text
