"""Human-readable rendering of the simulator state.

Pure functions from a ``Snapshot`` (or configuration) to text.  The
shell and the REPL decide where the text goes.
"""

from ffsim.config import SimulatorConfig
from ffsim.simulator import Snapshot

_RULE = "-" * 45


def format_blocks(snapshot: Snapshot) -> str:
    """Render every block with its address, size, and state."""
    lines = ["Memory Blocks:"]
    lines.extend(
        f"Block {i}: Start_address={b.start}, Size={b.size}KB, {'Free' if b.free else 'Allocated'}"
        for i, b in enumerate(snapshot.blocks, start=1)
    )
    return "\n".join(lines)


def format_processes(snapshot: Snapshot) -> str:
    """Render the active allocations."""
    lines = ["Active Processes:"]
    if not snapshot.active_processes:
        lines.append("No active processes")
    lines.extend(
        f"Process {p.id}: Address={p.address}, Size={p.size}KB" for p in snapshot.active_processes
    )
    return "\n".join(lines)


def format_waiting(snapshot: Snapshot) -> str:
    """Render the wait queue from front to rear."""
    lines = ["Waiting Queue:"]
    if not snapshot.waiting:
        lines.append("No processes waiting")
    lines.extend(f"Process {w.process_id}: Waiting for {w.size}KB" for w in snapshot.waiting)
    return "\n".join(lines)


def format_layout(snapshot: Snapshot) -> str:
    """Render blocks, active processes, and the wait queue."""
    return "\n\n".join(
        [format_blocks(snapshot), format_processes(snapshot), format_waiting(snapshot)]
    ) + f"\n{_RULE}"


def format_stats(snapshot: Snapshot) -> str:
    """Render memory usage and fragmentation figures."""
    used = snapshot.total_size - snapshot.total_free
    return "\n".join(
        [
            f"Total memory:   {snapshot.total_size}KB",
            f"Allocated:      {used}KB",
            f"Free:           {snapshot.total_free}KB in "
            f"{sum(1 for b in snapshot.blocks if b.free)} block(s)",
            f"Largest free:   {snapshot.largest_free}KB",
            f"Fragmentation:  {snapshot.external_fragmentation:.1%}",
        ]
    )


def format_limits(config: SimulatorConfig) -> str:
    """Render the table limits shown when the simulator starts."""
    return "\n".join(
        [
            "System Limitations:",
            f"- Maximum Memory Blocks: {config.max_blocks}",
            f"- Maximum Processes: {config.max_processes}",
            f"- Maximum Waiting Queue Size: {config.max_wait_queue}",
            _RULE,
        ]
    )
