"""Process table — who owns which address range.

A record is created for every successful allocation and is never
removed.  Freeing only flips the record to inactive, so the table is
also the history of every allocation the simulator has made.
"""

from dataclasses import dataclass

from ffsim.errors import CapacityExceededError, ProcessNotFoundError


@dataclass
class Process:
    """An allocation owned by one process.

    Attributes:
        id: Process identifier assigned by the caller.
        address: Start address of the owned block.
        size: Size of the owned block in KB.
        active: False once the allocation has been freed.

    """

    id: int
    address: int
    size: int
    active: bool = True


class ProcessTable:
    """Bounded, append-only table of process records."""

    def __init__(self, *, max_processes: int) -> None:
        """Create an empty table holding at most ``max_processes`` records."""
        self._max_processes = max_processes
        self._records: list[Process] = []

    def __len__(self) -> int:
        """Return the number of records, active or not."""
        return len(self._records)

    @property
    def max_processes(self) -> int:
        """Return the record limit."""
        return self._max_processes

    @property
    def is_full(self) -> bool:
        """Return True if no further record can be added."""
        return len(self._records) >= self._max_processes

    def record(self, pid: int, *, address: int, size: int) -> Process:
        """Append a new active record.

        Raises:
            CapacityExceededError: If the table is full.

        """
        if self.is_full:
            msg = f"Process table is full ({self._max_processes} records); cannot record process {pid}"
            raise CapacityExceededError(msg)
        process = Process(id=pid, address=address, size=size)
        self._records.append(process)
        return process

    def find_active_by_id(self, pid: int) -> Process | None:
        """Return the active record for ``pid``, or None."""
        for process in self._records:
            if process.id == pid and process.active:
                return process
        return None

    def deactivate(self, pid: int) -> Process:
        """Mark the active record for ``pid`` as freed.

        Returns:
            The deactivated record.

        Raises:
            ProcessNotFoundError: If ``pid`` has no active record.

        """
        process = self.find_active_by_id(pid)
        if process is None:
            msg = f"Process {pid} not found"
            raise ProcessNotFoundError(msg)
        process.active = False
        return process

    def active(self) -> list[Process]:
        """Return copies of the active records in creation order."""
        return [Process(p.id, p.address, p.size) for p in self._records if p.active]

    def history(self) -> list[Process]:
        """Return copies of every record, active or not."""
        return [Process(p.id, p.address, p.size, p.active) for p in self._records]
