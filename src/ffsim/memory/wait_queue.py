"""Wait queue — requests that could not be placed yet.

The queue is a fixed-capacity **ring buffer**.  Storage is allocated
once; ``front`` and ``rear`` move forward and wrap around the end of
the storage, and ``count`` says how many slots are in use.  Keeping the
count separately is what lets a full queue (front just after rear) be
told apart from an empty one.

Order is strictly first in, first out.  A request behind the head is
never served before the head, even if it would fit.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class WaitingRequest:
    """An allocation request parked until memory becomes available."""

    process_id: int
    size: int


class WaitQueue:
    """Bounded FIFO queue of waiting requests."""

    def __init__(self, *, capacity: int) -> None:
        """Create an empty queue with room for ``capacity`` requests."""
        self._capacity = capacity
        self._slots: list[WaitingRequest | None] = [None] * capacity
        self._front = 0
        self._rear = -1
        self._count = 0

    def __len__(self) -> int:
        """Return the number of waiting requests."""
        return self._count

    def __iter__(self) -> Iterator[WaitingRequest]:
        """Yield waiting requests from front to rear without removing them."""
        for i in range(self._count):
            yield self._slot((self._front + i) % self._capacity)

    def _slot(self, index: int) -> WaitingRequest:
        """Return the request in an occupied slot.

        Raises:
            RuntimeError: If a slot inside the occupied range is empty,
                meaning front, rear, and count have gone out of step.

        """
        request = self._slots[index]
        if request is None:
            msg = f"Wait queue slot {index} is empty but within the {self._count} occupied slots"
            raise RuntimeError(msg)
        return request

    @property
    def capacity(self) -> int:
        """Return the maximum number of waiting requests."""
        return self._capacity

    @property
    def is_full(self) -> bool:
        """Return True if no further request fits."""
        return self._count >= self._capacity

    def enqueue(self, process_id: int, size: int) -> bool:
        """Append a request at the rear.

        Returns:
            True if the request was queued, False if the queue is full.

        """
        if self.is_full:
            return False
        self._rear = (self._rear + 1) % self._capacity
        self._slots[self._rear] = WaitingRequest(process_id=process_id, size=size)
        self._count += 1
        return True

    def peek_front(self) -> WaitingRequest | None:
        """Return the head request without removing it, or None if empty."""
        if self._count == 0:
            return None
        return self._slot(self._front)

    def dequeue_front(self) -> WaitingRequest | None:
        """Remove and return the head request; no-op returning None if empty."""
        if self._count == 0:
            return None
        request = self._slot(self._front)
        self._slots[self._front] = None
        self._front = (self._front + 1) % self._capacity
        self._count -= 1
        return request
