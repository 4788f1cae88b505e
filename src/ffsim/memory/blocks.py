"""Block table — the contiguous partition of the address space.

The address space is a row of variable-size **blocks**.  Each block
knows where it starts, how big it is, and whether a process owns it.
The table keeps three invariants at all times:

- Blocks are sorted by start address.
- Each block ends exactly where the next one begins (no gaps, no
  overlaps), so the sizes always add up to the configured total.
- The number of blocks never exceeds ``max_blocks``.

Splitting is the only way the table grows: a free block that is larger
than a request is cut into an allocated prefix and a free remainder.
Freeing a block never merges it with its neighbours.  Adjacent free
blocks stay separate until someone explicitly calls ``merge_free()``,
which is how **external fragmentation** builds up in this model.
"""

from dataclasses import dataclass

from ffsim.errors import CapacityExceededError, InvalidConfigurationError


@dataclass
class MemoryBlock:
    """One contiguous range of the address space.

    Attributes:
        start: First address covered by the block.
        size: Number of KB the block covers.
        free: True if no process owns the block.

    """

    start: int
    size: int
    free: bool = True


class BlockTable:
    """Ordered, bounded sequence of memory blocks.

    Blocks are addressed by their position (index) in the table; indices
    shift when a split inserts a remainder block.
    """

    def __init__(self, sizes: list[int] | tuple[int, ...], *, max_blocks: int) -> None:
        """Lay out blocks back to back from address 0, all free.

        Args:
            sizes: Block sizes in address order.
            max_blocks: Upper bound on the number of blocks.

        Raises:
            InvalidConfigurationError: If there are more sizes than
                ``max_blocks`` allows.

        """
        if len(sizes) > max_blocks:
            msg = f"{len(sizes)} blocks requested but the maximum is {max_blocks}"
            raise InvalidConfigurationError(msg)
        self._max_blocks = max_blocks
        self._blocks: list[MemoryBlock] = []
        start = 0
        for size in sizes:
            self._blocks.append(MemoryBlock(start=start, size=size))
            start += size
        self._total_size = start

    def __len__(self) -> int:
        """Return the current number of blocks."""
        return len(self._blocks)

    def __getitem__(self, index: int) -> MemoryBlock:
        """Return the block at a table position."""
        return self._blocks[index]

    @property
    def max_blocks(self) -> int:
        """Return the block count limit."""
        return self._max_blocks

    @property
    def total_size(self) -> int:
        """Return the size of the whole address space."""
        return self._total_size

    @property
    def is_full(self) -> bool:
        """Return True if no further split is possible."""
        return len(self._blocks) >= self._max_blocks

    def blocks(self) -> list[MemoryBlock]:
        """Return a copy of every block in address order."""
        return [MemoryBlock(b.start, b.size, b.free) for b in self._blocks]

    def find_first_fit(self, size: int) -> int | None:
        """Return the index of the lowest-address free block of at least ``size``.

        Args:
            size: The requested size.

        Returns:
            The block index, or None if no single free block is big enough.

        """
        for i, block in enumerate(self._blocks):
            if block.free and block.size >= size:
                return i
        return None

    def split_at(self, index: int, size: int) -> MemoryBlock:
        """Allocate ``size`` from the front of a free block.

        If the block is bigger than ``size`` a free remainder block is
        inserted right after it; an exact fit is simply marked allocated.

        Args:
            index: Position of a free block with ``block.size >= size``.
            size: The amount to allocate.

        Returns:
            The allocated block.

        Raises:
            CapacityExceededError: If a split is needed but the table
                already holds ``max_blocks`` blocks.  Nothing is changed.
            ValueError: If the block is not free or too small.

        """
        block = self._blocks[index]
        if not block.free or block.size < size:
            msg = f"Block at {block.start} cannot hold {size}KB"
            raise ValueError(msg)

        if block.size > size:
            if self.is_full:
                msg = f"Block table is full ({self._max_blocks} blocks); cannot split block at {block.start}"
                raise CapacityExceededError(msg)
            remainder = MemoryBlock(start=block.start + size, size=block.size - size)
            self._blocks.insert(index + 1, remainder)
            block.size = size

        block.free = False
        return block

    def total_free(self) -> int:
        """Return the combined size of all free blocks.

        This is an upper bound on what can be allocated, not a promise:
        the free space may be scattered over blocks that are each too
        small for a given request.
        """
        return sum(b.size for b in self._blocks if b.free)

    def largest_free(self) -> int:
        """Return the size of the biggest free block (0 if none)."""
        return max((b.size for b in self._blocks if b.free), default=0)

    def mark_free_by_address(self, start: int) -> MemoryBlock:
        """Mark the block starting at ``start`` as free.

        The block is not merged with free neighbours.

        Raises:
            KeyError: If no block starts at that address.

        """
        for block in self._blocks:
            if block.start == start:
                block.free = True
                return block
        msg = f"No block starts at address {start}"
        raise KeyError(msg)

    def merge_free(self) -> int:
        """Merge every run of adjacent free blocks into a single block.

        This is never called implicitly; it exists as an explicit
        compaction command.  Allocated blocks keep their start addresses,
        so process records stay valid.

        Returns:
            The number of blocks removed by merging.

        """
        merged: list[MemoryBlock] = []
        for block in self._blocks:
            if merged and merged[-1].free and block.free:
                merged[-1].size += block.size
            else:
                merged.append(block)
        removed = len(self._blocks) - len(merged)
        self._blocks = merged
        return removed
