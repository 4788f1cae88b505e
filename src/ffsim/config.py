"""Simulator configuration — the initial partition and the table limits.

A configuration is supplied once, before the engine exists.  It can be
built in code or loaded from a small JSON document::

    {"block_sizes": [100, 500, 200, 300, 600], "max_wait_queue": 10}

Validation happens up front: an unusable configuration never produces
a half-built engine.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ffsim.errors import InvalidConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_MAX_BLOCKS = 50
DEFAULT_MAX_PROCESSES = 50
DEFAULT_MAX_WAIT_QUEUE = 50

# Largest size (and total address space) a block table can describe.
MAX_SIZE = 2**31 - 1


def _is_int(value: object) -> bool:
    """Return True for real integers (bool is not accepted)."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class SimulatorConfig:
    """Immutable simulator settings.

    Attributes:
        block_sizes: Sizes (KB) of the initial partition, in address order.
        max_blocks: Upper bound on the number of blocks after splitting.
        max_processes: Upper bound on process records (active or not).
        max_wait_queue: Capacity of the wait queue.

    """

    block_sizes: tuple[int, ...]
    max_blocks: int = DEFAULT_MAX_BLOCKS
    max_processes: int = DEFAULT_MAX_PROCESSES
    max_wait_queue: int = DEFAULT_MAX_WAIT_QUEUE

    @property
    def total_size(self) -> int:
        """Return the size of the whole address space."""
        return sum(self.block_sizes)

    def validate(self) -> None:
        """Check every setting.

        Raises:
            InvalidConfigurationError: If a limit is not a positive
                integer, a block size is out of range, or there are more
                blocks than ``max_blocks`` allows.

        """
        for name in ("max_blocks", "max_processes", "max_wait_queue"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise InvalidConfigurationError(msg)

        if not self.block_sizes:
            msg = "At least one memory block is required"
            raise InvalidConfigurationError(msg)
        if len(self.block_sizes) > self.max_blocks:
            msg = f"{len(self.block_sizes)} blocks requested but the maximum is {self.max_blocks}"
            raise InvalidConfigurationError(msg)

        for i, size in enumerate(self.block_sizes, start=1):
            if not _is_int(size):
                msg = f"Block {i} size must be an integer, got {size!r}"
                raise InvalidConfigurationError(msg)
            if size <= 0:
                msg = f"Block {i} size must be positive, got {size}"
                raise InvalidConfigurationError(msg)
            if size > MAX_SIZE:
                msg = f"Block {i} size {size} exceeds the maximum of {MAX_SIZE}"
                raise InvalidConfigurationError(msg)

        if self.total_size > MAX_SIZE:
            msg = f"Total memory {self.total_size} exceeds the maximum of {MAX_SIZE}"
            raise InvalidConfigurationError(msg)


def config_from_dict(data: dict[str, Any]) -> SimulatorConfig:
    """Build and validate a configuration from a decoded JSON object.

    Args:
        data: Mapping with ``block_sizes`` and optional limit keys.

    Returns:
        A validated configuration.

    Raises:
        InvalidConfigurationError: If keys are missing or values invalid.

    """
    if not isinstance(data, dict):
        msg = "Configuration must be a JSON object"
        raise InvalidConfigurationError(msg)
    sizes = data.get("block_sizes")
    if not isinstance(sizes, list):
        msg = "Configuration needs a 'block_sizes' list"
        raise InvalidConfigurationError(msg)

    config = SimulatorConfig(
        block_sizes=tuple(sizes),
        max_blocks=data.get("max_blocks", DEFAULT_MAX_BLOCKS),
        max_processes=data.get("max_processes", DEFAULT_MAX_PROCESSES),
        max_wait_queue=data.get("max_wait_queue", DEFAULT_MAX_WAIT_QUEUE),
    )
    config.validate()
    return config


def load_config(path: Path) -> SimulatorConfig:
    """Load a configuration from a JSON file.

    Raises:
        InvalidConfigurationError: If the file cannot be read or parsed,
            or its contents are invalid.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load configuration: {e}"
        raise InvalidConfigurationError(msg) from e
    return config_from_dict(data)
