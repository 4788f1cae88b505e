"""ff-sim — a first-fit contiguous memory allocation simulator."""

__version__ = "0.1.0"
