from typing import Sequence, TypeVar

from modules.exceptions import ChunkConfigurationError

T = TypeVar("T")


def _check_size(size: int) -> None:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ChunkConfigurationError(f"Chunk size must be a positive integer, got {size!r}")


def decrementing_capacity(first_size: int) -> int:
    """
    Max number of items the decrementing policy can hold before a chunk would be empty.
    """
    return first_size * (first_size + 1) // 2


def chunk_array(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split items into chunks of `size`, the last one holding the remainder.
    """
    _check_size(size)
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def chunk_array_decrementing(items: Sequence[T], first_size: int) -> list[list[T]]:
    """
    Split items into chunks of first_size, first_size - 1, first_size - 2, ...

    Each chunk in a Safe bundle costs a bit more calldata and gas than the one
    before it, so later chunks carry fewer transfers. The last chunk holds
    whatever is left.
    """
    _check_size(first_size)

    if len(items) > decrementing_capacity(first_size):
        raise ChunkConfigurationError(
            f"{len(items)} transfers do not fit decrementing chunks starting at {first_size} "
            f"(max {decrementing_capacity(first_size)}), increase the chunk size"
        )

    chunks = []
    cursor = 0
    while cursor < len(items):
        size = first_size - len(chunks)
        chunks.append(list(items[cursor : cursor + size]))
        cursor += size

    return chunks


def partition(items: Sequence[T], size: int, decrementing: bool = False) -> list[list[T]]:
    if decrementing:
        return chunk_array_decrementing(items, size)
    return chunk_array(items, size)
