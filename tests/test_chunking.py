import pytest

from modules.chunking import chunk_array, chunk_array_decrementing, decrementing_capacity, partition
from modules.exceptions import ChunkConfigurationError


@pytest.mark.parametrize("n", [0, 1, 5, 399, 400, 401, 1000])
@pytest.mark.parametrize("size", [1, 3, 200, 400])
def test_chunk_array_partitions_in_order(n, size):
    items = list(range(n))
    chunks = chunk_array(items, size)

    assert [x for chunk in chunks for x in chunk] == items
    assert len(chunks) == -(-n // size)
    assert all(len(chunk) == size for chunk in chunks[:-1])
    assert all(0 < len(chunk) <= size for chunk in chunks)


def test_chunk_array_remainder_goes_last():
    assert chunk_array("abcdefg", 3) == [["a", "b", "c"], ["d", "e", "f"], ["g"]]


def test_decrementing_example():
    chunks = chunk_array_decrementing(list(range(1000)), 400)

    assert [len(chunk) for chunk in chunks] == [400, 399, 201]
    assert chunks[1][0] == 400
    assert chunks[2][0] == 799


@pytest.mark.parametrize("n", [1, 10, 400, 799, 800, 1197, 5000])
def test_decrementing_lengths_shrink_by_one(n):
    first = 400
    items = list(range(n))
    chunks = chunk_array_decrementing(items, first)
    lengths = [len(chunk) for chunk in chunks]

    assert [x for chunk in chunks for x in chunk] == items
    assert sum(lengths) == n
    assert lengths[:-1] == [first - i for i in range(len(lengths) - 1)]
    assert 0 < lengths[-1] <= first - (len(lengths) - 1)


def test_decrementing_fills_to_capacity():
    assert decrementing_capacity(3) == 6
    assert [len(c) for c in chunk_array_decrementing(list(range(6)), 3)] == [3, 2, 1]


def test_decrementing_rejects_list_that_would_never_end():
    with pytest.raises(ChunkConfigurationError):
        chunk_array_decrementing(list(range(7)), 3)

    with pytest.raises(ChunkConfigurationError):
        chunk_array_decrementing([1, 2], 1)


@pytest.mark.parametrize("size", [0, -1, 2.5, "400", None, True])
def test_invalid_sizes(size):
    with pytest.raises(ChunkConfigurationError):
        chunk_array([1, 2, 3], size)
    with pytest.raises(ChunkConfigurationError):
        chunk_array_decrementing([1, 2, 3], size)


def test_empty_input_yields_no_chunks():
    assert chunk_array([], 400) == []
    assert chunk_array_decrementing([], 400) == []


def test_partition_dispatches_on_policy():
    items = list(range(10))

    assert [len(c) for c in partition(items, 4)] == [4, 4, 2]
    assert [len(c) for c in partition(items, 4, decrementing=True)] == [4, 3, 2, 1]
