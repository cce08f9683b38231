import math

import pytest

from llmgate.chunking import to_chunks


@pytest.mark.parametrize(("length", "size"), [(1, 1000), (999, 1000), (1000, 1000), (1001, 1000), (2500, 1000), (7, 3)])
def test_to_chunks_sizes(length: int, size: int) -> None:
    items = list(range(length))
    chunks = list(to_chunks(items, size))

    assert len(chunks) == math.ceil(length / size)
    assert all(len(chunk) <= size for chunk in chunks)
    assert len(chunks[-1]) == (length % size or size)
    assert [item for chunk in chunks for item in chunk] == items


def test_to_chunks_empty_sequence() -> None:
    assert list(to_chunks([], 10)) == []


def test_to_chunks_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        list(to_chunks(["a"], 0))
