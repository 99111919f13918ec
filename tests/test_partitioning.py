"""Tests for dataset partitioning."""

import pytest

from similarity_search.partitioning import partition

# every (n, k) with k <= n; k > n is covered by test_more_groups_than_items
SIZE_CASES = [
    (n, k)
    for n in [1, 2, 5, 19, 20, 21, 100]
    for k in [1, 2, 3, 7, 20]
    if k <= n
]


class TestPartition:
    """Tests for contiguous near-equal splitting."""

    def test_even_split(self):
        assert partition(list("abcdef"), 3) == [["a", "b"], ["c", "d"], ["e", "f"]]

    def test_remainder_goes_to_leading_groups(self):
        groups = partition(list(range(7)), 3)
        assert groups == [[0, 1, 2], [3, 4], [5, 6]]

    def test_single_group(self):
        assert partition([1, 2, 3], 1) == [[1, 2, 3]]

    def test_one_item_per_group(self):
        assert partition([1, 2, 3], 3) == [[1], [2], [3]]

    @pytest.mark.parametrize("k", [0, -1])
    def test_non_positive_k_is_empty(self, k):
        assert partition([1, 2, 3], k) == []

    def test_empty_input_is_empty(self):
        assert partition([], 4) == []

    def test_more_groups_than_items(self):
        assert partition([1, 2], 4) == [[1], [2], [], []]

    @pytest.mark.parametrize("n,k", SIZE_CASES)
    def test_sizes_and_order(self, n, k):
        items = list(range(n))
        groups = partition(items, k)

        assert len(groups) == k
        sizes = [len(g) for g in groups]
        assert max(sizes) - min(sizes) <= 1
        assert sizes == sorted(sizes, reverse=True)
        assert [x for g in groups for x in g] == items

    def test_accepts_tuples(self):
        assert partition(("a", "b", "c"), 2) == [["a", "b"], ["c"]]
