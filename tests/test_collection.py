import random

import pytest

from qbittorrent_sdk.collection import Collection
from qbittorrent_sdk.exceptions import InvalidArgumentError, ReadOnlyCollectionError


class NumberCollection(Collection):
    pass


@pytest.fixture
def numbers():
    return Collection([5, 3, 8, 1, 9, 2, 8, 3])


class TestAccess:
    def test_count_and_empty(self, numbers):
        assert numbers.count() == 8
        assert len(numbers) == 8
        assert not numbers.is_empty()
        assert Collection().is_empty()
        assert not Collection()

    def test_get_out_of_range_is_none(self, numbers):
        assert numbers.get(0) == 5
        assert numbers.get(7) == 3
        assert numbers.get(8) is None
        assert numbers.get(-1) is None

    def test_first_last_on_empty(self):
        empty = Collection()
        assert empty.first() is None
        assert empty.last() is None

    def test_contains_and_index_of(self, numbers):
        assert numbers.contains(8)
        assert numbers.index_of(8) == 2
        assert numbers.index_of(42) is None

    def test_to_json(self):
        assert Collection([1, 2]).to_json() == "[1, 2]"


class TestTransformations:
    def test_filter_returns_same_type(self):
        numbers = NumberCollection([1, 2, 3, 4])
        evens = numbers.filter(lambda n: n % 2 == 0)
        assert isinstance(evens, NumberCollection)
        assert evens.to_array() == [2, 4]

    def test_factory_is_used_for_results(self):
        created = []

        def factory(items):
            created.append(True)
            return Collection(items)

        Collection([3, 1, 2], factory=factory).sort().reverse()
        assert len(created) == 1

    def test_transformations_do_not_mutate_source(self, numbers):
        before = numbers.to_array()
        numbers.filter(lambda n: n > 4)
        numbers.sort()
        numbers.reverse()
        numbers.unique()
        assert numbers.to_array() == before

    def test_map_and_reduce(self, numbers):
        assert numbers.map(lambda n: n * 2)[:3] == [10, 6, 16]
        assert numbers.reduce(lambda total, n: total + n, 0) == 39

    def test_sort_with_comparator(self, numbers):
        ascending = numbers.sort(lambda a, b: a - b)
        assert ascending.to_array() == [1, 2, 3, 3, 5, 8, 8, 9]
        assert numbers.sort(lambda a, b: a - b, descending=True).to_array() == [9, 8, 8, 5, 3, 3, 2, 1]

    def test_sort_by_accessor(self):
        words = Collection(["ccc", "a", "bb"])
        assert words.sort_by(len).to_array() == ["a", "bb", "ccc"]
        assert words.sort_by(len, descending=True).to_array() == ["ccc", "bb", "a"]

    def test_slice_take_skip(self, numbers):
        assert numbers.slice(2, 3).to_array() == [8, 1, 9]
        assert numbers.slice(6).to_array() == [8, 3]
        assert numbers.slice(20).to_array() == []
        assert numbers.take(2).to_array() == [5, 3]
        assert numbers.skip(6).to_array() == [8, 3]

    def test_slice_negative_offset_counts_from_end(self, numbers):
        assert numbers.slice(-2).to_array() == [8, 3]
        assert numbers.slice(-3, 2).to_array() == [2, 8]
        assert numbers.slice(-20).to_array() == numbers.to_array()

    def test_slice_negative_length_stops_before_end(self, numbers):
        assert numbers.slice(1, -1).to_array() == [3, 8, 1, 9, 2, 8]
        assert numbers.slice(-4, -2).to_array() == [9, 2]
        assert numbers.slice(1, -20).to_array() == []

    def test_copy_is_writable_and_independent(self):
        frozen = NumberCollection([1, 2]).freeze()
        copied = frozen.copy()
        assert isinstance(copied, NumberCollection)
        copied.add(3)
        assert copied.to_array() == [1, 2, 3]
        assert frozen.to_array() == [1, 2]

    def test_shuffle_keeps_elements(self, numbers):
        shuffled = numbers.shuffle(random.Random(7))
        assert sorted(shuffled.to_array()) == sorted(numbers.to_array())

    def test_unique_keeps_first_occurrence(self):
        pairs = Collection([("a", 1), ("b", 2), ("a", 3)])
        assert pairs.unique(lambda p: p[0]).to_array() == [("a", 1), ("b", 2)]

    def test_concat(self):
        assert Collection([1]).concat(Collection([2, 3])).to_array() == [1, 2, 3]

    def test_group_by_stringifies_keys(self, numbers):
        groups = numbers.group_by(lambda n: n % 2 == 0)
        assert set(groups) == {"True", "False"}
        assert groups["True"].to_array() == [8, 2, 8]

    def test_group_by_calls_key_once_per_element(self, numbers):
        calls = []

        def parity(n):
            calls.append(n)
            return n % 2

        numbers.group_by(parity)
        assert calls == numbers.to_array()

    def test_chunk(self, numbers):
        chunks = numbers.chunk(3)
        assert [c.to_array() for c in chunks] == [[5, 3, 8], [1, 9, 2], [8, 3]]

    @pytest.mark.parametrize("size", [0, -1])
    def test_chunk_rejects_non_positive_size(self, numbers, size):
        with pytest.raises(InvalidArgumentError):
            numbers.chunk(size)

    def test_every_some_join(self, numbers):
        assert numbers.every(lambda n: n > 0)
        assert not numbers.some(lambda n: n > 100)
        assert Collection([]).every(lambda n: False)
        assert Collection([1, 2]).join("-") == "1-2"


class TestMutation:
    def test_mutators_chain(self):
        items = Collection([1])
        items.add(2).add_all([3, 4]).insert(0, 0).remove(1).remove_item(4)
        assert items.to_array() == [0, 2, 3]
        items.clear()
        assert items.is_empty()

    def test_remove_out_of_range_is_ignored(self):
        items = Collection([1, 2])
        items.remove(5)
        assert items.to_array() == [1, 2]

    def test_read_only_rejects_mutation(self):
        items = Collection([1, 2], read_only=True)
        for mutate in (lambda: items.add(3), lambda: items.clear(), lambda: items.remove(0)):
            with pytest.raises(ReadOnlyCollectionError):
                mutate()
        assert items.to_array() == [1, 2]

    def test_freeze(self):
        items = Collection([1]).freeze()
        assert items.read_only
        with pytest.raises(ReadOnlyCollectionError) as excinfo:
            items.add_all([2])
        assert excinfo.value.operation == "add_all"


class TestProperties:
    """Algebraic properties checked over seeded random inputs."""

    @pytest.fixture(params=range(5))
    def sample(self, request):
        rng = random.Random(request.param)
        return Collection([rng.randint(0, 20) for _ in range(rng.randint(0, 40))])

    def test_filter_count_matches_reduce(self, sample):
        def predicate(n):
            return n % 3 == 0

        expected = sample.reduce(lambda count, n: count + 1 if predicate(n) else count, 0)
        assert sample.filter(predicate).count() == expected

    def test_filter_is_order_preserving_subsequence(self, sample):
        filtered = iter(sample.to_array())
        assert all(item in filtered for item in sample.filter(lambda n: n > 10))

    def test_group_by_partitions(self, sample):
        groups = sample.group_by(lambda n: n % 4)
        assert sum(group.count() for group in groups.values()) == sample.count()
        for key, group in groups.items():
            assert group.every(lambda n: str(n % 4) == key)

    def test_unique_shrinks_and_is_idempotent(self, sample):
        once = sample.unique()
        assert once.count() <= sample.count()
        assert once.unique().to_array() == once.to_array()
        assert len(set(once.to_array())) == once.count()
