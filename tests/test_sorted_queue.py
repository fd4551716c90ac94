from __future__ import annotations

import random

import pytest

from sorted_queue import (
    SortedQueue,
    Ordering,
    ItemNotFoundError,
    DuplicateItemError,
)


class _Task:
    """Identity is the task id; the label is free to change."""

    def __init__(self, task_id: int, label: str = "") -> None:
        self.task_id = task_id
        self.label = label

    def __eq__(self, other) -> bool:
        return isinstance(other, _Task) and self.task_id == other.task_id

    def __hash__(self) -> int:
        return hash(self.task_id)


def _assert_consistent(queue: SortedQueue) -> None:
    heap = queue.heap
    for index in range(1, len(heap)):
        parent = (index - 1) // 2
        assert not queue.ordering.better(heap[index].priority, heap[parent].priority)

    assert len(queue.position) == len(heap)
    for index, entry in enumerate(heap):
        assert queue.position[entry.item] == index


def _drain(queue: SortedQueue) -> list:
    priorities = []
    while (result := queue.dequeue()) is not None:
        priorities.append(result[0])
        _assert_consistent(queue)
    return priorities


def test_max_first_extraction_order() -> None:
    queue = SortedQueue(Ordering.DESCENDING)
    for item, priority in zip("abcd", [5, 1, 9, 3]):
        queue.enqueue(priority, item)

    assert [queue.dequeue() for _ in range(4)] == [(9, "c"), (5, "a"), (3, "d"), (1, "b")]


def test_min_first_extraction_order() -> None:
    queue = SortedQueue(Ordering.ASCENDING)
    for item, priority in zip("abcd", [5, 1, 9, 3]):
        queue.enqueue(priority, item)

    assert _drain(queue) == [1, 3, 5, 9]


def test_default_ordering_is_ascending() -> None:
    assert SortedQueue().ordering is Ordering.ASCENDING


def test_ordering_must_be_an_ordering_member() -> None:
    with pytest.raises(AssertionError):
        SortedQueue(True)


@pytest.mark.parametrize("ordering", list(Ordering))
def test_random_operations_keep_heap_and_index_consistent(ordering: Ordering) -> None:
    rng = random.Random(7)
    queue = SortedQueue(ordering)
    present = set()

    for step in range(500):
        action = rng.random()
        if action < 0.45 or not present:
            item = step
            queue.enqueue(rng.randint(0, 100), item)
            present.add(item)
        elif action < 0.65:
            queue.change_priority(rng.randint(0, 100), rng.choice(sorted(present)))
        elif action < 0.75:
            # Repoint to a fresh identity at the same slot
            old_item = rng.choice(sorted(present))
            new_item = -step - 1
            priority = queue.get_weight(old_item)
            queue.set_ref(old_item, new_item)
            present.remove(old_item)
            present.add(new_item)
            assert old_item not in queue
            assert queue.get_weight(new_item) == priority
        elif action < 0.85:
            _, item = queue.dequeue()
            present.remove(item)
        else:
            item = rng.choice(sorted(present))
            queue.remove(item)
            present.remove(item)

        _assert_consistent(queue)
        assert queue.size() == len(present)

    priorities = _drain(queue)
    assert priorities == sorted(priorities, reverse=ordering is Ordering.DESCENDING)


def test_size_changes_only_on_enqueue_and_dequeue() -> None:
    queue = SortedQueue()
    assert queue.size() == 0

    queue.enqueue(3, "a")
    queue.enqueue(1, "b")
    assert queue.size() == 2

    queue.change_priority(0, "a")
    queue.set_ref("b", "c")
    queue.get_weight("a")
    assert queue.size() == 2

    queue.dequeue()
    assert queue.size() == 1
    assert len(queue) == 1


def test_change_priority_round_trip() -> None:
    queue = SortedQueue(Ordering.DESCENDING)
    for item, priority in zip("abcde", [4, 8, 15, 16, 23]):
        queue.enqueue(priority, item)

    queue.change_priority(42, "a")
    assert queue.get_weight("a") == 42
    assert queue.peek() == (42, "a")

    queue.change_priority(0, "a")
    assert queue.get_weight("a") == 0
    _assert_consistent(queue)
    assert _drain(queue) == [23, 16, 15, 8, 0]


def test_change_priority_to_same_value() -> None:
    queue = SortedQueue()
    queue.enqueue(1, "a")
    queue.enqueue(1, "b")

    queue.change_priority(1, "b")
    _assert_consistent(queue)
    assert queue.get_weight("b") == 1


def test_not_found_contract() -> None:
    queue = SortedQueue()
    queue.enqueue(1, "a")

    with pytest.raises(ItemNotFoundError):
        queue.change_priority(5, "missing")
    with pytest.raises(ItemNotFoundError):
        queue.set_ref("missing", "other")
    with pytest.raises(KeyError):
        queue.get_element("missing")
    with pytest.raises(ItemNotFoundError):
        queue.remove("missing")

    assert queue.size() == 1
    assert queue.get_weight("a") == 1
    assert queue.get_weight("missing") is None


def test_not_found_after_dequeue() -> None:
    queue = SortedQueue()
    queue.enqueue(1, "a")
    queue.dequeue()

    assert "a" not in queue
    with pytest.raises(ItemNotFoundError):
        queue.change_priority(0, "a")


def test_empty_queue_contract() -> None:
    queue = SortedQueue()
    assert queue.dequeue() is None
    assert queue.peek() is None
    assert queue.size() == 0
    assert not queue

    queue.enqueue(1, "a")
    queue.dequeue()
    assert queue.dequeue() is None
    assert queue.size() == 0


def test_duplicate_enqueue_is_rejected() -> None:
    queue = SortedQueue()
    queue.enqueue(1, _Task(1, "first"))

    with pytest.raises(DuplicateItemError):
        queue.enqueue(0, _Task(1, "second"))

    assert queue.size() == 1
    assert queue.get_element(_Task(1)).label == "first"
    _assert_consistent(queue)


def test_set_ref_repoints_equal_identity() -> None:
    queue = SortedQueue()
    original = _Task(1, "old path")
    queue.enqueue(2, original)
    queue.enqueue(1, _Task(2))

    replacement = _Task(1, "new path")
    queue.set_ref(original, replacement)

    assert queue.get_element(_Task(1)) is replacement
    assert queue.get_weight(replacement) == 2
    assert [entry.priority for entry in queue.heap] == [1, 2]
    _assert_consistent(queue)


def test_set_ref_to_new_identity() -> None:
    queue = SortedQueue()
    queue.enqueue(3, "a")
    queue.enqueue(1, "b")

    queue.set_ref("a", "z")

    assert "a" not in queue
    assert queue.get_weight("z") == 3
    _assert_consistent(queue)


def test_set_ref_onto_present_identity_is_rejected() -> None:
    queue = SortedQueue()
    queue.enqueue(3, "a")
    queue.enqueue(1, "b")

    with pytest.raises(DuplicateItemError):
        queue.set_ref("a", "b")

    assert queue.get_weight("a") == 3
    assert queue.get_weight("b") == 1
    _assert_consistent(queue)


def test_remove_last_and_root() -> None:
    queue = SortedQueue()
    for priority, item in enumerate("abcdef"):
        queue.enqueue(priority, item)

    assert queue.remove("f") == 5
    assert queue.remove("a") == 0
    _assert_consistent(queue)
    assert _drain(queue) == [1, 2, 3, 4]


def test_remove_requires_sift_up() -> None:
    queue = SortedQueue()
    # Removing 102 moves the last leaf (3) into the left subtree, below 100
    for priority in [0, 100, 1, 101, 102, 2, 3]:
        queue.enqueue(priority, priority)

    queue.remove(102)
    _assert_consistent(queue)
    assert _drain(queue) == [0, 1, 2, 3, 100, 101]


def test_graph_relaxation_order() -> None:
    queue = SortedQueue(Ordering.ASCENDING)
    queue.enqueue(0, "A")
    queue.enqueue(float("inf"), "B")
    queue.enqueue(float("inf"), "C")

    assert queue.dequeue() == (0, "A")
    queue.change_priority(4, "B")
    queue.change_priority(2, "C")

    assert queue.dequeue() == (2, "C")
    assert queue.dequeue() == (4, "B")


def test_entry_unpacks_as_pair() -> None:
    queue = SortedQueue()
    queue.enqueue(7, "a")

    priority, item = queue.heap[0]
    assert (priority, item) == (7, "a")
    assert queue.heap[0][1] == "a"
