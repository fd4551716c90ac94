import enum
from typing import TypeVar, Generic, Optional

ELEMENT_TYPE = TypeVar("ELEMENT_TYPE")
PRIORITY_TYPE = TypeVar("PRIORITY_TYPE")


class SortedQueueError(KeyError):
    pass


class ItemNotFoundError(SortedQueueError):
    pass


class DuplicateItemError(SortedQueueError):
    pass


class Ordering(enum.Enum):
    ASCENDING = "ascending"  # Minimum first
    DESCENDING = "descending"  # Maximum first

    def better(self, a, b) -> bool:
        """
        :return: True if priority a must be closer to the root than priority b
        """
        if self is Ordering.ASCENDING:
            return a < b
        return a > b


class Entry:
    __slots__ = ("priority", "item")

    priority: PRIORITY_TYPE
    item: ELEMENT_TYPE

    def __init__(self, priority, item):
        self.priority = priority
        self.item = item

    @property
    def values(self) -> tuple[PRIORITY_TYPE, ELEMENT_TYPE]:
        return self.priority, self.item

    def __getitem__(self, index: int):
        return self.values[index]

    def __iter__(self):
        return iter(self.values)

    def __repr__(self):
        return f"Entry({self.priority!r}, {self.item!r})"


class SortedQueue(Generic[ELEMENT_TYPE, PRIORITY_TYPE]):
    """
    Binary heap with a position index (item -> heap slot).

    Items are identified by their own __eq__ / __hash__, so an item whose identity defining fields
    change while it is enqueued must be replaced through set_ref.
    Not thread-safe.
    """

    def __init__(self, ordering: Ordering = Ordering.ASCENDING):
        assert isinstance(ordering, Ordering), "Ordering must be an Ordering member"
        self._ordering = ordering

        self.heap: list[Entry] = []
        self.position: dict[ELEMENT_TYPE, int] = {}

    @property
    def ordering(self) -> Ordering:
        return self._ordering

    # <editor-fold desc="HEAP PRIMITIVES">
    def _better(self, i: int, j: int) -> bool:
        return self._ordering.better(self.heap[i].priority, self.heap[j].priority)

    def _swap(self, i: int, j: int):
        heap = self.heap
        heap[i], heap[j] = heap[j], heap[i]
        self.position[heap[i].item] = i
        self.position[heap[j].item] = j

    def _pop_last(self) -> Entry:
        entry = self.heap.pop()
        del self.position[entry.item]
        return entry

    def _sift_up(self, index: int) -> int:
        while index > 0:
            parent_index = (index - 1) // 2
            if not self._better(index, parent_index):
                break
            self._swap(index, parent_index)
            index = parent_index
        return index

    def _sift_down(self, index: int) -> int:
        size = len(self.heap)
        while True:
            candidate = 2 * index + 1
            if candidate >= size:
                break

            right = candidate + 1
            if right < size and not self._better(candidate, right):
                candidate = right

            if not self._better(candidate, index):
                break
            self._swap(index, candidate)
            index = candidate
        return index

    def _find(self, item: ELEMENT_TYPE) -> int:
        try:
            return self.position[item]
        except KeyError:
            raise ItemNotFoundError(item) from None

    # </editor-fold>

    def enqueue(self, priority: PRIORITY_TYPE, item: ELEMENT_TYPE):
        if item in self.position:
            raise DuplicateItemError(item)

        index = len(self.heap)
        self.heap.append(Entry(priority, item))
        self.position[item] = index
        self._sift_up(index)

    def dequeue(self) -> Optional[tuple[PRIORITY_TYPE, ELEMENT_TYPE]]:
        if not self.heap:
            return None

        self._swap(0, len(self.heap) - 1)
        entry = self._pop_last()
        if self.heap:
            self._sift_down(0)
        return entry.values

    def peek(self) -> Optional[tuple[PRIORITY_TYPE, ELEMENT_TYPE]]:
        if not self.heap:
            return None
        return self.heap[0].values

    def change_priority(self, new_priority: PRIORITY_TYPE, item: ELEMENT_TYPE):
        index = self._find(item)

        entry = self.heap[index]
        old_priority = entry.priority
        entry.priority = new_priority

        # A single slot change can only break the invariant in one direction
        if self._ordering.better(old_priority, new_priority):
            self._sift_down(index)
        else:
            self._sift_up(index)

    def set_ref(self, old_item: ELEMENT_TYPE, new_item: ELEMENT_TYPE):
        index = self._find(old_item)
        if new_item != old_item and new_item in self.position:
            raise DuplicateItemError(new_item)

        del self.position[old_item]
        self.heap[index].item = new_item
        self.position[new_item] = index

    def get_weight(self, item: ELEMENT_TYPE) -> Optional[PRIORITY_TYPE]:
        index = self.position.get(item)
        if index is None:
            return None
        return self.heap[index].priority

    def get_element(self, item: ELEMENT_TYPE) -> ELEMENT_TYPE:
        return self.heap[self._find(item)].item

    def remove(self, item: ELEMENT_TYPE) -> PRIORITY_TYPE:
        index = self._find(item)

        last_index = len(self.heap) - 1
        self._swap(index, last_index)
        entry = self._pop_last()

        if index < last_index and self._sift_up(index) == index:
            self._sift_down(index)
        return entry.priority

    def size(self) -> int:
        return len(self.heap)

    def __len__(self):
        return len(self.heap)

    def __bool__(self):
        return bool(self.heap)

    def __contains__(self, item: ELEMENT_TYPE):
        return item in self.position

    def __repr__(self):
        return f"{type(self).__name__}({self._ordering.name}, size={len(self.heap)})"
