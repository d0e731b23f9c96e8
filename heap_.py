from enum import Enum
from typing import Any, Callable, Optional

from array_ import Array, AllocationError
from logger import init_logger

logger = init_logger(__name__)

__all__ = [
    "AllocationError",
    "EmptyError",
    "Orientation",
    "Heap",
    "satisfies",
    "dominates",
    "build_heap",
    "heap_sort",
]


class EmptyError(IndexError):
    """Raised when an element is extracted from a heap with no elements."""


class Orientation(Enum):
    MAX = "MAX"
    MIN = "MIN"


def _direction(orientation: Orientation) -> int:
    # The comparison sign a parent must have against its children
    return 1 if orientation == Orientation.MAX else -1


def satisfies(orientation: Orientation, compare: Callable[[Any, Any], int], a, b) -> bool:
    """True when `a` may sit above `b`: a >= b for MAX heaps, a <= b for MIN heaps."""
    return compare(a, b) * _direction(orientation) >= 0


def dominates(orientation: Orientation, compare: Callable[[Any, Any], int], a, b) -> bool:
    """Strict version of `satisfies`: ties do not dominate."""
    return compare(a, b) * _direction(orientation) > 0


class Heap:
    def __init__(self, size, compare, orientation=Orientation.MIN, destroy=None, dtype=None):
        self.elements = Array(size, dtype=dtype)
        self.compare = compare
        self.orientation = orientation
        self.destroy = destroy
        self.disposed = False

    @classmethod
    def _from_array(cls, elements: Array, compare, orientation, destroy=None):
        heap = cls.__new__(cls)
        heap.elements = elements
        heap.compare = compare
        heap.orientation = orientation
        heap.destroy = destroy
        heap.disposed = False
        return heap

    def _check_alive(self):
        if self.disposed:
            raise RuntimeError("Heap has been disposed and cannot be used again")

    def _satisfies(self, i, j):
        data = self.elements.elements
        return satisfies(self.orientation, self.compare, data[i], data[j])

    def sift_down(self, position, upper_bound):
        """
        Move the element at `position` down until it dominates its children.

        Only positions up to and including `upper_bound` are treated as part of
        the heap, which lets heap sort shrink the active prefix in place.
        """
        while True:
            left = 2 * position + 1
            right = 2 * position + 2

            if right <= upper_bound:
                best = left if self._satisfies(left, right) else right
            elif left <= upper_bound:
                best = left
            else:
                # Leaf reached
                break

            if self._satisfies(position, best):
                break

            self.elements.swap(position, best)
            position = best

    def sift_up(self, position):
        """Move the element at `position` up while it strictly dominates its parent."""
        data = self.elements.elements
        while position > 0:
            parent = (position - 1) // 2
            if not dominates(self.orientation, self.compare, data[position], data[parent]):
                break
            self.elements.swap(position, parent)
            position = parent

    def heapify(self):
        self._check_alive()
        length = self.elements.length()
        for i in range((length - 2) // 2, -1, -1):
            self.sift_down(i, length - 1)
        return self

    def push(self, element):
        """
        Append `element` and restore the heap property.

        Raises AllocationError if the storage had to grow and could not; the heap
        is left unchanged in that case.
        """
        self._check_alive()
        self.elements.insert(element)
        self.sift_up(self.elements.length() - 1)

    def pop(self):
        """Remove and return the root element (the maximum or minimum)."""
        self._check_alive()
        length = self.elements.length()
        if length == 0:
            raise EmptyError("pop from an empty heap")
        if length > 1:
            self.elements.swap(0, length - 1)
        result = self.elements.remove_last()
        length -= 1
        if length > 1:
            self.sift_down(0, length - 1)
        return result

    def dispose(self):
        """Release every element still in the heap; the heap is unusable afterwards."""
        self._check_alive()
        if self.destroy is not None:
            data = self.elements.elements
            for i in range(self.elements.length()):
                self.destroy(data[i])
        logger.debug(f"Disposed heap holding {self.elements.length()} elements")
        self.elements.free()
        self.disposed = True

    def length(self):
        return self.elements.length()

    def __len__(self):
        return self.elements.length()

    def is_empty(self):
        return self.elements.length() == 0

    def capacity(self):
        return self.elements.size


def build_heap(
        elements,
        compare: Callable[[Any, Any], int],
        orientation: Orientation = Orientation.MAX,
        length: Optional[int] = None,
        destroy: Optional[Callable[[Any], None]] = None) -> Heap:
    """
    Build either a min or max heap out of the supplied buffer.

    :param elements: List or numpy array; the heap takes ownership of it and reorders it in place.
    :param compare: Three-way comparison returning a negative, zero or positive number.
    :param orientation: Orientation.MAX or Orientation.MIN.
    :param length: Number of occupied slots at the front of `elements` (defaults to all).
    :param destroy: Optional cleanup called on every element still held at dispose time.
    :return: The heap wrapping `elements`.
    """
    heap = Heap._from_array(Array.wrap(elements, length), compare, orientation, destroy)
    return heap.heapify()


def heap_sort(elements, compare: Callable[[Any, Any], int], ascending: bool = True,
              length: Optional[int] = None) -> None:
    """
    Sort the first `length` slots of `elements` in place.

    Ascending order uses a max heap whose root is moved to the shrinking tail;
    descending order uses a min heap. The sort is not stable.
    """
    orientation = Orientation.MAX if ascending else Orientation.MIN
    heap = build_heap(elements, compare, orientation, length)
    for boundary in range(heap.length() - 1, 0, -1):
        heap.elements.swap(0, boundary)
        heap.sift_down(0, boundary - 1)
