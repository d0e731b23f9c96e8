from typing import Any, Callable, Optional

from heap_ import satisfies

FLOAT_EPSILON = 1e-10


def cmp_int(a, b) -> int:
    """Compare two integers: -1 if a < b, 0 if equal, 1 if a > b."""
    if a < b:
        return -1
    elif a == b:
        return 0
    return 1


def cmp_float(a, b) -> int:
    """Compare two floats, treating values closer than FLOAT_EPSILON as equal."""
    if abs(a - b) < FLOAT_EPSILON:
        return 0
    elif a < b:
        return -1
    return 1


def cmp_str(a: str, b: str) -> int:
    """Compare two strings lexicographically."""
    if a < b:
        return -1
    elif a == b:
        return 0
    return 1


def cmp_key(key: Callable[[Any], Any], compare: Callable[[Any, Any], int] = cmp_int):
    """Build a comparator that compares `key(a)` with `key(b)`."""
    def compare_by_key(a, b):
        return compare(key(a), key(b))
    return compare_by_key


def is_heap(elements, compare, orientation, length: Optional[int] = None) -> bool:
    """Check that every occupied non-root slot is dominated by its parent."""
    if length is None:
        length = len(elements)
    for i in range(1, length):
        parent = (i - 1) // 2
        if not satisfies(orientation, compare, elements[parent], elements[i]):
            return False
    return True
