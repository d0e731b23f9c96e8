import numpy as np

from logger import init_logger

logger = init_logger(__name__)


class AllocationError(MemoryError):
    """Raised when the storage cannot be grown to hold another element."""


class Array:
    def __init__(self, size, dtype=None):
        if size < 0:
            raise ValueError(f"Array size must be non-negative, got {size}")
        self.size = size
        self.index = 0
        if dtype is None:
            self.elements = [None] * size
        else:
            self.elements = np.empty(size, dtype=dtype)

    @classmethod
    def wrap(cls, buffer, length=None):
        """
        Take ownership of an existing list or ndarray without copying it.

        :param buffer: List or numpy array holding the elements.
        :param length: Number of occupied slots at the front of `buffer`.
        :return: An Array whose storage is `buffer` itself.
        """
        if length is None:
            length = len(buffer)
        if length < 0 or length > len(buffer):
            raise ValueError(f"length {length} out of range for a buffer of {len(buffer)} slots")
        array = cls.__new__(cls)
        array.elements = buffer
        array.size = len(buffer)
        array.index = length
        return array

    def _grow_storage(self, new_size):
        if isinstance(self.elements, np.ndarray):
            shape = (new_size,) + self.elements.shape[1:]
            new_elements = np.empty(shape, dtype=self.elements.dtype)
            new_elements[:self.index] = self.elements[:self.index]
            return new_elements
        return self.elements + [None] * (new_size - len(self.elements))

    def _resize(self):
        new_size = max(self.size * 2, 1)
        try:
            new_elements = self._grow_storage(new_size)
        except MemoryError as e:
            raise AllocationError(f"Unable to grow array from {self.size} to {new_size} slots") from e
        logger.debug(f"Array resized from {self.size} to {new_size} slots")
        self.elements = new_elements
        self.size = new_size

    def _checked(self, data):
        """
        Convert `data` to the storage dtype, refusing any lossy conversion.

        Numpy would otherwise truncate floats stored in integer slots and
        strings longer than a fixed-width string dtype.
        """
        dtype = self.elements.dtype
        try:
            converted = np.asarray(data, dtype=dtype)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"Cannot store {data!r} in an array of dtype {dtype}") from e
        if converted.shape != self.elements.shape[1:]:
            raise ValueError(f"Element shape {converted.shape} does not match slot shape {self.elements.shape[1:]}")
        if dtype.names is not None:
            original = data.item() if isinstance(data, np.void) else tuple(data)
            lossless = converted.item() == original
        else:
            lossless = np.array_equal(converted, np.asarray(data), equal_nan=dtype.kind in "fc")
        if not lossless:
            raise ValueError(f"Storing {data!r} as {dtype} would lose data")
        return converted

    def insert(self, data):
        if isinstance(self.elements, np.ndarray):
            data = self._checked(data)
        # Check if resizing is needed
        if self.index >= self.size:
            self._resize()
        self.elements[self.index] = data
        self.index += 1

    def get(self, i):
        if i < 0 or i >= self.index:
            return None
        return self.elements[i]

    def set(self, i, data):
        if i < 0 or i >= self.index:
            raise IndexError(f"Array index {i} out of range [0, {self.index})")
        if isinstance(self.elements, np.ndarray):
            data = self._checked(data)
        self.elements[i] = data

    def swap(self, i, j):
        if isinstance(self.elements, np.ndarray):
            # Fancy indexing copies, so rows of a 2-D buffer swap correctly
            self.elements[[i, j]] = self.elements[[j, i]]
        else:
            self.elements[i], self.elements[j] = self.elements[j], self.elements[i]

    def remove_last(self):
        if self.index == 0:
            raise IndexError("remove_last from an empty Array")
        self.index -= 1
        data = self.elements[self.index]
        # Indexing numpy storage can return a view (a row or a structured np.void)
        if isinstance(data, (np.ndarray, np.void)):
            data = data.copy()
        if not isinstance(self.elements, np.ndarray):
            self.elements[self.index] = None
        return data

    def occupied(self):
        return self.elements[:self.index]

    def length(self):
        return self.index

    def __len__(self):
        return self.index

    def free(self):
        self.elements = None
        self.size = 0
        self.index = 0
