"""
Read-only open-addressing hash table mapping keys to dense indices.
"""

from collections.abc import Sequence

from maxentkit.utils.hashing import java_string_hash

NOT_FOUND = -1


def _slot(key: str, capacity: int) -> int:
    return (java_string_hash(key) & 0x7FFFFFFF) % capacity


class IndexHashTable:
    """
    Fixed mapping from a known key universe to the keys' positions.

    The slot array is sized once at construction and never resized.
    Collisions are resolved by linear probing. Slots are computed with a
    deterministic string hash so the layout is identical across processes.
    """

    def __init__(self, keys: Sequence[str], load_factor: float) -> None:
        """
        Build the table.

        Args:
            keys: Unique keys; each key maps to its position in ``keys``.
            load_factor: Fill ratio in (0, 1].

        Raises:
            ValueError: If the load factor is out of range or a key repeats.
        """
        if not 0.0 < load_factor <= 1.0:
            raise ValueError(f"load_factor must be in (0, 1], got {load_factor}")

        capacity = int(len(keys) / load_factor) + 1
        self._keys: list[str | None] = [None] * capacity
        self._values: list[int] = [NOT_FOUND] * capacity
        self._size = len(keys)

        for index, key in enumerate(keys):
            slot = _slot(key, capacity)
            while self._keys[slot] is not None:
                if self._keys[slot] == key:
                    raise ValueError(f"Duplicate key in index table: {key!r}")
                slot = (slot + 1) % capacity
            self._keys[slot] = key
            self._values[slot] = index

    @property
    def capacity(self) -> int:
        """Number of slots."""
        return len(self._keys)

    def lookup(self, key: str) -> int:
        """
        Find the index of a key.

        Returns:
            The key's index, or ``NOT_FOUND`` (-1).
        """
        capacity = len(self._keys)
        slot = _slot(key, capacity)
        for _ in range(capacity):
            candidate = self._keys[slot]
            if candidate is None:
                return NOT_FOUND
            if candidate == key:
                return self._values[slot]
            slot = (slot + 1) % capacity
        return NOT_FOUND

    def to_list(self) -> list[str]:
        """Keys ordered by their index."""
        result: list[str] = [""] * self._size
        for key, value in zip(self._keys, self._values):
            if key is not None:
                result[value] = key
        return result

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.lookup(key) != NOT_FOUND

    def __len__(self) -> int:
        return self._size
