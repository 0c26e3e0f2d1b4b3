import logging
from typing import Iterator

logger = logging.getLogger(__name__)


class HolderRegistry:
    """Live set of accounts holding a positive balance.

    Removal swaps the last member into the vacated slot, so index order is not
    stable across mutations. Callers iterating by index range must re-read
    ``count()`` between calls and never treat the order as meaningful.
    """

    def __init__(self):
        self._holders: list[str] = []
        self._members: set[str] = set()

    def add(self, holder: str) -> bool:
        if holder in self._members:
            return False
        self._holders.append(holder)
        self._members.add(holder)
        logger.debug("Registered holder %s at index %d", holder, len(self._holders) - 1)
        return True

    def remove(self, holder: str) -> bool:
        if holder not in self._members:
            return False
        index = self._holders.index(holder)
        last = self._holders.pop()
        if index < len(self._holders):
            self._holders[index] = last
        self._members.discard(holder)
        logger.debug("Removed holder %s from index %d", holder, index)
        return True

    def contains(self, holder: str) -> bool:
        return holder in self._members

    def count(self) -> int:
        return len(self._holders)

    def at(self, index: int) -> str:
        if index < 0 or index >= len(self._holders):
            raise IndexError(f"Holder index {index} out of range")
        return self._holders[index]

    def enumerate(self) -> list[str]:
        return list(self._holders)

    def snapshot(self) -> list[str]:
        return list(self._holders)

    def restore(self, holders: list[str]) -> None:
        self._holders = list(holders)
        self._members = set(holders)

    def __contains__(self, holder: str) -> bool:
        return self.contains(holder)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[str]:
        return iter(self.enumerate())
