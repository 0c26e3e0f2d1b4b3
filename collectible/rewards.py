import logging
from typing import Callable, Iterable

from .errors import InvalidRangeError
from .models import RewardEntry
from .registry import HolderRegistry

logger = logging.getLogger(__name__)


class RewardLedger:
    """Pending reward entries per holder.

    Entries are appended on assignment and physically removed the moment they
    are claimed or swept, so an entry can resolve only once. Order within a
    holder's list carries no meaning.
    """

    def __init__(self):
        self._entries: dict[str, list[RewardEntry]] = {}

    def assign(self, holder: str, amount: int, expiry: int) -> RewardEntry:
        entry = RewardEntry(amount=amount, expiry=expiry)
        self._entries.setdefault(holder, []).append(entry)
        return entry

    def entries(self, holder: str) -> list[RewardEntry]:
        return list(self._entries.get(holder, []))

    def pending_count(self, holder: str) -> int:
        return len(self._entries.get(holder, []))

    def accounts(self) -> list[str]:
        return [holder for holder, entries in self._entries.items() if entries]

    def claimable_amount(self, holder: str, now: int) -> int:
        return sum(e.amount for e in self._entries.get(holder, []) if e.is_claimable(now))

    def claim_unexpired(self, holder: str, now: int) -> int:
        return self._extract(holder, lambda e: e.expiry >= now)

    def sweep_expired(self, registry: HolderRegistry, start: int, end: int, now: int) -> int:
        count = registry.count()
        if start < 0 or start > end or end >= count:
            raise InvalidRangeError(
                f"Invalid sweep range [{start}, {end}] for {count} holders"
            )
        holders = [registry.at(i) for i in range(start, end + 1)]
        return self.sweep_expired_accounts(holders, now)

    def sweep_expired_accounts(self, holders: Iterable[str], now: int) -> int:
        total = 0
        for holder in holders:
            total += self._extract(holder, lambda e: e.expiry < now)
        return total

    def snapshot(self) -> dict[str, list[RewardEntry]]:
        return {holder: list(entries) for holder, entries in self._entries.items()}

    def restore(self, state: dict[str, list[RewardEntry]]) -> None:
        self._entries = {holder: list(entries) for holder, entries in state.items()}

    def _extract(self, holder: str, selector: Callable[[RewardEntry], bool]) -> int:
        entries = self._entries.get(holder)
        if not entries:
            return 0

        total = 0
        removed = 0
        i = 0
        while i < len(entries):
            if selector(entries[i]):
                total += entries[i].amount
                # swapped-in element lands at i and is examined next
                entries[i] = entries[-1]
                entries.pop()
                removed += 1
            else:
                i += 1

        if not entries:
            del self._entries[holder]
        if removed:
            logger.debug("Resolved %d reward entries for %s totalling %d", removed, holder, total)
        return total
