"""
Interfaces the reward ledger consumes from its environment, with in-memory
implementations used by the HTTP service and the tests.

- TokenLedger: balances, minting and unit transfers
- AccessGate: authorization of privileged operations
- PaymentGateway: outbound value push, reporting success or failure
- Clock: current time as an integer unix timestamp
- EventSink: publication of committed ledger events
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from .errors import InsufficientSellerBalanceError, UnauthorizedError
from .models import LedgerEvent

logger = logging.getLogger(__name__)


class TokenLedger(Protocol):
    def balance_of(self, account: str) -> int: ...
    def mint(self, to: str, amount: int) -> None: ...
    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...
    def snapshot(self) -> object: ...
    def restore(self, state: object) -> None: ...


class AccessGate(Protocol):
    def require(self, caller: str, action: str) -> None: ...


class PaymentGateway(Protocol):
    def send(self, recipient: str, amount: int) -> bool: ...


class Clock(Protocol):
    def now(self) -> int: ...


class EventSink(Protocol):
    def emit(self, event: LedgerEvent) -> None: ...


class InMemoryTokenLedger:
    def __init__(self):
        self.balances: dict[str, int] = {}

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def mint(self, to: str, amount: int) -> None:
        self.balances[to] = self.balance_of(to) + amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientSellerBalanceError(
                f"{sender} holds {balance} units, cannot transfer {amount}"
            )
        self.balances[sender] = balance - amount
        self.balances[recipient] = self.balance_of(recipient) + amount

    def snapshot(self) -> dict[str, int]:
        return dict(self.balances)

    def restore(self, state: dict[str, int]) -> None:
        self.balances = dict(state)


class OwnerAccessGate:
    def __init__(self, owner: str):
        self.owner = owner

    def require(self, caller: str, action: str) -> None:
        if caller != self.owner:
            raise UnauthorizedError(f"{caller} is not allowed to {action}")


class InMemoryPayments:
    """Records payouts per recipient.

    ``failing`` recipients make ``send`` report failure; ``on_send`` runs
    before the payout is recorded, standing in for recipient code that gets
    control during a transfer.
    """

    def __init__(self, on_send: Optional[Callable[[str, int], None]] = None):
        self.paid: dict[str, int] = {}
        self.failing: set[str] = set()
        self.on_send = on_send

    def send(self, recipient: str, amount: int) -> bool:
        if recipient in self.failing:
            logger.warning("Payment of %d to %s rejected", amount, recipient)
            return False
        if self.on_send is not None:
            self.on_send(recipient, amount)
        self.paid[recipient] = self.paid.get(recipient, 0) + amount
        return True

    def total_paid(self, recipient: str) -> int:
        return self.paid.get(recipient, 0)


class SystemClock:
    def now(self) -> int:
        return int(datetime.now(timezone.utc).timestamp())


class ManualClock:
    def __init__(self, start: int = 1_700_000_000):
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        self.current += seconds
        return self.current

    def set(self, timestamp: int) -> None:
        self.current = timestamp


class InMemoryEventSink:
    def __init__(self):
        self.events: list[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)
        logger.info("Event %s %s", event.type.value, event.data)

    def of_type(self, event_type) -> list[LedgerEvent]:
        return [e for e in self.events if e.type == event_type]
