import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from .collaborators import (
    AccessGate,
    Clock,
    EventSink,
    InMemoryEventSink,
    InMemoryPayments,
    InMemoryTokenLedger,
    OwnerAccessGate,
    PaymentGateway,
    SystemClock,
    TokenLedger,
)
from .distribution import DistributionEngine
from .errors import (
    CollectibleServiceError,
    InvalidAmountError,
    SupplyExceededError,
    PaymentMismatchError,
    InsufficientSellerBalanceError,
    TransferFailedError,
    ReentrantCallError,
    RegistryInconsistencyError,
)
from .models import (
    REWARD_WINDOW_SECONDS,
    EventType,
    LedgerEvent,
    SaleReceipt,
    ResaleReceipt,
    ClaimReceipt,
    SweepReceipt,
    PendingReward,
    PendingRewardsResponse,
    HoldersResponse,
    CollectibleStatus,
)
from .processors import ClaimProcessor, SweepProcessor
from .registry import HolderRegistry
from .rewards import RewardLedger

logger = logging.getLogger(__name__)


class CollectibleService:
    """Sale lifecycle and resale reward redistribution for one collectible.

    Every mutating operation runs as a single transaction: registry, reward
    ledger, token balances and totals are snapshotted on entry and restored if
    any error escapes, events are published only on commit, and a guard
    rejects calls made while another operation is still in progress (e.g. from
    a payment recipient).
    """

    def __init__(
        self,
        brand: str,
        price_per_unit: int,
        max_supply: int,
        owner: Optional[str] = None,
        tokens: Optional[TokenLedger] = None,
        payments: Optional[PaymentGateway] = None,
        clock: Optional[Clock] = None,
        events: Optional[EventSink] = None,
        access: Optional[AccessGate] = None,
        engine: Optional[DistributionEngine] = None,
    ):
        if price_per_unit <= 0:
            raise InvalidAmountError(f"Price per unit must be positive, got {price_per_unit}")
        if max_supply <= 0:
            raise InvalidAmountError(f"Max supply must be positive, got {max_supply}")

        self.brand = brand
        self.price_per_unit = price_per_unit
        self.max_supply = max_supply
        self.tokens = tokens or InMemoryTokenLedger()
        self.payments = payments or InMemoryPayments()
        self.clock = clock or SystemClock()
        self.events = events or InMemoryEventSink()
        self.access = access or OwnerAccessGate(owner or brand)
        self.engine = engine or DistributionEngine()

        self.registry = HolderRegistry()
        self.rewards = RewardLedger()
        self.claims = ClaimProcessor(self.rewards, self.payments)
        self.sweeps = SweepProcessor(self.rewards, self.registry, self.payments, brand)

        self.total_minted = 0
        self.brand_revenue = 0
        self.rewards_assigned = 0
        self.rewards_claimed = 0
        self.rewards_swept = 0

        self._in_operation = False
        self._pending_events: list[LedgerEvent] = []

    # -- privileged -----------------------------------------------------

    def mint_initial(self, caller: str, to: str, amount: int) -> int:
        with self._transaction("mint"):
            self.access.require(caller, "mint")
            self._check_amount(amount)
            self._check_supply(amount)

            self.total_minted += amount
            self.registry.add(to)
            self.tokens.mint(to, amount)
            self._check_registry([to])
            self._record(EventType.MINTED, to=to, amount=amount, total_minted=self.total_minted)

        logger.info("Minted %d units to %s (total minted %d)", amount, to, self.total_minted)
        return self.total_minted

    def update_price(self, caller: str, new_price: int) -> int:
        with self._transaction("update_price"):
            self.access.require(caller, "update price")
            if new_price <= 0:
                raise InvalidAmountError(f"Price must be positive, got {new_price}")
            old_price = self.price_per_unit
            self.price_per_unit = new_price
            self._record(EventType.PRICE_UPDATED, old_price=old_price, new_price=new_price)

        logger.info("Price updated from %d to %d", old_price, new_price)
        return new_price

    # -- sales ----------------------------------------------------------

    def buy(self, buyer: str, amount: int, paid_value: int) -> SaleReceipt:
        with self._transaction("buy"):
            self._check_amount(amount)
            self._check_payment(amount, paid_value)
            self._check_supply(amount)

            split = self.engine.split_primary_sale(paid_value)
            self.total_minted += amount
            self.tokens.mint(buyer, amount)
            self.registry.add(buyer)
            self._check_registry([buyer])

            self._pay_brand(split.brand_total)
            self._record(EventType.PRIMARY_SALE, buyer=buyer, amount=amount, paid_value=paid_value)

        logger.info("Primary sale of %d units to %s for %d", amount, buyer, paid_value)
        return SaleReceipt(
            buyer=buyer,
            amount=amount,
            paid_value=paid_value,
            brand_paid=split.brand_total,
            total_minted=self.total_minted,
        )

    def resell(self, seller: str, buyer: str, amount: int, paid_value: int) -> ResaleReceipt:
        with self._transaction("resell"):
            self._check_amount(amount)
            balance = self.tokens.balance_of(seller)
            if balance < amount:
                raise InsufficientSellerBalanceError(
                    f"{seller} holds {balance} units, cannot resell {amount}"
                )
            self._check_payment(amount, paid_value)

            # holders before the transfer: seller included, buyer only if already holding
            holders = self.registry.snapshot()
            split = self.engine.split_resale(paid_value, len(holders))

            now = self.clock.now()
            expiry = now + REWARD_WINDOW_SECONDS
            assignments = self.engine.assignments(split, holders)
            for holder, value in assignments:
                self.rewards.assign(holder, value, expiry)
                self._record(EventType.REWARD_ASSIGNED, holder=holder, amount=value, expiry=expiry)
            self.rewards_assigned += split.distributed

            self.tokens.transfer(seller, buyer, amount)
            self.registry.add(buyer)
            if self.tokens.balance_of(seller) == 0:
                self.registry.remove(seller)
            self._check_registry([seller, buyer])

            self._pay_brand(split.brand_total)
            self._record(
                EventType.RESALE,
                seller=seller,
                buyer=buyer,
                amount=amount,
                paid_value=paid_value,
                brand_paid=split.brand_total,
                per_holder=split.per_holder,
                holder_count=split.holder_count,
            )

        logger.info(
            "Resale of %d units %s -> %s for %d: brand %d, %d holders x %d",
            amount, seller, buyer, paid_value, split.brand_total, split.holder_count, split.per_holder,
        )
        return ResaleReceipt(
            seller=seller,
            buyer=buyer,
            amount=amount,
            paid_value=paid_value,
            split=split,
            brand_paid=split.brand_total,
            rewarded_holders=[holder for holder, _ in assignments],
            reward_expiry=expiry if assignments else None,
        )

    # -- rewards --------------------------------------------------------

    def claim_rewards(self, caller: str) -> ClaimReceipt:
        with self._transaction("claim"):
            total = self.claims.claim(caller, self.clock.now())
            self.rewards_claimed += total
            self._record(EventType.REWARDS_CLAIMED, holder=caller, amount=total)

        return ClaimReceipt(
            holder=caller,
            amount=total,
            remaining_entries=self.rewards.pending_count(caller),
        )

    def sweep_expired_rewards(self, start_index: int, end_index: int) -> SweepReceipt:
        with self._transaction("sweep"):
            total = self.sweeps.sweep(start_index, end_index, self.clock.now())
            self._after_sweep(total, start_index=start_index, end_index=end_index)

        return SweepReceipt(
            amount=total,
            holders_scanned=end_index - start_index + 1,
            message="Expired rewards swept to brand" if total else "No expired rewards in range",
        )

    def sweep_expired_rewards_for(self, accounts: Iterable[str]) -> SweepReceipt:
        accounts = list(dict.fromkeys(accounts))
        with self._transaction("sweep"):
            total = self.sweeps.sweep_accounts(accounts, self.clock.now())
            self._after_sweep(total, accounts=accounts)

        return SweepReceipt(
            amount=total,
            holders_scanned=len(accounts),
            message="Expired rewards swept to brand" if total else "No expired rewards for accounts",
        )

    # -- read-only ------------------------------------------------------

    def list_holders(self) -> list[str]:
        return self.registry.enumerate()

    def holders(self) -> HoldersResponse:
        holders = self.list_holders()
        return HoldersResponse(holders=holders, count=len(holders))

    def pending_reward_count(self, holder: str) -> int:
        return self.rewards.pending_count(holder)

    def claimable_amount(self, holder: str) -> int:
        return self.rewards.claimable_amount(holder, self.clock.now())

    def pending_rewards(self, holder: str) -> PendingRewardsResponse:
        now = self.clock.now()
        entries = [
            PendingReward(amount=e.amount, expiry=e.expiry, state=e.state(now))
            for e in self.rewards.entries(holder)
        ]
        return PendingRewardsResponse(
            holder=holder,
            entries=entries,
            count=len(entries),
            claimable_amount=self.rewards.claimable_amount(holder, now),
        )

    def balance_of(self, account: str) -> int:
        return self.tokens.balance_of(account)

    def status(self) -> CollectibleStatus:
        return CollectibleStatus(
            brand=self.brand,
            price_per_unit=self.price_per_unit,
            max_supply=self.max_supply,
            total_minted=self.total_minted,
            holder_count=self.registry.count(),
            brand_revenue=self.brand_revenue,
            rewards_assigned=self.rewards_assigned,
            rewards_claimed=self.rewards_claimed,
            rewards_swept=self.rewards_swept,
        )

    # -- internals ------------------------------------------------------

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        if self._in_operation:
            raise ReentrantCallError(f"Cannot {action} while another operation is in progress")

        self._in_operation = True
        self._pending_events = []
        saved = (
            self.registry.snapshot(),
            self.rewards.snapshot(),
            self.tokens.snapshot(),
            self.price_per_unit,
            self.total_minted,
            self.brand_revenue,
            self.rewards_assigned,
            self.rewards_claimed,
            self.rewards_swept,
        )
        try:
            yield
        except Exception as e:
            self._rollback(saved)
            if isinstance(e, CollectibleServiceError):
                logger.warning("%s rejected: %s: %s", action, type(e).__name__, e)
            raise
        else:
            events, self._pending_events = self._pending_events, []
            for event in events:
                self.events.emit(event)
        finally:
            self._in_operation = False
            self._pending_events = []

    def _rollback(self, saved: tuple) -> None:
        (registry, rewards, tokens, self.price_per_unit, self.total_minted,
         self.brand_revenue, self.rewards_assigned, self.rewards_claimed,
         self.rewards_swept) = saved
        self.registry.restore(registry)
        self.rewards.restore(rewards)
        self.tokens.restore(tokens)

    def _record(self, event_type: EventType, **data) -> None:
        self._pending_events.append(
            LedgerEvent(type=event_type, timestamp=self.clock.now(), data=data)
        )

    def _after_sweep(self, total: int, **data) -> None:
        self.rewards_swept += total
        if total:
            self._record(EventType.REWARDS_SWEPT, amount=total, **data)
        else:
            logger.info("Sweep found no expired rewards (%s)", data)

    def _pay_brand(self, amount: int) -> None:
        if amount == 0:
            return
        if not self.payments.send(self.brand, amount):
            raise TransferFailedError(f"Payment of {amount} to brand {self.brand} failed")
        self.brand_revenue += amount

    def _check_amount(self, amount: int) -> None:
        if amount <= 0:
            raise InvalidAmountError(f"Amount must be positive, got {amount}")

    def _check_supply(self, amount: int) -> None:
        if self.total_minted + amount > self.max_supply:
            raise SupplyExceededError(
                f"Minting {amount} would exceed max supply {self.max_supply} "
                f"({self.total_minted} already minted)"
            )

    def _check_payment(self, amount: int, paid_value: int) -> None:
        expected = self.price_per_unit * amount
        if paid_value != expected:
            raise PaymentMismatchError(f"Expected payment of {expected}, got {paid_value}")

    def _check_registry(self, accounts: Iterable[str]) -> None:
        for account in accounts:
            holding = self.tokens.balance_of(account) > 0
            if self.registry.contains(account) != holding:
                raise RegistryInconsistencyError(
                    f"Registry out of sync for {account}: "
                    f"registered={self.registry.contains(account)}, holding={holding}"
                )
